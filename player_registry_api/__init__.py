"""
Top-level package for the Player Registry API.

All functionality lives in submodules under ``app``; import the ASGI
application as ``player_registry_api.app.main:app``.
"""

__all__ = []
