"""
Application package initializer.

This package contains the main entrypoint for the API and all of its
submodules: ``core`` (configuration, logging, database, exceptions),
``schemas``, ``services`` and the versioned routers under ``api``.
"""

from .main import app  # noqa: F401
