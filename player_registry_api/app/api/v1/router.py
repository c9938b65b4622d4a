"""
Top-level router for version 1 of the API.

This router aggregates domain-specific routers under a unified prefix.
When new endpoints or domains are introduced, include their routers
here.
"""

from fastapi import APIRouter

from .endpoints import players

router = APIRouter()

# The players router defines its own "/players" paths internally.
router.include_router(players.router, tags=["players"])
