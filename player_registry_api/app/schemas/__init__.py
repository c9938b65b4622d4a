"""
Pydantic schema definitions for API payloads.

Schemas are separated from storage so the API representation can
evolve independently of the persisted layout.
"""
