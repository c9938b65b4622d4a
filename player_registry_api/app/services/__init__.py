"""
Service layer.

Validation, level derivation, filter composition and storage live in
separate modules; ``player_service`` ties them together for the API
handlers.
"""
