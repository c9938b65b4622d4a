"""
Domain exceptions raised by the service layer.

Services never raise ``HTTPException`` directly.  Endpoints translate
these exceptions into HTTP responses: field errors become ``400 Bad
Request`` and lookups of unknown players become ``404 Not Found``.
"""

from typing import Optional


class PlayerRegistryError(Exception):
    """Base class for all player registry errors."""


class InvalidFieldError(PlayerRegistryError, ValueError):
    """A supplied value is malformed or outside its allowed range."""

    def __init__(self, field: str, message: Optional[str] = None) -> None:
        self.field = field
        super().__init__(message or f"Invalid value for field '{field}'")


class MissingFieldError(InvalidFieldError):
    """A field required on creation was not supplied."""

    def __init__(self, field: str) -> None:
        super().__init__(field, f"Field '{field}' is required")


class PlayerNotFoundError(PlayerRegistryError, LookupError):
    """No player exists with the requested id."""

    def __init__(self, player_id: int) -> None:
        self.player_id = player_id
        super().__init__(f"Player {player_id} not found")
