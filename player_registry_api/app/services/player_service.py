"""
Business logic for players.

``PlayerService`` validates input, keeps the derived ``level`` and
``until_next_level`` fields in step with experience, composes list
filters and delegates persistence to a storage collaborator.  It holds
no state of its own between calls.

Updates are a read-modify-write sequence without locking; concurrent
updates of the same player resolve as last write wins.
"""

import logging
import re
from functools import lru_cache
from typing import List, Optional

from ..core.config import settings
from ..core.exceptions import InvalidFieldError, PlayerNotFoundError
from ..schemas.player import INT64_MAX, PageRequest, Player, PlayerCreate, PlayerFilter, PlayerUpdate
from .filters import build_filter
from .leveling import calculate_progress
from .storage import InMemoryPlayerStorage, PlayerStorage, SQLitePlayerStorage
from .validation import UPDATE_CHECKS, require_fields, validate_fields

logger = logging.getLogger(__name__)

_ID_PATTERN = re.compile(r"[+-]?[0-9]+")


class PlayerService:
    """Сервис для управления игроками."""

    def __init__(self, storage: PlayerStorage) -> None:
        self.storage = storage

    def list_players(self, filters: PlayerFilter, page: PageRequest) -> List[Player]:
        """Return one page of players matching every supplied filter."""
        items, _ = self.storage.find(build_filter(filters), page)
        return items

    def count_players(self, filters: PlayerFilter) -> int:
        """Return how many players match every supplied filter."""
        _, total = self.storage.find(build_filter(filters))
        return total

    def create_player(self, data: PlayerCreate) -> Player:
        """Validate, derive level fields and persist a new player.

        Raises ``MissingFieldError`` if a required field is absent and
        ``InvalidFieldError`` for the first constraint violated.
        """
        fields = data.supplied_fields()
        require_fields(fields)
        validate_fields(fields)
        fields.setdefault("banned", False)
        level, until_next_level = calculate_progress(fields["experience"])
        player = Player(**fields, level=level, until_next_level=until_next_level)
        player = self.storage.save(player)
        logger.info("Created player %s '%s'", player.id, player.name)
        return player

    def get_player(self, player_id: int) -> Player:
        player = self.storage.get(player_id)
        if player is None:
            raise PlayerNotFoundError(player_id)
        return player

    def update_player(self, player_id: int, data: PlayerUpdate) -> Player:
        """Overwrite the supplied fields of an existing player.

        Level fields are recomputed on every call, whether or not
        experience was part of the update.
        """
        player = self.get_player(player_id)
        updates = data.supplied_fields()
        changed = ", ".join(sorted(updates)) or "no fields"
        validate_fields(updates, UPDATE_CHECKS)
        experience = updates.get("experience", player.experience)
        level, until_next_level = calculate_progress(experience)
        updates.update(level=level, until_next_level=until_next_level)
        player = self.storage.save(player.model_copy(update=updates))
        logger.info("Updated player %s (%s)", player_id, changed)
        return player

    def delete_player(self, player_id: int) -> None:
        if not self.storage.delete(player_id):
            raise PlayerNotFoundError(player_id)
        logger.info("Deleted player %s", player_id)

    @staticmethod
    def parse_id(raw_id: Optional[str]) -> int:
        """Parse a path id.

        ``None``, ``""`` and ``"0"`` are rejected outright, as are values
        that are not integers, are negative or do not fit a signed 64-bit
        integer.
        """
        if raw_id is None or raw_id == "" or raw_id == "0":
            raise InvalidFieldError("id", f"Invalid id: {raw_id!r}")
        if not _ID_PATTERN.fullmatch(raw_id):
            raise InvalidFieldError("id", f"Invalid id: {raw_id!r}")
        player_id = int(raw_id)
        if player_id < 0 or player_id > INT64_MAX:
            raise InvalidFieldError("id", f"Invalid id: {raw_id!r}")
        return player_id


@lru_cache(maxsize=1)
def get_storage() -> PlayerStorage:
    """Build the storage collaborator selected by ``settings.storage_backend``."""
    if settings.storage_backend == "memory":
        logger.info("Using in-memory player storage")
        return InMemoryPlayerStorage()
    logger.info("Using SQLite player storage")
    return SQLitePlayerStorage()


def get_player_service() -> PlayerService:
    """FastAPI dependency returning a service bound to the configured storage."""
    return PlayerService(get_storage())
