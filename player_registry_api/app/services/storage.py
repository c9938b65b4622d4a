"""
Storage collaborators for player records.

Both implementations honour the same contract:

* ``find(predicate, page)`` returns ``(items, total)`` where ``total``
  counts every match and ``items`` holds the requested page sorted by
  the page's order key (ties broken by id).  ``page=None`` returns all
  matches unpaginated in id order.
* ``get(player_id)`` returns the player or ``None``.
* ``save(player)`` inserts when ``player.id`` is ``None`` (assigning a
  new id) and replaces the stored row otherwise.
* ``delete(player_id)`` returns ``False`` when nothing was removed.

``SQLitePlayerStorage`` opens a connection per call, so an instance
can be shared by request handlers running in FastAPI's threadpool.
"""

import logging
import sqlite3
import threading
from datetime import date
from typing import Optional, Protocol

from ..core.db import get_cursor, init_db
from ..schemas.player import PageRequest, Player, PlayerOrder
from .filters import PlayerPredicate

logger = logging.getLogger(__name__)

_COLUMNS = "id, name, title, race, profession, birthday, experience, level, until_next_level, banned"

_ORDER_COLUMNS = {
    PlayerOrder.ID: "id",
    PlayerOrder.NAME: "name",
    PlayerOrder.EXPERIENCE: "experience",
    PlayerOrder.BIRTHDAY: "birthday",
    PlayerOrder.LEVEL: "level",
}


class PlayerStorage(Protocol):
    def find(self, predicate: PlayerPredicate, page: Optional[PageRequest] = None) -> tuple[list[Player], int]: ...

    def get(self, player_id: int) -> Optional[Player]: ...

    def save(self, player: Player) -> Player: ...

    def delete(self, player_id: int) -> bool: ...


class InMemoryPlayerStorage:
    """Process-local storage backed by a dict."""

    def __init__(self) -> None:
        self._players: dict[int, Player] = {}
        self._next_id = 1
        self._lock = threading.Lock()

    def find(self, predicate: PlayerPredicate, page: Optional[PageRequest] = None) -> tuple[list[Player], int]:
        with self._lock:
            matches = [p for p in self._players.values() if predicate(p)]
        if page is None:
            items = sorted(matches, key=lambda p: p.id)
        else:
            field = page.order.field_name
            matches.sort(key=lambda p: (getattr(p, field), p.id))
            items = matches[page.offset:page.offset + page.page_size]
        return [p.model_copy() for p in items], len(matches)

    def get(self, player_id: int) -> Optional[Player]:
        with self._lock:
            player = self._players.get(player_id)
        return player.model_copy() if player else None

    def save(self, player: Player) -> Player:
        with self._lock:
            if player.id is None:
                player = player.model_copy(update={"id": self._next_id})
                self._next_id += 1
            else:
                self._next_id = max(self._next_id, player.id + 1)
            self._players[player.id] = player
        return player.model_copy()

    def delete(self, player_id: int) -> bool:
        with self._lock:
            return self._players.pop(player_id, None) is not None


def _row_to_player(row: sqlite3.Row) -> Player:
    return Player(
        id=row["id"],
        name=row["name"],
        title=row["title"],
        race=row["race"],
        profession=row["profession"],
        birthday=date.fromisoformat(row["birthday"]),
        experience=row["experience"],
        level=row["level"],
        until_next_level=row["until_next_level"],
        banned=bool(row["banned"]),
    )


class SQLitePlayerStorage:
    """Storage backed by the ``players`` table."""

    def __init__(self, db_path: Optional[str] = None) -> None:
        self.db_path = db_path

    def init(self) -> None:
        init_db(self.db_path)

    def find(self, predicate: PlayerPredicate, page: Optional[PageRequest] = None) -> tuple[list[Player], int]:
        where = f" WHERE {predicate.clause}" if predicate.clause else ""
        params = list(predicate.params)
        with get_cursor(self.db_path) as cursor:
            total = cursor.execute(
                f"SELECT COUNT(*) AS count FROM players{where}", tuple(params)
            ).fetchone()["count"]
            query = f"SELECT {_COLUMNS} FROM players{where}"
            if page is None:
                query += " ORDER BY id"
            else:
                query += f" ORDER BY {_ORDER_COLUMNS[page.order]}, id LIMIT ? OFFSET ?"
                params.extend([page.page_size, page.offset])
            rows = cursor.execute(query, tuple(params)).fetchall()
        return [_row_to_player(row) for row in rows], total

    def get(self, player_id: int) -> Optional[Player]:
        with get_cursor(self.db_path) as cursor:
            row = cursor.execute(
                f"SELECT {_COLUMNS} FROM players WHERE id = ?", (player_id,)
            ).fetchone()
        return _row_to_player(row) if row else None

    def save(self, player: Player) -> Player:
        values = (
            player.name,
            player.title,
            player.race.value,
            player.profession.value,
            player.birthday.isoformat(),
            player.experience,
            player.level,
            player.until_next_level,
            int(player.banned),
        )
        with get_cursor(self.db_path) as cursor:
            if player.id is None:
                cursor.execute(
                    """
                    INSERT INTO players (name, title, race, profession, birthday, experience, level, until_next_level, banned)
                    VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    values,
                )
                player = player.model_copy(update={"id": cursor.lastrowid})
            else:
                cursor.execute(
                    """
                    UPDATE players
                    SET name = ?, title = ?, race = ?, profession = ?, birthday = ?,
                        experience = ?, level = ?, until_next_level = ?, banned = ?
                    WHERE id = ?
                    """,
                    values + (player.id,),
                )
        logger.debug("Stored player %s", player.id)
        return player

    def delete(self, player_id: int) -> bool:
        with get_cursor(self.db_path) as cursor:
            cursor.execute("DELETE FROM players WHERE id = ?", (player_id,))
            return cursor.rowcount > 0
