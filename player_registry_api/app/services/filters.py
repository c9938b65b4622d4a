"""
Composable player filters.

Each ``select_by_*`` function turns one optional filter dimension into a
``PlayerPredicate`` or returns ``None`` when the dimension was not
supplied.  ``build_filter`` drops the ``None`` entries and folds the
remainder with logical AND; with nothing supplied the result matches
every player.

A predicate carries two equivalent renderings: a Python callable used
by in-memory storage and a parameterised SQL ``WHERE`` fragment used by
the SQLite storage.  Column names are fixed strings; user input only
ever travels through the parameter tuple.
"""

from dataclasses import dataclass
from datetime import date
from functools import reduce
from typing import Any, Callable, Optional

from ..core.exceptions import InvalidFieldError
from ..schemas.player import Player, PlayerFilter, Profession, Race, millis_to_date


@dataclass(frozen=True)
class PlayerPredicate:
    test: Callable[[Player], bool]
    clause: str = ""
    params: tuple[Any, ...] = ()

    def __call__(self, player: Player) -> bool:
        return self.test(player)

    def __and__(self, other: "PlayerPredicate") -> "PlayerPredicate":
        if not self.clause:
            return other
        if not other.clause:
            return self
        left, right = self.test, other.test
        return PlayerPredicate(
            test=lambda player: left(player) and right(player),
            clause=f"({self.clause}) AND ({other.clause})",
            params=self.params + other.params,
        )


MATCH_ALL = PlayerPredicate(test=lambda player: True)


def _contains(field: str, fragment: Optional[str]) -> Optional[PlayerPredicate]:
    if fragment is None:
        return None
    # instr() is case-sensitive, unlike LIKE on ASCII text
    return PlayerPredicate(
        test=lambda player: fragment in getattr(player, field),
        clause=f"instr({field}, ?) > 0",
        params=(fragment,),
    )


def _equals(field: str, value: Any, sql_value: Any) -> Optional[PlayerPredicate]:
    if value is None:
        return None
    return PlayerPredicate(
        test=lambda player: getattr(player, field) == value,
        clause=f"{field} = ?",
        params=(sql_value,),
    )


def _between(field: str, low: Any, high: Any, to_sql: Callable[[Any], Any] = lambda v: v) -> Optional[PlayerPredicate]:
    if low is None and high is None:
        return None
    if low is None:
        return PlayerPredicate(
            test=lambda player: getattr(player, field) <= high,
            clause=f"{field} <= ?",
            params=(to_sql(high),),
        )
    if high is None:
        return PlayerPredicate(
            test=lambda player: getattr(player, field) >= low,
            clause=f"{field} >= ?",
            params=(to_sql(low),),
        )
    return PlayerPredicate(
        test=lambda player: low <= getattr(player, field) <= high,
        clause=f"{field} BETWEEN ? AND ?",
        params=(to_sql(low), to_sql(high)),
    )


def select_by_name(name: Optional[str]) -> Optional[PlayerPredicate]:
    return _contains("name", name)


def select_by_title(title: Optional[str]) -> Optional[PlayerPredicate]:
    return _contains("title", title)


def select_by_race(race: Optional[Race]) -> Optional[PlayerPredicate]:
    return _equals("race", race, race.value if race else None)


def select_by_profession(profession: Optional[Profession]) -> Optional[PlayerPredicate]:
    return _equals("profession", profession, profession.value if profession else None)


def select_by_experience(min_experience: Optional[int], max_experience: Optional[int]) -> Optional[PlayerPredicate]:
    return _between("experience", min_experience, max_experience)


def select_by_level(min_level: Optional[int], max_level: Optional[int]) -> Optional[PlayerPredicate]:
    return _between("level", min_level, max_level)


def _bound_date(field: str, millis: Optional[int]) -> Optional[date]:
    if millis is None:
        return None
    try:
        return millis_to_date(millis)
    except ValueError as e:
        raise InvalidFieldError(field, str(e)) from e


def select_by_birthday(after: Optional[int], before: Optional[int]) -> Optional[PlayerPredicate]:
    """Birthdays within ``[after, before]``, both given as epoch milliseconds."""
    return _between(
        "birthday",
        _bound_date("after", after),
        _bound_date("before", before),
        to_sql=date.isoformat,
    )


def select_by_banned(banned: Optional[bool]) -> Optional[PlayerPredicate]:
    return _equals("banned", banned, int(banned) if banned is not None else None)


def build_predicates(filters: PlayerFilter) -> list[Optional[PlayerPredicate]]:
    """One entry per filter dimension, ``None`` where it was not supplied."""
    return [
        select_by_name(filters.name),
        select_by_title(filters.title),
        select_by_race(filters.race),
        select_by_profession(filters.profession),
        select_by_birthday(filters.after, filters.before),
        select_by_banned(filters.banned),
        select_by_experience(filters.min_experience, filters.max_experience),
        select_by_level(filters.min_level, filters.max_level),
    ]


def combine(predicates: list[Optional[PlayerPredicate]]) -> PlayerPredicate:
    """AND together every supplied predicate."""
    return reduce(lambda acc, p: acc & p, (p for p in predicates if p is not None), MATCH_ALL)


def build_filter(filters: PlayerFilter) -> PlayerPredicate:
    return combine(build_predicates(filters))
