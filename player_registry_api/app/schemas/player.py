"""
Pydantic models for player data.

``Player`` is both the stored record and the response body.  Request
bodies use ``PlayerCreate`` and ``PlayerUpdate``; every field is
optional there so the service layer, not pydantic, decides which
fields are required and reports ``MissingFieldError``/``InvalidFieldError``
in a fixed order.  Race and profession are parsed into their enums at
this boundary, so an unknown value never reaches the service.

Birthdays travel over the wire as epoch milliseconds (UTC) and are
stored with date precision.
"""

import math
from datetime import date, datetime, time, timezone
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

# Widths of the integer types existing clients send: 32-bit for
# experience, level and paging, 64-bit for ids and timestamps.
INT32_MAX = 2**31 - 1
INT64_MAX = 2**63 - 1


class Race(str, Enum):
    HUMAN = "HUMAN"
    DWARF = "DWARF"
    ELF = "ELF"
    GIANT = "GIANT"
    ORC = "ORC"
    TROLL = "TROLL"
    HOBBIT = "HOBBIT"


class Profession(str, Enum):
    WARRIOR = "WARRIOR"
    ROGUE = "ROGUE"
    SORCERER = "SORCERER"
    CLERIC = "CLERIC"
    PALADIN = "PALADIN"
    NAZGUL = "NAZGUL"
    WARLOCK = "WARLOCK"
    DRUID = "DRUID"


class PlayerOrder(str, Enum):
    """Sort keys accepted by the list endpoint."""

    ID = "ID"
    NAME = "NAME"
    EXPERIENCE = "EXPERIENCE"
    BIRTHDAY = "BIRTHDAY"
    LEVEL = "LEVEL"

    @property
    def field_name(self) -> str:
        return self.value.lower()


def millis_to_date(value: int) -> date:
    """Convert epoch milliseconds to a UTC calendar date."""
    try:
        return datetime.fromtimestamp(value / 1000, tz=timezone.utc).date()
    except (OverflowError, OSError, ValueError) as e:
        raise ValueError(f"timestamp {value} is out of range") from e


def date_to_millis(value: date) -> int:
    """Convert a calendar date to epoch milliseconds at UTC midnight."""
    moment = datetime.combine(value, time.min, tzinfo=timezone.utc)
    return int(moment.timestamp() * 1000)


def _parse_birthday(value: Any) -> Any:
    if value is None or isinstance(value, bool):
        return value
    if isinstance(value, float) and not math.isfinite(value):
        raise ValueError(f"timestamp {value} is not a finite number")
    if isinstance(value, (int, float)):
        return millis_to_date(int(value))
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, str):
        text = value.strip()
        if text.lstrip("-").isdigit():
            return millis_to_date(int(text))
        if "T" in text:
            return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    return value


class PlayerFields(BaseModel):
    """Shared optional fields of create and update payloads.

    Unknown keys, including ``id``, ``level`` and ``untilNextLevel``,
    are ignored: those values are always assigned by the server.
    """

    name: Optional[str] = Field(None, examples=["Ragnar"])
    title: Optional[str] = Field(None, examples=["Skull Crusher"])
    race: Optional[Race] = Field(None, examples=["HUMAN"])
    profession: Optional[Profession] = Field(None, examples=["WARRIOR"])
    birthday: Optional[date] = Field(None, examples=[1104537600000])
    experience: Optional[int] = Field(None, examples=[1500])
    banned: Optional[bool] = Field(None, examples=[False])

    model_config = ConfigDict(extra="ignore")

    @field_validator("birthday", mode="before")
    @classmethod
    def parse_birthday(cls, value: Any) -> Any:
        return _parse_birthday(value)

    def supplied_fields(self) -> dict[str, Any]:
        """Return the fields the client actually sent with a non-null value."""
        return {
            key: value
            for key, value in self.model_dump(exclude_unset=True).items()
            if value is not None
        }


class PlayerCreate(PlayerFields):
    """Schema for creating a player.

    ``name``, ``title``, ``race``, ``profession``, ``birthday`` and
    ``experience`` are required by the service; ``banned`` defaults to
    ``False``.
    """


class PlayerUpdate(PlayerFields):
    """Schema for a partial update.  Only supplied fields are changed."""


class Player(BaseModel):
    """A stored player record, also used as the response schema."""

    id: Optional[int] = None
    name: str
    title: str
    race: Race
    profession: Profession
    birthday: date
    experience: int
    level: int = 0
    until_next_level: int = Field(0, alias="untilNextLevel")
    banned: bool = False

    model_config = ConfigDict(populate_by_name=True, from_attributes=True)

    @field_validator("birthday", mode="before")
    @classmethod
    def parse_birthday(cls, value: Any) -> Any:
        return _parse_birthday(value)

    @field_serializer("birthday", when_used="json")
    def serialize_birthday(self, value: date) -> int:
        return date_to_millis(value)


class PlayerFilter(BaseModel):
    """Optional filter dimensions of the list and count endpoints.

    Every attribute left as ``None`` places no constraint on the result.
    ``after`` and ``before`` are epoch milliseconds.
    """

    name: Optional[str] = None
    title: Optional[str] = None
    race: Optional[Race] = None
    profession: Optional[Profession] = None
    after: Optional[int] = None
    before: Optional[int] = None
    banned: Optional[bool] = None
    min_experience: Optional[int] = None
    max_experience: Optional[int] = None
    min_level: Optional[int] = None
    max_level: Optional[int] = None


class PageRequest(BaseModel):
    """Paging and ordering of a list request."""

    page_number: int = Field(0, ge=0, le=INT32_MAX)
    page_size: int = Field(3, ge=1, le=INT32_MAX)
    order: PlayerOrder = PlayerOrder.ID

    @property
    def offset(self) -> int:
        return self.page_number * self.page_size
