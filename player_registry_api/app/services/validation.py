"""
Field constraints for player input.

Only fields that are present are checked.  Checks run in a fixed order
and the first violation is raised; errors are never aggregated.  New
players are checked name, title, experience, birthday; partial updates
name, title, birthday, experience.  Race and profession need no check here
because pydantic already parsed them into their enums.
"""

import logging
from datetime import date
from typing import Any, Mapping

from ..core.exceptions import InvalidFieldError, MissingFieldError

logger = logging.getLogger(__name__)

NAME_MAX_LENGTH = 12
TITLE_MAX_LENGTH = 30
MAX_EXPERIENCE = 10_000_000
MIN_BIRTH_YEAR = 2000
MAX_BIRTH_YEAR = 3000

REQUIRED_FIELDS = ("name", "title", "race", "profession", "birthday", "experience")


def check_name(name: str) -> None:
    if not 1 <= len(name) <= NAME_MAX_LENGTH:
        raise InvalidFieldError("name", f"Name must be 1 to {NAME_MAX_LENGTH} characters long")


def check_title(title: str) -> None:
    if not 1 <= len(title) <= TITLE_MAX_LENGTH:
        raise InvalidFieldError("title", f"Title must be 1 to {TITLE_MAX_LENGTH} characters long")


def check_experience(experience: int) -> None:
    if not 0 <= experience <= MAX_EXPERIENCE:
        raise InvalidFieldError("experience", f"Experience must be between 0 and {MAX_EXPERIENCE}")


def check_birthday(birthday: date) -> None:
    if not MIN_BIRTH_YEAR <= birthday.year <= MAX_BIRTH_YEAR:
        raise InvalidFieldError(
            "birthday",
            f"Birthday year must be between {MIN_BIRTH_YEAR} and {MAX_BIRTH_YEAR}",
        )


CREATE_CHECKS = (
    ("name", check_name),
    ("title", check_title),
    ("experience", check_experience),
    ("birthday", check_birthday),
)

UPDATE_CHECKS = (
    ("name", check_name),
    ("title", check_title),
    ("birthday", check_birthday),
    ("experience", check_experience),
)


def require_fields(fields: Mapping[str, Any]) -> None:
    """Raise ``MissingFieldError`` for the first required field not supplied."""
    for field in REQUIRED_FIELDS:
        if fields.get(field) is None:
            logger.debug("Rejected player: missing %s", field)
            raise MissingFieldError(field)


def validate_fields(fields: Mapping[str, Any], checks=CREATE_CHECKS) -> None:
    """Check every constrained field present in ``fields``, in ``checks`` order."""
    for field, check in checks:
        value = fields.get(field)
        if value is None:
            continue
        try:
            check(value)
        except InvalidFieldError:
            logger.debug("Rejected player: invalid %s=%r", field, value)
            raise
