from datetime import date

import pytest

from conftest import player_payload
from player_registry_api.app.core.exceptions import InvalidFieldError, MissingFieldError, PlayerNotFoundError
from player_registry_api.app.schemas.player import PlayerCreate, PlayerFilter, PlayerUpdate, date_to_millis
from player_registry_api.app.services.player_service import PlayerService


def create(service, **overrides):
    return service.create_player(PlayerCreate.model_validate(player_payload(**overrides)))


def test_create_assigns_id_and_derived_fields(service):
    player = create(service, experience=100)
    assert player.id == 1
    assert player.level == 1
    assert player.until_next_level == 200
    assert player.banned is False
    assert player.birthday == date(2005, 3, 10)
    assert service.get_player(player.id) == player


def test_create_ignores_caller_supplied_derived_fields(service):
    payload = player_payload(experience=0, level=99, untilNextLevel=-1, id=42)
    player = service.create_player(PlayerCreate.model_validate(payload))
    assert player.id == 1
    assert (player.level, player.until_next_level) == (0, 100)


@pytest.mark.parametrize("field", ["name", "title", "race", "profession", "birthday", "experience"])
def test_create_requires_every_field(service, field):
    payload = player_payload()
    del payload[field]
    with pytest.raises(MissingFieldError):
        service.create_player(PlayerCreate.model_validate(payload))
    assert service.count_players(PlayerFilter()) == 0


def test_explicit_null_counts_as_missing(service):
    with pytest.raises(MissingFieldError):
        create(service, title=None)


@pytest.mark.parametrize(
    "overrides",
    [
        {"name": ""},
        {"name": "x" * 13},
        {"title": "x" * 31},
        {"experience": -1},
        {"experience": 10_000_001},
        {"birthday": date_to_millis(date(1999, 12, 31))},
        {"birthday": date_to_millis(date(3001, 1, 1))},
    ],
)
def test_create_rejects_invalid_values(service, overrides):
    with pytest.raises(InvalidFieldError):
        create(service, **overrides)
    assert service.count_players(PlayerFilter()) == 0


@pytest.mark.parametrize(
    "overrides",
    [
        {"name": "x"},
        {"name": "x" * 12},
        {"experience": 0},
        {"experience": 10_000_000},
        {"birthday": "2000-01-01"},
    ],
)
def test_create_accepts_boundary_values(service, overrides):
    assert create(service, **overrides).id is not None


def test_get_unknown_player(service):
    with pytest.raises(PlayerNotFoundError):
        service.get_player(7)


def test_update_overwrites_only_supplied_fields(service):
    player = create(service)
    updated = service.update_player(player.id, PlayerUpdate(title="Axe Lord", experience=300))
    assert updated.title == "Axe Lord"
    assert updated.name == player.name
    assert (updated.level, updated.until_next_level) == (2, 300)
    assert service.get_player(player.id) == updated


def test_update_recomputes_level_even_without_experience(service, storage):
    player = create(service, experience=1500)
    storage.save(player.model_copy(update={"level": 0, "until_next_level": 0}))

    updated = service.update_player(player.id, PlayerUpdate(banned=True))
    assert updated.banned is True
    assert (updated.level, updated.until_next_level) == (5, 600)

    again = service.update_player(player.id, PlayerUpdate(banned=True))
    assert (again.level, again.until_next_level) == (5, 600)


def test_update_with_empty_body_keeps_record(service):
    player = create(service)
    assert service.update_player(player.id, PlayerUpdate()) == player


def test_invalid_update_leaves_record_untouched(service):
    player = create(service)
    with pytest.raises(InvalidFieldError):
        service.update_player(player.id, PlayerUpdate(name="Ragnarok", experience=-1))
    assert service.get_player(player.id) == player


def test_update_unknown_player(service):
    with pytest.raises(PlayerNotFoundError):
        service.update_player(3, PlayerUpdate(banned=True))


def test_delete(service):
    player = create(service)
    service.delete_player(player.id)
    with pytest.raises(PlayerNotFoundError):
        service.get_player(player.id)


def test_delete_unknown_player_changes_nothing(service):
    create(service)
    with pytest.raises(PlayerNotFoundError):
        service.delete_player(99)
    assert service.count_players(PlayerFilter()) == 1


def test_ids_are_not_reused_after_delete(service):
    first = create(service)
    service.delete_player(first.id)
    assert create(service).id == first.id + 1


@pytest.mark.parametrize("raw", [None, "", "0", "-5", "abc", "1.5", " 7", "1_000"])
def test_parse_id_rejects(raw):
    with pytest.raises(InvalidFieldError):
        PlayerService.parse_id(raw)


@pytest.mark.parametrize("raw, expected", [("7", 7), ("+7", 7), ("123456789012", 123456789012)])
def test_parse_id_accepts(raw, expected):
    assert PlayerService.parse_id(raw) == expected


def test_update_reports_birthday_before_experience(service):
    player = create(service)
    with pytest.raises(InvalidFieldError) as info:
        service.update_player(player.id, PlayerUpdate(experience=-1, birthday=date(1999, 1, 1)))
    assert info.value.field == "birthday"


def test_create_reports_experience_before_birthday(service):
    with pytest.raises(InvalidFieldError) as info:
        create(service, experience=-1, birthday=date_to_millis(date(1999, 1, 1)))
    assert info.value.field == "experience"


@pytest.mark.parametrize("raw", ["9223372036854775808", "99999999999999999999"])
def test_parse_id_rejects_values_beyond_64_bits(raw):
    with pytest.raises(InvalidFieldError):
        PlayerService.parse_id(raw)


def test_parse_id_accepts_largest_64_bit_value():
    assert PlayerService.parse_id("9223372036854775807") == 2**63 - 1
