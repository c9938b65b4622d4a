from datetime import date

import pytest
from fastapi.testclient import TestClient

from player_registry_api.app.main import app
from player_registry_api.app.schemas.player import PlayerCreate, date_to_millis
from player_registry_api.app.services.player_service import PlayerService, get_player_service
from player_registry_api.app.services.storage import InMemoryPlayerStorage, SQLitePlayerStorage


def player_payload(**overrides):
    payload = {
        "name": "Ragnar",
        "title": "Skull Crusher",
        "race": "HUMAN",
        "profession": "WARRIOR",
        "birthday": date_to_millis(date(2005, 3, 10)),
        "experience": 1500,
    }
    payload.update(overrides)
    return payload


ROSTER = [
    player_payload(),
    player_payload(name="Elrond", title="Lord of Rivendell", race="ELF", profession="SORCERER",
                   birthday=date_to_millis(date(2010, 7, 1)), experience=50000),
    player_payload(name="Gimli", title="axe master", race="DWARF", profession="WARRIOR",
                   birthday=date_to_millis(date(2001, 1, 15)), experience=300, banned=True),
    player_payload(name="ragna", title="Shadow", race="ORC", profession="ROGUE",
                   birthday=date_to_millis(date(2020, 12, 31)), experience=0, banned=False),
    player_payload(name="Bilbo", title="Ring Bearer", race="HOBBIT", profession="ROGUE",
                   birthday=date_to_millis(date(2003, 9, 22)), experience=100, banned=True),
]


@pytest.fixture
def memory_storage():
    return InMemoryPlayerStorage()


@pytest.fixture
def sqlite_storage(tmp_path):
    storage = SQLitePlayerStorage(str(tmp_path / "players.db"))
    storage.init()
    return storage


@pytest.fixture(params=["memory", "sqlite"])
def storage(request):
    return request.getfixturevalue(f"{request.param}_storage")


@pytest.fixture
def service(storage):
    return PlayerService(storage)


@pytest.fixture
def roster(service):
    """Create the five sample players; ids are 1 to 5 in ROSTER order."""
    return [service.create_player(PlayerCreate.model_validate(p)) for p in ROSTER]


@pytest.fixture
def client(storage):
    app.dependency_overrides[get_player_service] = lambda: PlayerService(storage)
    yield TestClient(app)
    app.dependency_overrides.clear()
