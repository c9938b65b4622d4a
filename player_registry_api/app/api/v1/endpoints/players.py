"""
Player endpoints for API v1.

These routes expose list, count and CRUD operations for players.
Handlers are plain ``def`` functions: the service and its storage are
blocking, so FastAPI runs them in its threadpool.  Path ids arrive as
strings and are parsed by ``PlayerService.parse_id`` so that malformed
ids yield ``400`` rather than FastAPI's default ``422``.
"""

import logging
from typing import List, NoReturn, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from player_registry_api.app.core.config import settings
from player_registry_api.app.core.exceptions import (
    InvalidFieldError,
    PlayerNotFoundError,
    PlayerRegistryError,
)
from player_registry_api.app.schemas.player import (
    INT32_MAX,
    INT64_MAX,
    PageRequest,
    Player,
    PlayerCreate,
    PlayerFilter,
    PlayerOrder,
    PlayerUpdate,
    Profession,
    Race,
)
from player_registry_api.app.services.player_service import PlayerService, get_player_service


logger = logging.getLogger(__name__)

router = APIRouter()


def _raise_http(error: PlayerRegistryError) -> NoReturn:
    if isinstance(error, PlayerNotFoundError):
        logger.warning("Not found: %s", error)
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(error)) from error
    if isinstance(error, InvalidFieldError):
        logger.warning("Bad request: %s", error)
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(error)) from error
    raise error


# Integer parameters carry the bounds of the column types they are
# compared with, so out-of-range values are rejected with 400 before
# they reach sqlite3.
def player_filter(
    name: Optional[str] = Query(None),
    title: Optional[str] = Query(None),
    race: Optional[Race] = Query(None),
    profession: Optional[Profession] = Query(None),
    after: Optional[int] = Query(None, ge=-INT64_MAX - 1, le=INT64_MAX, description="Earliest birthday, epoch milliseconds"),
    before: Optional[int] = Query(None, ge=-INT64_MAX - 1, le=INT64_MAX, description="Latest birthday, epoch milliseconds"),
    banned: Optional[bool] = Query(None),
    min_experience: Optional[int] = Query(None, ge=-INT32_MAX - 1, le=INT32_MAX, alias="minExperience"),
    max_experience: Optional[int] = Query(None, ge=-INT32_MAX - 1, le=INT32_MAX, alias="maxExperience"),
    min_level: Optional[int] = Query(None, ge=-INT32_MAX - 1, le=INT32_MAX, alias="minLevel"),
    max_level: Optional[int] = Query(None, ge=-INT32_MAX - 1, le=INT32_MAX, alias="maxLevel"),
) -> PlayerFilter:
    """Collect the optional filter query parameters shared by list and count."""
    return PlayerFilter(
        name=name,
        title=title,
        race=race,
        profession=profession,
        after=after,
        before=before,
        banned=banned,
        min_experience=min_experience,
        max_experience=max_experience,
        min_level=min_level,
        max_level=max_level,
    )


def page_request(
    order: PlayerOrder = Query(PlayerOrder.ID),
    page_number: int = Query(0, ge=0, le=INT32_MAX, alias="pageNumber"),
    page_size: Optional[int] = Query(None, ge=1, le=INT32_MAX, alias="pageSize"),
) -> PageRequest:
    return PageRequest(
        page_number=page_number,
        page_size=page_size if page_size is not None else settings.default_page_size,
        order=order,
    )


@router.get("/players", response_model=List[Player])
def list_players(
    filters: PlayerFilter = Depends(player_filter),
    page: PageRequest = Depends(page_request),
    service: PlayerService = Depends(get_player_service),
) -> List[Player]:
    """Получить страницу игроков с фильтрами и сортировкой.

    - **name**, **title** — подстрока (с учётом регистра).
    - **race**, **profession**, **banned** — точное совпадение.
    - **after**, **before** — диапазон дат рождения (epoch ms).
    - **minExperience**/**maxExperience**, **minLevel**/**maxLevel** — включительные границы.
    - **order** — `ID`, `NAME`, `EXPERIENCE`, `BIRTHDAY`, `LEVEL`.
    - **pageNumber**, **pageSize** — пагинация.
    """
    try:
        return service.list_players(filters, page)
    except PlayerRegistryError as e:
        _raise_http(e)


@router.get("/players/count", response_model=int)
def count_players(
    filters: PlayerFilter = Depends(player_filter),
    service: PlayerService = Depends(get_player_service),
) -> int:
    """Count the players matching the same filters as the list endpoint."""
    try:
        return service.count_players(filters)
    except PlayerRegistryError as e:
        _raise_http(e)


@router.post("/players", response_model=Player)
def create_player(
    player: PlayerCreate,
    service: PlayerService = Depends(get_player_service),
) -> Player:
    """Create a new player.

    All fields except ``banned`` are required.  ``level`` and
    ``untilNextLevel`` are computed from ``experience``.
    """
    try:
        return service.create_player(player)
    except PlayerRegistryError as e:
        _raise_http(e)


@router.get("/players/{player_id}", response_model=Player)
def get_player(
    player_id: str,
    service: PlayerService = Depends(get_player_service),
) -> Player:
    try:
        return service.get_player(service.parse_id(player_id))
    except PlayerRegistryError as e:
        _raise_http(e)


# POST is the verb existing clients use for updates; PUT and PATCH are
# accepted on the same path as aliases.
@router.api_route("/players/{player_id}", methods=["POST", "PUT", "PATCH"], response_model=Player)
def update_player(
    player_id: str,
    updates: PlayerUpdate,
    service: PlayerService = Depends(get_player_service),
) -> Player:
    """Update an existing player.

    Partial updates are supported; omitted fields remain unchanged.
    """
    try:
        return service.update_player(service.parse_id(player_id), updates)
    except PlayerRegistryError as e:
        _raise_http(e)


@router.delete("/players/{player_id}", status_code=status.HTTP_200_OK, response_class=Response)
def delete_player(
    player_id: str,
    service: PlayerService = Depends(get_player_service),
) -> Response:
    """Delete a player permanently."""
    try:
        service.delete_player(service.parse_id(player_id))
    except PlayerRegistryError as e:
        _raise_http(e)
    return Response(status_code=status.HTTP_200_OK)
