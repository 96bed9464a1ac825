# src/foosrank/api/player.py

"""API endpoints for managing players."""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from foosrank.db.models import Player, PlayerRating
from foosrank.db.session import get_db
from foosrank.rating.belief import DEFAULT_BELIEF, RatingMode, Role
from foosrank.schemas import player as player_schema
from foosrank.schemas.pagination import PaginatedResponse, PlayerSortField, SortOrder
from foosrank.services import player_service

# Create an APIRouter instance for players
# - prefix="/players": All routes here will be prefixed with /players
# - tags=["Players"]: Groups these endpoints under "Players" in the API docs
router = APIRouter(prefix="/players", tags=["Players"])


@router.post(
    "/",
    response_model=player_schema.PlayerRead,
    status_code=status.HTTP_201_CREATED,
)
async def create_player(
    player_in: player_schema.PlayerCreate, db: AsyncSession = Depends(get_db)
) -> Player:
    """
    Create a new player with default ratings.

    - **name**: The unique name for the player (surrounding whitespace is trimmed).

    Raises:
        409 Conflict: If a player with the same name already exists.
    """
    return await player_service.create_player(db, player_in)


@router.get("/", response_model=PaginatedResponse[player_schema.PlayerRead])
async def read_players(
    skip: int = Query(0, ge=0, description="Records to skip"),
    limit: int = Query(50, ge=1, le=100, description="Max records to return"),
    sort_by: PlayerSortField = Query(PlayerSortField.RATING, description="Sort field"),
    sort_order: SortOrder = Query(SortOrder.DESC, description="Sort direction"),
    db: AsyncSession = Depends(get_db),
) -> PaginatedResponse[player_schema.PlayerRead]:
    """
    Retrieve a paginated list of players.

    - **skip**: Number of records to skip (for pagination)
    - **limit**: Maximum number of records to return (1-100)
    - **sort_by**: Field to sort by (id, name, created_at, rating)
    - **sort_order**: Sort direction (asc, desc)

    Sorting by rating uses the best conservative rating (mean - 3 * deviation)
    across the player's stored beliefs.
    """
    total = (await db.execute(select(func.count(Player.id)))).scalar_one()

    if sort_by == PlayerSortField.RATING:
        best = (
            select(
                PlayerRating.player_id,
                func.max(PlayerRating.mean - 3 * PlayerRating.deviation).label(
                    "best"
                ),
            )
            .group_by(PlayerRating.player_id)
            .subquery()
        )
        # Players without stored beliefs rank at the default
        sort_column = func.coalesce(best.c.best, DEFAULT_BELIEF.conservative_rating)
        query = select(Player).outerjoin(best, best.c.player_id == Player.id)
    else:
        sort_column = getattr(Player, sort_by.value)
        query = select(Player)

    if sort_order == SortOrder.DESC:
        sort_column = sort_column.desc()

    # Apply pagination, ties broken by id for stable pages
    query = query.order_by(sort_column, Player.id).offset(skip).limit(limit)
    result = await db.execute(query)
    items = list(result.scalars().all())

    return PaginatedResponse(
        items=items,  # type: ignore[arg-type]
        total=total,
        skip=skip,
        limit=limit,
        has_more=(skip + len(items)) < total,
    )


@router.get("/by-role/{role}", response_model=list[player_schema.RoleStanding])
async def read_role_standings(
    role: str, db: AsyncSession = Depends(get_db)
) -> list[player_schema.RoleStanding]:
    """
    Rank all players by their rating in one role.

    - **role**: defender or attacker, or any when RATING_MODE is single

    Raises:
        422: If the role is not recognised for the current rating mode.
    """
    single = player_service.RATING_MODE is RatingMode.SINGLE
    return await player_service.list_role_standings(
        db, Role.parse(role, allow_any=single)
    )


@router.post("/reset-ratings", response_model=player_schema.ResetRatingsResponse)
async def reset_ratings(
    db: AsyncSession = Depends(get_db),
) -> player_schema.ResetRatingsResponse:
    """
    Reset every player's ratings to the default values.
    Match history is kept.
    """
    rows = await player_service.reset_all_ratings(db)
    return player_schema.ResetRatingsResponse(
        success=True,
        message="All player ratings have been reset to default values",
        ratings_reset=rows,
    )


@router.get("/{player_id}", response_model=player_schema.PlayerRead)
async def read_player(player_id: int, db: AsyncSession = Depends(get_db)) -> Player:
    """
    Retrieve a single player by their ID.
    """
    return await player_service.get_player(db, player_id)
