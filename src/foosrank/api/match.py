# src/foosrank/api/match.py

"""API endpoints for recording and browsing matches."""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from foosrank import config
from foosrank.db.models import Match, MatchParticipant
from foosrank.db.session import get_db
from foosrank.schemas import match as match_schema
from foosrank.schemas.pagination import MatchSortField, PaginatedResponse, SortOrder
from foosrank.services import match_service

# Create an APIRouter instance for matches
router = APIRouter(prefix="/matches", tags=["Matches"])


@router.get("/", response_model=PaginatedResponse[match_schema.MatchRead])
async def read_matches(
    skip: int = Query(0, ge=0, description="Records to skip"),
    limit: int = Query(
        config.MATCH_HISTORY_LIMIT, ge=1, le=100, description="Max records to return"
    ),
    sort_by: MatchSortField = Query(MatchSortField.PLAYED_AT, description="Sort field"),
    sort_order: SortOrder = Query(SortOrder.DESC, description="Sort direction"),
    player_id: int | None = Query(None, description="Filter by player"),
    db: AsyncSession = Depends(get_db),
) -> PaginatedResponse[match_schema.MatchRead]:
    """
    Retrieve the match history, newest first by default.

    - **skip**: Number of records to skip (for pagination)
    - **limit**: Maximum number of records to return (1-100)
    - **sort_by**: Field to sort by (id, played_at)
    - **sort_order**: Sort direction (asc, desc)
    - **player_id**: Only matches this player took part in
    """
    base_query = select(Match)

    if player_id is not None:
        # Join with participants to filter by player
        base_query = (
            base_query.join(MatchParticipant)
            .where(MatchParticipant.player_id == player_id)
            .distinct()
        )

    count_query = select(func.count()).select_from(base_query.subquery())
    total = (await db.execute(count_query)).scalar_one()

    # Apply sorting, ties broken by id so equal timestamps keep insertion order
    sort_column = getattr(Match, sort_by.value)
    id_column = Match.id
    if sort_order == SortOrder.DESC:
        sort_column = sort_column.desc()
        id_column = id_column.desc()

    # Apply pagination and eager load relationships
    query = (
        base_query.order_by(sort_column, id_column)
        .offset(skip)
        .limit(limit)
        .options(selectinload(Match.participants).selectinload(MatchParticipant.player))
    )
    result = await db.execute(query)
    items = list(result.scalars().unique().all())

    return PaginatedResponse(
        items=items,  # type: ignore[arg-type]
        total=total,
        skip=skip,
        limit=limit,
        has_more=(skip + len(items)) < total,
    )


@router.post(
    "/", response_model=match_schema.MatchRead, status_code=status.HTTP_201_CREATED
)
async def create_match(
    match_in: match_schema.MatchCreate, db: AsyncSession = Depends(get_db)
) -> Match:
    """
    Record a match result, update all four players' ratings, and return the match.

    Players are referenced by name; names seen for the first time create a
    new player starting from the default rating.

    Raises:
        422: If winner is not 1 or 2, or a player fills more than one slot
        500: If rating calculation fails
    """
    return await match_service.process_new_match(db, match_in)


@router.post("/forecast", response_model=match_schema.ForecastRead)
async def forecast_match(
    request: match_schema.ForecastRequest, db: AsyncSession = Depends(get_db)
) -> match_schema.ForecastRead:
    """
    Forecast the win probability of two prospective lineups.
    Nothing is recorded.
    """
    return await match_service.forecast(db, request)


@router.get("/{match_id}", response_model=match_schema.MatchRead)
async def read_match(match_id: int, db: AsyncSession = Depends(get_db)) -> Match:
    """
    Retrieve a single match by its ID, including its participants and their players.
    """
    return await match_service.get_match(db, match_id)
