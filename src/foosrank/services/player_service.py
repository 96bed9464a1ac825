# src/foosrank/services/player_service.py

"""Business logic for players and their stored beliefs."""

from __future__ import annotations

import logging

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from foosrank import config
from foosrank.db import models
from foosrank.exceptions import (
    InvalidRoleError,
    PlayerAlreadyExistsError,
    PlayerNotFoundError,
)
from foosrank.rating.belief import (
    DEFAULT_BELIEF,
    DEFAULT_DEVIATION,
    DEFAULT_MEAN,
    RatingMode,
    Role,
    SkillBelief,
)
from foosrank.schemas import player as player_schema

logger = logging.getLogger(__name__)

# Fails at startup on an unknown RATING_MODE value.
RATING_MODE = RatingMode(config.RATING_MODE)


async def create_player(
    db: AsyncSession,
    player_in: player_schema.PlayerCreate,
    mode: RatingMode | None = None,
) -> models.Player:
    """
    Creates a player with a default belief for every slot the mode keeps.

    Raises:
        PlayerAlreadyExistsError: If the name is taken
    """
    mode = mode or RATING_MODE

    query = select(models.Player.id).where(models.Player.name == player_in.name)
    if (await db.execute(query)).scalar_one_or_none() is not None:
        raise PlayerAlreadyExistsError(player_in.name)

    player = models.Player(
        name=player_in.name,
        ratings=[
            models.PlayerRating(
                role=role.value, mean=DEFAULT_MEAN, deviation=DEFAULT_DEVIATION
            )
            for role in mode.storage_roles()
        ],
    )
    try:
        db.add(player)
        await db.commit()
    except IntegrityError:
        # Lost a race with a concurrent create of the same name
        await db.rollback()
        raise PlayerAlreadyExistsError(player_in.name)

    logger.info(
        "Created player", extra={"player_id": player.id, "mode": mode.value}
    )
    return player


async def get_player(db: AsyncSession, player_id: int) -> models.Player:
    """
    Fetches a player by ID.

    Raises:
        PlayerNotFoundError: If no such player exists
    """
    player = await db.get(models.Player, player_id)
    if player is None:
        raise PlayerNotFoundError(player_id)
    return player


async def get_or_create_players(
    db: AsyncSession, names: list[str]
) -> dict[str, models.Player]:
    """
    Retrieves players by name, creating any that don't exist yet.

    Existing rows are locked for the rest of the transaction so concurrent
    matches sharing a player apply their rating updates one after another.
    New players start without stored beliefs; the coordinator falls back
    to the default belief for them.
    """
    query = (
        select(models.Player)
        .where(models.Player.name.in_(names))
        .with_for_update()
        .execution_options(populate_existing=True)
    )
    result = await db.execute(query)
    players = {p.name: p for p in result.scalars().all()}

    for name in names:
        if name in players:
            continue
        player = models.Player(name=name, ratings=[])
        db.add(player)
        players[name] = player
        logger.debug("Created player on first match", extra={"player_name": name})

    # NOTE: We don't commit here; the caller owns the transaction.
    await db.flush()
    return players


async def list_role_standings(
    db: AsyncSession, role: Role, mode: RatingMode | None = None
) -> list[player_schema.RoleStanding]:
    """
    Ranks every player by their belief for one role, highest mean first.

    matches_played counts only matches in which the player filled that role.
    `any` is only meaningful in single mode, where it covers both slots.

    Raises:
        InvalidRoleError: If `any` is requested in per-role mode
    """
    mode = mode or RATING_MODE
    if role is Role.ANY and mode is not RatingMode.SINGLE:
        raise InvalidRoleError(role.value)
    storage_role = mode.storage_role(role)

    count_query = select(models.MatchParticipant.player_id, func.count()).group_by(
        models.MatchParticipant.player_id
    )
    if role is not Role.ANY:
        count_query = count_query.where(models.MatchParticipant.role == role.value)
    counts = dict((await db.execute(count_query)).all())

    result = await db.execute(select(models.Player))
    standings = []
    for player in result.scalars().all():
        stored = player.rating_for(storage_role.value)
        belief = stored.to_belief() if stored is not None else DEFAULT_BELIEF
        standings.append(
            player_schema.RoleStanding(
                id=player.id,
                name=player.name,
                role=role.value,
                mean=belief.mean,
                deviation=belief.deviation,
                conservative_rating=belief.conservative_rating,
                matches_played=counts.get(player.id, 0),
            )
        )

    standings.sort(key=lambda s: (-s.mean, s.name))
    return standings


async def reset_all_ratings(db: AsyncSession) -> int:
    """Resets every stored belief to the default. Returns the number of rows."""
    stmt = update(models.PlayerRating).values(
        mean=DEFAULT_MEAN,
        deviation=DEFAULT_DEVIATION,
        version=models.PlayerRating.version + 1,
    )
    try:
        result = await db.execute(stmt)
        await db.commit()
    except Exception:
        await db.rollback()
        raise

    logger.warning("All player ratings reset", extra={"rows": result.rowcount})
    return int(result.rowcount)


def stored_belief(player: models.Player, role: Role) -> SkillBelief | None:
    """The player's stored belief for a role, or None if they have none yet."""
    rating = player.rating_for(role.value)
    return rating.to_belief() if rating is not None else None
