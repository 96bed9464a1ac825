# tests/test_db_models.py

"""Tests for the database models."""

import pytest
from foosrank.db.models import Match, MatchParticipant, Player, PlayerRating
from foosrank.rating.belief import DEFAULT_BELIEF, SkillBelief
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession


@pytest.mark.asyncio
async def test_create_player(db_session: AsyncSession):
    """Test creating a Player instance in the database."""
    # 1. Create a new player object
    new_player = Player(name="TestPlayer")

    # 2. Add it to the session and commit
    db_session.add(new_player)
    await db_session.commit()
    await db_session.refresh(new_player)

    # 3. Assert that the player has been given an ID
    assert new_player.id is not None
    assert new_player.name == "TestPlayer"
    assert new_player.version == 1
    assert new_player.created_at is not None

    # 4. Query the database to confirm it was saved
    result = await db_session.execute(select(Player).where(Player.name == "TestPlayer"))
    player_from_db = result.scalar_one_or_none()

    assert player_from_db is not None
    assert player_from_db.id == new_player.id


@pytest.mark.asyncio
async def test_player_rating_defaults_and_belief(db_session: AsyncSession):
    player = Player(name="Rated", ratings=[PlayerRating(role="defender")])
    db_session.add(player)
    await db_session.commit()

    rating = player.rating_for("defender")
    assert rating is not None
    assert rating.to_belief() == DEFAULT_BELIEF
    assert player.rating_for("attacker") is None


@pytest.mark.asyncio
async def test_rating_for_picks_role_after_reload(db_session: AsyncSession):
    player = Player(
        name="Finder",
        ratings=[
            PlayerRating(role="defender", mean=31.0, deviation=4.0),
            PlayerRating(role="attacker", mean=19.0, deviation=6.0),
        ],
    )
    db_session.add(player)
    await db_session.commit()

    result = await db_session.execute(
        select(Player)
        .where(Player.id == player.id)
        .execution_options(populate_existing=True)
    )
    reloaded = result.scalar_one()

    found = reloaded.rating_for("attacker")
    assert found is not None
    assert found.to_belief() == SkillBelief(19.0, 6.0)
    assert reloaded.rating_for("any") is None


@pytest.mark.asyncio
async def test_match_with_participants(db_session: AsyncSession):
    player = Player(name="Participant")
    match = Match(winner=2, team1_win_probability=0.4, team2_win_probability=0.6)
    match.participants.append(
        MatchParticipant(
            player=player,
            team=2,
            role="attacker",
            mean_before=25.0,
            deviation_before=8.333,
            mean_after=27.5,
            deviation_after=7.9,
        )
    )
    db_session.add(match)
    await db_session.commit()

    assert match.id is not None
    assert match.played_at is not None
    assert match.participants[0].player_id == player.id


@pytest.mark.asyncio
async def test_one_rating_per_player_and_role(db_session: AsyncSession):
    """The (player, role) pair is unique."""
    player = Player(
        name="Doubled",
        ratings=[PlayerRating(role="defender"), PlayerRating(role="defender")],
    )
    db_session.add(player)

    with pytest.raises(IntegrityError):
        await db_session.commit()
