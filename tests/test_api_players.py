# tests/test_api_players.py

"""Tests for the /players endpoints."""

import pytest
from foosrank.rating.belief import RatingMode
from foosrank.services import player_service
from httpx import AsyncClient

# =============================================================================
# Helper Functions
# =============================================================================


async def create_player(client: AsyncClient, name: str) -> dict:
    """Helper to create a player and return the response body."""
    res = await client.post("/players/", json={"name": name})
    assert res.status_code == 201
    return res.json()


async def record_match(
    client: AsyncClient,
    team1: tuple[str, str],
    team2: tuple[str, str],
    winner: int = 1,
) -> dict:
    """Helper to record a match from (defender, attacker) name pairs."""
    res = await client.post(
        "/matches/",
        json={
            "team1": {"defender": team1[0], "attacker": team1[1]},
            "team2": {"defender": team2[0], "attacker": team2[1]},
            "winner": winner,
        },
    )
    assert res.status_code == 201, res.text
    return res.json()


# =============================================================================
# Create and read
# =============================================================================


@pytest.mark.asyncio
async def test_create_player(async_client: AsyncClient):
    """Test creating a player via the API."""
    data = await create_player(async_client, "Alice")

    assert data["name"] == "Alice"
    assert "id" in data
    assert "created_at" in data
    ratings = {r["role"]: r for r in data["ratings"]}
    assert set(ratings) == {"defender", "attacker"}
    assert ratings["defender"]["mean"] == 25.0
    assert ratings["defender"]["deviation"] == 8.333


@pytest.mark.asyncio
async def test_create_player_trims_name(async_client: AsyncClient):
    data = await create_player(async_client, "  Padded  ")

    assert data["name"] == "Padded"


@pytest.mark.asyncio
async def test_create_player_duplicate_name(async_client: AsyncClient):
    await create_player(async_client, "Twin")

    response = await async_client.post("/players/", json={"name": "Twin"})

    assert response.status_code == 409
    assert response.json()["error_type"] == "PlayerAlreadyExistsError"


@pytest.mark.asyncio
async def test_create_player_blank_name(async_client: AsyncClient):
    response = await async_client.post("/players/", json={"name": "   "})

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_read_player(async_client: AsyncClient):
    created = await create_player(async_client, "Bob")

    response = await async_client.get(f"/players/{created['id']}")

    assert response.status_code == 200
    assert response.json()["name"] == "Bob"
    assert len(response.json()["ratings"]) == 2


# =============================================================================
# Listing
# =============================================================================


@pytest.mark.asyncio
async def test_read_players_sorted_by_rating(async_client: AsyncClient):
    """Default listing ranks players by their best conservative rating."""
    await create_player(async_client, "Idle")
    await record_match(async_client, ("Win1", "Win2"), ("Lose1", "Lose2"), winner=1)

    response = await async_client.get("/players/")

    assert response.status_code == 200
    data = response.json()
    assert data["total"] == 5
    assert data["has_more"] is False
    names = [p["name"] for p in data["items"]]
    assert set(names[:2]) == {"Win1", "Win2"}
    assert names[2] == "Idle"
    assert set(names[3:]) == {"Lose1", "Lose2"}


@pytest.mark.asyncio
async def test_read_players_sorted_by_name_with_pagination(async_client: AsyncClient):
    for name in ("Cleo", "Abby", "Bert"):
        await create_player(async_client, name)

    response = await async_client.get(
        "/players/", params={"sort_by": "name", "sort_order": "asc", "limit": 2}
    )

    data = response.json()
    assert [p["name"] for p in data["items"]] == ["Abby", "Bert"]
    assert data["total"] == 3
    assert data["has_more"] is True

    response = await async_client.get(
        "/players/",
        params={"sort_by": "name", "sort_order": "asc", "skip": 2, "limit": 2},
    )
    assert [p["name"] for p in response.json()["items"]] == ["Cleo"]
    assert response.json()["has_more"] is False


@pytest.mark.asyncio
async def test_read_players_invalid_sort_field(async_client: AsyncClient):
    response = await async_client.get("/players/", params={"sort_by": "height"})

    assert response.status_code == 422


# =============================================================================
# Role standings
# =============================================================================


@pytest.mark.asyncio
async def test_role_standings(async_client: AsyncClient):
    await record_match(async_client, ("Dee", "Ema"), ("Fin", "Gil"), winner=2)

    response = await async_client.get("/players/by-role/attacker")

    assert response.status_code == 200
    standings = response.json()
    assert [s["name"] for s in standings] == ["Gil", "Dee", "Fin", "Ema"]
    assert standings[0]["role"] == "attacker"
    assert standings[0]["matches_played"] == 1
    assert standings[1]["matches_played"] == 0
    assert standings[1]["mean"] == 25.0


@pytest.mark.asyncio
@pytest.mark.parametrize("role", ["goalie", "any"])
async def test_role_standings_invalid_role(async_client: AsyncClient, role: str):
    response = await async_client.get(f"/players/by-role/{role}")

    assert response.status_code == 422
    assert response.json()["error_type"] == "InvalidRoleError"


@pytest.mark.asyncio
async def test_role_standings_any_in_single_mode(
    async_client: AsyncClient, monkeypatch: pytest.MonkeyPatch
):
    monkeypatch.setattr(player_service, "RATING_MODE", RatingMode.SINGLE)
    await record_match(async_client, ("Hal", "Ivo"), ("Jo", "Kit"), winner=1)

    response = await async_client.get("/players/by-role/any")

    assert response.status_code == 200
    standings = response.json()
    assert {s["name"] for s in standings[:2]} == {"Hal", "Ivo"}
    assert all(s["role"] == "any" for s in standings)
    assert all(s["matches_played"] == 1 for s in standings)


# =============================================================================
# Reset
# =============================================================================


@pytest.mark.asyncio
async def test_reset_ratings(async_client: AsyncClient):
    await record_match(async_client, ("Hugo", "Iris"), ("Jack", "Kate"), winner=1)

    response = await async_client.post("/players/reset-ratings")

    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert data["ratings_reset"] == 4

    players = (await async_client.get("/players/")).json()["items"]
    for player in players:
        for rating in player["ratings"]:
            assert rating["mean"] == 25.0
            assert rating["deviation"] == 8.333

    # Match history is kept
    matches = (await async_client.get("/matches/")).json()
    assert matches["total"] == 1
