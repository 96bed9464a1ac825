# tests/test_api_errors.py

"""Tests for HTTP error responses across all API endpoints."""

import pytest
from httpx import AsyncClient


def match_payload(winner=1, **teams) -> dict:
    return {
        "team1": teams.get("team1", {"defender": "A1", "attacker": "A2"}),
        "team2": teams.get("team2", {"defender": "B1", "attacker": "B2"}),
        "winner": winner,
    }


# =============================================================================
# 404 Not Found Errors
# =============================================================================


@pytest.mark.asyncio
async def test_get_nonexistent_player_returns_404(async_client: AsyncClient):
    """Test that fetching a non-existent player returns 404."""
    response = await async_client.get("/players/999999")

    assert response.status_code == 404
    data = response.json()
    assert "detail" in data
    assert "not found" in data["detail"].lower()
    assert data["error_type"] == "PlayerNotFoundError"


@pytest.mark.asyncio
async def test_get_nonexistent_match_returns_404(async_client: AsyncClient):
    """Test that fetching a non-existent match returns 404."""
    response = await async_client.get("/matches/999999")

    assert response.status_code == 404
    data = response.json()
    assert "not found" in data["detail"].lower()
    assert data["error_type"] == "MatchNotFoundError"


# =============================================================================
# 422 Validation Errors - Matches
# =============================================================================


@pytest.mark.asyncio
@pytest.mark.parametrize("winner", [0, 3, -1])
async def test_invalid_winner_returns_422(async_client: AsyncClient, winner: int):
    """A winner other than 1 or 2 is rejected before anything is written."""
    response = await async_client.post("/matches/", json=match_payload(winner=winner))

    assert response.status_code == 422
    data = response.json()
    assert data["error_type"] == "InvalidOutcomeError"
    assert "1 or 2" in data["detail"]

    players = (await async_client.get("/players/")).json()
    assert players["total"] == 0


@pytest.mark.asyncio
async def test_non_numeric_winner_returns_422(async_client: AsyncClient):
    response = await async_client.post(
        "/matches/", json=match_payload(winner="team one")
    )

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_player_on_both_teams_returns_422(async_client: AsyncClient):
    response = await async_client.post(
        "/matches/",
        json=match_payload(team2={"defender": "A1", "attacker": "B2"}),
    )

    assert response.status_code == 422
    assert response.json()["error_type"] == "DuplicatePlayerError"

    matches = (await async_client.get("/matches/")).json()
    assert matches["total"] == 0


@pytest.mark.asyncio
async def test_missing_attacker_returns_422(async_client: AsyncClient):
    response = await async_client.post(
        "/matches/", json=match_payload(team1={"defender": "A1"})
    )

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_blank_player_name_returns_422(async_client: AsyncClient):
    response = await async_client.post(
        "/matches/", json=match_payload(team1={"defender": "A1", "attacker": " "})
    )

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_forecast_with_duplicate_player_returns_422(async_client: AsyncClient):
    response = await async_client.post(
        "/matches/forecast",
        json={
            "team1": {"defender": "Same", "attacker": "Same"},
            "team2": {"defender": "B1", "attacker": "B2"},
        },
    )

    assert response.status_code == 422
    assert response.json()["error_type"] == "DuplicatePlayerError"


# =============================================================================
# 422 Validation Errors - Pagination
# =============================================================================


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "params",
    [{"skip": -1}, {"limit": 0}, {"limit": 101}, {"sort_by": "winner"}],
)
async def test_invalid_match_pagination_returns_422(
    async_client: AsyncClient, params: dict
):
    response = await async_client.get("/matches/", params=params)

    assert response.status_code == 422


# =============================================================================
# 409 Conflict Errors
# =============================================================================


@pytest.mark.asyncio
async def test_duplicate_player_name_returns_409(async_client: AsyncClient):
    res = await async_client.post("/players/", json={"name": "Unique"})
    assert res.status_code == 201

    response = await async_client.post("/players/", json={"name": "Unique"})

    assert response.status_code == 409
    assert "already exists" in response.json()["detail"]
