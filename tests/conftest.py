"""Shared fixtures and fakes for the advisor test suite."""

from __future__ import annotations

import json
from typing import Any

import pytest

from fpl_advisor.config import Settings
from fpl_advisor.types import Catalog

BASE_URL = "https://fpl.example.com/api"


class FakeResponse:
    """Stand-in for ``aiohttp.ClientResponse`` used as an async context manager."""

    def __init__(self, status: int, body: str | bytes) -> None:
        self.status = status
        self._body = body.encode("utf-8") if isinstance(body, str) else body

    async def read(self) -> bytes:
        return self._body

    async def __aenter__(self) -> FakeResponse:
        return self

    async def __aexit__(self, *_exc: object) -> None:
        return None


class FakeSession:
    """Route GET requests to canned payloads keyed by URL suffix."""

    def __init__(self, routes: dict[str, Any] | None = None) -> None:
        self.routes: dict[str, Any] = routes or {}
        self.calls: list[tuple[str, dict[str, str] | None]] = []
        self.closed = False

    def get(self, url: str, headers: dict[str, str] | None = None) -> FakeResponse:
        self.calls.append((url, headers))
        for suffix, outcome in self.routes.items():
            if url.endswith(suffix):
                if isinstance(outcome, Exception):
                    raise outcome
                if isinstance(outcome, FakeResponse):
                    return outcome
                return FakeResponse(200, json.dumps(outcome))
        raise AssertionError(f"Unexpected request: {url}")

    async def close(self) -> None:
        self.closed = True


def make_player(player_id: int, **overrides: Any) -> dict[str, Any]:
    player: dict[str, Any] = {
        "id": player_id,
        "web_name": f"Player{player_id}",
        "team": 1,
        "element_type": 3,
        "now_cost": 75,
        "form": "4.0",
        "points_per_game": "5.1",
        "total_points": 60,
        "selected_by_percent": "12.3",
        "chance_of_playing_next_round": None,
        "minutes": 900,
        "starts": 10,
        "bps": 210,
        "influence": "300.2",
        "creativity": "250.0",
        "threat": "400.0",
        "ict_index": "95.1",
        "expected_goals": "3.20",
        "expected_assists": "1.10",
        "expected_goal_involvements": "4.30",
    }
    player.update(overrides)
    return player


@pytest.fixture
def bootstrap() -> dict[str, Any]:
    return {
        "teams": [
            {"id": 1, "name": "Arsenal"},
            {"id": 2, "name": "Liverpool"},
            {"id": 3, "name": "Chelsea"},
        ],
        "elements": [
            make_player(10, web_name="Saka", form="7.5"),
            make_player(11, web_name="Salah", team=2, form="8.2", now_cost=130),
            make_player(12, web_name="Palmer", team=3, form="6.0"),
        ],
        "events": [
            {"id": 4, "name": "Gameweek 4", "is_current": False, "is_next": False},
            {"id": 5, "name": "Gameweek 5", "is_current": True, "is_next": False},
            {"id": 6, "name": "Gameweek 6", "is_current": False, "is_next": True},
        ],
    }


@pytest.fixture
def catalog(bootstrap: dict[str, Any]) -> Catalog:
    return Catalog.from_bootstrap(bootstrap)


@pytest.fixture
def fixtures() -> list[dict[str, Any]]:
    return [
        {
            "id": 50,
            "event": 5,
            "kickoff_time": "2025-09-20T14:00:00Z",
            "team_h": 1,
            "team_a": 2,
            "team_h_difficulty": 4,
            "team_a_difficulty": 4,
        },
        {
            "id": 60,
            "event": 6,
            "kickoff_time": "2025-09-27T11:30:00Z",
            "team_h": 2,
            "team_a": 3,
            "team_h_difficulty": 3,
            "team_a_difficulty": 4,
        },
        {
            "id": 61,
            "event": 6,
            "kickoff_time": "2025-09-27T14:00:00Z",
            "team_h": 3,
            "team_a": 1,
            "team_h_difficulty": 4,
            "team_a_difficulty": 3,
        },
    ]


@pytest.fixture
def picks() -> dict[str, Any]:
    return {
        "picks": [
            {"element": 11, "position": 1, "is_captain": True, "is_vice_captain": False},
            {"element": 10, "position": 2, "is_captain": False, "is_vice_captain": True},
            {"element": 12, "position": 3, "is_captain": False, "is_vice_captain": False},
        ],
        "entry_history": {"event": 5, "bank": 15, "event_transfers": 1},
        "active_chip": None,
        "chips": [
            {"name": "wildcard", "status_for_event": "available"},
            {"name": "bboost", "status_for_event": "played"},
            {"name": "3xc", "status_for_event": "available"},
        ],
    }


@pytest.fixture
def settings() -> Settings:
    return Settings(
        fpl_base_url=BASE_URL,
        fpl_team_id="123",
        fpl_session="session-token",
        anthropic_api_key="test-key",
    )
