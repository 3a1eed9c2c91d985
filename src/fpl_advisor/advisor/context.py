"""Build the per-user and league-wide context objects fed to the prompt.

Upstream FPL records are sparse: keys go missing or come back ``null`` for
new or inactive players. All default substitution happens here so that the
models handed to the prompt composer are always fully populated.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from ..fpl.utils import normalize_form, normalize_price
from ..types import (
    Catalog,
    EnrichedPick,
    FixtureRecord,
    FixtureSummary,
    GeneralSummary,
    PickEntry,
    PickRecord,
    PlayerRecord,
    TeamRecord,
    TopPerformer,
    UserContext,
)

UNKNOWN_PLAYER = "Unknown"
UNKNOWN_TEAM = "Unknown Team"
NOT_AVAILABLE = "N/A"
TOP_PERFORMER_LIMIT = 10


def _text(record: dict[str, Any], key: str) -> str:
    """String stat, ``"0"`` when missing or empty."""
    return str(record.get(key) or "0")


def _count(record: dict[str, Any], key: str) -> int:
    """Integer stat, ``0`` when missing."""
    return int(record.get(key) or 0)


def _advanced(record: dict[str, Any], key: str) -> str:
    """Expected-stat field, ``"N/A"`` only when missing or null."""
    value = record.get(key)
    return NOT_AVAILABLE if value is None else str(value)


def _team_name(catalog: Catalog, team_id: int | None) -> str:
    team: TeamRecord = catalog.teams.get(team_id, {}) if team_id is not None else {}
    return team.get("name") or UNKNOWN_TEAM


def _enrich_pick(pick: PickEntry, catalog: Catalog) -> EnrichedPick:
    player_id = pick.get("element")
    player: PlayerRecord = (
        catalog.players.get(player_id, {}) if player_id is not None else {}
    )
    stats: dict[str, Any] = dict(player)
    chance = player.get("chance_of_playing_next_round")
    return EnrichedPick(
        position=pick.get("position"),
        player_id=player_id,
        name=player.get("web_name") or UNKNOWN_PLAYER,
        team_name=_team_name(catalog, player.get("team")),
        is_captain=bool(pick.get("is_captain", False)),
        is_vice_captain=bool(pick.get("is_vice_captain", False)),
        cost=normalize_price(player.get("now_cost")),
        form=_text(stats, "form"),
        points_per_game=_text(stats, "points_per_game"),
        total_points=_count(stats, "total_points"),
        selected_by_percent=_text(stats, "selected_by_percent"),
        chance_of_playing_next_round=100 if chance is None else int(chance),
        minutes=_count(stats, "minutes"),
        starts=_count(stats, "starts"),
        bps=_count(stats, "bps"),
        influence=_text(stats, "influence"),
        creativity=_text(stats, "creativity"),
        threat=_text(stats, "threat"),
        ict_index=_text(stats, "ict_index"),
        expected_goals=_advanced(stats, "expected_goals"),
        expected_assists=_advanced(stats, "expected_assists"),
        expected_goal_involvements=_advanced(stats, "expected_goal_involvements"),
    )


def build_user_context(picks: PickRecord, catalog: Catalog) -> UserContext:
    """Join the user's raw picks against the catalog.

    Squad order and captaincy flags are preserved; unknown players become
    placeholder entries rather than errors.
    """
    history = picks.get("entry_history") or {}
    chips = picks.get("chips") or []
    return UserContext(
        team_picks=[_enrich_pick(pick, catalog) for pick in picks.get("picks") or []],
        bank=normalize_price(history.get("bank")),
        transfers_made_this_gw=int(history.get("event_transfers") or 0),
        active_chip=picks.get("active_chip") or None,
        available_chips=[
            chip.get("name", "")
            for chip in chips
            if chip.get("status_for_event") == "available"
        ],
    )


def _summarize_fixture(fixture: FixtureRecord, catalog: Catalog) -> FixtureSummary:
    return FixtureSummary(
        kickoff_time=fixture.get("kickoff_time"),
        home_team=_team_name(catalog, fixture.get("team_h")),
        away_team=_team_name(catalog, fixture.get("team_a")),
        home_difficulty=fixture.get("team_h_difficulty"),
        away_difficulty=fixture.get("team_a_difficulty"),
    )


def _summarize_player(player: PlayerRecord, catalog: Catalog) -> TopPerformer:
    stats: dict[str, Any] = dict(player)
    return TopPerformer(
        name=player.get("web_name") or UNKNOWN_PLAYER,
        team_name=_team_name(catalog, player.get("team")),
        cost=normalize_price(player.get("now_cost")),
        form=_text(stats, "form"),
        ict_index=_text(stats, "ict_index"),
        total_points=_count(stats, "total_points"),
        expected_goal_involvements=_advanced(stats, "expected_goal_involvements"),
    )


def top_players_by_form(
    catalog: Catalog, limit: int = TOP_PERFORMER_LIMIT
) -> list[PlayerRecord]:
    """Players ordered by descending form; ties keep catalog order."""
    ranked = sorted(
        catalog.players.values(),
        key=lambda player: normalize_form(player.get("form")),
        reverse=True,
    )
    return ranked[:limit]


def build_general_summary(
    catalog: Catalog,
    fixtures: Sequence[FixtureRecord],
    next_gameweek_id: int | None,
) -> GeneralSummary:
    upcoming: list[FixtureSummary] = []
    if next_gameweek_id is not None:
        upcoming = [
            _summarize_fixture(fixture, catalog)
            for fixture in fixtures
            if fixture.get("event") == next_gameweek_id
        ]

    return GeneralSummary(
        next_gameweek_id=next_gameweek_id,
        upcoming_fixtures=upcoming,
        top_performers=[
            _summarize_player(player, catalog) for player in top_players_by_form(catalog)
        ],
    )


__all__ = [
    "NOT_AVAILABLE",
    "TOP_PERFORMER_LIMIT",
    "UNKNOWN_PLAYER",
    "UNKNOWN_TEAM",
    "build_general_summary",
    "build_user_context",
    "top_players_by_form",
]
