"""Shared type definitions for the advisor pipeline."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, TypedDict

from pydantic import BaseModel, ConfigDict, Field, field_validator

UNAVAILABLE = "N/A - data unavailable."

# Wire names of the seven advice sections, in display order.
ADVICE_FIELDS: dict[str, str] = {
    "promising_teams_next_gw": "promisingTeamsNextGW",
    "transfer_strategy": "transferStrategy",
    "captain_picks": "captainPicks",
    "starting_lineup": "startingLineup",
    "bench_order": "benchOrder",
    "chip_strategy": "chipStrategy",
    "players_to_watch": "playersToWatch",
}

# =============================================================================
# Upstream payloads (FPL API JSON, every key optional)
# =============================================================================


class PlayerRecord(TypedDict, total=False):
    """Subset of a ``bootstrap-static`` element used by the advisor."""

    id: int
    web_name: str
    team: int
    element_type: int
    now_cost: int
    form: str
    points_per_game: str
    total_points: int
    selected_by_percent: str
    chance_of_playing_next_round: int | None
    minutes: int
    starts: int
    bps: int
    influence: str
    creativity: str
    threat: str
    ict_index: str
    expected_goals: str | None
    expected_assists: str | None
    expected_goal_involvements: str | None


class TeamRecord(TypedDict, total=False):
    """Subset of a ``bootstrap-static`` team."""

    id: int
    name: str
    short_name: str


class GameweekRecord(TypedDict, total=False):
    """Subset of a ``bootstrap-static`` event."""

    id: int
    name: str
    is_current: bool
    is_next: bool
    deadline_time: str | None


class FixtureRecord(TypedDict, total=False):
    """Subset of a ``fixtures`` entry."""

    id: int
    event: int | None
    kickoff_time: str | None
    team_h: int
    team_a: int
    team_h_difficulty: int
    team_a_difficulty: int


class PickEntry(TypedDict, total=False):
    """Single squad slot from the ``picks`` endpoint."""

    element: int
    position: int
    multiplier: int
    is_captain: bool
    is_vice_captain: bool


class EntryHistory(TypedDict, total=False):
    """Gameweek history block attached to a picks payload."""

    event: int
    bank: int
    value: int
    event_transfers: int
    event_transfers_cost: int


class ChipRecord(TypedDict, total=False):
    """Chip availability for the requested gameweek."""

    name: str
    status_for_event: str


class PickRecord(TypedDict, total=False):
    """Raw ``entry/{id}/event/{gw}/picks`` payload."""

    picks: list[PickEntry]
    entry_history: EntryHistory
    active_chip: str | None
    chips: list[ChipRecord]


@dataclass(slots=True, frozen=True)
class Catalog:
    """League-wide reference data fetched once per request."""

    players: dict[int, PlayerRecord] = field(default_factory=dict)
    teams: dict[int, TeamRecord] = field(default_factory=dict)
    events: list[GameweekRecord] = field(default_factory=list)

    @classmethod
    def from_bootstrap(cls, payload: dict[str, Any]) -> Catalog:
        """Index a ``bootstrap-static`` payload by player and team id."""
        players: dict[int, PlayerRecord] = {}
        for player in payload.get("elements") or []:
            players[player.get("id")] = player
        teams: dict[int, TeamRecord] = {}
        for team in payload.get("teams") or []:
            teams[team.get("id")] = team
        return cls(
            players=players,
            teams=teams,
            events=list(payload.get("events") or []),
        )


# =============================================================================
# Derived context (built once per request by the context builder)
# =============================================================================


class EnrichedPick(BaseModel):
    """A squad slot joined with its player and team records."""

    position: int | None
    player_id: int | None
    name: str
    team_name: str
    is_captain: bool
    is_vice_captain: bool
    cost: float
    form: str
    points_per_game: str
    total_points: int
    selected_by_percent: str
    chance_of_playing_next_round: int
    minutes: int
    starts: int
    bps: int
    influence: str
    creativity: str
    threat: str
    ict_index: str
    expected_goals: str
    expected_assists: str
    expected_goal_involvements: str


class UserContext(BaseModel):
    """Everything the prompt needs to know about the user's team."""

    team_picks: list[EnrichedPick]
    bank: float
    transfers_made_this_gw: int
    active_chip: str | None = None
    available_chips: list[str] = []


class FixtureSummary(BaseModel):
    """Display form of a single upcoming fixture."""

    kickoff_time: str | None
    home_team: str
    away_team: str
    home_difficulty: int | None
    away_difficulty: int | None


class TopPerformer(BaseModel):
    """Display-safe subset of a high-form player."""

    name: str
    team_name: str
    cost: float
    form: str
    ict_index: str
    total_points: int
    expected_goal_involvements: str


class GeneralSummary(BaseModel):
    """League-wide context scoped to the gameweek being advised on."""

    next_gameweek_id: int | None
    upcoming_fixtures: list[FixtureSummary]
    top_performers: list[TopPerformer]


# =============================================================================
# Advice results
# =============================================================================


class _AdviceSections(BaseModel):
    """The seven display sections shared by both advice variants."""

    model_config = ConfigDict(populate_by_name=True)

    promising_teams_next_gw: str = Field(UNAVAILABLE, alias="promisingTeamsNextGW")
    transfer_strategy: str = Field(UNAVAILABLE, alias="transferStrategy")
    captain_picks: str = Field(UNAVAILABLE, alias="captainPicks")
    starting_lineup: str = Field(UNAVAILABLE, alias="startingLineup")
    bench_order: str = Field(UNAVAILABLE, alias="benchOrder")
    chip_strategy: str = Field(UNAVAILABLE, alias="chipStrategy")
    players_to_watch: str = Field(UNAVAILABLE, alias="playersToWatch")

    @field_validator(*ADVICE_FIELDS, mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> str:
        if value is None:
            return UNAVAILABLE
        if isinstance(value, str):
            return value
        return json.dumps(value, ensure_ascii=False)

    def sections(self) -> dict[str, str]:
        """Return the display sections keyed by wire name, in display order."""
        return {alias: getattr(self, name) for name, alias in ADVICE_FIELDS.items()}

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class Advice(_AdviceSections):
    """Advice accepted from the model; unknown keys are kept as-is."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")


class AdviceError(_AdviceSections):
    """Advice that could not be produced, carrying the reason."""

    error: str
    raw_response: str | None = Field(None, alias="rawResponse")


AdviceResult = Advice | AdviceError


class ResponseEnvelope(BaseModel):
    """Top-level payload returned for a single advice request."""

    model_config = ConfigDict(populate_by_name=True)

    message: str = "FPL Advisor API request processed."
    current_gameweek: int = Field(alias="currentGameweek")
    next_gameweek_for_advice: int = Field(alias="nextGameweekForAdvice")
    team_id_used: str = Field(alias="teamIdUsed")
    ai_structured_suggestion: Advice | AdviceError = Field(
        alias="aiStructuredSuggestion"
    )

    def to_payload(self) -> dict[str, Any]:
        payload = self.model_dump(by_alias=True, exclude={"ai_structured_suggestion"})
        payload["aiStructuredSuggestion"] = self.ai_structured_suggestion.to_payload()
        return payload


__all__ = [
    "ADVICE_FIELDS",
    "UNAVAILABLE",
    "Advice",
    "AdviceError",
    "AdviceResult",
    "Catalog",
    "ChipRecord",
    "EnrichedPick",
    "EntryHistory",
    "FixtureRecord",
    "FixtureSummary",
    "GameweekRecord",
    "GeneralSummary",
    "PickEntry",
    "PickRecord",
    "PlayerRecord",
    "ResponseEnvelope",
    "TeamRecord",
    "TopPerformer",
    "UserContext",
]
