"""End-to-end tests for the advice orchestrator with faked I/O."""

from __future__ import annotations

import dataclasses
import json
from typing import Any

import pytest
from conftest import FakeResponse, FakeSession

from fpl_advisor.advisor.orchestrator import FPLAdvisor, error_payload
from fpl_advisor.config import Settings
from fpl_advisor.errors import (
    CompletionError,
    ConfigError,
    FetchError,
    GameweekError,
)
from fpl_advisor.types import UNAVAILABLE, Advice, AdviceError

REPLY = json.dumps(
    {
        "promisingTeamsNextGW": "Liverpool",
        "transferStrategy": "Roll the transfer.",
        "captainPicks": "Salah",
        "startingLineup": "Salah, Saka, Palmer",
        "benchOrder": "None",
        "chipStrategy": "Hold",
        "playersToWatch": "Isak",
    }
)


class FakeGateway:
    def __init__(
        self,
        reply: str = REPLY,
        configured: bool = True,
        error: Exception | None = None,
    ) -> None:
        self.reply = reply
        self.configured = configured
        self.error = error
        self.prompts: list[str] = []

    async def request_completion(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.reply


def _routes(
    bootstrap: dict[str, Any], fixtures: list[dict[str, Any]], picks: dict[str, Any]
) -> dict[str, Any]:
    return {
        "/bootstrap-static/": bootstrap,
        "/fixtures/": fixtures,
        "/picks/": picks,
    }


def _advisor(
    settings: Settings, session: FakeSession, gateway: FakeGateway
) -> FPLAdvisor:
    return FPLAdvisor(settings, gateway, session_factory=lambda: session)  # type: ignore[arg-type,return-value]


@pytest.mark.asyncio
async def test_advise_happy_path(
    settings: Settings,
    bootstrap: dict[str, Any],
    fixtures: list[dict[str, Any]],
    picks: dict[str, Any],
) -> None:
    session = FakeSession(_routes(bootstrap, fixtures, picks))
    gateway = FakeGateway()
    advisor = _advisor(settings, session, gateway)

    envelope = await advisor.advise(free_transfers=2)

    assert envelope.current_gameweek == 5
    assert envelope.next_gameweek_for_advice == 6
    assert envelope.team_id_used == "123"
    assert isinstance(envelope.ai_structured_suggestion, Advice)
    assert envelope.ai_structured_suggestion.captain_picks == "Salah"
    assert session.closed is True

    prompt = gateway.prompts[0]
    assert "Free Transfers Available (next GW, user-provided): 2" in prompt
    assert '"home_team": "Liverpool"' in prompt

    picks_url = next(url for url, _ in session.calls if url.endswith("/picks/"))
    assert picks_url.endswith("/entry/123/event/5/picks/")

    payload = envelope.to_payload()
    assert payload["currentGameweek"] == 5
    assert payload["nextGameweekForAdvice"] == 6
    assert payload["teamIdUsed"] == "123"
    assert payload["aiStructuredSuggestion"]["startingLineup"] == "Salah, Saka, Palmer"


@pytest.mark.asyncio
async def test_team_id_argument_overrides_default(
    settings: Settings,
    bootstrap: dict[str, Any],
    fixtures: list[dict[str, Any]],
    picks: dict[str, Any],
) -> None:
    session = FakeSession(_routes(bootstrap, fixtures, picks))
    advisor = _advisor(settings, session, FakeGateway())

    envelope = await advisor.advise(team_id="777")

    assert envelope.team_id_used == "777"
    assert any(url.endswith("/entry/777/event/5/picks/") for url, _ in session.calls)


@pytest.mark.asyncio
async def test_missing_session_returns_canned_advice(
    settings: Settings,
    bootstrap: dict[str, Any],
    fixtures: list[dict[str, Any]],
) -> None:
    session = FakeSession(_routes(bootstrap, fixtures, {}))
    gateway = FakeGateway()
    advisor = _advisor(dataclasses.replace(settings, fpl_session=None), session, gateway)

    envelope = await advisor.advise(team_id="555")

    suggestion = envelope.ai_structured_suggestion
    assert isinstance(suggestion, AdviceError)
    assert "555" in suggestion.error
    assert suggestion.starting_lineup == UNAVAILABLE
    assert envelope.current_gameweek == 5
    assert gateway.prompts == []
    assert not any(url.endswith("/picks/") for url, _ in session.calls)


@pytest.mark.asyncio
async def test_missing_next_gameweek_falls_back_to_current(
    settings: Settings,
    bootstrap: dict[str, Any],
    fixtures: list[dict[str, Any]],
    picks: dict[str, Any],
) -> None:
    bootstrap["events"] = [{"id": 38, "is_current": True}]
    session = FakeSession(_routes(bootstrap, fixtures, picks))
    advisor = _advisor(settings, session, FakeGateway())

    envelope = await advisor.advise()

    assert envelope.current_gameweek == 38
    assert envelope.next_gameweek_for_advice == 38


@pytest.mark.asyncio
async def test_missing_current_gameweek_is_fatal(
    settings: Settings,
    bootstrap: dict[str, Any],
    fixtures: list[dict[str, Any]],
    picks: dict[str, Any],
) -> None:
    bootstrap["events"] = [{"id": 1, "is_current": False, "is_next": True}]
    session = FakeSession(_routes(bootstrap, fixtures, picks))
    advisor = _advisor(settings, session, FakeGateway())

    with pytest.raises(GameweekError):
        await advisor.advise()
    assert session.closed is True


@pytest.mark.asyncio
async def test_invalid_reply_is_absorbed(
    settings: Settings,
    bootstrap: dict[str, Any],
    fixtures: list[dict[str, Any]],
    picks: dict[str, Any],
) -> None:
    session = FakeSession(_routes(bootstrap, fixtures, picks))
    advisor = _advisor(settings, session, FakeGateway(reply="Sure! Here is advice"))

    envelope = await advisor.advise()

    suggestion = envelope.ai_structured_suggestion
    assert isinstance(suggestion, AdviceError)
    assert suggestion.raw_response == "Sure! Here is advice"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("overrides", "configured", "message"),
    [
        ({}, False, "Anthropic API key"),
        ({"fpl_base_url": None}, True, "FPL Base URL"),
        ({"fpl_team_id": None}, True, "FPL Team ID"),
    ],
)
async def test_configuration_checked_before_fetching(
    settings: Settings,
    overrides: dict[str, Any],
    configured: bool,
    message: str,
) -> None:
    session = FakeSession()
    advisor = _advisor(
        dataclasses.replace(settings, **overrides),
        session,
        FakeGateway(configured=configured),
    )

    with pytest.raises(ConfigError, match=message):
        await advisor.advise()
    assert session.calls == []


@pytest.mark.asyncio
async def test_fetch_failure_aborts_request(
    settings: Settings, fixtures: list[dict[str, Any]]
) -> None:
    session = FakeSession(
        {"/bootstrap-static/": FakeResponse(500, "boom"), "/fixtures/": fixtures}
    )
    advisor = _advisor(settings, session, FakeGateway())

    with pytest.raises(FetchError) as excinfo:
        await advisor.advise()

    assert excinfo.value.status == 500
    assert session.closed is True


@pytest.mark.asyncio
async def test_completion_failure_aborts_request(
    settings: Settings,
    bootstrap: dict[str, Any],
    fixtures: list[dict[str, Any]],
    picks: dict[str, Any],
) -> None:
    session = FakeSession(_routes(bootstrap, fixtures, picks))
    gateway = FakeGateway(error=CompletionError("Completion service returned an empty message."))
    advisor = _advisor(settings, session, gateway)

    with pytest.raises(CompletionError):
        await advisor.advise()


def test_error_payload_shapes() -> None:
    assert error_payload(ConfigError("FPL Base URL not configured.")) == {
        "error": "FPL Base URL not configured."
    }

    payload = error_payload(FetchError("API request failed with status 500: boom"))
    assert payload["error"] == "API request failed with status 500: boom"
    suggestion = payload["aiStructuredSuggestion"]
    assert suggestion["error"] == payload["error"]
    assert suggestion["startingLineup"] == UNAVAILABLE
    assert "rawResponse" not in suggestion
