"""Orchestrator for a single FPL advice request."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from typing import Any

import aiohttp

from ..config import Settings
from ..errors import AdvisorError, ConfigError
from ..fpl.client import FPLSourceClient
from ..fpl.gameweeks import find_current_gameweek, find_next_gameweek
from ..fpl.utils import create_http_session, safe_close_session
from ..types import AdviceError, AdviceResult, ResponseEnvelope
from .api import CompletionGateway
from .context import build_general_summary, build_user_context
from .prompts import compose_prompt
from .validation import validate_reply

logger = logging.getLogger(__name__)

SessionFactory = Callable[[], aiohttp.ClientSession]

INTERNAL_ERROR_MESSAGE = "An internal server error occurred"


def no_personalization_advice(team_id: str) -> AdviceError:
    return AdviceError(
        error=(
            "Cannot provide personalized FPL advice. FPL user data not available "
            f"for Team ID: {team_id}. Ensure FPL_SESSION is valid."
        )
    )


def error_payload(exc: AdvisorError) -> dict[str, Any]:
    """JSON body describing a request that could not be completed."""
    message = str(exc) or INTERNAL_ERROR_MESSAGE
    if isinstance(exc, ConfigError):
        return {"error": message}
    return {
        "error": message,
        "aiStructuredSuggestion": AdviceError(error=message).to_payload(),
    }


class FPLAdvisor:
    """Sequence fetching, context building and completion for one request."""

    def __init__(
        self,
        settings: Settings,
        gateway: CompletionGateway,
        session_factory: SessionFactory = create_http_session,
    ) -> None:
        self.settings = settings
        self.gateway = gateway
        self._session_factory = session_factory

    def _check_configuration(self, team_id: str | None) -> tuple[str, str]:
        if not self.gateway.configured:
            raise ConfigError("Anthropic API key not configured.")
        if not self.settings.fpl_base_url:
            raise ConfigError("FPL Base URL not configured.")
        if not team_id:
            raise ConfigError("FPL Team ID not configured or provided.")
        return self.settings.fpl_base_url, team_id

    async def advise(
        self,
        free_transfers: int | None = None,
        team_id: str | None = None,
    ) -> ResponseEnvelope:
        """Produce advice for ``team_id`` (or the configured default team).

        Raises:
            ConfigError: required configuration is missing.
            GameweekError: no event is flagged as current.
            FetchError: the FPL API or completion service failed.
        """
        team_to_use = team_id or self.settings.fpl_team_id
        logger.info(
            "--- Starting FPL advice request (Team ID: %s, user FTs: %s) ---",
            team_to_use,
            free_transfers,
        )
        base_url, team_to_use = self._check_configuration(team_to_use)

        session = self._session_factory()
        try:
            client = FPLSourceClient(base_url, session)
            catalog_result, fixtures_result = await asyncio.gather(
                client.fetch_catalog(),
                client.fetch_fixtures(),
                return_exceptions=True,
            )
            # Both fetches must settle before the session is closed.
            if isinstance(catalog_result, BaseException):
                raise catalog_result
            if isinstance(fixtures_result, BaseException):
                raise fixtures_result
            catalog, fixtures = catalog_result, fixtures_result

            current_gw = find_current_gameweek(catalog.events)
            next_gw = find_next_gameweek(catalog.events, current_gw)
            logger.info("Current gameweek: %s, planning for: %s", current_gw, next_gw)

            picks = await client.fetch_user_picks(
                current_gw, team_to_use, self.settings.fpl_session
            )
        finally:
            await safe_close_session(session)

        suggestion: AdviceResult
        if picks is None:
            logger.info("User picks not available, returning default advice structure")
            suggestion = no_personalization_advice(team_to_use)
        else:
            user_context = build_user_context(picks, catalog)
            summary = build_general_summary(catalog, fixtures, next_gw)
            prompt = compose_prompt(user_context, summary, free_transfers)
            raw_reply = await self.gateway.request_completion(prompt)
            suggestion = validate_reply(raw_reply)

        return ResponseEnvelope(
            current_gameweek=current_gw,
            next_gameweek_for_advice=next_gw,
            team_id_used=team_to_use,
            ai_structured_suggestion=suggestion,
        )


def build_advisor(settings: Settings | None = None) -> FPLAdvisor:
    """Create an advisor wired to the real FPL API and completion service."""
    settings = settings or Settings.from_env()
    return FPLAdvisor(settings, CompletionGateway.from_settings(settings))


__all__ = [
    "INTERNAL_ERROR_MESSAGE",
    "FPLAdvisor",
    "SessionFactory",
    "build_advisor",
    "error_payload",
    "no_personalization_advice",
]
