"""HTTP endpoint exposing the advisor as ``GET /api/advise``."""

from __future__ import annotations

import logging

from aiohttp import web

from .advisor.orchestrator import INTERNAL_ERROR_MESSAGE, FPLAdvisor, error_payload
from .errors import AdvisorError

logger = logging.getLogger(__name__)

ADVISOR_KEY = web.AppKey("advisor", FPLAdvisor)


def parse_free_transfers(raw: str | None) -> int | None:
    """Return a non-negative integer, or ``None`` when the value is unusable."""
    if raw is None:
        return None
    try:
        value = int(raw.strip())
    except ValueError:
        return None
    return value if value >= 0 else None


def parse_team_id(raw: str | None) -> str | None:
    if raw is None:
        return None
    return raw.strip() or None


async def advise_handler(request: web.Request) -> web.Response:
    advisor = request.app[ADVISOR_KEY]
    free_transfers = parse_free_transfers(request.query.get("freeTransfers"))
    team_id = parse_team_id(request.query.get("teamId"))

    try:
        envelope = await advisor.advise(free_transfers=free_transfers, team_id=team_id)
    except AdvisorError as exc:
        logger.error("Error in FPL advice request: %s", exc)
        return web.json_response(error_payload(exc), status=500)
    except Exception:
        logger.exception("Unexpected error in FPL advice request")
        payload = error_payload(AdvisorError(INTERNAL_ERROR_MESSAGE))
        return web.json_response(payload, status=500)

    return web.json_response(envelope.to_payload())


def create_app(advisor: FPLAdvisor) -> web.Application:
    app = web.Application()
    app[ADVISOR_KEY] = advisor
    app.router.add_get("/api/advise", advise_handler)
    return app


def run_server(advisor: FPLAdvisor, host: str = "127.0.0.1", port: int = 8080) -> None:
    web.run_app(create_app(advisor), host=host, port=port)


__all__ = [
    "ADVISOR_KEY",
    "advise_handler",
    "create_app",
    "parse_free_transfers",
    "parse_team_id",
    "run_server",
]
