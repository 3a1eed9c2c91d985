"""Read-only client for the three FPL endpoints the advisor depends on."""

from __future__ import annotations

import json
import logging
from typing import Any, cast
from urllib.parse import quote

import aiohttp

from ..errors import FetchError
from ..types import Catalog, FixtureRecord, PickRecord
from .utils import build_url

logger = logging.getLogger(__name__)

_SHAPE_NAMES = {dict: "object", list: "array"}


class FPLSourceClient:
    """Fetch catalog, fixtures and picks from the FPL API.

    Every call makes a single attempt. Non-2xx responses, transport errors,
    undecodable bodies and payloads of the wrong shape all raise
    :class:`FetchError`.
    """

    def __init__(self, base_url: str, session: aiohttp.ClientSession) -> None:
        self._base_url = base_url
        self._session = session

    async def _get_json(
        self,
        path: str,
        expected: type[dict[str, Any]] | type[list[Any]],
        headers: dict[str, str] | None = None,
    ) -> Any:
        url = build_url(self._base_url, path)
        try:
            async with self._session.get(url, headers=headers) as response:
                raw = await response.read()
                status = response.status
        except (aiohttp.ClientError, TimeoutError) as exc:
            logger.error("Fetch error for %s: %s", url, exc)
            raise FetchError(
                f"API request to {url} failed: {exc}", url=url
            ) from exc

        body = raw.decode("utf-8", errors="replace")
        if not 200 <= status < 300:
            logger.error("API error for %s: %s %s", url, status, body)
            raise FetchError(
                f"API request failed with status {status}: {body}",
                url=url,
                status=status,
                body=body,
            )

        try:
            payload = json.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            logger.error("Invalid JSON from %s: %s", url, exc)
            raise FetchError(
                f"API response from {url} was not valid JSON: {exc}",
                url=url,
                status=status,
                body=body,
            ) from exc

        if not isinstance(payload, expected):
            shape = _SHAPE_NAMES[expected]
            logger.error("Unexpected payload from %s: expected JSON %s", url, shape)
            raise FetchError(
                f"API response from {url} was not a JSON {shape}",
                url=url,
                status=status,
                body=body,
            )
        return payload

    async def fetch_catalog(self) -> Catalog:
        logger.info("Fetching bootstrap data")
        payload = await self._get_json("bootstrap-static", dict)
        return Catalog.from_bootstrap(payload)

    async def fetch_fixtures(self) -> list[FixtureRecord]:
        logger.info("Fetching fixtures data")
        payload = await self._get_json("fixtures", list)
        return cast("list[FixtureRecord]", payload)

    async def fetch_user_picks(
        self,
        gameweek_id: int,
        team_id: str | None,
        credential: str | None,
    ) -> PickRecord | None:
        """Return the team's picks, or ``None`` when personalization is not possible."""
        if not team_id or not credential:
            logger.info("Team ID or FPL session not set; skipping user picks fetch")
            return None

        logger.info("Fetching user picks for GW %s (team %s)", gameweek_id, team_id)
        # The team id arrives from callers; keep it inside a single path segment.
        payload = await self._get_json(
            f"entry/{quote(team_id, safe='')}/event/{gameweek_id}/picks",
            dict,
            headers={"Cookie": f"sessionid={credential}"},
        )
        return cast("PickRecord", payload)


__all__ = ["FPLSourceClient"]
