"""Shared helpers for interacting with the public FPL API."""

from __future__ import annotations

import aiohttp

USER_AGENT = "fpl-advisor/0.1"


def create_http_session() -> aiohttp.ClientSession:
    return aiohttp.ClientSession(
        headers={"User-Agent": USER_AGENT, "Accept": "application/json"}
    )


async def safe_close_session(session: aiohttp.ClientSession) -> None:
    await session.close()


def build_url(base_url: str, path: str) -> str:
    """Join ``path`` onto ``base_url`` keeping FPL's trailing-slash convention."""
    return f"{base_url.rstrip('/')}/{path.strip('/')}/"


def normalize_price(raw_tenths: int | float | None) -> float:
    """Convert an FPL money amount stored in tenths into whole units."""
    return round((raw_tenths or 0) / 10.0, 1)


def normalize_form(form: str | float | None) -> float:
    if isinstance(form, str):
        try:
            return float(form)
        except (TypeError, ValueError):
            return 0.0
    if form is None:
        return 0.0
    return float(form)


__all__ = [
    "USER_AGENT",
    "build_url",
    "create_http_session",
    "normalize_form",
    "normalize_price",
    "safe_close_session",
]
