"""Resolve which gameweeks a request is about."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from ..errors import GameweekError
from ..types import GameweekRecord

logger = logging.getLogger(__name__)


def _event_id(event: GameweekRecord, flag: str) -> int:
    event_id = event.get("id")
    if event_id is None:
        raise GameweekError(f"Gameweek flagged {flag} has no id.")
    return event_id


def find_current_gameweek(events: Sequence[GameweekRecord]) -> int:
    """Return the id of the event flagged ``is_current``."""
    for event in events:
        if event.get("is_current", False):
            return _event_id(event, "is_current")
    raise GameweekError("Could not determine current gameweek.")


def find_next_gameweek(events: Sequence[GameweekRecord], current_id: int) -> int:
    """Return the id flagged ``is_next``, falling back to ``current_id``.

    A missing ``is_next`` flag is normal once the season has finished.
    """
    for event in events:
        if event.get("is_next", False):
            return _event_id(event, "is_next")
    logger.warning(
        "Could not determine next gameweek. Using current gameweek %s for planning.",
        current_id,
    )
    return current_id


__all__ = ["find_current_gameweek", "find_next_gameweek"]
