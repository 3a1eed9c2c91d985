"""FPL API integration: data fetching and gameweek resolution."""

from .client import FPLSourceClient
from .gameweeks import find_current_gameweek, find_next_gameweek

__all__ = [
    "FPLSourceClient",
    "find_current_gameweek",
    "find_next_gameweek",
]
