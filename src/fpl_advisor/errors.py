"""Exceptions raised by the advisor pipeline."""

from __future__ import annotations


class AdvisorError(RuntimeError):
    """Base class for failures that abort an advice request."""


class ConfigError(AdvisorError):
    """Raised when required configuration is missing."""


class GameweekError(AdvisorError):
    """Raised when the current gameweek cannot be determined."""


class FetchError(AdvisorError):
    """Raised when an upstream service cannot be reached or rejects a request."""

    def __init__(
        self,
        message: str,
        *,
        url: str | None = None,
        status: int | None = None,
        body: str | None = None,
    ) -> None:
        super().__init__(message)
        self.url = url
        self.status = status
        self.body = body


class CompletionError(FetchError):
    """Raised when the completion service fails to produce a reply."""


__all__ = [
    "AdvisorError",
    "CompletionError",
    "ConfigError",
    "FetchError",
    "GameweekError",
]
