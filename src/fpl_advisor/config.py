"""Process-wide configuration read once at startup."""

from __future__ import annotations

import os
from collections.abc import Mapping, MutableMapping
from dataclasses import dataclass
from pathlib import Path

from .errors import ConfigError

PROJECT_ROOT = Path(__file__).resolve().parents[2]
DEFAULT_ENV_PATH = PROJECT_ROOT / ".env"
DEFAULT_MODEL = "claude-sonnet-4-5-20250929"
DEFAULT_MAX_TOKENS = 2000


def load_env_file(
    path: Path, environ: MutableMapping[str, str] | None = None
) -> None:
    """Load simple KEY=VALUE pairs from an ``.env`` file into ``environ``.

    Variables already present in ``environ`` are left untouched.
    """

    target = os.environ if environ is None else environ
    try:
        raw_lines = path.read_text(encoding="utf-8").splitlines()
    except FileNotFoundError:
        return

    for raw_line in raw_lines:
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if line.startswith("export "):
            line = line[len("export ") :].strip()
        elif line.startswith("export\t"):
            line = line[len("export\t") :].strip()
        if not line or "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip()
        if not key or key in target:
            continue

        if value and value[0] in {'"', "'"} and value[-1] == value[0]:
            value = value[1:-1]
        else:
            value = value.split(" #", 1)[0].rstrip()

        target[key] = value


def _clean(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


@dataclass(slots=True, frozen=True)
class Settings:
    """Immutable configuration snapshot.

    Missing values are allowed here; they surface as request-time errors.
    """

    fpl_base_url: str | None = None
    fpl_team_id: str | None = None
    fpl_session: str | None = None
    anthropic_api_key: str | None = None
    anthropic_model: str = DEFAULT_MODEL
    anthropic_max_tokens: int = DEFAULT_MAX_TOKENS

    @classmethod
    def from_env(
        cls,
        environ: Mapping[str, str] | None = None,
        *,
        env_file: Path | None = DEFAULT_ENV_PATH,
    ) -> Settings:
        """Build settings from ``environ`` after loading ``env_file``."""
        values: dict[str, str] = dict(os.environ if environ is None else environ)
        if env_file is not None:
            load_env_file(env_file, values)

        max_tokens_raw = _clean(values.get("ANTHROPIC_MAX_TOKENS"))
        try:
            max_tokens = int(max_tokens_raw) if max_tokens_raw else DEFAULT_MAX_TOKENS
        except ValueError as exc:
            raise ConfigError(
                f"ANTHROPIC_MAX_TOKENS must be an integer, got {max_tokens_raw!r}"
            ) from exc

        return cls(
            fpl_base_url=_clean(values.get("FPL_BASE_URL")),
            fpl_team_id=_clean(values.get("FPL_TEAM_ID")),
            fpl_session=_clean(values.get("FPL_SESSION")),
            anthropic_api_key=_clean(values.get("ANTHROPIC_API_KEY")),
            anthropic_model=_clean(values.get("ANTHROPIC_MODEL")) or DEFAULT_MODEL,
            anthropic_max_tokens=max_tokens,
        )


__all__ = [
    "DEFAULT_ENV_PATH",
    "DEFAULT_MAX_TOKENS",
    "DEFAULT_MODEL",
    "Settings",
    "load_env_file",
]
