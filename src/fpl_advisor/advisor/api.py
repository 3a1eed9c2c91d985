"""Anthropic API wrapper for JSON advice completions."""

from __future__ import annotations

import logging

import anthropic
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from ..config import DEFAULT_MAX_TOKENS, DEFAULT_MODEL, Settings
from ..errors import CompletionError
from .prompts import SYSTEM_PROMPT

logger = logging.getLogger(__name__)

TEMPERATURE = 0.7
# Prefilling the assistant turn with an open brace keeps the reply in JSON.
JSON_PREFILL = "{"


@retry(
    retry=retry_if_exception_type(anthropic.APIConnectionError),
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=1, min=1, max=10),
    reraise=True,
)
async def make_anthropic_call(
    client: anthropic.AsyncAnthropic,
    model: str,
    prompt: str,
    system: str,
    max_tokens: int = DEFAULT_MAX_TOKENS,
) -> str:
    """Request a JSON completion and return the reply text including the prefill."""
    logger.debug(f"Making API call to {model}")

    message = await client.messages.create(
        model=model,
        max_tokens=max_tokens,
        temperature=TEMPERATURE,
        system=system,
        messages=[
            {"role": "user", "content": prompt},
            {"role": "assistant", "content": JSON_PREFILL},
        ],
    )

    parts: list[str] = []
    for block in message.content:
        text = getattr(block, "text", None)
        if text:
            parts.append(text)
    response_text = "".join(parts).strip()

    stop_reason = getattr(message, "stop_reason", "") or ""
    usage = getattr(message, "usage", None)
    output_tokens = getattr(usage, "output_tokens", None) if usage else None
    logger.debug(
        "API call successful (stop_reason=%s, output_tokens=%s, response_length=%s)",
        stop_reason,
        output_tokens,
        len(response_text),
    )
    if stop_reason and stop_reason not in {"end_turn", "stop_sequence"}:
        logger.warning(
            "Anthropic message returned stop_reason='%s' (response chars=%s)",
            stop_reason,
            len(response_text),
        )

    if not response_text:
        return ""
    return JSON_PREFILL + response_text


class CompletionGateway:
    """Sends composed prompts to the completion service."""

    def __init__(
        self,
        client: anthropic.AsyncAnthropic | None,
        model: str = DEFAULT_MODEL,
        max_tokens: int = DEFAULT_MAX_TOKENS,
    ) -> None:
        self.client = client
        self.model = model
        self.max_tokens = max_tokens

    @classmethod
    def from_settings(cls, settings: Settings) -> CompletionGateway:
        client = None
        if settings.anthropic_api_key:
            client = anthropic.AsyncAnthropic(api_key=settings.anthropic_api_key)
        return cls(
            client,
            model=settings.anthropic_model,
            max_tokens=settings.anthropic_max_tokens,
        )

    @property
    def configured(self) -> bool:
        return self.client is not None

    async def request_completion(self, prompt: str, system: str = SYSTEM_PROMPT) -> str:
        """Return the raw reply text for ``prompt``.

        Raises:
            CompletionError: on transport failure, a non-success status or an
                empty reply.
        """
        if self.client is None:
            raise CompletionError("Anthropic API key not configured.")

        logger.info("Sending advice request to %s", self.model)
        try:
            text = await make_anthropic_call(
                self.client, self.model, prompt, system, self.max_tokens
            )
        except anthropic.APIStatusError as exc:
            logger.error(
                "Completion service returned status %s: %s", exc.status_code, exc
            )
            raise CompletionError(
                f"Completion service returned status {exc.status_code}: {exc.message}",
                status=exc.status_code,
                body=str(exc.body) if exc.body is not None else None,
            ) from exc
        except anthropic.APIError as exc:
            logger.error("Completion service request failed: %s", exc)
            raise CompletionError(f"Completion service request failed: {exc}") from exc

        if not text:
            logger.error("Completion service returned an empty message")
            raise CompletionError("Completion service returned an empty message.")
        return text


__all__ = [
    "JSON_PREFILL",
    "TEMPERATURE",
    "CompletionGateway",
    "make_anthropic_call",
]
