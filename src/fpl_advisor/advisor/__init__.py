"""Advice generation: context building, prompting and reply handling."""

from .api import CompletionGateway
from .context import build_general_summary, build_user_context
from .orchestrator import FPLAdvisor, build_advisor, error_payload
from .prompts import compose_prompt
from .report import render_markdown
from .validation import validate_reply

__all__ = [
    "CompletionGateway",
    "FPLAdvisor",
    "build_advisor",
    "build_general_summary",
    "build_user_context",
    "compose_prompt",
    "error_payload",
    "render_markdown",
    "validate_reply",
]
