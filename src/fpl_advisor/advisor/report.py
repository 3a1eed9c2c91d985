"""Markdown rendering of an advice envelope."""

from __future__ import annotations

from ..types import AdviceError, ResponseEnvelope

SECTION_TITLES: dict[str, str] = {
    "promisingTeamsNextGW": "Promising Teams (Next GW)",
    "transferStrategy": "Transfer Strategy",
    "captainPicks": "Captaincy Picks",
    "startingLineup": "Starting Lineup",
    "benchOrder": "Bench Order",
    "chipStrategy": "Chip Strategy",
    "playersToWatch": "Players to Watch",
}

EMPTY_SECTION = "_No specific advice provided or data unavailable for this section._"


def _is_placeholder(content: str) -> bool:
    return not content.strip() or content.startswith("N/A -")


def render_section(title: str, content: str) -> str:
    body = EMPTY_SECTION if _is_placeholder(content) else content.strip()
    return f"### {title}\n\n{body}\n"


def render_markdown(envelope: ResponseEnvelope) -> str:
    suggestion = envelope.ai_structured_suggestion
    lines = [
        "# FPL Advisor",
        "",
        f"- **Team ID:** {envelope.team_id_used}",
        f"- **Current gameweek:** {envelope.current_gameweek}",
        f"- **Advice for gameweek:** {envelope.next_gameweek_for_advice}",
        "",
    ]

    if isinstance(suggestion, AdviceError):
        lines.append(f"> **Error:** {suggestion.error}")
        lines.append("")
        if suggestion.raw_response:
            lines.extend(["Raw response:", "", "```", suggestion.raw_response, "```", ""])

    sections = suggestion.sections()
    for key, title in SECTION_TITLES.items():
        lines.append(render_section(title, sections[key]))

    return "\n".join(lines).rstrip() + "\n"


__all__ = ["EMPTY_SECTION", "SECTION_TITLES", "render_markdown", "render_section"]
