"""Prompt construction for the gameweek advice request."""

from __future__ import annotations

import json
from typing import Any

from ..types import GeneralSummary, UserContext

FREE_TRANSFERS_UNKNOWN = (
    "Not specified by user; assume 1 FT if unsure, but confirm with user if critical."
)

SYSTEM_PROMPT = """You are an FPL advisor. Use only the provided data and do not invent fixtures or statistics.
Return a single valid JSON object, no markdown fences."""

# One sentence of required content per output key, in schema order.
ADVICE_SCHEMA: dict[str, str] = {
    "promisingTeamsNextGW": (
        "Using UPCOMING FIXTURES, name 2-3 teams with the most favourable fixtures "
        "and the best chance of goals or clean sheets, explaining each choice with "
        "home/away advantage and fixture difficulty ratings."
    ),
    "transferStrategy": (
        "Name specific players to TRANSFER OUT of CURRENT SQUAD and specific players "
        "to TRANSFER IN, justified by form, ICT index, expected stats, value and "
        "fixture difficulty, favouring players from strong teams over one easy "
        "fixture; base it on {free_transfers} free transfers and advise rolling a "
        "transfer when nothing is urgent."
    ),
    "captainPicks": (
        "Captain and vice-captain nominations from the user's squad (after any "
        "recommended transfers), each with a justification."
    ),
    "startingLineup": (
        "The optimal starting 11 player names drawn from the user's squad after "
        "your recommended transfers."
    ),
    "benchOrder": (
        "Bench order for the remaining squad players after transfers and the "
        "starting 11 are decided."
    ),
    "chipStrategy": "Advice on whether and which chip to use for the next gameweek.",
    "playersToWatch": "1-2 players to monitor for future gameweeks.",
}

PLAYER_ELIGIBILITY_RULE = (
    "Every player named in transferStrategy or startingLineup MUST be a real FPL "
    "player with a listed position (Goalkeeper, Defender, Midfielder, Forward). "
    "Never name managers, coaches or other non-player personnel."
)


def format_free_transfers(hint: str | int | None) -> str:
    """Return the free-transfer count to quote, or the advisory fallback."""
    if isinstance(hint, bool):
        return FREE_TRANSFERS_UNKNOWN
    if isinstance(hint, int):
        return str(hint) if hint >= 0 else FREE_TRANSFERS_UNKNOWN
    if isinstance(hint, str):
        try:
            value = int(hint.strip())
        except ValueError:
            return FREE_TRANSFERS_UNKNOWN
        return str(value) if value >= 0 else FREE_TRANSFERS_UNKNOWN
    return FREE_TRANSFERS_UNKNOWN


def _dump(data: Any) -> str:
    return json.dumps(data, indent=2, ensure_ascii=False)


def _schema_block(free_transfers: str) -> str:
    lines = []
    for key, requirement in ADVICE_SCHEMA.items():
        text = requirement.format(free_transfers=free_transfers)
        lines.append(f'- "{key}": (string) {text}')
    return "\n".join(lines)


def compose_prompt(
    user_context: UserContext,
    general_summary: GeneralSummary,
    free_transfers_hint: str | int | None = None,
) -> str:
    """Render the advice request.

    The output depends only on the arguments, so identical inputs always
    produce identical prompts.
    """
    free_transfers = format_free_transfers(free_transfers_hint)
    squad = [pick.model_dump() for pick in user_context.team_picks]
    fixtures = [item.model_dump() for item in general_summary.upcoming_fixtures]
    top_players = [item.model_dump() for item in general_summary.top_performers]
    next_gw = general_summary.next_gameweek_id
    chips = ", ".join(user_context.available_chips) or "None"

    return f"""You are an expert Fantasy Premier League (FPL) assistant. Your goal is to provide the best possible advice for the upcoming gameweek, using all of the context below.

The user has "{free_transfers}" free transfers available for the *next* gameweek you are advising on.
"Transfers Made This Gameweek" refers to transfers already made in the *current or most recently completed* gameweek.

Return JSON matching this schema EXACTLY (every value a descriptive string):
{_schema_block(free_transfers)}

RULES:
1. {PLAYER_ELIGIBILITY_RULE}
2. captainPicks, startingLineup and benchOrder must only use players from CURRENT SQUAD, adjusted for your transferStrategy.
3. Use exactly the seven keys above and nothing else.

## USER TEAM CONTEXT
- Current Squad: {_dump(squad)}
- Money in Bank: £{user_context.bank}m
- Transfers Made This Gameweek (current/past GW): {user_context.transfers_made_this_gw}
- Free Transfers Available (next GW, user-provided): {free_transfers}
- Active Chip for Current GW: {user_context.active_chip or "None"}
- Available Chips for Future Use: {chips}

## GENERAL FPL DATA (next gameweek)
- Next Gameweek ID: {next_gw if next_gw is not None else "N/A"}
- Upcoming Fixtures (Next GW): {_dump(fixtures)}
- Sample of Top Performing Players (League-wide): {_dump(top_players)}
"""


__all__ = [
    "ADVICE_SCHEMA",
    "FREE_TRANSFERS_UNKNOWN",
    "PLAYER_ELIGIBILITY_RULE",
    "SYSTEM_PROMPT",
    "compose_prompt",
    "format_free_transfers",
]
