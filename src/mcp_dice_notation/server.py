from __future__ import annotations

from mcp.server.fastmcp import FastMCP

from .config import get_settings
from .dice import roll_direction, roll_stats
from .errors import DiceError
from .formatting import format_stats
from .logging_config import setup_logging
from .service import roll_from_text


mcp = FastMCP("mcp-dice-notation")


@mcp.tool()
def roll_dice(text: str, advanced: bool | None = None):
    """Roll a dice notation expression such as '2d8 + 6 + d8' or '4d6kh3'.

    Input: text (string), advanced (optional bool: allow '(2d4)d6' style rolls)
    Output: structured JSON with every die rolled, the total and an explanation

    Raises a hard error (exception) on invalid input.
    """

    try:
        return roll_from_text(text, advanced=advanced)
    except DiceError as e:
        # Fail-fast: surface stable error codes in the message.
        raise ValueError(str(e)) from None


@mcp.tool()
def roll_ability_scores():
    """Roll six ability scores, each 4d6 dropping the lowest die."""

    stats = roll_stats()
    return {
        "scores": [{"total": r.total, "vals": list(r.vals)} for r in stats],
        "explanation": format_stats(stats),
    }


@mcp.tool()
def roll_compass_direction() -> str:
    """Pick one of the eight compass directions, or 'Stay'."""

    return roll_direction()


def run() -> None:
    setup_logging(get_settings())
    # Default transport is stdio.
    mcp.run()


if __name__ == "__main__":
    run()
