from __future__ import annotations

import uuid
from datetime import datetime, timezone
from random import Random
from typing import Any

from .config import get_settings
from .formatting import format_vals, format_value, render, replace_rolls
from .interpreter import evaluate
from .logging_config import get_logger
from .parser import parse


logger = get_logger(__name__)


def _now_utc_iso() -> str:
    return datetime.now(timezone.utc).replace(microsecond=0).isoformat().replace("+00:00", "Z")


def roll_from_text(
    text: str,
    advanced: bool | None = None,
    rng: Random | None = None,
) -> dict[str, Any]:
    """Parse, evaluate, then report every die. Raises DiceError for invalid input."""
    settings = get_settings()
    if advanced is None:
        advanced = settings.advanced

    logger.info("dice.request.start", input=text, advanced=advanced)
    ast = parse(text, advanced=advanced)
    total, rolls = evaluate(ast, rng=rng, max_dice=settings.max_dice)

    substituted = replace_rolls(ast, dict(rolls), format_vals)
    explanation = f"{text} = {render(substituted)} = {format_value(total)}"

    result = {
        "type": "rolls",
        "request_id": uuid.uuid4().hex,
        "timestamp": _now_utc_iso(),
        "input": text,
        "advanced": advanced,
        "rng": {
            "source": "secrets.SystemRandom" if rng is None else type(rng).__name__,
        },
        "rolls": [
            {
                "type": "roll",
                "vals": list(roll.vals),
                "total": roll.total,
                "sides": roll.sides,
                "dpos": pos,
            }
            for pos, roll in rolls
        ],
        "total": total,
        "explanation": explanation,
    }
    logger.info("dice.request.result", request_id=result["request_id"], total=total)
    return result
