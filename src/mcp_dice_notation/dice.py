from __future__ import annotations

import secrets
from random import Random

from .errors import EvalError
from .filtermodifier import FilterKind, FilterModifier
from .logging_config import get_logger
from .models import Roll


logger = get_logger(__name__)

# Process-wide source for real rolls; callers may pass their own Random.
SYSTEM_RNG: Random = secrets.SystemRandom()

MAX_DICE = 10_000

STAT_ROLL = "4d6l"
STAT_COUNT = 6

DIRECTIONS: tuple[str, ...] = (
    "North",
    "North East",
    "East",
    "South East",
    "South",
    "South West",
    "West",
    "North West",
    "Stay",
)


def _apply_filter(rolls: list[int], fm: FilterModifier[int]) -> list[int]:
    """Select from ascending ``rolls``. Drops saturate at the number rolled."""
    n = fm.value
    if fm.kind is FilterKind.KEEP_LOWEST:
        return rolls[:n]
    if fm.kind is FilterKind.KEEP_HIGHEST:
        return rolls[::-1][:n]
    if fm.kind is FilterKind.DROP_LOWEST:
        rolls = rolls[::-1]
        return rolls[: len(rolls) - min(n, len(rolls))]
    if fm.kind is FilterKind.DROP_HIGHEST:
        return rolls[: len(rolls) - min(n, len(rolls))]
    return rolls


def _shuffle(rolls: list[int], rng: Random) -> None:
    # Sorting for the filter leaks roll order; scramble it again for display.
    if not rolls:
        return
    for _ in range(len(rolls) + 1):
        a = rng.randrange(len(rolls))
        b = rng.randrange(len(rolls))
        rolls[a], rolls[b] = rolls[b], rolls[a]


def roll_die(
    count: int,
    sides: int,
    fm: FilterModifier[int] | None = None,
    rng: Random | None = None,
) -> Roll:
    """Roll ``count`` dice with ``sides`` faces and apply the filter ``fm``."""
    if sides < 1:
        raise EvalError("[INVALID_DIE] Can't roll zero sided die.")
    if count < 0:
        raise EvalError(f"[INVALID_DICE] Can't roll a negative number of dice ({count}).")

    fm = fm if fm is not None else FilterModifier.none()
    rng = rng if rng is not None else SYSTEM_RNG

    rolls = sorted(rng.randint(1, sides) for _ in range(count))
    kept = _apply_filter(rolls, fm)
    _shuffle(kept, rng)

    roll = Roll(vals=tuple(kept), total=sum(kept), sides=sides)
    logger.debug(
        "dice.roll.result",
        count=count,
        sides=sides,
        filter=fm.suffix(),
        vals=list(roll.vals),
        total=roll.total,
    )
    return roll


def roll_direction(rng: Random | None = None) -> str:
    roll = roll_die(1, len(DIRECTIONS), rng=rng)
    return DIRECTIONS[roll.total - 1]


def roll_stats(rng: Random | None = None) -> list[Roll]:
    """Roll six ability scores, each 4d6 dropping the lowest die."""
    # Imported here: the interpreter depends on this module.
    from .interpreter import evaluate
    from .parser import parse

    ast = parse(STAT_ROLL)
    stats: list[Roll] = []
    for _ in range(STAT_COUNT):
        _total, rolls = evaluate(ast, rng=rng)
        stats.append(rolls[0][1])
    return stats
