from __future__ import annotations

import math
from dataclasses import replace
from functools import partial
from random import Random
from typing import Callable

from .dice import MAX_DICE, SYSTEM_RNG, roll_die
from .errors import EvalError
from .logging_config import get_logger
from .models import (
    DEFAULT_SIDES,
    INT_MAX,
    INT_MIN,
    Add,
    Ast,
    Const,
    Dice,
    Div,
    IntDiv,
    Mod,
    Mul,
    Negate,
    Power,
    Roll,
    Sub,
    Value,
)


logger = get_logger(__name__)

RollTrace = list[tuple[int, Roll]]


def _checked(value: int) -> int:
    if not INT_MIN <= value <= INT_MAX:
        raise EvalError(f"[OVERFLOW] {value} doesn't fit in a 64 bit integer.")
    return value


def _to_int(value: float) -> int:
    try:
        return _checked(math.floor(value))
    except (OverflowError, ValueError):
        raise EvalError(f"[OVERFLOW] {value} can't be converted to an integer.") from None


def _both_int(left: Value, right: Value) -> bool:
    return isinstance(left, int) and isinstance(right, int)


def add(left: Value, right: Value) -> Value:
    if _both_int(left, right):
        return _checked(left + right)
    return float(left) + float(right)


def sub(left: Value, right: Value) -> Value:
    if _both_int(left, right):
        return _checked(left - right)
    return float(left) - float(right)


def mul(left: Value, right: Value) -> Value:
    if _both_int(left, right):
        return _checked(left * right)
    return float(left) * float(right)


def div(left: Value, right: Value) -> float:
    # Always a float, even for 15 / 3.
    if right == 0:
        raise EvalError("[DIVISION_BY_ZERO] Can't divide by zero.")
    try:
        return float(left) / float(right)
    except OverflowError:
        raise EvalError(f"[OVERFLOW] {left} / {right} is too large.") from None


def int_div(left: Value, right: Value) -> int:
    return _to_int(div(left, right))


def mod(left: Value, right: Value) -> Value:
    """Remainder with the sign of the dividend: -7 mod 3 == -1."""
    if right == 0:
        raise EvalError("[DIVISION_BY_ZERO] Can't take a remainder modulo zero.")
    if _both_int(left, right):
        remainder = abs(left) % abs(right)
        return -remainder if left < 0 else remainder
    return math.fmod(float(left), float(right))


def power(left: Value, right: Value) -> Value:
    if _both_int(left, right) and right >= 0:
        # Bail out before computing a huge number only to reject it.
        if abs(left) > 1 and right > 64:
            raise EvalError(f"[OVERFLOW] {left} ** {right} doesn't fit in a 64 bit integer.")
        return _checked(left**right)
    try:
        result = float(left) ** float(right)
    except ZeroDivisionError:
        raise EvalError("[DIVISION_BY_ZERO] Can't raise zero to a negative power.") from None
    except OverflowError:
        raise EvalError(f"[OVERFLOW] {left} ** {right} is too large.") from None
    if isinstance(result, complex):
        raise EvalError(f"[INVALID_NUMBER] {left} ** {right} isn't a real number.")
    return result


def negate(value: Value) -> Value:
    if isinstance(value, int):
        return _checked(-value)
    return -value


_BINARY: dict[type, Callable[[Value, Value], Value]] = {
    Add: add,
    Sub: sub,
    Mul: mul,
    Div: div,
    Mod: mod,
    IntDiv: int_div,
    Power: power,
}


def parse_const(literal: str) -> Value:
    dots = literal.count(".")
    if dots > 1:
        raise EvalError(f"[INVALID_NUMBER] {literal} couldn't be parsed as number (too many dots).")
    try:
        if dots == 0:
            return _checked(int(literal))
        return float(literal)
    except ValueError:
        raise EvalError(f"[INVALID_NUMBER] {literal} couldn't be parsed as number.") from None


def _filter_count(value: Value) -> int:
    if not isinstance(value, int):
        raise EvalError(f"[INVALID_MODIFIER] {value}: couldn't be parsed as int.")
    if value < 0:
        raise EvalError(f"[INVALID_MODIFIER] {value}: can't keep or drop a negative number of dice.")
    return value


def interp(
    ast: Ast,
    rolls: RollTrace,
    rng: Random | None = None,
    max_dice: int = MAX_DICE,
) -> Value:
    """Evaluate ``ast``, appending every dice roll to ``rolls``.

    Operands are evaluated left before right, so the trace is in evaluation
    order. ``rng`` defaults to the process-wide system random source.

    Raises EvalError; ``rolls`` may then hold a partial trace, which callers
    must discard (``evaluate`` does this for you).
    """
    rng = rng if rng is not None else SYSTEM_RNG

    op = _BINARY.get(type(ast))
    if op is not None:
        left = interp(ast.left, rolls, rng, max_dice)
        right = interp(ast.right, rolls, rng, max_dice)
        return op(left, right)

    if isinstance(ast, Negate):
        return negate(interp(ast.operand, rolls, rng, max_dice))

    if isinstance(ast, Const):
        return parse_const(ast.literal)

    if isinstance(ast, Dice):
        return _interp_dice(ast, rolls, rng, max_dice)

    raise TypeError(f"not an expression node: {ast!r}")


def _interp_dice(ast: Dice, rolls: RollTrace, rng: Random, max_dice: int) -> int:
    if ast.count is None:
        return interp(replace(ast, count=Const("1")), rolls, rng, max_dice)
    if ast.sides is None:
        return interp(replace(ast, sides=Const(DEFAULT_SIDES)), rolls, rng, max_dice)

    count = interp(ast.count, rolls, rng, max_dice)
    sides = interp(ast.sides, rolls, rng, max_dice)
    if not (isinstance(count, int) and isinstance(sides, int)):
        raise EvalError("[INVALID_DICE] couldn't be parsed as dice roll (no ints).")

    fm = ast.fm.map(lambda node: partial(interp, node, rolls, rng, max_dice)).swap()
    fm = fm.map(_filter_count)

    if sides == 0:
        raise EvalError("[INVALID_DIE] Can't roll zero sided die.")
    if sides < 0:
        raise EvalError(f"[INVALID_DIE] Can't roll a die with {sides} sides.")
    if count > max_dice:
        raise EvalError(f"[TOO_MANY_DICE] Can't roll more than {max_dice} dice at once (got {count}).")

    roll = roll_die(count, sides, fm, rng)
    total = _checked(roll.total)
    rolls.append((ast.pos, roll))
    return total


def evaluate(
    ast: Ast,
    rng: Random | None = None,
    max_dice: int = MAX_DICE,
) -> tuple[Value, RollTrace]:
    """Evaluate ``ast`` and return its value with the trace ordered by position."""
    rolls: RollTrace = []
    try:
        value = interp(ast, rolls, rng, max_dice)
    except EvalError as e:
        logger.debug("dice.eval.failed", error=str(e), discarded_rolls=len(rolls))
        raise
    rolls.sort(key=lambda entry: entry[0])
    return value, rolls
