from __future__ import annotations

from dataclasses import replace
from random import Random
from typing import Callable

from .dice import MAX_DICE
from .interpreter import RollTrace, evaluate
from .models import Add, Ast, Const, Dice, Div, IntDiv, Mod, Mul, Negate, Power, Roll, Sub, Value
from .parser import parse


_SYMBOLS: dict[type, str] = {
    Add: "+",
    Sub: "-",
    Mul: "*",
    Div: "/",
    IntDiv: "//",
    # Not "%": after a bare d that would read as percentile sides.
    Mod: "mod",
    Power: "**",
}

_PRECEDENCE: dict[type, int] = {
    Add: 1,
    Sub: 1,
    Mul: 2,
    Div: 2,
    IntDiv: 2,
    Mod: 2,
    Negate: 3,
    Power: 4,
}
_ATOM = 5


def _precedence(ast: Ast) -> int:
    return _PRECEDENCE.get(type(ast), _ATOM)


def _wrap(ast: Ast, min_precedence: int) -> str:
    text = render(ast)
    if _precedence(ast) < min_precedence:
        return f"({text})"
    return text


def _dice_operand(ast: Ast | None) -> str:
    if ast is None:
        return ""
    if isinstance(ast, Const):
        return ast.literal
    # Only plain numbers may touch the d; anything else needs advanced mode.
    return f"({render(ast)})"


def render(ast: Ast) -> str:
    """Write ``ast`` back out as dice notation with as few parentheses as possible."""
    if isinstance(ast, Const):
        return ast.literal

    if isinstance(ast, Dice):
        count = _dice_operand(ast.count)
        sides = _dice_operand(ast.sides)
        return f"{count}d{sides}{ast.fm.suffix(render)}"

    if isinstance(ast, Negate):
        return f"-{_wrap(ast.operand, _PRECEDENCE[Power])}"

    if isinstance(ast, Power):
        left = _wrap(ast.left, _ATOM)
        right = _wrap(ast.right, _PRECEDENCE[Negate])
        return f"{left} ** {right}"

    precedence = _precedence(ast)
    left = _wrap(ast.left, precedence)
    right = _wrap(ast.right, precedence + 1)
    return f"{left} {_SYMBOLS[type(ast)]} {right}"


def replace_rolls(ast: Ast, lookup: dict[int, Roll], func: Callable[[Roll], str]) -> Ast:
    """Return a copy of ``ast`` with every dice node swapped for ``func(roll)``."""
    if isinstance(ast, Dice):
        return Const(func(lookup[ast.pos]))
    if isinstance(ast, Negate):
        return Negate(replace_rolls(ast.operand, lookup, func))
    if isinstance(ast, Const):
        return ast
    return replace(
        ast,
        left=replace_rolls(ast.left, lookup, func),
        right=replace_rolls(ast.right, lookup, func),
    )


def format_value(value: Value) -> str:
    return str(value)


def format_vals(roll: Roll) -> str:
    return f"[{', '.join(str(v) for v in roll.vals)}]"


def roll_inline(
    text: str,
    advanced: bool = False,
    rng: Random | None = None,
    max_dice: int = MAX_DICE,
) -> str:
    """One-line result: ``4d8 + 2 = [3, 1, 8, 5] + 2 = 19``."""
    ast = parse(text, advanced=advanced)
    total, rolls = evaluate(ast, rng=rng, max_dice=max_dice)

    lookup = dict(rolls)
    substituted = replace_rolls(ast, lookup, format_vals)
    return f"{text} = {render(substituted)} = {format_value(total)}"


def format_table(text: str, total: Value, rolls: RollTrace) -> str:
    """Lay each die's values out under the column of its ``d``.

    ::

         d8    d6
        2d8 + 3d6 = 21
         5     1
         7     2
               6
    """
    rolls = sorted(rolls, key=lambda entry: entry[0])

    header = ""
    for pos, roll in rolls:
        header = header.ljust(pos) + f"d{roll.sides}"

    rows: list[str] = []
    for pos, roll in rolls:
        while len(roll.vals) > len(rows):
            rows.append("")
        for index, val in enumerate(roll.vals):
            rows[index] = rows[index].ljust(pos) + str(val)

    return "\n".join([header, f"{text} = {format_value(total)}", *rows])


def format_stats(stats: list[Roll]) -> str:
    return "\n".join(f"{roll.total:2}: {format_vals(roll)}" for roll in stats)
