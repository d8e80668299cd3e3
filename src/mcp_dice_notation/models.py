from __future__ import annotations

from dataclasses import dataclass, field
from typing import TypeAlias

from .filtermodifier import FilterModifier


DEFAULT_SIDES = "20"

INT_MIN = -(2**63)
INT_MAX = 2**63 - 1

Value: TypeAlias = int | float


@dataclass(frozen=True)
class Const:
    # Kept as written; resolved to int/float only when evaluated.
    literal: str


@dataclass(frozen=True)
class Add:
    left: Ast
    right: Ast


@dataclass(frozen=True)
class Sub:
    left: Ast
    right: Ast


@dataclass(frozen=True)
class Mul:
    left: Ast
    right: Ast


@dataclass(frozen=True)
class Div:
    left: Ast
    right: Ast


@dataclass(frozen=True)
class Mod:
    left: Ast
    right: Ast


@dataclass(frozen=True)
class IntDiv:
    left: Ast
    right: Ast


@dataclass(frozen=True)
class Power:
    left: Ast
    right: Ast


@dataclass(frozen=True)
class Negate:
    operand: Ast


@dataclass(frozen=True)
class Dice:
    count: Ast | None
    sides: Ast | None
    fm: FilterModifier[Ast] = field(default_factory=FilterModifier)
    # Index of the 'd' in the source text; joins this node to its Roll.
    pos: int = 0


BinaryOp: TypeAlias = Add | Sub | Mul | Div | Mod | IntDiv | Power
Ast: TypeAlias = BinaryOp | Negate | Dice | Const


@dataclass(frozen=True)
class Roll:
    vals: tuple[int, ...]
    total: int
    sides: int
