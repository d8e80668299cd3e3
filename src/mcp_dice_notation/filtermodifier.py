from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Generic, TypeVar


T = TypeVar("T")
U = TypeVar("U")


class FilterKind(str, Enum):
    KEEP_LOWEST = "kl"
    KEEP_HIGHEST = "kh"
    DROP_LOWEST = "dl"
    DROP_HIGHEST = "dh"
    NONE = ""


@dataclass(frozen=True)
class FilterModifier(Generic[T]):
    """Post-roll selection policy: keep or drop the N lowest/highest dice.

    The same shape carries an unparsed count (an AST node), an evaluated
    value, or a plain ``int`` once it is ready for the dice engine.
    """

    kind: FilterKind = FilterKind.NONE
    value: T | None = None

    @classmethod
    def keep_lowest(cls, value: T) -> FilterModifier[T]:
        return cls(FilterKind.KEEP_LOWEST, value)

    @classmethod
    def keep_highest(cls, value: T) -> FilterModifier[T]:
        return cls(FilterKind.KEEP_HIGHEST, value)

    @classmethod
    def drop_lowest(cls, value: T) -> FilterModifier[T]:
        return cls(FilterKind.DROP_LOWEST, value)

    @classmethod
    def drop_highest(cls, value: T) -> FilterModifier[T]:
        return cls(FilterKind.DROP_HIGHEST, value)

    @classmethod
    def none(cls) -> FilterModifier[T]:
        return cls()

    @property
    def is_none(self) -> bool:
        return self.kind is FilterKind.NONE

    def map(self, f: Callable[[T], U]) -> FilterModifier[U]:
        if self.is_none:
            return FilterModifier()
        return FilterModifier(self.kind, f(self.value))

    def swap(self: FilterModifier[Callable[[], U]]) -> FilterModifier[U]:
        """Run a deferred computation held in the payload.

        Whatever the computation raises propagates unchanged, so an error in
        a filter count surfaces exactly like an error anywhere else in the
        expression.
        """
        if self.is_none:
            return FilterModifier()
        return FilterModifier(self.kind, self.value())

    def suffix(self, render: Callable[[T], str] = str) -> str:
        if self.is_none:
            return ""
        return f"{self.kind.value}{render(self.value)}"
