from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .options import Options


class DiceError(ValueError):
    """User-facing errors (fail-fast, no result is produced)."""


class ParseError(DiceError):
    """The input is not valid dice notation.

    Carries the accumulated expectations so callers can render them however
    they like; ``str()`` gives the caret diagnostic.
    """

    def __init__(self, options: Options):
        self.options = options
        super().__init__(str(options))


class EvalError(DiceError):
    """The input parsed, but evaluating it failed."""
