from __future__ import annotations

from dataclasses import dataclass
from typing import TypeVar

from .errors import ParseError
from .filtermodifier import FilterKind, FilterModifier
from .logging_config import get_logger
from .models import Add, Ast, Const, Dice, Div, IntDiv, Mod, Mul, Negate, Power, Sub
from .options import Options


logger = get_logger(__name__)

T = TypeVar("T")

# Every grammar method returns either its result or the Options describing
# why it failed. Nothing in here raises until Parser.parse() gives up.
Parsed = T | Options

DIGITS = "1234567890."
DIGITS_NAME = Options("").add("0-9")

# Tried in order; the first token that matches picks the filter.
FILTER_TOKENS: tuple[tuple[str, FilterKind], ...] = (
    ("kh", FilterKind.KEEP_HIGHEST),
    ("h", FilterKind.KEEP_HIGHEST),
    ("dl", FilterKind.DROP_LOWEST),
    ("l", FilterKind.DROP_LOWEST),
    ("dh", FilterKind.DROP_HIGHEST),
    ("kl", FilterKind.KEEP_LOWEST),
)

_BINARY = {
    "+": Add,
    "-": Sub,
    "*": Mul,
    "/": Div,
    "//": IntDiv,
    "%": Mod,
}


@dataclass(frozen=True)
class _State:
    pos: int
    source: str
    advanced: bool


class Parser:
    """Recursive-descent parser for dice notation.

    ``advanced`` enables parenthesised dice operands such as ``(3d5)d(5d3)``.
    Alternatives are tried with an explicit ``backup()``/``restore()`` pair so
    a failed branch never leaves the cursor half way through a token.
    """

    def __init__(self, text: str, advanced: bool = False):
        self.source = text
        self.pos = 0
        self.advanced = advanced

    def advanced_mode(self) -> Parser:
        self.advanced = True
        return self

    def backup(self) -> _State:
        return _State(pos=self.pos, source=self.source, advanced=self.advanced)

    def restore(self, state: _State) -> None:
        self.pos = state.pos
        self.source = state.source
        self.advanced = state.advanced

    def _peek(self) -> str:
        if self.pos < len(self.source):
            return self.source[self.pos]
        return ""

    def _skip_whitespace(self) -> None:
        while self.pos < len(self.source) and self.source[self.pos].isspace():
            self.pos += 1

    def expect(self, c: str, options: Options) -> Options | None:
        self._skip_whitespace()

        if self._peek() == c:
            return None
        return options.add(c).pos(self.pos)

    def accept(self, c: str, options: Options) -> Options | None:
        failure = self.expect(c, options)
        if failure is not None:
            return failure

        self.pos += 1
        return None

    def accept_string(self, text: str, options: Options) -> Options | None:
        backup = self.backup()
        for c in text:
            failure = self.accept(c, options)
            if failure is not None:
                self.restore(backup)
                return failure
        return None

    def accept_any(
        self,
        chars: str,
        options: Options,
        name: Options | None = None,
    ) -> Parsed[str]:
        for c in chars:
            failure = self.accept(c, options)
            if failure is None:
                return c
            if name is None:
                options = options.merge(failure)

        if name is not None:
            options = options.merge(name).pos(self.pos)

        return options

    def parse(self) -> Ast:
        result = self.parse_expr(Options(self.source))
        if isinstance(result, Options):
            logger.debug("dice.parse.failed", source=self.source, pos=result.lastpos)
            raise ParseError(result)

        self._skip_whitespace()
        if self.pos < len(self.source):
            logger.debug("dice.parse.trailing", source=self.source, pos=self.pos)
            raise ParseError(
                Options(self.source).pos(self.pos).message("unexpected trailing character(s)")
            )

        return result

    def parse_expr(self, options: Options) -> Parsed[Ast]:
        return self.parse_sum(options)

    def parse_sum(self, options: Options) -> Parsed[Ast]:
        res = self.parse_term(options)
        if isinstance(res, Options):
            return res

        while True:
            backup = self.backup()
            op = self.accept_any("+-", options)
            if isinstance(op, Options):
                self.restore(backup)
                return res

            right = self.parse_term(options)
            if isinstance(right, Options):
                return right
            res = _BINARY[op](res, right)

    def parse_term(self, options: Options) -> Parsed[Ast]:
        res = self.parse_factor(options)
        if isinstance(res, Options):
            return res

        while True:
            backup = self.backup()
            op = self.accept_any("*/%", options)
            if isinstance(op, Options):
                self.restore(backup)
                if self.accept_string("mod", options) is not None:
                    self.restore(backup)
                    return res
                op = "%"
            elif op == "/" and self.accept("/", options) is None:
                op = "//"

            right = self.parse_factor(options)
            if isinstance(right, Options):
                return right
            res = _BINARY[op](res, right)

    def parse_factor(self, options: Options) -> Parsed[Ast]:
        backup = self.backup()

        failure = self.accept("-", options)
        if failure is None:
            operand = self.parse_power(options)
            if isinstance(operand, Options):
                return operand
            return Negate(operand)

        self.restore(backup)
        return self.parse_power(failure)

    def parse_power(self, options: Options) -> Parsed[Ast]:
        res = self.parse_atom(options)
        if isinstance(res, Options):
            return res

        if self.accept_string("**", options) is None:
            # Right operand is a factor, not a power: 2 ** 3 ** 2 == 2 ** 9.
            right = self.parse_factor(options)
            if isinstance(right, Options):
                return right
            return Power(res, right)

        return res

    def parse_atom(self, options: Options) -> Parsed[Ast]:
        backup = self.backup()
        res = self.parse_dice(options)
        if not isinstance(res, Options):
            return res

        failure = res
        self.restore(backup)

        if self.accept("(", failure) is None:
            return self._parse_group(failure)

        self.restore(backup)
        failure = failure.add("(").message("tried to parse expression between parenthesis")
        return self.parse_number(failure.message("tried to parse dice roll"))

    def _parse_group(self, options: Options) -> Parsed[Ast]:
        # The opening parenthesis has already been consumed.
        inner = self.parse_sum(options)
        if isinstance(inner, Options):
            return inner

        failure = self.accept(")", options)
        if failure is not None:
            return failure.message("missing closing parenthesis")
        return inner

    def _parse_dice_operand(self, options: Options, sides: bool) -> tuple[Parsed[Ast | None], Options]:
        """Parse a dice count or sides.

        A missing operand yields ``None``; only a parenthesised operand that
        was opened and then failed is an error.
        """
        backup = self.backup()

        if self.advanced:
            if self.accept("(", options) is None:
                return self._parse_group(options), options
            options = options.add("(").message("tried to parse expression between parenthesis")
            self.restore(backup)

        if sides:
            operand = self.parse_number_or_percent(options)
        else:
            operand = self.parse_number(options)

        if isinstance(operand, Options):
            self.restore(backup)
            return None, options
        return operand, options

    def parse_dice(self, options: Options) -> Parsed[Ast]:
        count, options = self._parse_dice_operand(options, sides=False)
        if isinstance(count, Options):
            return count

        failure = self.accept("d", options)
        if failure is not None:
            return failure
        pos = self.pos - 1

        sides, options = self._parse_dice_operand(options, sides=True)
        if isinstance(sides, Options):
            return sides

        return Dice(count, sides, self.parse_filter(options), pos)

    def parse_filter(self, options: Options) -> FilterModifier[Ast]:
        for token, kind in FILTER_TOKENS:
            if self.accept_string(token, options) is None:
                break
        else:
            return FilterModifier.none()

        backup = self.backup()
        count = self.parse_number(options)
        if isinstance(count, Options):
            self.restore(backup)
            count = Const("1")
        return FilterModifier(kind, count)

    def parse_number_or_percent(self, options: Options) -> Parsed[Ast]:
        if self.accept("%", options) is None:
            return Const("100")
        return self.parse_number(options.add("%"))

    def parse_number(self, options: Options) -> Parsed[Ast]:
        first = self.accept_any(DIGITS, options, name=DIGITS_NAME)
        if isinstance(first, Options):
            return first.add("(").message("tried to parse a number")

        number = [first]
        while True:
            backup = self.backup()
            digit = self.accept_any(DIGITS, options, name=DIGITS_NAME)
            if isinstance(digit, Options):
                self.restore(backup)
                break
            number.append(digit)

        return Const("".join(number))


def parse(text: str, advanced: bool = False) -> Ast:
    return Parser(text, advanced=advanced).parse()
