from __future__ import annotations

from dataclasses import dataclass, replace


@dataclass(frozen=True)
class Options:
    """What the parser would have accepted at the furthest point it reached.

    Every failing branch returns one of these instead of raising; alternatives
    are combined with ``merge`` so the final diagnostic reflects all of them.
    """

    source: str
    lastpos: int = 0
    expected: frozenset[str] = frozenset()
    messages: tuple[str, ...] = ()

    def message(self, msg: str) -> Options:
        return replace(self, messages=self.messages + (msg,))

    def pos(self, pos: int) -> Options:
        if pos > self.lastpos:
            return replace(self, lastpos=pos)
        return self

    def add(self, value: str) -> Options:
        return replace(self, expected=self.expected | {value})

    add_str = add

    def merge(self, other: Options) -> Options:
        messages = self.messages + tuple(m for m in other.messages if m not in self.messages)
        return replace(
            self,
            lastpos=max(self.lastpos, other.lastpos),
            expected=self.expected | other.expected,
            messages=messages,
        )

    def __str__(self) -> str:
        lines = [self.source, " " * self.lastpos + "^"]

        if self.expected:
            lines.append("An error occurred: unexpected character.")
            lines.append(f"Expected any of: [{', '.join(sorted(self.expected))}]")
            lines.append("")

        lines.extend(self.messages)
        return "\n".join(lines)
