"""Parse failure reporting: position, context trail and source excerpt."""

from __future__ import annotations

import functools
from collections.abc import Callable
from dataclasses import dataclass
from typing import ParamSpec, TypeVar

from .cursor import Cursor

P = ParamSpec("P")
R = TypeVar("R")


@dataclass(frozen=True)
class Diagnostic:
    line: int
    column: int
    expected: str
    contexts: tuple[str, ...]
    source_line: str

    def render(self) -> str:
        """Render as multi-line human-readable text."""
        lines = [f"Parse error at line {self.line}, column {self.column}:"]
        lines.extend(f"  while parsing {label}" for label in self.contexts)
        lines.append(f"  expected {self.expected}")

        gutter = str(self.line)
        # Keep tabs so the marker lines up with tab-indented source.
        marker_pad = "".join(
            ch if ch == "\t" else " " for ch in self.source_line[: self.column - 1]
        )
        lines.append(f" {gutter} | {self.source_line}")
        lines.append(f" {' ' * len(gutter)} | {marker_pad}^")
        return "\n".join(lines)

    def __str__(self) -> str:
        return self.render()


class Mismatch(Exception):
    """Internal signal that recognition failed at `cursor`.

    Never escapes the parser; converted to a `ParseError` at the top level.
    """

    def __init__(self, cursor: Cursor, expected: str) -> None:
        self.cursor = cursor
        self.expected = expected
        self.contexts: list[str] = []
        super().__init__(f"expected {expected} at {cursor.line}:{cursor.column}")

    def to_diagnostic(self) -> Diagnostic:
        return Diagnostic(
            line=self.cursor.line,
            column=self.cursor.column,
            expected=self.expected,
            contexts=tuple(self.contexts),
            source_line=self.cursor.source_line(),
        )


def context(label: str) -> Callable[[Callable[P, R]], Callable[P, R]]:
    """Record `label` in the context trail of any mismatch raised inside."""

    def decorate(parse_fn: Callable[P, R]) -> Callable[P, R]:
        @functools.wraps(parse_fn)
        def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            try:
                return parse_fn(*args, **kwargs)
            except Mismatch as exc:
                exc.contexts.insert(0, label)
                raise

        return wrapper

    return decorate
