"""Immutable position-carrying view into source text."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Cursor:
    """Remaining input plus the 1-based line/column of its first character."""

    text: str
    offset: int = 0
    line: int = 1
    column: int = 1

    @property
    def at_end(self) -> bool:
        return self.offset >= len(self.text)

    @property
    def remaining(self) -> str:
        return self.text[self.offset:]

    @property
    def at_line_start(self) -> bool:
        return self.column == 1

    def peek(self, size: int = 1) -> str:
        return self.text[self.offset:self.offset + size]

    def startswith(self, prefix: str) -> bool:
        return self.text.startswith(prefix, self.offset)

    def advance(self, count: int) -> Cursor:
        """Return a cursor moved forward by `count` characters."""
        end = min(self.offset + count, len(self.text))
        consumed = self.text[self.offset:end]
        newlines = consumed.count("\n")
        if newlines:
            line = self.line + newlines
            column = len(consumed) - consumed.rfind("\n")
        else:
            line = self.line
            column = self.column + len(consumed)
        return Cursor(self.text, end, line, column)

    def line_end(self) -> int:
        """Offset of the line terminator (or end of text) on the current line."""
        end = self.text.find("\n", self.offset)
        return len(self.text) if end == -1 else end

    def rest_of_line(self) -> str:
        """Text up to, but not including, the line terminator."""
        return self.text[self.offset:self.line_end()].rstrip("\r")

    def next_line(self) -> Cursor:
        """Cursor positioned at the start of the following line."""
        end = self.line_end()
        if end >= len(self.text):
            return self.advance(end - self.offset)
        return self.advance(end - self.offset + 1)

    def source_line(self) -> str:
        """Full text of the line the cursor is on, without its terminator."""
        start = self.text.rfind("\n", 0, self.offset) + 1
        return self.text[start:self.line_end()].rstrip("\r")
