"""Lexical primitives: each takes a cursor and returns what it recognized."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from .constants import (
    ARGUMENT_CONTINUE_CHARS,
    COMMENT_CHAR,
    DOC_POST_MARKER,
    DOC_PRE_MARKER,
    DOC_SCRIPT_MARKER,
    FUNCTION_CONTINUE_CHARS,
    IDENT_START_CHARS,
)
from .cursor import Cursor
from .diagnostics import Mismatch, context

_SPACES = " \t"
_WHITESPACE = " \t\r\n"


class IdentifierKind(StrEnum):
    FUNCTION = "function"
    ARGUMENT = "argument"


@dataclass(frozen=True)
class IdentifierRule:
    start_chars: frozenset[str]
    continue_chars: frozenset[str]


IDENTIFIER_RULES: dict[IdentifierKind, IdentifierRule] = {
    IdentifierKind.FUNCTION: IdentifierRule(IDENT_START_CHARS, FUNCTION_CONTINUE_CHARS),
    IdentifierKind.ARGUMENT: IdentifierRule(IDENT_START_CHARS, ARGUMENT_CONTINUE_CHARS),
}


@context("identifier")
def identifier(cursor: Cursor, kind: IdentifierKind) -> tuple[str, Cursor]:
    rule = IDENTIFIER_RULES[kind]
    if cursor.peek() not in rule.start_chars:
        raise Mismatch(cursor, f"{kind} name")

    text = cursor.text
    end = cursor.offset + 1
    while end < len(text) and text[end] in rule.continue_chars:
        end += 1
    return text[cursor.offset:end], cursor.advance(end - cursor.offset)


def skip_spaces(cursor: Cursor) -> Cursor:
    """Skip spaces and tabs on the current line."""
    return _skip_chars(cursor, _SPACES)


def skip_whitespace(cursor: Cursor) -> Cursor:
    """Skip spaces, tabs and line terminators."""
    return _skip_chars(cursor, _WHITESPACE)


def is_doc_line(cursor: Cursor, marker: str) -> bool:
    return cursor.startswith(marker)


def skip_trivia(cursor: Cursor) -> Cursor:
    """Skip whitespace and ordinary comments.

    Stops at `#>` and `#<` lines, which only the grammar may consume.
    """
    while True:
        cursor = skip_whitespace(cursor)
        if not cursor.startswith(COMMENT_CHAR):
            return cursor
        if is_doc_line(cursor, DOC_PRE_MARKER) or is_doc_line(cursor, DOC_POST_MARKER):
            return cursor
        cursor = cursor.next_line()


def doc_lines(cursor: Cursor, marker: str) -> tuple[list[str], Cursor]:
    """Collect consecutive doc lines introduced by `marker`.

    Returns the trimmed line texts (possibly none) and the cursor after the
    last collected line and any trivia that follows it.
    """
    # `#^` is an ordinary comment for skip_trivia, so script docs only
    # tolerate whitespace between lines.
    skip = skip_whitespace if marker == DOC_SCRIPT_MARKER else skip_trivia

    collected: list[str] = []
    while is_doc_line(cursor, marker):
        collected.append(cursor.advance(len(marker)).rest_of_line().strip())
        cursor = skip(cursor.next_line())
    return collected, cursor


def keyword(cursor: Cursor, word: str) -> Cursor | None:
    """Match `word` as a whole word; return the cursor after it or None."""
    if not cursor.startswith(word):
        return None
    following = cursor.advance(len(word))
    if following.peek() in FUNCTION_CONTINUE_CHARS:
        return None
    return following


def expect(cursor: Cursor, token: str) -> Cursor:
    if not cursor.startswith(token):
        raise Mismatch(cursor, f"'{token}'")
    return cursor.advance(len(token))


def expect_line_end(cursor: Cursor) -> Cursor:
    """Require optional spaces, an optional comment, then a line terminator."""
    cursor = skip_spaces(cursor)
    if cursor.startswith(COMMENT_CHAR):
        cursor = cursor.advance(len(cursor.rest_of_line()))
    if cursor.startswith("\r\n"):
        return cursor.advance(2)
    if cursor.startswith("\n"):
        return cursor.advance(1)
    raise Mismatch(cursor, "end of line")


def _skip_chars(cursor: Cursor, chars: str) -> Cursor:
    text = cursor.text
    end = cursor.offset
    while end < len(text) and text[end] in chars:
        end += 1
    if end == cursor.offset:
        return cursor
    return cursor.advance(end - cursor.offset)
