"""Structural parser: source text to `Script`.

Grammar, top to bottom::

    script   := "#^"-doc? item* END
    item     := "#>"-doc? "pub"? "inline"? "fn" name "(" arglist ")" "#<"-doc? block
    arglist  := (arg ",")* last_arg?
    arg      := "#>"-doc? ident "," "#<"-doc?
    last_arg := "#>"-doc? (ident | "...") ","? "#<"-doc?
    block    := "{" comment? NEWLINE body "}"

Every step takes an immutable `Cursor` and returns its result together with
the cursor after it. The first mismatch aborts the whole parse.
"""

from __future__ import annotations

from dataclasses import dataclass

from .constants import (
    DOC_POST_MARKER,
    DOC_PRE_MARKER,
    DOC_SCRIPT_MARKER,
    FORWARD_MARKER,
    KEYWORD_FN,
    KEYWORD_INLINE,
    KEYWORD_PUB,
)
from .cursor import Cursor
from .diagnostics import Mismatch, context
from .errors import ParseError
from .lexer import (
    IdentifierKind,
    doc_lines,
    expect,
    expect_line_end,
    identifier,
    keyword,
    skip_spaces,
    skip_trivia,
    skip_whitespace,
)
from .models import Arg, Description, ForwardArgs, Item, Script


@dataclass(frozen=True)
class _Signature:
    name: str
    args: tuple[Arg, ...]
    forward: ForwardArgs | None


@dataclass(frozen=True)
class _Body:
    text: str
    source_line: int


def parse(source: str) -> Script:
    """Parse script source.

    Raises:
        ParseError: the source does not match the grammar.
        ScriptInvariantError: the source parses but repeats a function
            name, or an argument name within one function.
    """
    try:
        return _script(Cursor(source))
    except Mismatch as exc:
        raise ParseError(exc.to_diagnostic()) from None


@context("script")
def _script(cursor: Cursor) -> Script:
    script_doc, cursor = doc_lines(skip_whitespace(cursor), DOC_SCRIPT_MARKER)
    cursor = skip_trivia(cursor)

    items: list[Item] = []
    while not cursor.at_end:
        item, cursor = _item(cursor)
        items.append(item)
        cursor = skip_trivia(cursor)

    return Script(items=tuple(items), description=Description.from_lines(script_doc))


@context("function")
def _item(cursor: Cursor) -> tuple[Item, Cursor]:
    pre_doc, cursor = doc_lines(cursor, DOC_PRE_MARKER)
    is_public, cursor = _optional_keyword(cursor, KEYWORD_PUB)
    is_inline, cursor = _optional_keyword(cursor, KEYWORD_INLINE)

    after_fn = keyword(cursor, KEYWORD_FN)
    if after_fn is None:
        raise Mismatch(cursor, f"'{KEYWORD_FN}'")
    cursor = skip_trivia(after_fn)

    signature, cursor = _signature(cursor)
    post_doc, cursor = doc_lines(skip_trivia(cursor), DOC_POST_MARKER)
    body, cursor = _block(cursor)

    item = Item(
        name=signature.name,
        is_public=is_public,
        is_inline=is_inline,
        args=signature.args,
        forward=signature.forward,
        body=body.text,
        body_source_line=body.source_line,
        description=Description.from_lines([*pre_doc, *post_doc]),
    )
    return item, cursor


def _optional_keyword(cursor: Cursor, word: str) -> tuple[bool, Cursor]:
    after = keyword(cursor, word)
    if after is None:
        return False, cursor
    return True, skip_trivia(after)


@context("function signature")
def _signature(cursor: Cursor) -> tuple[_Signature, Cursor]:
    name, cursor = identifier(cursor, IdentifierKind.FUNCTION)
    cursor = expect(skip_trivia(cursor), "(")
    args, forward, cursor = _arglist(cursor)
    cursor = expect(cursor, ")")
    return _Signature(name=name, args=args, forward=forward), cursor


@context("argument list")
def _arglist(cursor: Cursor) -> tuple[tuple[Arg, ...], ForwardArgs | None, Cursor]:
    args: list[Arg] = []
    cursor = skip_trivia(cursor)

    while True:
        pre_doc, cursor = doc_lines(cursor, DOC_PRE_MARKER)
        if not pre_doc and cursor.startswith(")"):
            return tuple(args), None, cursor

        # The forward marker is tried before an identifier. It can never
        # be mistaken for one since "." does not start an identifier.
        if cursor.startswith(FORWARD_MARKER):
            forward, cursor = _forward_argument(cursor, pre_doc)
            return tuple(args), forward, cursor

        arg, has_comma, cursor = _argument(cursor, pre_doc)
        args.append(arg)
        if not has_comma:
            return tuple(args), None, cursor


@context("argument")
def _argument(cursor: Cursor, pre_doc: list[str]) -> tuple[Arg, bool, Cursor]:
    name, cursor = identifier(cursor, IdentifierKind.ARGUMENT)
    has_comma, post_doc, cursor = _argument_tail(cursor)
    arg = Arg(name=name, description=Description.from_lines([*pre_doc, *post_doc]))
    return arg, has_comma, cursor


@context("argument")
def _forward_argument(cursor: Cursor, pre_doc: list[str]) -> tuple[ForwardArgs, Cursor]:
    cursor = cursor.advance(len(FORWARD_MARKER))
    _, post_doc, cursor = _argument_tail(cursor)
    if not cursor.startswith(")"):
        raise Mismatch(cursor, f"')' since '{FORWARD_MARKER}' must be the last argument")
    return ForwardArgs(description=Description.from_lines([*pre_doc, *post_doc])), cursor


def _argument_tail(cursor: Cursor) -> tuple[bool, list[str], Cursor]:
    """Optional comma, then optional post doc lines."""
    cursor = skip_trivia(cursor)
    has_comma = cursor.startswith(",")
    if has_comma:
        cursor = skip_trivia(cursor.advance(1))
    post_doc, cursor = doc_lines(cursor, DOC_POST_MARKER)
    return has_comma, post_doc, cursor


@context("function body")
def _block(cursor: Cursor) -> tuple[_Body, Cursor]:
    cursor = expect_line_end(expect(cursor, "{"))
    body, cursor = _capture_body(cursor)
    cursor = expect(skip_spaces(cursor), "}")
    return body, cursor


def _capture_body(cursor: Cursor) -> tuple[_Body, Cursor]:
    """Capture the indented lines following an opening brace.

    The leading whitespace of the first non-blank line fixes the indent
    prefix. Lines are taken while they are blank or start with that prefix,
    and are stored with the prefix removed. An unindented first non-blank
    line means an empty body; the cursor is left on that line.
    """
    start_line = cursor.line

    probe = cursor
    while not probe.at_end and not probe.rest_of_line().strip():
        probe = probe.next_line()
    first = probe.rest_of_line()
    prefix = first[: len(first) - len(first.lstrip(" \t"))]
    if probe.at_end or not prefix:
        return _Body(text="", source_line=start_line), probe

    captured: list[str] = []
    while not cursor.at_end:
        content = cursor.rest_of_line()
        following = cursor.next_line()
        terminator = cursor.text[cursor.offset + len(content):following.offset]
        if not content.strip():
            kept = content[len(prefix):] if content.startswith(prefix) else ""
        elif content.startswith(prefix):
            kept = content[len(prefix):]
        else:
            break
        captured.append(kept + terminator)
        cursor = following

    return _Body(text="".join(captured), source_line=start_line), cursor
