"""Render a parsed script as shell text, keeping body lines aligned."""

from __future__ import annotations

from .constants import (
    BINDING_TEMPLATE,
    EMPTY_BODY_TEMPLATE,
    INLINE_TEMPLATE,
    INVOCATION_TEMPLATE,
    STRICT_MODE_PROLOGUE,
    SUBSHELL_TEMPLATE,
)
from .errors import RenderInvariantError
from .models import Item, Script


def render(script: Script) -> str:
    """Render every function definition in source order.

    Each definition is preceded by enough newlines that its body's first
    line has the same line number as in the source, so line numbers in
    shell error messages point back at the script file.
    """
    parts: list[str] = []
    newline_count = 0
    for item in script.items:
        text = render_item(item, current_line=newline_count + 1)
        parts.append(text)
        newline_count += text.count("\n")
    return "".join(parts)


def render_item(item: Item, *, current_line: int) -> str:
    """Render one definition starting on output line `current_line`."""
    # The definition line comes right before the body's first line.
    first_body_line = current_line + 1
    if item.body_source_line < first_body_line:
        raise RenderInvariantError(
            f"Function '{item.name}' body starts on line {item.body_source_line}, "
            f"but output is already at line {first_body_line}."
        )
    padding = "\n" * (item.body_source_line - first_body_line)

    if not item.body:
        return padding + EMPTY_BODY_TEMPLATE.format(name=item.name)

    template = INLINE_TEMPLATE if item.is_inline else SUBSHELL_TEMPLATE
    return padding + template.format(
        name=item.name,
        bindings=render_bindings(item),
        body=item.body,
    )


def render_bindings(item: Item) -> str:
    """Bind each named argument from the next positional parameter.

    A forwarding parameter binds nothing; the body reads "$@" itself.
    """
    return "".join(BINDING_TEMPLATE.format(name=arg.name) for arg in item.args)


def render_invocation(script: Script, function_name: str) -> str:
    """Render the complete script that calls `function_name` with "$@"."""
    script.get_item(function_name)
    return "\n".join(
        (
            render(script),
            STRICT_MODE_PROLOGUE,
            INVOCATION_TEMPLATE.format(name=function_name),
        )
    ) + "\n"
