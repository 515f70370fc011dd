"""Tests for shell text rendering."""

from __future__ import annotations

import pytest

from sbash.errors import RenderInvariantError, UnknownFunctionError
from sbash.models import Arg, ForwardArgs, Item, Script
from sbash.parser import parse
from sbash.renderer import render, render_bindings, render_invocation


def test_render_greeter(greeter_source: str) -> None:
    rendered = render(parse(greeter_source))
    assert rendered == (
        "\n" * 9
        + 'greet () { ( name="$1"; shift; greeting="$1"; shift; \n'
        + 'echo "$greeting, $name"\n'
        + ") };"
        + "\n\n"
        + "noop () { :; }"
    )


def test_render_keeps_body_lines_aligned_with_source(greeter_source: str) -> None:
    script = parse(greeter_source)
    rendered_lines = render(script).split("\n")
    source_lines = greeter_source.split("\n")

    for item in script.items:
        if not item.body:
            continue
        first_body_line = item.body.split("\n")[0]
        index = item.body_source_line - 1
        assert rendered_lines[index] == first_body_line
        assert source_lines[index].strip() == first_body_line.strip()


def test_render_empty_body_is_noop() -> None:
    script = parse("pub inline fn a(x) {\n}\n")
    assert render(script) == "a () { :; }"


def test_render_inline_body_shares_shell_state() -> None:
    script = parse("inline fn cd_tmp(dir) {\n  cd \"$dir\"\n}\n")
    assert render(script) == 'cd_tmp () { dir="$1"; shift; \ncd "$dir"\n};'


def test_render_default_body_runs_in_subshell() -> None:
    script = parse("fn hello() {\n  echo hi\n}\n")
    assert render(script) == "hello () { ( \necho hi\n) };"


def test_render_pads_between_items() -> None:
    source = "fn a() {\n  one\n}\n\n\n# gap\nfn b() {\n  two\n}\n"
    rendered = render(parse(source))
    lines = rendered.split("\n")
    assert lines[1] == "one"
    assert lines[7] == "two"
    assert lines[6] == "b () { ( "


def test_bindings_in_declared_order() -> None:
    item = Item(
        name="f",
        args=(Arg(name="a"), Arg(name="b"), Arg(name="c")),
        body="true\n",
        body_source_line=2,
    )
    assert render_bindings(item) == 'a="$1"; shift; b="$1"; shift; c="$1"; shift; '


def test_forward_marker_binds_nothing() -> None:
    script = parse('fn run(target, ...) {\n  exec "$target" "$@"\n}\n')
    assert render(script) == 'run () { ( target="$1"; shift; \nexec "$target" "$@"\n) };'


def test_render_rejects_items_out_of_source_order() -> None:
    script = Script(
        items=(
            Item(name="late", body="x\n", body_source_line=10),
            Item(name="early", body="y\n", body_source_line=3),
        )
    )
    with pytest.raises(RenderInvariantError):
        render(script)


def test_render_invocation_appends_prologue_and_call() -> None:
    script = parse("pub fn main(name) {\n  echo \"$name\"\n}\n")
    assert render_invocation(script, "main") == (
        'main () { ( name="$1"; shift; \necho "$name"\n) };\n'
        "set -euo pipefail\n"
        'main "$@"\n'
    )


def test_render_invocation_unknown_function() -> None:
    script = Script(items=(Item(name="a", body_source_line=2),))
    with pytest.raises(UnknownFunctionError):
        render_invocation(script, "b")


def test_render_empty_script() -> None:
    assert render(Script()) == ""


def test_forward_only_item_has_empty_bindings() -> None:
    item = Item(name="f", forward=ForwardArgs(), body="true\n", body_source_line=2)
    assert render_bindings(item) == ""
