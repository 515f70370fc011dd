"""Tests for the document model."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from sbash.errors import DuplicateArgumentError, DuplicateFunctionError, UnknownFunctionError
from sbash.models import Arg, Description, ForwardArgs, Item, Script


def make_item(name: str, *, is_public: bool = False, line: int = 2) -> Item:
    return Item(name=name, is_public=is_public, body_source_line=line)


def test_description_from_no_lines_is_empty() -> None:
    description = Description.from_lines([])
    assert description.short == ""
    assert description.long == ""
    assert description.is_empty


def test_description_single_paragraph_joins_lines() -> None:
    description = Description.from_lines(["Deploy the", "application."])
    assert description.short == "Deploy the application."
    assert description.long == "Deploy the application."


def test_description_paragraphs() -> None:
    description = Description.from_lines(["First.", "", "", "Second", "part.", "", "Third."])
    assert description.short == "First."
    assert description.long == "First.\n\nSecond part.\n\nThird."


def test_description_ignores_leading_and_trailing_blank_lines() -> None:
    description = Description.from_lines(["", "  Only.  ", ""])
    assert description.short == "Only."
    assert description.long == "Only."


def test_item_defaults() -> None:
    item = make_item("build")
    assert item.args == ()
    assert item.forward is None
    assert item.body == ""
    assert not item.forwards_arguments


def test_item_rejects_duplicate_argument_names() -> None:
    with pytest.raises(DuplicateArgumentError):
        Item(name="f", args=(Arg(name="a"), Arg(name="a")), body_source_line=2)


def test_item_requires_positive_body_line() -> None:
    with pytest.raises(ValidationError):
        Item(name="f", body_source_line=0)


def test_item_is_immutable() -> None:
    item = make_item("build")
    with pytest.raises(ValidationError):
        item.name = "other"  # type: ignore[misc]


def test_script_rejects_duplicate_names_even_if_private() -> None:
    with pytest.raises(DuplicateFunctionError) as exc_info:
        Script(items=(make_item("a", is_public=True), make_item("a", line=5)))
    assert exc_info.value.name == "a"


def test_script_public_items_keep_source_order() -> None:
    script = Script(
        items=(
            make_item("c", is_public=True, line=2),
            make_item("b", line=5),
            make_item("a", is_public=True, line=8),
        )
    )
    assert [item.name for item in script.public_items] == ["c", "a"]


def test_script_get_item() -> None:
    script = Script(items=(make_item("a"),))
    assert script.get_item("a").name == "a"
    with pytest.raises(UnknownFunctionError):
        script.get_item("missing")


def test_forward_args_carries_description() -> None:
    forward = ForwardArgs(description=Description.from_lines(["Extra."]))
    item = Item(name="run", forward=forward, body_source_line=2)
    assert item.forwards_arguments
    assert item.forward is not None
    assert item.forward.description.short == "Extra."
