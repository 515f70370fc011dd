"""Document model for parsed sbash scripts."""

from __future__ import annotations

from collections.abc import Iterable

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .errors import DuplicateArgumentError, DuplicateFunctionError, UnknownFunctionError


class Description(BaseModel):
    """Documentation assembled from doc comments around one construct."""

    model_config = ConfigDict(frozen=True)

    short: str = ""
    long: str = ""

    @classmethod
    def from_lines(cls, lines: Iterable[str]) -> Description:
        """Build a description from trimmed doc-line texts.

        Blank lines separate paragraphs. Lines within a paragraph are joined
        with a space; `short` is the first paragraph, `long` all of them.
        """
        paragraphs: list[str] = []
        current: list[str] = []
        for line in lines:
            text = line.strip()
            if text:
                current.append(text)
            elif current:
                paragraphs.append(" ".join(current))
                current = []
        if current:
            paragraphs.append(" ".join(current))

        if not paragraphs:
            return cls()
        return cls(short=paragraphs[0], long="\n\n".join(paragraphs))

    @property
    def is_empty(self) -> bool:
        return not self.long


class Arg(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    description: Description = Description()


class ForwardArgs(BaseModel):
    """Trailing parameter that forwards all remaining invocation arguments."""

    model_config = ConfigDict(frozen=True)

    description: Description = Description()


class Item(BaseModel):
    """One function declaration."""

    model_config = ConfigDict(frozen=True)

    name: str
    is_public: bool = False
    is_inline: bool = False
    args: tuple[Arg, ...] = ()
    forward: ForwardArgs | None = None
    body: str = ""
    body_source_line: int = Field(ge=1)
    description: Description = Description()

    @model_validator(mode="after")
    def check_unique_args(self) -> Item:
        seen: set[str] = set()
        for arg in self.args:
            if arg.name in seen:
                raise DuplicateArgumentError(self.name, arg.name)
            seen.add(arg.name)
        return self

    @property
    def arg_names(self) -> list[str]:
        return [arg.name for arg in self.args]

    @property
    def forwards_arguments(self) -> bool:
        return self.forward is not None


class Script(BaseModel):
    """Ordered function declarations plus the script-level description."""

    model_config = ConfigDict(frozen=True)

    items: tuple[Item, ...] = ()
    description: Description = Description()

    @model_validator(mode="after")
    def check_unique_names(self) -> Script:
        seen: set[str] = set()
        for item in self.items:
            if item.name in seen:
                raise DuplicateFunctionError(item.name)
            seen.add(item.name)
        return self

    @property
    def public_items(self) -> list[Item]:
        return [item for item in self.items if item.is_public]

    def get_item(self, name: str) -> Item:
        for item in self.items:
            if item.name == name:
                return item
        raise UnknownFunctionError(name)
