"""Typed exceptions for sbash."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .diagnostics import Diagnostic


class SbashError(Exception):
    """Base class for all sbash errors."""


class ParseError(SbashError):
    """Raised when script source does not match the grammar."""

    def __init__(self, diagnostic: Diagnostic) -> None:
        self.diagnostic = diagnostic
        super().__init__(diagnostic.render())


class ScriptInvariantError(SbashError):
    """Raised when syntactically valid source breaks a document invariant."""


class DuplicateFunctionError(ScriptInvariantError):
    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Function '{name}' is defined more than once.")


class DuplicateArgumentError(ScriptInvariantError):
    def __init__(self, function_name: str, argument_name: str) -> None:
        self.function_name = function_name
        self.argument_name = argument_name
        super().__init__(
            f"Argument '{argument_name}' appears more than once in function '{function_name}'."
        )


class UnknownFunctionError(SbashError):
    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Function '{name}' is not defined.")


class ConfigError(SbashError):
    """Raised when environment configuration is invalid."""


class ShellLaunchError(SbashError):
    """Raised when the shell interpreter cannot be started."""


class ShellTerminatedError(SbashError):
    def __init__(self, signal_number: int) -> None:
        self.signal_number = signal_number
        super().__init__(f"Shell process terminated by signal {signal_number}.")


class RenderInvariantError(AssertionError):
    """Raised when items arrive out of source order at render time.

    Indicates a parser defect; never caught.
    """
