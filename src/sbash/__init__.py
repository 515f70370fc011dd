"""sbash: run functions from a small shell-function dialect as subcommands."""

from .cli_surface import Action, Invoke, ShowCompletions, ShowDebug, ShowHelp, ShowScript, resolve
from .diagnostics import Diagnostic
from .errors import (
    DuplicateArgumentError,
    DuplicateFunctionError,
    ParseError,
    SbashError,
    ScriptInvariantError,
)
from .models import Arg, Description, ForwardArgs, Item, Script
from .parser import parse
from .renderer import render, render_invocation

__version__ = "0.1.0"

__all__ = [
    "Action",
    "Arg",
    "Description",
    "Diagnostic",
    "DuplicateArgumentError",
    "DuplicateFunctionError",
    "ForwardArgs",
    "Invoke",
    "Item",
    "ParseError",
    "SbashError",
    "Script",
    "ScriptInvariantError",
    "ShowCompletions",
    "ShowDebug",
    "ShowHelp",
    "ShowScript",
    "parse",
    "render",
    "render_invocation",
    "resolve",
]
