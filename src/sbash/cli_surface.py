"""Command-line surface for a parsed script, and dispatch to an `Action`.

Every public function becomes a subcommand whose positional parameters are
the function's arguments, in declared order. A script whose only public
function is `main` skips the subcommand layer: the program itself takes
`main`'s parameters.
"""

from __future__ import annotations

import argparse
from collections.abc import Sequence
from dataclasses import dataclass

from .completions import render_completions
from .constants import COMPLETION_SHELLS, ENTRY_POINT_NAME
from .models import Item, Script
from .renderer import render_invocation

_FUNCTION_DEST = "__function"
_FORWARD_DEST = "__forward"
_FORWARD_METAVAR = "ARGS"

FLAG_SHOW_SCRIPT = "--show-script"
FLAG_SHOW_DEBUG = "--show-debug"
FLAG_COMPLETIONS = "--completions"

_LEADING_FLAGS = (FLAG_SHOW_SCRIPT, FLAG_SHOW_DEBUG, "-h", "--help")


@dataclass(frozen=True)
class Action:
    pass


@dataclass(frozen=True)
class ShowScript(Action):
    """Print the rendered document without running anything."""


@dataclass(frozen=True)
class ShowDebug(Action):
    """Print the full script for the selected call without running it."""

    rendered_full_script: str


@dataclass(frozen=True)
class ShowCompletions(Action):
    shell: str
    text: str


@dataclass(frozen=True)
class ShowHelp(Action):
    """No function was selected: print help and exit with status 2."""

    text: str


@dataclass(frozen=True)
class Invoke(Action):
    function_name: str
    bound_arguments: tuple[str, ...]


def single_main(script: Script) -> Item | None:
    """Return the entry-point item if the program takes its arguments directly."""
    public = script.public_items
    if len(public) == 1 and public[0].name == ENTRY_POINT_NAME:
        return public[0]
    return None


def build_arg_parser(script: Script, program_name: str) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=program_name,
        description=script.description.long or None,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    _add_global_flags(parser)

    main_item = single_main(script)
    if main_item is not None:
        if parser.description is None:
            parser.description = main_item.description.long or None
        _add_parameters(parser, main_item)
        parser.set_defaults(**{_FUNCTION_DEST: main_item.name})
        return parser

    subparsers = parser.add_subparsers(
        dest=_FUNCTION_DEST,
        title="functions",
        metavar="FUNCTION",
    )
    for item in script.public_items:
        subparser = subparsers.add_parser(
            item.name,
            help=_help_text(item.description.short),
            description=item.description.long or None,
            formatter_class=argparse.RawDescriptionHelpFormatter,
        )
        _add_parameters(subparser, item)
    return parser


def resolve(script: Script, program_name: str, arguments: Sequence[str]) -> Action:
    """Decide what to do with the process arguments.

    Usage errors (unknown function, missing or extra values) are reported by
    argparse, which prints usage and raises `SystemExit(2)`.
    """
    arguments = list(arguments)

    start = _leading_flags_end(arguments)
    early = _parse_leading_flags(program_name, arguments[:start])
    if early.completions is not None:
        subcommands = [] if single_main(script) is not None else script.public_items
        text = render_completions(
            early.completions,
            program_name,
            subcommands,
            [FLAG_SHOW_SCRIPT, FLAG_SHOW_DEBUG, FLAG_COMPLETIONS],
        )
        return ShowCompletions(shell=early.completions, text=text)
    if early.show_script:
        return ShowScript()

    parsed, forwarded = split_forwarded(script, arguments, start)
    parser = build_arg_parser(script, program_name)
    namespace = parser.parse_args(parsed)

    function_name = getattr(namespace, _FUNCTION_DEST, None)
    if function_name is None:
        return ShowHelp(text=parser.format_help())

    item = script.get_item(function_name)
    if namespace.show_debug:
        return ShowDebug(rendered_full_script=render_invocation(script, item.name))
    return Invoke(
        function_name=item.name,
        bound_arguments=bind_arguments(item, namespace, forwarded),
    )


def split_forwarded(
    script: Script, arguments: list[str], start: int
) -> tuple[list[str], tuple[str, ...]]:
    """Cut off the values a forwarding parameter passes through untouched.

    `start` is the index of the first token after the leading global flags.
    Everything after the selected function's named values is returned
    separately so argparse never interprets it; `-la` or `-h` meant for a
    wrapped command reaches the function as-is.
    """
    item = single_main(script)
    if item is None:
        if start >= len(arguments):
            return arguments, ()
        item = next((i for i in script.public_items if i.name == arguments[start]), None)
        if item is None:
            return arguments, ()
        start += 1

    if item.forward is None:
        return arguments, ()
    boundary = start + len(item.args)
    if boundary > len(arguments):
        # Too few values: let argparse report the missing ones.
        return arguments, ()
    return arguments[:boundary], tuple(arguments[boundary:])


def bind_arguments(
    item: Item,
    namespace: argparse.Namespace,
    forwarded: Sequence[str] = (),
) -> tuple[str, ...]:
    """Collect matched values in declared order, forwarded values last."""
    values = [getattr(namespace, _param_dest(index)) for index in range(len(item.args))]
    if item.forward is not None:
        values.extend(getattr(namespace, _FORWARD_DEST))
        values.extend(forwarded)
    return tuple(values)


def _help_text(text: str) -> str | None:
    # argparse applies %-formatting to help strings.
    return text.replace("%", "%%") or None


def _add_global_flags(parser: argparse.ArgumentParser) -> None:
    modes = parser.add_mutually_exclusive_group()
    modes.add_argument(
        FLAG_SHOW_SCRIPT,
        action="store_true",
        help="Print the generated shell script and exit.",
    )
    modes.add_argument(
        FLAG_SHOW_DEBUG,
        action="store_true",
        help="Print the full script for the selected function instead of running it.",
    )
    parser.add_argument(
        FLAG_COMPLETIONS,
        choices=COMPLETION_SHELLS,
        metavar="SHELL",
        help=f"Print a completion script ({', '.join(COMPLETION_SHELLS)}) and exit.",
    )


def _add_parameters(parser: argparse.ArgumentParser, item: Item) -> None:
    # Positional dests are internal names so they cannot collide with the
    # global flags; the argument name is shown as the metavar.
    for index, arg in enumerate(item.args):
        parser.add_argument(
            _param_dest(index),
            metavar=arg.name,
            help=_help_text(arg.description.short),
        )
    if item.forward is not None:
        # Values are split off before parsing, see split_forwarded();
        # declared here so they show up in usage and help.
        parser.add_argument(
            _FORWARD_DEST,
            nargs="*",
            metavar=_FORWARD_METAVAR,
            help=_help_text(item.forward.description.short)
            or "Arguments passed through unchanged.",
        )


def _param_dest(index: int) -> str:
    return f"__arg{index}"


def _leading_flags_end(arguments: list[str]) -> int:
    """Index of the first token that is not a global flag or help flag."""
    index = 0
    while index < len(arguments):
        token = arguments[index]
        if token == FLAG_COMPLETIONS:
            index += 2
        elif token in _LEADING_FLAGS or token.startswith(FLAG_COMPLETIONS + "="):
            index += 1
        else:
            break
    return min(index, len(arguments))


def _parse_leading_flags(program_name: str, leading: list[str]) -> argparse.Namespace:
    """Parse the global flags that appear before the first positional token.

    These short-circuit before any function is matched, so they work even
    when the program's own parameters are required.
    """
    pre_parser = argparse.ArgumentParser(prog=program_name, add_help=False)
    _add_global_flags(pre_parser)
    namespace, _ = pre_parser.parse_known_args(leading)
    return namespace
