"""Process entry point: read a script file, resolve the call, run the shell."""

from __future__ import annotations

import sys
import time
from collections.abc import Sequence
from pathlib import Path

from .cli_surface import Invoke, ShowCompletions, ShowDebug, ShowHelp, ShowScript, resolve
from .config import Settings, find_shell, load_settings
from .constants import ERROR_PREFIX, EXE_NAME, EXIT_FAILURE, EXIT_OK, EXIT_USAGE
from .errors import ParseError, SbashError, ScriptInvariantError, ShellTerminatedError
from .logging_utils import log_event, setup_logging
from .models import Script
from .parser import parse
from .renderer import render, render_invocation
from .runner import run_script

_STDIN_SCRIPT = "-"

_USAGE = """\
Usage: sbash <script-file> [--show-script | --show-debug] [--completions SHELL]
             [function] [args...]

Runs a public function of the script file with the given arguments.
Use '-' as the script file to read the script from standard input.

Options (after the script file):
  --show-script        Print the generated shell script and exit.
  --show-debug         Print the full script for the call instead of running it.
  --completions SHELL  Print a completion script (bash, zsh, fish) and exit.
  --help, -h           Show help for the script's functions.

Environment:
  SBASH_SHELL          Interpreter to run (default: bash).
  SBASH_LOG_FILE       Write structured logs to this file.
"""


def main(argv: Sequence[str] | None = None) -> int:
    """Application entry point. Returns the process exit status."""
    args = list(sys.argv[1:] if argv is None else argv)

    if not args:
        print(_USAGE, end="", file=sys.stderr)
        return EXIT_USAGE
    if args[0] in ("--help", "-h"):
        print(_USAGE, end="")
        return EXIT_OK

    script_file, rest = args[0], args[1:]
    program_name = EXE_NAME if script_file == _STDIN_SCRIPT else script_file

    try:
        settings = load_settings()
    except SbashError as exc:
        _print_error(str(exc))
        return EXIT_FAILURE

    setup_logging(settings.log_file)
    log_event(
        "app_start",
        script_file=script_file,
        argc=len(rest),
        shell=settings.shell,
        log_file=settings.log_file,
    )

    try:
        exit_code = _run(script_file, program_name, rest, settings)
    except SystemExit as exc:
        # argparse exits after printing usage errors or help.
        exit_code = _exit_status(exc)
    log_event("app_stop", exit_code=exit_code)
    return exit_code


def _run(script_file: str, program_name: str, rest: list[str], settings: Settings) -> int:
    try:
        source = _read_source(script_file)
    except OSError as exc:
        _print_error(f"Could not read script file: {exc}")
        return EXIT_FAILURE

    try:
        script = parse(source)
    except ParseError as exc:
        diagnostic = exc.diagnostic
        log_event(
            "parse_failed",
            script_file=script_file,
            error_type=type(exc).__name__,
            line=diagnostic.line,
            column=diagnostic.column,
            error=diagnostic.expected,
        )
        print(f"{script_file}: {exc}", file=sys.stderr)
        return EXIT_FAILURE
    except ScriptInvariantError as exc:
        log_event("parse_failed", script_file=script_file, error_type=type(exc).__name__, error=str(exc))
        _print_error(f"{script_file}: {exc}")
        return EXIT_FAILURE

    log_event(
        "script_parsed",
        script_file=script_file,
        function_count=len(script.items),
        public_count=len(script.public_items),
    )

    try:
        return _dispatch(script, program_name, rest, settings)
    except ShellTerminatedError as exc:
        _print_error(f"Fatal: {exc}")
        return EXIT_FAILURE
    except SbashError as exc:
        _print_error(str(exc))
        return EXIT_FAILURE


def _dispatch(script: Script, program_name: str, rest: list[str], settings: Settings) -> int:
    action = resolve(script, program_name, rest)
    log_event(
        "action_resolved",
        action=type(action).__name__,
        function=getattr(action, "function_name", None),
        argc=len(action.bound_arguments) if isinstance(action, Invoke) else None,
    )

    if isinstance(action, ShowScript):
        print(render(script))
        return EXIT_OK
    if isinstance(action, ShowDebug):
        print(action.rendered_full_script, end="")
        return EXIT_OK
    if isinstance(action, ShowCompletions):
        print(action.text, end="")
        return EXIT_OK
    if isinstance(action, ShowHelp):
        print(action.text, end="", file=sys.stderr)
        return EXIT_USAGE

    assert isinstance(action, Invoke)
    shell = find_shell(settings)
    started = time.monotonic()
    exit_code = run_script(
        render_invocation(script, action.function_name),
        shell=shell,
        program_name=program_name,
        arguments=action.bound_arguments,
    )
    log_event(
        "shell_exit",
        function=action.function_name,
        exit_code=exit_code,
        elapsed_ms=round((time.monotonic() - started) * 1000),
    )
    return exit_code


def _read_source(script_file: str) -> str:
    if script_file == _STDIN_SCRIPT:
        return sys.stdin.read()
    return Path(script_file).read_text(encoding="utf-8")


def _exit_status(exc: SystemExit) -> int:
    if exc.code is None:
        return EXIT_OK
    if isinstance(exc.code, int):
        return exc.code
    return EXIT_USAGE


def _print_error(message: str) -> None:
    print(f"{ERROR_PREFIX} {message}", file=sys.stderr)
