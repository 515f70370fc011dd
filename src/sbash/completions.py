"""Shell completion scripts for a script's command-line surface."""

from __future__ import annotations

import re
import shlex
from pathlib import PurePath

from .models import Item

_NON_WORD_RE = re.compile(r"\W")


def render_completions(
    shell: str,
    program_name: str,
    subcommands: list[Item],
    flags: list[str],
) -> str:
    """Return the completion script text for `shell`.

    `subcommands` is empty when the program takes its arguments directly.
    """
    if shell == "bash":
        return _bash(program_name, subcommands, flags)
    if shell == "zsh":
        return "autoload -U +X bashcompinit && bashcompinit\n" + _bash(
            program_name, subcommands, flags
        )
    if shell == "fish":
        return _fish(program_name, subcommands, flags)
    raise ValueError(f"Unsupported completion shell: {shell}")


def _function_name(program_name: str) -> str:
    stem = PurePath(program_name).name or "script"
    return "_sbash_" + _NON_WORD_RE.sub("_", stem)


def _bash(program_name: str, subcommands: list[Item], flags: list[str]) -> str:
    words = " ".join([*(item.name for item in subcommands), *flags])
    function_name = _function_name(program_name)
    return "\n".join(
        [
            f"{function_name}() {{",
            '    local cur="${COMP_WORDS[COMP_CWORD]}"',
            "    if [[ $COMP_CWORD -eq 1 ]]; then",
            f'        COMPREPLY=( $(compgen -W "{words}" -- "$cur") )',
            "    else",
            '        COMPREPLY=( $(compgen -f -- "$cur") )',
            "    fi",
            "}",
            f"complete -F {function_name} {shlex.quote(program_name)}",
            "",
        ]
    )


def _fish(program_name: str, subcommands: list[Item], flags: list[str]) -> str:
    command = shlex.quote(program_name)
    lines = []
    for item in subcommands:
        line = f"complete -c {command} -f -n '__fish_use_subcommand' -a {shlex.quote(item.name)}"
        if item.description.short:
            line += f" -d {shlex.quote(item.description.short)}"
        lines.append(line)
    for flag in flags:
        lines.append(f"complete -c {command} -l {flag.removeprefix('--')}")
    lines.append("")
    return "\n".join(lines)
