"""Run a rendered script through the external shell interpreter."""

from __future__ import annotations

import subprocess
from collections.abc import Sequence

from .errors import ShellLaunchError, ShellTerminatedError


def run_script(
    script_text: str,
    *,
    shell: str,
    program_name: str,
    arguments: Sequence[str],
) -> int:
    """Pipe `script_text` into `shell -s ARGUMENTS...` and wait for it.

    The child sees `program_name` as its argv[0], so `$0` and shell error
    messages name the script file. Returns the child's exit status.

    Raises:
        ShellLaunchError: the interpreter could not be started.
        ShellTerminatedError: the interpreter was killed by a signal.
    """
    try:
        process = subprocess.Popen(
            [program_name, "-s", *arguments],
            executable=shell,
            stdin=subprocess.PIPE,
            text=True,
            encoding="utf-8",
        )
    except OSError as exc:
        raise ShellLaunchError(f"Could not start shell '{shell}': {exc}") from exc

    # communicate() tolerates a shell that exits before reading all input.
    process.communicate(script_text)
    returncode = process.returncode
    if returncode < 0:
        raise ShellTerminatedError(-returncode)
    return returncode
