"""Pytest configuration and fixtures for sbash tests."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from pathlib import Path

import pytest

# Line numbers in comments are source line numbers.
GREETER_SOURCE = (
    "#^ Deploy helpers.\n"  # 1
    "\n"  # 2
    "#> Say hello.\n"  # 3
    "#>\n"  # 4
    "#> Prints a greeting.\n"  # 5
    "pub fn greet(\n"  # 6
    "    #> Who to greet.\n"  # 7
    "    name,\n"  # 8
    "    greeting, #< Greeting word.\n"  # 9
    ") {\n"  # 10
    '    echo "$greeting, $name"\n'  # 11
    "}\n"  # 12
    "\n"  # 13
    "inline fn noop() {\n"  # 14
    "}\n"  # 15
)


@pytest.fixture
def greeter_source() -> str:
    return GREETER_SOURCE


@pytest.fixture
def write_script(tmp_path: Path) -> Callable[[str], Path]:
    """Write script source to a file and return its path."""

    def _write(source: str, name: str = "script.sb") -> Path:
        path = tmp_path / name
        path.write_text(source, encoding="utf-8")
        return path

    return _write


@pytest.fixture(autouse=True)
def clear_sbash_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("SBASH_SHELL", raising=False)
    monkeypatch.delenv("SBASH_LOG_FILE", raising=False)


@pytest.fixture(autouse=True)
def reset_logging() -> Iterator[None]:
    yield
    root = logging.getLogger()
    for handler in list(root.handlers):
        if isinstance(handler, logging.FileHandler):
            root.removeHandler(handler)
            handler.close()
    logging.disable(logging.NOTSET)
