"""Runtime settings read from the environment."""

from __future__ import annotations

import os
import shutil
from collections.abc import Mapping
from pathlib import Path

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from .constants import DEFAULT_SHELL, ENV_LOG_FILE, ENV_SHELL
from .errors import ConfigError


class Settings(BaseModel):
    model_config = ConfigDict(frozen=True)

    shell: str = DEFAULT_SHELL
    log_file: Path | None = None

    @field_validator("shell")
    @classmethod
    def shell_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("shell must not be empty")
        return value


def load_settings(
    environ: Mapping[str, str] | None = None,
    *,
    cwd: Path | None = None,
) -> Settings:
    """Build settings from `SBASH_SHELL` and `SBASH_LOG_FILE`.

    Raises:
        ConfigError: a variable is set to an unusable value.
    """
    env = os.environ if environ is None else environ
    values: dict[str, object] = {}

    shell = env.get(ENV_SHELL)
    if shell is not None:
        values["shell"] = shell

    log_file_raw = env.get(ENV_LOG_FILE, "").strip()
    if log_file_raw:
        values["log_file"] = resolve_log_file(log_file_raw, cwd if cwd is not None else Path.cwd())

    try:
        return Settings.model_validate(values)
    except ValidationError as exc:
        raise ConfigError(f"Invalid environment configuration: {exc}") from exc


def resolve_log_file(raw: str, cwd: Path) -> Path:
    """Expand `~` and anchor relative log paths at the invocation directory."""
    if "\0" in raw:
        raise ConfigError(f"{ENV_LOG_FILE} contains a NUL character.")
    try:
        path = Path(raw).expanduser()
    except RuntimeError as exc:
        raise ConfigError(f"{ENV_LOG_FILE}: cannot expand home directory: {exc}") from exc
    if not path.is_absolute():
        path = cwd / path
    return path.resolve()


def find_shell(settings: Settings) -> str:
    """Resolve the configured interpreter to an executable path."""
    resolved = shutil.which(settings.shell)
    if resolved is None:
        raise ConfigError(
            f"Shell '{settings.shell}' was not found. Set {ENV_SHELL} to an installed shell."
        )
    return resolved
