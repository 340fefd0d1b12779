"""Config file discovery and operator defaults loading.

Walk-up finder locates ``skelctl.toml``, similar to how git finds .git/.
``SKELCTL_CONFIG`` and ``--config`` override the walk-up.

Operator defaults (field name -> suggested answer) come from a user-level
``defaults.toml`` (``SKELCTL_DEFAULTS`` or ``~/.config/skelctl/``), with
the project's ``[defaults]`` table layered on top.
"""

from __future__ import annotations

import os
import tomllib
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import click

CONFIG_FILENAME = "skelctl.toml"
CONFIG_ENV_VAR = "SKELCTL_CONFIG"
DEFAULTS_FILENAME = "defaults.toml"
DEFAULTS_ENV_VAR = "SKELCTL_DEFAULTS"


def find_config(start: Path | None = None) -> Path | None:
    """Walk up from *start* (default: cwd) looking for skelctl.toml.

    Returns the path to the config file, or None if not found.
    Checks SKELCTL_CONFIG env var first.
    """
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        p = Path(env_path)
        return p if p.is_file() else None

    current = (start or Path.cwd()).resolve()
    while True:
        candidate = current / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            return None
        current = parent


def user_config_dir() -> Path:
    """``$XDG_CONFIG_HOME/skelctl``, falling back to ``~/.config/skelctl``."""
    base = os.environ.get("XDG_CONFIG_HOME")
    root = Path(base) if base else Path.home() / ".config"
    return root / "skelctl"


def find_defaults_file() -> Path | None:
    """Locate the user-level operator defaults file, if any."""
    env_path = os.environ.get(DEFAULTS_ENV_VAR)
    candidate = Path(env_path) if env_path else user_config_dir() / DEFAULTS_FILENAME
    return candidate if candidate.is_file() else None


def read_toml(path: Path) -> dict[str, Any]:
    """Parse *path* as TOML; raises ClickException on malformed content."""
    raw = path.read_text(encoding="utf-8")
    try:
        return tomllib.loads(raw)
    except tomllib.TOMLDecodeError as exc:
        msg = f"Invalid TOML in {path}: {exc}"
        raise click.ClickException(msg) from exc


def load_overrides(
    project_defaults: Mapping[str, Any] | None = None,
    defaults_path: Path | None = None,
) -> dict[str, str]:
    """Merge user-file defaults with project *project_defaults* (project wins).

    Only scalar values are kept; nested tables are ignored.
    """
    path = defaults_path or find_defaults_file()
    merged: dict[str, Any] = {}
    if path is not None:
        data = read_toml(path)
        merged.update(data.get("defaults", data))
    merged.update(project_defaults or {})
    return {
        key: str(value)
        for key, value in merged.items()
        if isinstance(value, (str, int, float, bool))
    }
