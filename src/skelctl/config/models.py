"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults live here, ``skelctl.toml`` only holds
overrides. Every section is optional.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field


class PromptConfig(BaseModel):
    """[prompt] section — how questions are decorated."""

    model_config = {"frozen": True}

    prefix: str = "[?]"
    prefix_color: str | None = "green"
    delimiter: str = " "
    banner: str = "Please answer the following:"
    banner_color: str | None = None
    confirm_color: str | None = "green"
    warning_color: str | None = "red"
    color: bool = True


class CommandsConfig(BaseModel):
    """[commands] section — external command execution.

    ``timeout`` is in seconds; ``None`` waits for commands indefinitely.
    """

    model_config = {"frozen": True}

    timeout: float | None = Field(default=None, gt=0)


class TemplatesConfig(BaseModel):
    """[templates] section — extra template search directories.

    Searched in order, before the templates shipped with skelctl.
    """

    model_config = {"frozen": True}

    paths: list[Path] = Field(default_factory=list)
