"""Editor configuration. Optional overrides live at ~/.rline/config.json."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any

from rline.theme import THEME_ENV

logger = logging.getLogger(__name__)

CONFIG_DIR_ENV = "RLINE_CONFIG_DIR"


@dataclass
class EditorConfig:
    """Prompt text, highlighting and buffer settings for one editor.

    Prompt widths are supplied by the caller rather than measured, so
    prompts may carry their own escape sequences.
    """

    prompt: str = "> "
    prompt_width: int = 2
    prompt_right: str = " :) "
    prompt_right_width: int = 4
    shell_commands: list[str] = field(default_factory=list)
    theme: str = "default"
    language: str = "sh"
    buffer_size: int = 1024
    exit_token: str = "exit"

    def __post_init__(self) -> None:
        if self.prompt_width < 0 or self.prompt_right_width < 0:
            raise ValueError("prompt widths must not be negative")
        if self.buffer_size <= 0:
            raise ValueError("buffer_size must be positive")

    @classmethod
    def from_env(cls, **overrides: Any) -> EditorConfig:
        """Build a config with the theme taken from ``RLINE_THEME``."""
        theme = os.environ.get(THEME_ENV)
        if theme and "theme" not in overrides:
            overrides["theme"] = theme
        return cls(**overrides)


def _get_config_dir() -> Path:
    return Path(os.environ.get(CONFIG_DIR_ENV, Path.home() / ".rline"))


def _get_config_path() -> Path:
    return _get_config_dir() / "config.json"


def config_from_dict(data: dict[str, Any]) -> EditorConfig:
    known = {f.name for f in fields(EditorConfig)}
    values = {k: v for k, v in data.items() if k in known}
    if "shell_commands" in values:
        values["shell_commands"] = [str(c) for c in values["shell_commands"]]
    return EditorConfig.from_env(**values)


def load_config(path: Path | None = None) -> EditorConfig:
    """Load the config file, falling back to defaults when it is unusable."""
    config_path = path or _get_config_path()
    if not config_path.exists():
        return EditorConfig.from_env()
    try:
        data = json.loads(config_path.read_text())
        if not isinstance(data, dict):
            raise ValueError("config root must be an object")
        return config_from_dict(data)
    except (OSError, ValueError, TypeError) as e:
        logger.warning("Error reading config %s: %s", config_path, e)
        return EditorConfig.from_env()
