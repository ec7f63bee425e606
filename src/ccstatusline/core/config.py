"""Settings management.

Loads settings.json from the user config directory, falls back to the
defaults when the file is missing or invalid, and writes settings back.
"""

import json
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from .config_loader import load_json_file
from .config_schema import (
    FlexMode,
    LoggingConfig,
    MergeMode,
    Settings,
    WidgetItem,
    WidgetKind,
)
from .global_paths import GlobalPath
from ..util.log import Log, LogFormat, LogLevel

log = Log.create({"service": "config"})

__all__ = [
    "ConfigError",
    "FlexMode",
    "LoggingConfig",
    "MergeMode",
    "Settings",
    "WidgetItem",
    "WidgetKind",
    "apply_logging",
    "load_settings",
    "save_settings",
]


class ConfigError(Exception):
    """Configuration error."""

    def __init__(self, path: str, message: str):
        self.path = path
        super().__init__(f"Config error in {path}: {message}")


def load_settings(path: Optional[str] = None) -> Settings:
    """Load settings, returning the defaults for a missing or invalid file."""
    filepath = path or GlobalPath.settings_file()
    data = load_json_file(filepath)
    if data is None:
        return Settings()

    try:
        return Settings.model_validate(data)
    except ValidationError as e:
        log.error("invalid settings, using defaults", {"path": filepath, "error": ConfigError(filepath, str(e))})
        return Settings()


def save_settings(settings: Settings, path: Optional[str] = None) -> str:
    """Write settings as pretty JSON using the camelCase keys."""
    filepath = Path(path or GlobalPath.settings_file())
    payload = settings.model_dump(mode="json", by_alias=True, exclude_none=True)
    try:
        filepath.parent.mkdir(parents=True, exist_ok=True)
        filepath.write_text(json.dumps(payload, indent=2) + "\n", encoding="utf-8")
    except OSError as e:
        raise ConfigError(str(filepath), str(e)) from e
    return str(filepath)


def apply_logging(config: LoggingConfig, *, console: Optional[bool] = None, level: Optional[str] = None) -> None:
    """Configure the global logger from settings and CLI flags (flags win)."""
    try:
        log_level = LogLevel.parse(level or config.level) if (level or config.level) else None
    except ValueError:
        log_level = None
    Log.configure(
        level=log_level,
        format=LogFormat.parse(config.format) if config.format else None,
        console=console if console is not None else config.console,
        file=bool(config.file),
    )
