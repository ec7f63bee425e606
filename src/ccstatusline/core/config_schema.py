"""Settings schema: pydantic models for settings.json."""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ..render.style import Color
from ..util.log import Log

log = Log.create({"service": "config.schema"})

MAX_LINES = 3


class WidgetKind(str, Enum):
    """Every widget type a settings file may name."""

    MODEL = "model"
    OUTPUT_STYLE = "output-style"
    VERSION = "version"
    GIT_BRANCH = "git-branch"
    GIT_CHANGES = "git-changes"
    TOKENS_INPUT = "tokens-input"
    TOKENS_OUTPUT = "tokens-output"
    TOKENS_CACHED = "tokens-cached"
    TOKENS_TOTAL = "tokens-total"
    CONTEXT_LENGTH = "context-length"
    CONTEXT_PERCENTAGE = "context-percentage"
    CONTEXT_PERCENTAGE_USABLE = "context-percentage-usable"
    SESSION_CLOCK = "session-clock"
    SESSION_COST = "session-cost"
    SESSION_ID = "claude-session-id"
    BLOCK_TIMER = "block-timer"
    TERMINAL_WIDTH = "terminal-width"
    CURRENT_WORKING_DIR = "current-working-dir"
    CUSTOM_TEXT = "custom-text"
    CUSTOM_COMMAND = "custom-command"
    SEPARATOR = "separator"
    FLEX_SEPARATOR = "flex-separator"

    @property
    def is_separator(self) -> bool:
        return self in (WidgetKind.SEPARATOR, WidgetKind.FLEX_SEPARATOR)


class FlexMode(str, Enum):
    """How many columns to hold back for messages the host prints after us."""

    FULL = "full"
    FULL_MINUS_RESERVE = "full-minus-reserve"
    FULL_UNTIL_THRESHOLD = "full-until-threshold"


LEGACY_FLEX_MODES = {
    "full-minus-40": FlexMode.FULL_MINUS_RESERVE,
    "full-until-compact": FlexMode.FULL_UNTIL_THRESHOLD,
}


class MergeMode(str, Enum):
    NONE = "none"
    MERGE = "merge"
    NO_PADDING = "no-padding"


def _parse_color(value: Any, field: str) -> Optional[Color]:
    if value is None or isinstance(value, Color):
        return value
    if not isinstance(value, str):
        log.warn("ignoring non-string color", {"field": field, "value": value})
        return None
    color = Color.parse(value)
    if color is None and value.strip() not in ("", "none"):
        log.warn("ignoring unknown color", {"field": field, "value": value})
    return color


class WidgetItem(BaseModel):
    """One configured widget on a status line."""
    id: str
    type: WidgetKind
    color: Optional[Color] = None
    background_color: Optional[Color] = Field(None, alias="backgroundColor")
    bold: Optional[bool] = None
    raw_value: bool = Field(False, alias="rawValue")
    merge: Union[bool, Literal["no-padding"], None] = None
    character: Optional[str] = None
    custom_text: Optional[str] = Field(None, alias="customText")
    command_path: Optional[str] = Field(None, alias="commandPath")
    max_width: Optional[int] = Field(None, alias="maxWidth")
    preserve_colors: bool = Field(False, alias="preserveColors")
    timeout: Optional[int] = None
    metadata: Dict[str, str] = Field(default_factory=dict)

    model_config = ConfigDict(extra="ignore", populate_by_name=True, frozen=True)

    @field_validator("color", "background_color", mode="before")
    @classmethod
    def _color(cls, value: Any, info) -> Optional[Color]:
        return _parse_color(value, info.field_name)

    @field_validator("metadata", mode="before")
    @classmethod
    def _stringify_metadata(cls, value: Any) -> Dict[str, str]:
        if not isinstance(value, dict):
            return {}
        return {str(k): str(v).lower() if isinstance(v, bool) else str(v) for k, v in value.items()}

    @property
    def merge_mode(self) -> MergeMode:
        if self.merge == "no-padding":
            return MergeMode.NO_PADDING
        if self.merge:
            return MergeMode.MERGE
        return MergeMode.NONE


class LoggingConfig(BaseModel):
    """Logging configuration."""
    level: Optional[str] = None
    format: Optional[Literal["kv", "json", "pretty"]] = None
    console: Optional[bool] = None
    file: Optional[bool] = None

    model_config = ConfigDict(extra="forbid", populate_by_name=True)


def default_lines() -> List[List[WidgetItem]]:
    items = [
        {"id": "1", "type": "model", "color": "cyan"},
        {"id": "2", "type": "separator"},
        {"id": "3", "type": "context-length", "color": "gray"},
        {"id": "4", "type": "separator"},
        {"id": "5", "type": "git-branch", "color": "magenta"},
        {"id": "6", "type": "separator"},
        {"id": "7", "type": "git-changes", "color": "yellow"},
    ]
    return [[WidgetItem.model_validate(item) for item in items]]


class Settings(BaseModel):
    """Main settings schema."""
    schema_: Optional[str] = Field(None, alias="$schema")
    lines: List[List[WidgetItem]] = Field(default_factory=default_lines)
    flex_mode: FlexMode = Field(FlexMode.FULL_MINUS_RESERVE, alias="flexMode")
    compact_threshold: int = Field(60, ge=1, le=99, alias="compactThreshold")
    default_separator: Optional[str] = Field(None, alias="defaultSeparator")
    default_padding: Optional[str] = Field(None, alias="defaultPadding")
    inherit_separator_colors: bool = Field(False, alias="inheritSeparatorColors")
    global_bold: bool = Field(False, alias="globalBold")
    override_foreground_color: Optional[Color] = Field(None, alias="overrideForegroundColor")
    override_background_color: Optional[Color] = Field(None, alias="overrideBackgroundColor")
    nerd_font_icons: bool = Field(False, alias="nerdFontIcons")
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    @model_validator(mode="before")
    @classmethod
    def _migrate_legacy(cls, value: Any) -> Any:
        if not isinstance(value, dict):
            return value
        data = dict(value)

        # Single-line settings predate multi-line support.
        if "items" in data and "lines" not in data:
            data["lines"] = [data.pop("items")]

        mode = data.get("flexMode")
        if isinstance(mode, str) and mode in LEGACY_FLEX_MODES:
            data["flexMode"] = LEGACY_FLEX_MODES[mode].value

        lines = data.get("lines")
        if lines is not None:
            if not isinstance(lines, list):
                lines = [[]]
            data["lines"] = [_known_items(line) for line in lines[:MAX_LINES]]
        return data

    @field_validator("override_foreground_color", "override_background_color", mode="before")
    @classmethod
    def _color(cls, value: Any, info) -> Optional[Color]:
        return _parse_color(value, info.field_name)


def _known_items(line: Any) -> List[Any]:
    """Drop items whose type no widget implements."""
    if not isinstance(line, list):
        return []
    known = {kind.value for kind in WidgetKind}
    result = []
    for item in line:
        kind = item.get("type") if isinstance(item, dict) else getattr(item, "type", None)
        if isinstance(kind, WidgetKind) or kind in known:
            result.append(item)
        else:
            log.warn("dropping widget of unknown type", {"type": kind})
    return result
