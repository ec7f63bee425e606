from __future__ import annotations

import json
from pathlib import Path

import pytest

from ccstatusline.core.config import (
    ConfigError,
    FlexMode,
    MergeMode,
    Settings,
    WidgetKind,
    load_settings,
    save_settings,
)
from ccstatusline.core.global_paths import GlobalPath
from ccstatusline.render.style import Color


def _write(path: Path, text: str) -> str:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return str(path)


def test_missing_file_gives_defaults() -> None:
    settings = load_settings()

    assert settings.flex_mode == FlexMode.FULL_MINUS_RESERVE
    assert settings.compact_threshold == 60
    assert [item.type for item in settings.lines[0]][:3] == [
        WidgetKind.MODEL,
        WidgetKind.SEPARATOR,
        WidgetKind.CONTEXT_LENGTH,
    ]


def test_jsonc_comments_are_accepted(tmp_path: Path) -> None:
    path = _write(
        tmp_path / "settings.json",
        """
        {
          // one line with the model only
          "lines": [[{"id": "1", "type": "model", "color": "bgRed"}]],
          "flexMode": "full"
        }
        """,
    )

    settings = load_settings(path)

    assert settings.flex_mode == FlexMode.FULL
    assert settings.lines[0][0].color == Color.RED


def test_invalid_file_falls_back_to_defaults(tmp_path: Path) -> None:
    path = _write(tmp_path / "settings.json", "{ not json at all")

    assert load_settings(path) == Settings()


def test_schema_violation_falls_back_to_defaults(tmp_path: Path) -> None:
    path = _write(tmp_path / "settings.json", json.dumps({"compactThreshold": 150}))

    assert load_settings(path).compact_threshold == 60


def test_legacy_items_and_flex_modes_migrate() -> None:
    settings = Settings.model_validate({
        "items": [{"id": "1", "type": "model"}],
        "flexMode": "full-minus-40",
    })

    assert len(settings.lines) == 1
    assert settings.lines[0][0].type == WidgetKind.MODEL
    assert settings.flex_mode == FlexMode.FULL_MINUS_RESERVE
    assert Settings.model_validate({"flexMode": "full-until-compact"}).flex_mode == FlexMode.FULL_UNTIL_THRESHOLD


def test_unknown_widget_types_are_dropped() -> None:
    settings = Settings.model_validate({
        "lines": [[{"id": "1", "type": "spotify"}, {"id": "2", "type": "model"}]],
    })

    assert [item.type for item in settings.lines[0]] == [WidgetKind.MODEL]


def test_lines_are_capped_at_three() -> None:
    lines = [[{"id": str(i), "type": "model"}] for i in range(5)]

    assert len(Settings.model_validate({"lines": lines}).lines) == 3


def test_unknown_colors_are_dropped() -> None:
    settings = Settings.model_validate({
        "lines": [[{"id": "1", "type": "model", "color": "chartreuse"}]],
        "overrideForegroundColor": "none",
        "overrideBackgroundColor": "bgBlue",
    })

    assert settings.lines[0][0].color is None
    assert settings.override_foreground_color is None
    assert settings.override_background_color == Color.BLUE


def test_merge_modes_and_metadata() -> None:
    settings = Settings.model_validate({
        "lines": [[
            {"id": "1", "type": "model", "merge": True},
            {"id": "2", "type": "model", "merge": "no-padding"},
            {"id": "3", "type": "context-percentage", "metadata": {"inverse": True}},
        ]],
    })
    first, second, third = settings.lines[0]

    assert first.merge_mode == MergeMode.MERGE
    assert second.merge_mode == MergeMode.NO_PADDING
    assert third.merge_mode == MergeMode.NONE
    assert third.metadata == {"inverse": "true"}


def test_save_round_trips_with_aliases() -> None:
    settings = Settings.model_validate({
        "lines": [[{"id": "1", "type": "custom-text", "customText": "hi", "rawValue": True}]],
        "nerdFontIcons": True,
    })

    path = save_settings(settings)
    payload = json.loads(Path(path).read_text(encoding="utf-8"))

    assert path == GlobalPath.settings_file()
    assert payload["nerdFontIcons"] is True
    assert payload["lines"][0][0]["customText"] == "hi"
    assert load_settings() == settings


def test_save_raises_config_error_when_unwritable(tmp_path: Path) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("", encoding="utf-8")

    with pytest.raises(ConfigError):
        save_settings(Settings(), str(blocker / "settings.json"))
