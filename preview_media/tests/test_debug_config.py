import json
from pathlib import Path

from preview_media import debug_config
from preview_media.debug_config import PreviewSettings, load_preview_settings


def test_missing_settings_file_uses_defaults(tmp_path: Path) -> None:
    settings = load_preview_settings(tmp_path / "preview_settings.json")
    assert settings == PreviewSettings()
    assert settings.frame_interval_ms == 16
    assert settings.max_follow_up_sweeps == 8


def test_malformed_settings_file_uses_defaults(tmp_path: Path) -> None:
    path = tmp_path / "preview_settings.json"
    path.write_text("{oops", encoding="utf-8")
    assert load_preview_settings(path) == PreviewSettings()
    path.write_text('"just a string"', encoding="utf-8")
    assert load_preview_settings(path) == PreviewSettings()


def test_settings_are_clamped_and_coerced(tmp_path: Path) -> None:
    path = tmp_path / "preview_settings.json"
    path.write_text(
        json.dumps(
            {
                "frame_interval_ms": 0,
                "max_follow_up_sweeps": "500",
                "log_retention": "bad",
                "overrides": {"Prefers-Color-Scheme": " dark ", "hover": None},
            }
        ),
        encoding="utf-8",
    )
    settings = load_preview_settings(path)
    assert settings.frame_interval_ms == debug_config.FRAME_INTERVAL_MIN_MS
    assert settings.max_follow_up_sweeps == debug_config.FOLLOW_UP_SWEEPS_MAX
    assert settings.log_retention == 5
    assert dict(settings.overrides) == {"prefers-color-scheme": "dark"}


def test_boolean_values_are_not_treated_as_numbers(tmp_path: Path) -> None:
    path = tmp_path / "preview_settings.json"
    path.write_text('{"frame_interval_ms": true}', encoding="utf-8")
    assert load_preview_settings(path).frame_interval_ms == 16


def test_is_dev_build_tokens(monkeypatch) -> None:
    assert debug_config.is_dev_build("yes") is True
    assert debug_config.is_dev_build("off") is False
    assert debug_config.is_dev_build("maybe") is False
    monkeypatch.setenv(debug_config.DEV_MODE_ENV_VAR, "1")
    assert debug_config.is_dev_build() is True
    monkeypatch.delenv(debug_config.DEV_MODE_ENV_VAR)
    assert debug_config.is_dev_build() is False
