"""Settings loader for the preview media engine."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

DEV_MODE_ENV_VAR = "PREVIEW_MEDIA_DEV_MODE"

FRAME_INTERVAL_MIN_MS = 1
FRAME_INTERVAL_MAX_MS = 1000
FOLLOW_UP_SWEEPS_MIN = 1
FOLLOW_UP_SWEEPS_MAX = 64
LOG_RETENTION_MIN = 1
LOG_RETENTION_MAX = 20


def is_dev_build(value: Optional[str] = None) -> bool:
    if value is None:
        value = os.getenv(DEV_MODE_ENV_VAR)
    if value is None:
        return False
    token = value.strip().lower()
    if token in {"1", "true", "yes", "on"}:
        return True
    if token in {"0", "false", "no", "off"}:
        return False
    return False


DEBUG_CONFIG_ENABLED = is_dev_build()


@dataclass(frozen=True)
class PreviewSettings:
    frame_interval_ms: int = 16
    max_follow_up_sweeps: int = 8
    log_retention: int = 5
    overrides: Mapping[str, str] = field(default_factory=dict)


def _coerce_clamped_int(value: Any, fallback: int, *, minimum: int, maximum: int) -> int:
    if value is None or isinstance(value, bool):
        return fallback
    try:
        numeric = int(value)
    except (TypeError, ValueError):
        return fallback
    return max(minimum, min(maximum, numeric))


def _coerce_overrides(value: Any) -> Dict[str, str]:
    if not isinstance(value, dict):
        return {}
    cleaned: Dict[str, str] = {}
    for key, raw in value.items():
        if raw is None:
            continue
        cleaned[str(key).strip().lower()] = str(raw).strip()
    return cleaned


def load_preview_settings(path: Path) -> PreviewSettings:
    """Load engine settings from a JSON file, falling back to defaults on any problem."""

    defaults = PreviewSettings()
    try:
        raw_text = path.read_text(encoding="utf-8")
        data = json.loads(raw_text)
    except (FileNotFoundError, OSError, json.JSONDecodeError):
        return defaults
    if not isinstance(data, dict):
        return defaults

    return PreviewSettings(
        frame_interval_ms=_coerce_clamped_int(
            data.get("frame_interval_ms"),
            defaults.frame_interval_ms,
            minimum=FRAME_INTERVAL_MIN_MS,
            maximum=FRAME_INTERVAL_MAX_MS,
        ),
        max_follow_up_sweeps=_coerce_clamped_int(
            data.get("max_follow_up_sweeps"),
            defaults.max_follow_up_sweeps,
            minimum=FOLLOW_UP_SWEEPS_MIN,
            maximum=FOLLOW_UP_SWEEPS_MAX,
        ),
        log_retention=_coerce_clamped_int(
            data.get("log_retention"),
            defaults.log_retention,
            minimum=LOG_RETENTION_MIN,
            maximum=LOG_RETENTION_MAX,
        ),
        overrides=_coerce_overrides(data.get("overrides")),
    )
