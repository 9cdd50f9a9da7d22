from __future__ import annotations

import json
from pathlib import Path
from types import MappingProxyType
from typing import Dict, Mapping, Optional

from preview_media.debug_config import DEBUG_CONFIG_ENABLED
from preview_media.logging_utils import get_logger

_LOGGER = get_logger("Overrides", debug_enabled=DEBUG_CONFIG_ENABLED)

OVERRIDABLE_FEATURES: Mapping[str, tuple[str, ...]] = MappingProxyType(
    {
        "prefers-color-scheme": ("light", "dark"),
        "prefers-reduced-motion": ("reduce", "no-preference"),
        "prefers-contrast": ("more", "less", "no-preference"),
        "hover": ("none", "hover"),
        "pointer": ("none", "coarse", "fine"),
    }
)


def normalise_overrides(overrides: Optional[Mapping[str, object]]) -> Dict[str, str]:
    """Copy an override mapping, dropping unset (None) entries and stringifying values."""
    cleaned: Dict[str, str] = {}
    if not overrides:
        return cleaned
    for key, value in overrides.items():
        if value is None:
            continue
        name = str(key)
        if name not in OVERRIDABLE_FEATURES:
            _LOGGER.debug("Keeping override for unknown media feature %r", name)
        cleaned[name] = str(value)
    return cleaned


class FeatureOverrideStore:
    """Holds the static media feature values that cannot be derived from the viewport size."""

    def __init__(self, initial: Optional[Mapping[str, object]] = None) -> None:
        self._values: Dict[str, str] = normalise_overrides(initial)

    @property
    def current(self) -> Mapping[str, str]:
        return MappingProxyType(self._values)

    def replace(self, overrides: Optional[Mapping[str, object]]) -> Mapping[str, str]:
        """Replace the whole map; keys missing from ``overrides`` are cleared."""
        self._values = normalise_overrides(overrides)
        _LOGGER.debug(
            "Media feature overrides replaced: %s",
            ", ".join(f"{key}={value}" for key, value in sorted(self._values.items())) or "none",
        )
        return self.current

    def get(self, name: str) -> Optional[str]:
        return self._values.get(name)


def load_overrides(path: Path) -> Dict[str, str]:
    """Load an overrides JSON file, returning {} on errors.

    The file holds a JSON object of feature -> value, optionally nested under
    an ``"overrides"`` key.
    """
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError:
        return {}
    try:
        data = json.loads(raw)
    except json.JSONDecodeError:
        _LOGGER.warning("Ignoring malformed overrides file %s", path)
        return {}
    if not isinstance(data, dict):
        return {}
    nested = data.get("overrides")
    if isinstance(nested, dict):
        data = nested
    return normalise_overrides(data)
