"""Ambient user preferences of the host environment.

These are consulted for ``prefers-*`` features when no override is set. The
module stays free of Qt types; the Qt adapter layers the platform colour
scheme on top of :func:`detect_host_preferences`.
"""
from __future__ import annotations

import os
from dataclasses import dataclass, replace
from typing import Mapping, Optional

COLOR_SCHEME_ENV_VAR = "PREVIEW_MEDIA_HOST_COLOR_SCHEME"
REDUCED_MOTION_ENV_VAR = "PREVIEW_MEDIA_HOST_REDUCED_MOTION"
CONTRAST_ENV_VAR = "PREVIEW_MEDIA_HOST_CONTRAST"

_TRUE_TOKENS = {"1", "true", "yes", "on", "reduce"}
_FALSE_TOKENS = {"0", "false", "no", "off", "no-preference"}


@dataclass(frozen=True)
class HostPreferences:
    color_scheme: str = "light"
    reduced_motion: bool = False
    contrast: str = "no-preference"

    def with_color_scheme(self, scheme: Optional[str]) -> "HostPreferences":
        if scheme not in {"light", "dark"}:
            return self
        return replace(self, color_scheme=scheme)


DEFAULT_HOST_PREFERENCES = HostPreferences()


def _env_token(env: Mapping[str, str], key: str) -> Optional[str]:
    value = env.get(key)
    if value is None:
        return None
    token = value.strip().lower()
    return token or None


def detect_host_preferences(env: Optional[Mapping[str, str]] = None) -> HostPreferences:
    """Resolve host preferences from environment variables, defaulting to light/no-preference."""

    source = os.environ if env is None else env
    prefs = DEFAULT_HOST_PREFERENCES

    scheme = _env_token(source, COLOR_SCHEME_ENV_VAR)
    if scheme in {"light", "dark"}:
        prefs = replace(prefs, color_scheme=scheme)

    motion = _env_token(source, REDUCED_MOTION_ENV_VAR)
    if motion in _TRUE_TOKENS:
        prefs = replace(prefs, reduced_motion=True)
    elif motion in _FALSE_TOKENS:
        prefs = replace(prefs, reduced_motion=False)

    contrast = _env_token(source, CONTRAST_ENV_VAR)
    if contrast in {"more", "less", "no-preference"}:
        prefs = replace(prefs, contrast=contrast)

    return prefs


def env_color_scheme_set(env: Optional[Mapping[str, str]] = None) -> bool:
    source = os.environ if env is None else env
    return _env_token(source, COLOR_SCHEME_ENV_VAR) in {"light", "dark"}
