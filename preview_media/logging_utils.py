from __future__ import annotations

import logging
import os
import tempfile
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

LOGGER_ROOT = "PreviewMedia"
PROPAGATE_ENV_VAR = "PREVIEW_MEDIA_PROPAGATE_LOGS"
LOG_DIR_ENV_VAR = "PREVIEW_MEDIA_LOG_DIR"

_FALSE_TOKENS = {"0", "false", "no", "off"}


def resolve_log_level(debug_enabled: bool) -> int:
    """Return DEBUG in dev mode, INFO otherwise."""
    return logging.DEBUG if debug_enabled else logging.INFO


def _propagation_enabled() -> bool:
    value = os.environ.get(PROPAGATE_ENV_VAR)
    if value is None:
        return True
    return value.strip().lower() not in _FALSE_TOKENS


def get_logger(suffix: str, *, debug_enabled: bool = False) -> logging.Logger:
    """Return a named logger below the PreviewMedia hierarchy."""
    logger = logging.getLogger(f"{LOGGER_ROOT}.{suffix}" if suffix else LOGGER_ROOT)
    logger.setLevel(resolve_log_level(debug_enabled))
    logger.propagate = _propagation_enabled()
    return logger


def resolve_logs_dir(log_dir_name: str = "PreviewMedia") -> Path:
    """
    Resolve the directory to store preview logs.

    Strategy:
    - Use PREVIEW_MEDIA_LOG_DIR if set.
    - Fall back to XDG state/cache locations, then `cwd/logs/<log_dir_name>`.
    - Final fallback: tempdir/<log_dir_name>.
    """
    candidates = []

    env_override = os.environ.get(LOG_DIR_ENV_VAR)
    if env_override:
        candidates.append(Path(env_override).expanduser())

    state_home = Path(os.environ.get("XDG_STATE_HOME", Path.home() / ".local" / "state"))
    cache_home = Path(os.environ.get("XDG_CACHE_HOME", Path.home() / ".cache"))
    candidates.append(state_home / "preview-media" / "logs")
    candidates.append(cache_home / "preview-media" / "logs")
    candidates.append(Path.cwd() / "logs")

    for base in candidates:
        try:
            target = base / log_dir_name
            target.mkdir(parents=True, exist_ok=True)
            return target
        except OSError:
            continue

    temp_fallback = Path(tempfile.gettempdir()) / "preview-media" / log_dir_name
    temp_fallback.mkdir(parents=True, exist_ok=True)
    return temp_fallback


def build_rotating_file_handler(
    log_dir: Path,
    filename: str,
    *,
    retention: int = 5,
    max_bytes: int = 512 * 1024,
    formatter: Optional[logging.Formatter] = None,
) -> RotatingFileHandler:
    """Open ``log_dir/filename`` for preview logs.

    ``retention`` counts the live file plus its rotated copies, so 1 (or
    anything lower) keeps no backups.
    """
    log_dir.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(
        log_dir / filename,
        maxBytes=max_bytes,
        backupCount=max(1, retention) - 1,
        encoding="utf-8",
    )
    if formatter is not None:
        handler.setFormatter(formatter)
    return handler
