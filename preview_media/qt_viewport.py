"""Qt glue: turns a QWidget into a preview viewport provider."""
from __future__ import annotations

from pathlib import Path
from typing import Callable, Mapping, Optional

from PyQt6.QtCore import QCoreApplication, QEvent, QObject, Qt, QTimer
from PyQt6.QtGui import QGuiApplication
from PyQt6.QtWidgets import QWidget

from preview_media.debug_config import DEBUG_CONFIG_ENABLED, PreviewSettings, load_preview_settings
from preview_media.host_preferences import HostPreferences, detect_host_preferences, env_color_scheme_set
from preview_media.logging_utils import get_logger
from preview_media.preview_match_media import PreviewMatchMedia
from preview_media.viewport import Size, SizeCallback, Unobserve

_LOGGER = get_logger("Qt", debug_enabled=DEBUG_CONFIG_ENABLED)


class _ResizeFilter(QObject):
    def __init__(self, parent: QObject, on_resize: SizeCallback) -> None:
        super().__init__(parent)
        self._on_resize = on_resize

    def eventFilter(self, watched, event):  # type: ignore[override]
        if event.type() == QEvent.Type.Resize:
            try:
                self._on_resize()
            except Exception:
                _LOGGER.exception("Preview resize callback failed")
        return False


class WidgetViewportProvider:
    """Reports a widget's size and forwards its resize events."""

    def __init__(self, widget: QWidget) -> None:
        self._widget = widget

    def get_size(self) -> Size:
        return float(self._widget.width()), float(self._widget.height())

    def observe(self, on_size_changed: SizeCallback) -> Unobserve:
        resize_filter = _ResizeFilter(self._widget, on_size_changed)
        self._widget.installEventFilter(resize_filter)

        def unobserve() -> None:
            self._widget.removeEventFilter(resize_filter)
            resize_filter.deleteLater()

        return unobserve


def qt_after(ms: int, callback: Callable[[], None]) -> QTimer:
    # Parented to the application so Qt owns the timer while it is pending.
    timer = QTimer(QCoreApplication.instance())
    timer.setSingleShot(True)

    def _fire() -> None:
        try:
            callback()
        finally:
            timer.deleteLater()

    timer.timeout.connect(_fire)
    timer.start(max(0, int(ms)))
    return timer


def qt_after_cancel(handle: object) -> None:
    if isinstance(handle, QTimer):
        handle.stop()
        handle.deleteLater()


def qt_host_preferences() -> HostPreferences:
    """Host preferences with the platform colour scheme when a Qt GUI application is running."""

    prefs = detect_host_preferences()
    if env_color_scheme_set():
        return prefs
    app = QGuiApplication.instance()
    if app is None:
        return prefs
    style_hints = app.styleHints()
    color_scheme = getattr(style_hints, "colorScheme", None)
    if color_scheme is None:
        return prefs
    scheme = color_scheme()
    if scheme == Qt.ColorScheme.Dark:
        return prefs.with_color_scheme("dark")
    if scheme == Qt.ColorScheme.Light:
        return prefs.with_color_scheme("light")
    return prefs


def create_preview_match_media(
    widget: QWidget,
    *,
    settings: Optional[PreviewSettings] = None,
    settings_path: Optional[Path] = None,
    overrides: Optional[Mapping[str, object]] = None,
) -> PreviewMatchMedia:
    """Create a matchMedia emulation scoped to ``widget``'s size."""

    if settings is None and settings_path is not None:
        settings = load_preview_settings(settings_path)
    return PreviewMatchMedia(
        WidgetViewportProvider(widget),
        after=qt_after,
        after_cancel=qt_after_cancel,
        overrides=overrides,
        settings=settings,
        host_preferences=qt_host_preferences,
    )
