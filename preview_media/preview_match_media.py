"""Preview-scoped matchMedia emulation.

Evaluates media queries against the size reported by a viewport provider
(typically a preview widget) instead of the real screen.

Supported features:
  - (min-width / max-width / width), (min-height / max-height / height)
  - (orientation: portrait | landscape)
  - (aspect-ratio) with min/max
  - `not`, `and` and comma separated OR queries
  - prefers-color-scheme, prefers-reduced-motion, prefers-contrast (overrides or host preferences)
  - hover, pointer (overrides, else a desktop default)
"""
from __future__ import annotations

from typing import Callable, Dict, Mapping, Optional, Tuple

from preview_media.change_notifier import AfterCancelFn, AfterFn, FrameCoalescer
from preview_media.debug_config import DEBUG_CONFIG_ENABLED, PreviewSettings
from preview_media.feature_overrides import FeatureOverrideStore
from preview_media.host_preferences import HostPreferences, detect_host_preferences
from preview_media.logging_utils import get_logger
from preview_media.query_evaluator import evaluate_query
from preview_media.query_handle import MediaQueryChangeEvent, PreviewMediaQueryList
from preview_media.query_parser import MediaQueryNode, parse_media_query
from preview_media.viewport import Size, Unobserve, ViewportProvider

_LOGGER = get_logger("Engine", debug_enabled=DEBUG_CONFIG_ENABLED)

HostPreferencesFn = Callable[[], HostPreferences]


class PreviewMatchMedia:
    """Owns the parse cache, the handle registry, the override store and the size notifier."""

    def __init__(
        self,
        provider: ViewportProvider,
        *,
        after: AfterFn,
        after_cancel: AfterCancelFn,
        overrides: Optional[Mapping[str, object]] = None,
        settings: Optional[PreviewSettings] = None,
        host_preferences: HostPreferencesFn = detect_host_preferences,
    ) -> None:
        self._settings = settings or PreviewSettings()
        self._provider = provider
        self._host_preferences = host_preferences
        initial = dict(self._settings.overrides)
        if overrides:
            initial.update(overrides)
        self._overrides = FeatureOverrideStore(initial)
        self._parsed: Dict[str, Optional[MediaQueryNode]] = {}
        self._handles: Dict[str, PreviewMediaQueryList] = {}
        self._sweeping = False
        self._sweep_pending = False
        self._destroyed = False
        self._notifier = FrameCoalescer(
            self._run_frame_sweep,
            after=after,
            after_cancel=after_cancel,
            frame_interval_ms=self._settings.frame_interval_ms,
        )
        self._unobserve: Optional[Unobserve] = provider.observe(self._on_size_changed)

    @property
    def overrides(self) -> Mapping[str, str]:
        return self._overrides.current

    @property
    def destroyed(self) -> bool:
        return self._destroyed

    @property
    def frame_pending(self) -> bool:
        return self._notifier.pending

    @property
    def handle_count(self) -> int:
        return len(self._handles)

    # Public API -------------------------------------------------------------

    def match_media(self, query: str) -> PreviewMediaQueryList:
        """Return the live handle for ``query``, creating it on first use."""

        raw = query if isinstance(query, str) else str(query)
        existing = self._handles.get(raw)
        if existing is not None:
            return existing

        if raw in self._parsed:
            predicate = self._parsed[raw]
        else:
            predicate = parse_media_query(raw)
            self._parsed[raw] = predicate

        matches = False
        if predicate is not None:
            size = self._read_size()
            if size is not None:
                matches = self._evaluate(predicate, size, self._read_host_preferences())
        handle = PreviewMediaQueryList(raw, predicate, matches)
        self._handles[raw] = handle
        return handle

    def set_overrides(self, overrides: Optional[Mapping[str, object]]) -> None:
        """Replace the feature overrides and re-evaluate every handle immediately."""

        self._overrides.replace(overrides)
        self._sweep("overrides")

    def destroy(self) -> None:
        """Stop observing the viewport and drop every cached query."""

        if self._unobserve is not None:
            unobserve = self._unobserve
            self._unobserve = None
            try:
                unobserve()
            except Exception:
                _LOGGER.exception("Failed to stop observing the preview viewport")
        self._notifier.cancel()
        for handle in self._handles.values():
            handle._detached = True
        self._handles.clear()
        self._parsed.clear()
        self._sweep_pending = False
        if not self._destroyed:
            _LOGGER.debug("Preview matchMedia destroyed")
        self._destroyed = True

    # Sweeps -----------------------------------------------------------------

    def _on_size_changed(self) -> None:
        if self._unobserve is None:
            return
        self._notifier.request()

    def _run_frame_sweep(self) -> None:
        self._sweep("resize")

    def _sweep(self, reason: str) -> None:
        if self._sweeping:
            # Re-entrant request from a listener; the running sweep picks it up.
            self._sweep_pending = True
            return
        self._sweeping = True
        passes = 0
        try:
            while True:
                self._sweep_pending = False
                passes += 1
                self._sweep_once()
                if not self._sweep_pending:
                    break
                if passes > self._settings.max_follow_up_sweeps:
                    _LOGGER.warning(
                        "Media query sweep (%s) still requesting follow-ups after %d passes; stopping",
                        reason,
                        passes,
                    )
                    self._sweep_pending = False
                    break
        finally:
            self._sweeping = False

    def _sweep_once(self) -> None:
        size = self._read_size()
        if size is None:
            return
        host = self._read_host_preferences()
        for handle in list(self._handles.values()):
            self._update_handle(handle, size, host)

    def _update_handle(self, handle: PreviewMediaQueryList, size: Size, host: HostPreferences) -> None:
        predicate = handle.predicate
        if handle.detached or predicate is None:
            return
        new_matches = self._evaluate(predicate, size, host)
        if new_matches == handle.matches:
            return
        handle._matches = new_matches
        event = MediaQueryChangeEvent(matches=new_matches, media=handle.media)

        onchange = handle.onchange
        if onchange is not None:
            try:
                onchange(event)
            except Exception:
                _LOGGER.exception("Error in media query onchange for %r", handle.media)

        for listener in handle.listeners():
            try:
                listener(event)
            except Exception:
                _LOGGER.exception("Error in media query listener for %r", handle.media)

    # Helpers ----------------------------------------------------------------

    def _evaluate(self, predicate: MediaQueryNode, size: Size, host: HostPreferences) -> bool:
        width, height = size
        return evaluate_query(predicate, width, height, self._overrides.current, host)

    def _read_size(self) -> Optional[Tuple[float, float]]:
        try:
            width, height = self._provider.get_size()
        except Exception:
            _LOGGER.exception("Failed to read the preview viewport size")
            return None
        return float(width), float(height)

    def _read_host_preferences(self) -> HostPreferences:
        try:
            return self._host_preferences()
        except Exception:
            _LOGGER.exception("Failed to read host preferences; using defaults")
            return HostPreferences()
