from __future__ import annotations

from typing import Callable, List, Optional, Tuple

from preview_media.debug_config import DEBUG_CONFIG_ENABLED
from preview_media.logging_utils import get_logger

AfterFn = Callable[[int, Callable[[], None]], object]
AfterCancelFn = Callable[[object], None]

_LOGGER = get_logger("Notifier", debug_enabled=DEBUG_CONFIG_ENABLED)


class FrameCoalescer:
    """Collapses bursts of size signals into at most one callback per frame."""

    def __init__(
        self,
        callback: Callable[[], None],
        *,
        after: AfterFn,
        after_cancel: AfterCancelFn,
        frame_interval_ms: int = 16,
    ) -> None:
        self._callback = callback
        self._after = after
        self._after_cancel = after_cancel
        self.frame_interval_ms = max(1, int(frame_interval_ms))
        self._handle: object | None = None
        self.coalesced = 0

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def request(self) -> bool:
        """Schedule the callback for the next frame; returns False when one is already pending."""
        if self._handle is not None:
            self.coalesced += 1
            return False
        self._handle = self._after(self.frame_interval_ms, self._run)
        return True

    def cancel(self) -> None:
        handle = self._handle
        self._handle = None
        if handle is None:
            return
        try:
            self._after_cancel(handle)
        except Exception as exc:
            _LOGGER.debug("Failed to cancel pending frame %r: %s", handle, exc)

    def _run(self) -> None:
        if self._handle is None:
            return
        self._handle = None
        if self.coalesced:
            _LOGGER.debug("Frame sweep running after %d coalesced size signals", self.coalesced)
            self.coalesced = 0
        self._callback()


class ManualFrameScheduler:
    """`after`/`after_cancel` pair driven by explicit frame flushes instead of an event loop."""

    def __init__(self) -> None:
        self.scheduled: List[Tuple[int, int, Callable[[], None]]] = []
        self.cancelled: List[int] = []
        self._next_handle = 0

    def after(self, ms: int, callback: Callable[[], None]) -> int:
        self._next_handle += 1
        self.scheduled.append((self._next_handle, ms, callback))
        return self._next_handle

    def cancel(self, handle: object) -> None:
        if not isinstance(handle, int):
            return
        self.cancelled.append(handle)
        self.scheduled = [entry for entry in self.scheduled if entry[0] != handle]

    @property
    def pending(self) -> int:
        return len(self.scheduled)

    def flush(self, limit: Optional[int] = None) -> int:
        """Run due callbacks in scheduling order; callbacks scheduled while flushing wait for the next flush."""
        due = self.scheduled if limit is None else self.scheduled[:limit]
        self.scheduled = self.scheduled[len(due):]
        for _handle, _ms, callback in due:
            callback()
        return len(due)
