from preview_media.change_notifier import FrameCoalescer, ManualFrameScheduler


class FrameTimers:
    """Records frame requests so each test decides when a frame fires."""

    def __init__(self) -> None:
        self.requests: dict[str, tuple[int, object]] = {}
        self.cancelled: list[object] = []

    def after(self, ms: int, cb) -> str:
        handle = f"frame-{len(self.requests) + 1}"
        self.requests[handle] = (ms, cb)
        return handle

    def cancel(self, handle: object) -> None:
        self.cancelled.append(handle)

    def delay(self, handle: str) -> int:
        return self.requests[handle][0]

    def fire(self, handle: str) -> None:
        assert handle in self.requests, f"no frame {handle} was requested"
        self.requests[handle][1]()


def test_request_schedules_once_per_frame() -> None:
    timers = FrameTimers()
    calls: list[str] = []
    coalescer = FrameCoalescer(lambda: calls.append("sweep"), after=timers.after, after_cancel=timers.cancel)

    assert coalescer.request() is True
    assert coalescer.request() is False
    assert coalescer.request() is False
    assert len(timers.requests) == 1
    assert timers.delay("frame-1") == 16
    assert coalescer.coalesced == 2

    timers.fire("frame-1")
    assert calls == ["sweep"]
    assert coalescer.pending is False
    assert coalescer.coalesced == 0

    # A new signal after the frame ran schedules a fresh frame.
    assert coalescer.request() is True
    assert len(timers.requests) == 2


def test_cancel_drops_pending_frame() -> None:
    timers = FrameTimers()
    calls: list[str] = []
    coalescer = FrameCoalescer(
        lambda: calls.append("sweep"),
        after=timers.after,
        after_cancel=timers.cancel,
        frame_interval_ms=0,
    )
    coalescer.request()
    assert timers.delay("frame-1") == 1

    coalescer.cancel()
    assert timers.cancelled == ["frame-1"]
    assert coalescer.pending is False

    # A timer firing after cancellation is ignored.
    timers.fire("frame-1")
    assert calls == []

    coalescer.cancel()
    assert timers.cancelled == ["frame-1"]


def test_cancel_failure_is_swallowed() -> None:
    def broken_cancel(handle: object) -> None:
        raise RuntimeError("timer already gone")

    coalescer = FrameCoalescer(lambda: None, after=lambda _ms, _cb: "h", after_cancel=broken_cancel)
    coalescer.request()
    coalescer.cancel()
    assert coalescer.pending is False


def test_manual_scheduler_defers_callbacks_scheduled_during_flush() -> None:
    frames = ManualFrameScheduler()
    order: list[str] = []

    def first() -> None:
        order.append("first")
        frames.after(16, lambda: order.append("second"))

    frames.after(16, first)
    assert frames.flush() == 1
    assert order == ["first"]
    assert frames.pending == 1
    assert frames.flush() == 1
    assert order == ["first", "second"]


def test_manual_scheduler_cancel_removes_entry() -> None:
    frames = ManualFrameScheduler()
    handle = frames.after(16, lambda: None)
    frames.cancel(handle)
    frames.cancel("not-a-handle")
    assert frames.pending == 0
    assert frames.cancelled == [handle]
