"""Viewport provider protocol and an in-memory implementation."""
from __future__ import annotations

from typing import Callable, List, Protocol, Tuple

Size = Tuple[float, float]
SizeCallback = Callable[[], None]
Unobserve = Callable[[], None]


class ViewportProvider(Protocol):
    def get_size(self) -> Size:
        ...

    def observe(self, on_size_changed: SizeCallback) -> Unobserve:
        ...


class StaticViewport:
    """Viewport provider whose size is set explicitly, e.g. from the CLI or tests."""

    def __init__(self, width: float, height: float) -> None:
        self._size: Size = (float(width), float(height))
        self._observers: List[SizeCallback] = []

    def get_size(self) -> Size:
        return self._size

    def set_size(self, width: float, height: float) -> None:
        self._size = (float(width), float(height))
        for callback in list(self._observers):
            callback()

    def observe(self, on_size_changed: SizeCallback) -> Unobserve:
        self._observers.append(on_size_changed)

        def unobserve() -> None:
            if on_size_changed in self._observers:
                self._observers.remove(on_size_changed)

        return unobserve

    @property
    def observer_count(self) -> int:
        return len(self._observers)
