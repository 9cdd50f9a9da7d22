"""MediaQueryList-like handle bound to a preview viewport."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, List, Optional

from preview_media.query_parser import MediaQueryNode


@dataclass(frozen=True)
class MediaQueryChangeEvent:
    matches: bool
    media: str


ChangeListener = Callable[[MediaQueryChangeEvent], None]


class PreviewMediaQueryList:
    """Live result of one media query against a preview viewport.

    ``matches`` is read-only to callers; only the owning
    :class:`~preview_media.preview_match_media.PreviewMatchMedia` updates it.
    """

    def __init__(self, media: str, predicate: Optional[MediaQueryNode], matches: bool) -> None:
        self._media = media
        self._predicate = predicate
        self._matches = bool(matches)
        self._listeners: List[ChangeListener] = []
        self._detached = False
        self.onchange: Optional[ChangeListener] = None

    def __repr__(self) -> str:
        return f"PreviewMediaQueryList(media={self._media!r}, matches={self._matches})"

    @property
    def media(self) -> str:
        return self._media

    @property
    def matches(self) -> bool:
        return self._matches

    @property
    def predicate(self) -> Optional[MediaQueryNode]:
        return self._predicate

    @property
    def supported(self) -> bool:
        return self._predicate is not None

    @property
    def detached(self) -> bool:
        return self._detached

    def add_listener(self, listener: ChangeListener) -> None:
        if listener is None:
            return
        if listener not in self._listeners:
            self._listeners.append(listener)

    def remove_listener(self, listener: ChangeListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def add_event_listener(self, event_type: str, listener: ChangeListener) -> None:
        if event_type == "change":
            self.add_listener(listener)

    def remove_event_listener(self, event_type: str, listener: ChangeListener) -> None:
        if event_type == "change":
            self.remove_listener(listener)

    def listeners(self) -> List[ChangeListener]:
        return list(self._listeners)
