from __future__ import annotations

from typing import Callable

from preview_media.debug_config import DEBUG_CONFIG_ENABLED
from preview_media.logging_utils import get_logger
from preview_media.preview_match_media import PreviewMatchMedia
from preview_media.query_handle import MediaQueryChangeEvent

_LOGGER = get_logger("Binding", debug_enabled=DEBUG_CONFIG_ENABLED)


def _noop() -> None:
    return None


def bind_query(
    engine: PreviewMatchMedia,
    query: str,
    on_value: Callable[[bool], None],
) -> Callable[[], None]:
    """Push the current match value of ``query`` to ``on_value`` and keep it in sync.

    Returns a callable that stops forwarding changes.
    """

    try:
        handle = engine.match_media(query)
    except Exception:
        _LOGGER.exception("Failed to register preview media query %r", query)
        on_value(False)
        return _noop

    on_value(handle.matches)

    def _forward(event: MediaQueryChangeEvent) -> None:
        on_value(event.matches)

    handle.add_event_listener("change", _forward)

    def unbind() -> None:
        handle.remove_event_listener("change", _forward)

    return unbind
