"""Media query evaluation against a virtual preview viewport."""

from preview_media.change_notifier import FrameCoalescer, ManualFrameScheduler
from preview_media.feature_overrides import FeatureOverrideStore, load_overrides
from preview_media.host_preferences import HostPreferences, detect_host_preferences
from preview_media.preview_match_media import PreviewMatchMedia
from preview_media.query_binding import bind_query
from preview_media.query_evaluator import evaluate_query
from preview_media.query_handle import MediaQueryChangeEvent, PreviewMediaQueryList
from preview_media.query_parser import AndNode, FeatureNode, NotNode, OrNode, parse_media_query
from preview_media.viewport import StaticViewport, ViewportProvider

__all__ = [
    "AndNode",
    "FeatureNode",
    "FeatureOverrideStore",
    "FrameCoalescer",
    "HostPreferences",
    "ManualFrameScheduler",
    "MediaQueryChangeEvent",
    "NotNode",
    "OrNode",
    "PreviewMatchMedia",
    "PreviewMediaQueryList",
    "StaticViewport",
    "ViewportProvider",
    "bind_query",
    "detect_host_preferences",
    "evaluate_query",
    "load_overrides",
    "parse_media_query",
]
