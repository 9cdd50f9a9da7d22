"""Pure evaluation of parsed media queries against a virtual viewport."""
from __future__ import annotations

from typing import List, Mapping, Optional

from preview_media.host_preferences import DEFAULT_HOST_PREFERENCES, HostPreferences
from preview_media.query_parser import AndNode, FeatureNode, MediaQueryNode, NotNode, OrNode, ratio

ASPECT_RATIO_EPSILON = 0.01

STATIC_FEATURES = (
    "prefers-color-scheme",
    "prefers-reduced-motion",
    "prefers-contrast",
    "hover",
    "pointer",
)


def _compare(actual: float, operator: str, expected: float) -> bool:
    if operator == "min":
        return actual >= expected
    if operator == "max":
        return actual <= expected
    return actual == expected


def _evaluate_static(node: FeatureNode, overrides: Mapping[str, str], host: HostPreferences) -> bool:
    override_value = overrides.get(node.name)
    if override_value is not None:
        return override_value == node.value

    if node.name == "prefers-color-scheme":
        return node.value == host.color_scheme
    if node.name == "prefers-reduced-motion":
        return host.reduced_motion if node.value == "reduce" else not host.reduced_motion
    if node.name == "prefers-contrast":
        return node.value == host.contrast
    # Without an override assume a desktop: hover capable, fine pointer.
    if node.name == "hover":
        return node.value == "hover"
    if node.name == "pointer":
        return node.value == "fine"
    return False


def _evaluate_feature(
    node: FeatureNode,
    width: float,
    height: float,
    overrides: Mapping[str, str],
    host: HostPreferences,
) -> bool:
    if node.name == "width":
        return _compare(width, node.operator, float(node.value))
    if node.name == "height":
        return _compare(height, node.operator, float(node.value))
    if node.name == "orientation":
        portrait = height >= width
        return portrait if node.value == "portrait" else not portrait
    if node.name == "aspect-ratio":
        current = ratio(width, height)
        expected = float(node.value)
        if node.operator == "exact":
            return abs(current - expected) < ASPECT_RATIO_EPSILON
        return _compare(current, node.operator, expected)
    if node.name in STATIC_FEATURES:
        return _evaluate_static(node, overrides, host)
    return False


def _chain(node: MediaQueryNode, kind: type) -> List[MediaQueryNode]:
    # Folded lists nest to the left, one level per operand.
    operands: List[MediaQueryNode] = []
    while isinstance(node, kind):
        operands.append(node.right)
        node = node.left
    operands.append(node)
    operands.reverse()
    return operands


def evaluate_query(
    node: MediaQueryNode,
    width: float,
    height: float,
    overrides: Optional[Mapping[str, str]] = None,
    host: Optional[HostPreferences] = None,
) -> bool:
    """Return whether ``node`` matches a ``width`` x ``height`` viewport."""

    active_overrides = overrides if overrides is not None else {}
    host_prefs = host if host is not None else DEFAULT_HOST_PREFERENCES
    negate = False
    while isinstance(node, NotNode):
        negate = not negate
        node = node.operand
    if isinstance(node, AndNode):
        result = all(evaluate_query(part, width, height, active_overrides, host_prefs) for part in _chain(node, AndNode))
    elif isinstance(node, OrNode):
        result = any(evaluate_query(part, width, height, active_overrides, host_prefs) for part in _chain(node, OrNode))
    elif isinstance(node, FeatureNode):
        result = _evaluate_feature(node, width, height, active_overrides, host_prefs)
    else:
        result = False
    return result != negate
