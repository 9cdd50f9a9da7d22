"""Media query parser producing an immutable predicate tree.

Supported grammar, lowest precedence first:

* comma separated query lists (OR)
* `` and `` conjunctions
* a ``not `` prefix, bound to the clause immediately following it
* single parenthesised feature clauses such as ``(min-width: 600px)``

Because commas are split before ``and`` and ``and`` before ``not``, the
string ``not (a) and (b)`` parses as ``and(not(a), b)``.
"""
from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Callable, List, Optional, Union

from preview_media.debug_config import DEBUG_CONFIG_ENABLED
from preview_media.logging_utils import get_logger

_LOGGER = get_logger("Parser", debug_enabled=DEBUG_CONFIG_ENABLED)


@dataclass(frozen=True)
class FeatureNode:
    name: str
    operator: str
    value: Union[float, str]


@dataclass(frozen=True)
class AndNode:
    left: "MediaQueryNode"
    right: "MediaQueryNode"


@dataclass(frozen=True)
class OrNode:
    left: "MediaQueryNode"
    right: "MediaQueryNode"


@dataclass(frozen=True)
class NotNode:
    operand: "MediaQueryNode"


MediaQueryNode = Union[FeatureNode, AndNode, OrNode, NotNode]


class MediaQuerySyntaxError(ValueError):
    """Raised internally when a fragment of a media query cannot be parsed."""

    def __init__(self, fragment: str, reason: str) -> None:
        super().__init__(f"{reason}: {fragment!r}")
        self.fragment = fragment
        self.reason = reason


_MEDIA_TYPE_AND = re.compile(r"^(screen|all|print)\s+and\s+", re.IGNORECASE)
_MEDIA_TYPE_ONLY = re.compile(r"^(screen|all|print)$", re.IGNORECASE)
_NOT_PREFIX = re.compile(r"^not\s+", re.IGNORECASE)
_CLAUSE = re.compile(r"^\(([^)]+)\)$")

_DIMENSION = re.compile(r"^(min-|max-)?(width|height)\s*:\s*([+-]?\d*\.?\d+)(px|em|rem)?$", re.IGNORECASE | re.ASCII)
_ASPECT_RATIO = re.compile(r"^(min-|max-)?aspect-ratio\s*:\s*(\d+)\s*/\s*(\d+)$", re.IGNORECASE | re.ASCII)
_KEYWORD_FEATURES = {
    "orientation": re.compile(r"^orientation\s*:\s*(portrait|landscape)$", re.IGNORECASE),
    "hover": re.compile(r"^hover\s*:\s*(none|hover)$", re.IGNORECASE),
    "pointer": re.compile(r"^pointer\s*:\s*(none|coarse|fine)$", re.IGNORECASE),
    "prefers-color-scheme": re.compile(r"^prefers-color-scheme\s*:\s*(light|dark)$", re.IGNORECASE),
    "prefers-reduced-motion": re.compile(r"^prefers-reduced-motion\s*:\s*(reduce|no-preference)$", re.IGNORECASE),
    "prefers-contrast": re.compile(r"^prefers-contrast\s*:\s*(more|less|no-preference)$", re.IGNORECASE),
}


def split_top_level(text: str, delimiter: str, *, ignore_case: bool = False) -> List[str]:
    """Split ``text`` on ``delimiter`` outside of any parentheses.

    A trailing empty segment is dropped; interior and leading empty segments
    are kept so callers can reject them.
    """
    haystack = text.lower() if ignore_case else text
    needle = delimiter.lower() if ignore_case else delimiter
    results: List[str] = []
    depth = 0
    current: List[str] = []
    index = 0
    while index < len(text):
        char = text[index]
        if char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
        elif depth == 0 and haystack.startswith(needle, index):
            results.append("".join(current))
            current = []
            index += len(delimiter)
            continue
        current.append(char)
        index += 1
    if current:
        results.append("".join(current))
    return results


def ratio(numerator: float, denominator: float) -> float:
    """Divide without raising: x/0 is a signed infinity and 0/0 is nan."""
    if denominator == 0:
        if numerator == 0:
            return math.nan
        return math.copysign(math.inf, numerator)
    return numerator / denominator


def _operator_for(prefix: Optional[str]) -> str:
    if not prefix:
        return "exact"
    return "min" if prefix.lower() == "min-" else "max"


def _fold(parts: List[str], combine: Callable[[MediaQueryNode, MediaQueryNode], MediaQueryNode]) -> MediaQueryNode:
    # Parse every part before folding so the first failure aborts the whole query.
    nodes = [_parse(part.strip()) for part in parts]
    result = nodes[0]
    for node in nodes[1:]:
        result = combine(result, node)
    return result


def _parse_feature(content: str) -> FeatureNode:
    match = _DIMENSION.match(content)
    if match:
        prefix, dimension, value_text, _unit = match.groups()
        return FeatureNode(dimension.lower(), _operator_for(prefix), float(value_text))

    match = _ASPECT_RATIO.match(content)
    if match:
        prefix, numerator, denominator = match.groups()
        return FeatureNode("aspect-ratio", _operator_for(prefix), ratio(float(numerator), float(denominator)))

    for name, pattern in _KEYWORD_FEATURES.items():
        match = pattern.match(content)
        if match:
            return FeatureNode(name, "exact", match.group(1).lower())

    raise MediaQuerySyntaxError(content, "Unsupported media query feature")


def _parse(text: str) -> MediaQueryNode:
    trimmed = text.strip()
    stripped = _MEDIA_TYPE_ONLY.sub("", _MEDIA_TYPE_AND.sub("", trimmed))
    working = stripped or trimmed

    parts = split_top_level(working, ",")
    if parts and parts != [working]:
        return _fold(parts, OrNode)

    parts = split_top_level(working, " and ", ignore_case=True)
    if parts and parts != [working]:
        return _fold(parts, AndNode)

    # Peel stacked "not" prefixes iteratively; nesting depth is unbounded.
    negations = 0
    match = _NOT_PREFIX.match(working)
    while match:
        negations += 1
        working = working[match.end():]
        match = _NOT_PREFIX.match(working)
    if negations:
        node = _parse(working)
        for _ in range(negations):
            node = NotNode(node)
        return node

    clause = _CLAUSE.match(working)
    if not clause:
        if not working:
            raise MediaQuerySyntaxError(working, "Empty media query")
        raise MediaQuerySyntaxError(working, "Expected a parenthesised media feature")
    return _parse_feature(clause.group(1).strip())


def parse_media_query(query: str) -> Optional[MediaQueryNode]:
    """Parse ``query`` into a predicate tree, or return None when unsupported.

    Never raises; a single warning naming the offending fragment is logged
    for queries that cannot be parsed.
    """

    try:
        return _parse(query)
    except MediaQuerySyntaxError as exc:
        _LOGGER.warning("Unsupported media query %r: %s %r", query, exc.reason, exc.fragment)
        return None
