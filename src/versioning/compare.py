"""Numeric, segment-wise ordering of Maven version strings.

``1.10.0`` sorts after ``1.2.0`` and ``1.2.0`` after ``1.2``. Qualifiers after
a dash are ignored (``26.0.0-beta1`` compares like ``26.0.0``), which makes the
comparator a weak order; ``max_version`` breaks the remaining ties on the
plain string so selection never depends on input order.
"""

import re
from functools import cmp_to_key
from typing import Iterable, List

# Segment heads are plain ASCII digits.
_SEGMENT_HEAD = re.compile(r"[0-9]+")


class MalformedVersionError(ValueError):
    """A version string has a segment that does not start with an integer."""

    def __init__(self, version: str):
        super().__init__(f"Malformed version string: {version!r}")
        self.version = version


def _tokens(version: str) -> List[int]:
    tokens = []
    for segment in version.split("."):
        head = segment.split("-")[0]
        if not _SEGMENT_HEAD.fullmatch(head):
            raise MalformedVersionError(version)
        tokens.append(int(head))
    return tokens


def compare_versions(a: str, b: str) -> int:
    """Return -1, 0 or 1 as ``a`` is older than, equal to or newer than ``b``.

    Raises:
        MalformedVersionError: If either version cannot be tokenized.
    """
    left, right = _tokens(a), _tokens(b)
    for x, y in zip(left, right):
        if x != y:
            return -1 if x < y else 1
    if len(left) == len(right):
        return 0
    return -1 if len(left) < len(right) else 1


def sort_version_strings(versions: Iterable[str]) -> List[str]:
    """Sort versions oldest to most recent; equal versions keep input order."""
    return sorted(versions, key=cmp_to_key(compare_versions))


def _total_order(a: str, b: str) -> int:
    result = compare_versions(a, b)
    if result:
        return result
    return (a > b) - (a < b)


def max_version(versions: Iterable[str]) -> str:
    """Most recent version; ties go to the lexicographically greatest string.

    Raises:
        ValueError: If ``versions`` is empty.
        MalformedVersionError: If any version cannot be tokenized.
    """
    candidates = list(versions)
    if not candidates:
        raise ValueError("max_version() requires at least one version")
    return max(candidates, key=cmp_to_key(_total_order))
