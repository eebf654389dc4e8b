"""Selection of a concrete version from Maven ranges and Gradle dynamic versions.

Supports exact versions, ``latest``/empty, Gradle prefix versions
(``26.0.+``, ``+``) and Maven bracket ranges (``[1.0,2.0)``, ``(,1.5]``,
``[1.2]`` and unions such as ``[1.0,1.2),[1.5,)``).
"""

from typing import List, Optional

from .compare import MalformedVersionError, compare_versions, max_version


def is_dynamic(spec: Optional[str]) -> bool:
    """True when ``spec`` must be resolved against the published versions."""
    if not spec or spec.lower() in ("latest", "latest.release", "release"):
        return True
    return spec.endswith("+") or spec[0] in "[("


def pick_version(spec: Optional[str], candidates: List[str]) -> Optional[str]:
    """Pick the newest candidate satisfying ``spec``; None when nothing matches.

    Candidates that cannot be tokenized are ignored. ``-SNAPSHOT`` versions are
    only chosen when no release version matches.
    """
    usable = []
    for candidate in candidates:
        try:
            compare_versions(candidate, candidate)
        except MalformedVersionError:
            continue
        usable.append(candidate)

    if not is_dynamic(spec):
        return spec if spec in candidates else None

    if not spec or spec.lower() in ("latest", "latest.release", "release"):
        matching = usable
    elif spec.endswith("+"):
        prefix = spec[:-1]
        matching = [v for v in usable if v.startswith(prefix)]
    else:
        matching = _filter_by_range(spec, usable)

    if not matching:
        return None
    releases = [v for v in matching if not v.endswith("-SNAPSHOT")]
    return max_version(releases or matching)


def _filter_by_range(range_spec: str, candidates: List[str]) -> List[str]:
    """Filter candidates by Maven version range specification."""
    range_spec = range_spec.strip()
    matching = set()
    for single in _split_ranges(range_spec):
        matching.update(_parse_bracket_range(single, candidates))
    return [v for v in candidates if v in matching]


def _split_ranges(range_spec: str) -> List[str]:
    """Split a union like ``[1.0,2.0),[3.0,4.0]`` into single ranges."""
    ranges = []
    current = ""
    depth = 0
    for char in range_spec:
        if char in "[(":
            if depth == 0:
                current = ""
            depth += 1
            current += char
        elif char in "])":
            depth -= 1
            current += char
            if depth == 0:
                ranges.append(current)
                current = ""
        elif depth > 0:
            current += char
    return ranges


def _parse_bracket_range(range_spec: str, candidates: List[str]) -> List[str]:
    """Parse Maven bracket range notation like [1.0,2.0), (1.0,], or [1.2]."""
    inner = range_spec[1:-1] if len(range_spec) >= 2 else ""
    parts = inner.split(",")

    # Single-element bracket [1.2] means exactly that version.
    if len(parts) == 1:
        base = parts[0].strip()
        return [v for v in candidates if base and compare_versions(v, base) == 0]

    lower, upper = parts[0].strip(), parts[1].strip()
    lower_inclusive = range_spec.startswith("[")
    upper_inclusive = range_spec.endswith("]")

    matching = []
    for v in candidates:
        if lower:
            cmp = compare_versions(v, lower)
            if cmp < 0 or (cmp == 0 and not lower_inclusive):
                continue
        if upper:
            cmp = compare_versions(v, upper)
            if cmp > 0 or (cmp == 0 and not upper_inclusive):
                continue
        matching.append(v)
    return matching
