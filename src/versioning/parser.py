"""Coordinate parsing and key derivation."""

import logging
from typing import Iterable, List, Optional

from .models import Coordinate, ResolvedArtifact

logger = logging.getLogger(__name__)


def parse_coordinate(spec: str) -> Coordinate:
    """Parse ``group:artifact[:version][@classifier]`` into a Coordinate.

    The Gradle form ``group:artifact:version:classifier`` is accepted too.
    Never raises. A specifier with fewer than two components, or with more
    components than either form allows, yields an incomplete coordinate that
    is only useful for display; callers check ``Coordinate.is_complete``
    before using it for lookups or grouping.
    """
    spec = spec.strip()
    original = spec
    classifier: Optional[str] = None
    if "@" in spec:
        spec, _, classifier = spec.rpartition("@")
        classifier = classifier.strip() or None
    parts = [p.strip() for p in spec.split(":")]
    if len(parts) == 4 and classifier is None:
        # group:artifact:version:classifier
        classifier = parts.pop() or None
    if len(parts) > 3:
        logger.warning("Ignoring package specifier %s: too many components", original)
        return Coordinate(group=original)
    group = parts[0]
    artifact = parts[1] if len(parts) > 1 else ""
    version = parts[2] if len(parts) > 2 and parts[2] else None
    return Coordinate(group=group, artifact=artifact, version=version, classifier=classifier)


def versionless_key(coordinate: Coordinate) -> Optional[str]:
    """``group.artifact``, or None for an incomplete coordinate.

    This is the sole signal for "this logical package was resolved"; version
    and classifier are ignored.
    """
    if not coordinate.is_complete:
        return None
    return f"{coordinate.group}.{coordinate.artifact}"


def group_artifact_key(coordinate: Coordinate) -> Optional[str]:
    """``group:artifact``, or None for an incomplete coordinate."""
    if not coordinate.is_complete:
        return None
    return f"{coordinate.group}:{coordinate.artifact}"


def versionless_keys(artifacts: Iterable[ResolvedArtifact]) -> set:
    """Versionless keys of a collection of resolved artifacts."""
    return {versionless_key(a.coordinate) for a in artifacts}


def split_list(value: Optional[str], separator: str = ";") -> List[str]:
    """Split a separator-delimited list, dropping blanks."""
    if not value:
        return []
    return [item.strip() for item in value.split(separator) if item.strip()]
