"""Detection of requested packages absent from the resolved set."""

from typing import Iterable, Set

from versioning.models import Coordinate
from versioning.parser import group_artifact_key


def find_missing(requested: Iterable[Coordinate], final: Iterable[Coordinate]) -> Set[Coordinate]:
    """Requested coordinates whose ``group:artifact`` is not in ``final``.

    The original requested coordinate is returned since nothing was resolved
    for it. Incomplete requested coordinates are ignored.
    """
    found = {group_artifact_key(c) for c in final if c.is_complete}
    return {
        coordinate
        for coordinate in requested
        if coordinate.is_complete and group_artifact_key(coordinate) not in found
    }
