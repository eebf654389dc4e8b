"""Two-phase artifact lookup with fallback-classifier retry.

Repository index metadata frequently omits secondary packaging formats, so
packages are first looked up normally and only the misses are looked up again
under the fallback classifier. Forcing the classifier on every package would
break packages that only exist under the default one.
"""
from __future__ import annotations

import logging
from typing import Iterable, Protocol, Sequence, Set

from constants import Constants
from common.logging_utils import extra_context, is_debug_enabled
from versioning.models import Coordinate, RepoLocation, ResolvedArtifact
from versioning.parser import versionless_key, versionless_keys

logger = logging.getLogger(__name__)


class RepositoryClient(Protocol):
    """Resolves coordinates against an ordered list of repositories.

    Lenient: coordinates that cannot be resolved are absent from the result,
    they never raise.
    """

    def lookup(
        self, coordinates: Iterable[Coordinate], repos: Sequence[RepoLocation]
    ) -> Set[ResolvedArtifact]:
        ...


def complete_coordinates(coordinates: Iterable[Coordinate]) -> Set[Coordinate]:
    """Drop coordinates without both group and artifact."""
    complete = set()
    for coordinate in coordinates:
        if coordinate.is_complete:
            complete.add(coordinate)
        else:
            logger.debug("Ignoring incomplete package specifier %s", coordinate)
    return complete


def fallback_requests(requested: Iterable[Coordinate], resolved: Iterable[ResolvedArtifact]) -> Set[Coordinate]:
    """Coordinates to retry under the fallback classifier.

    A requested coordinate is retried when no resolved artifact shares its
    versionless key and it does not already name a classifier.
    """
    found = versionless_keys(resolved)
    retries = set()
    for coordinate in complete_coordinates(requested):
        if versionless_key(coordinate) in found or coordinate.classifier:
            continue
        retries.add(coordinate.with_classifier(Constants.FALLBACK_CLASSIFIER))
    return retries


def resolve(
    requested: Iterable[Coordinate],
    repos: Sequence[RepoLocation],
    client: RepositoryClient,
) -> Set[ResolvedArtifact]:
    """Resolve ``requested`` in two phases and return the union of both.

    The union is not deduplicated by versionless key: a package may be present
    both under its default type and under the fallback classifier.
    """
    requested = complete_coordinates(requested)
    if not requested:
        return set()

    phase1 = set(client.lookup(requested, repos))
    logger.info("Resolved %d artifacts for %d requested packages", len(phase1), len(requested))

    retries = fallback_requests(requested, phase1)
    if not retries:
        return phase1

    for coordinate in sorted(retries):
        logger.info("Package %s not found, searching for %s", coordinate.with_classifier(None), coordinate)
    phase2 = set(client.lookup(retries, repos))
    if is_debug_enabled(logger):
        logger.debug(
            "Fallback classifier lookup complete",
            extra=extra_context(
                event="decision",
                component="orchestrator",
                action="fallback_lookup",
                requested=len(retries),
                resolved=len(phase2),
            )
        )
    return phase1 | phase2
