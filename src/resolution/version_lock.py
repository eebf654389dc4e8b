"""Version locking of resolved artifacts by regular-expression lock groups.

Packages released as a set (e.g. Google Play services, Android support
libraries) break when mixed across revisions. Every resolved artifact that
belongs to a lock group is pinned to the most recent version found in that
group, and each rewrite is recorded so it can be reported to the user.
"""
from __future__ import annotations

import logging
import re
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

from versioning.compare import max_version
from versioning.models import Coordinate, LockGroup, ReconciliationResult, ResolvedArtifact

logger = logging.getLogger(__name__)


def build_lock_groups(entries: Iterable[Mapping[str, Any]]) -> List[LockGroup]:
    """Compile ``{"pattern": ..., "exclude": ...}`` mappings into LockGroups.

    Raises:
        ValueError: If an entry has no pattern or a pattern does not compile.
    """
    groups = []
    for index, entry in enumerate(entries):
        pattern = entry.get("pattern") if isinstance(entry, Mapping) else None
        if not pattern:
            raise ValueError(f"version lock #{index + 1} has no pattern")
        exclude = entry.get("exclude")
        try:
            groups.append(LockGroup(
                pattern=re.compile(pattern),
                exclude=re.compile(exclude) if exclude else None,
            ))
        except re.error as exc:
            raise ValueError(f"version lock #{index + 1} has an invalid regular expression: {exc}") from exc
    return groups


def lock_group_for(module_string: str, groups: Sequence[LockGroup]) -> Optional[LockGroup]:
    """Return the single lock group ``module_string`` belongs to, if any.

    A module matching more than one group's pattern belongs to none of them;
    overlapping patterns indicate a configuration conflict rather than a
    locking candidate. A module matching its group's exclude pattern is not
    locked either.
    """
    matches = [g for g in groups if g.pattern.fullmatch(module_string)]
    if len(matches) != 1:
        if len(matches) > 1:
            logger.warning(
                "%s matches %d version lock groups (%s), leaving it unlocked",
                module_string, len(matches), ", ".join(str(g) for g in matches),
            )
        return None
    group = matches[0]
    if group.exclude is not None and group.exclude.fullmatch(module_string):
        return None
    return group


def _as_package(artifact: ResolvedArtifact, version: Optional[str] = None) -> Coordinate:
    coordinate = artifact.coordinate.with_classifier(artifact.type or None)
    if version is not None:
        coordinate = coordinate.with_version(version)
    return coordinate


def reconcile(resolved: Iterable[ResolvedArtifact], lock_groups: Sequence[LockGroup]) -> ReconciliationResult:
    """Pin every lock group's members to the group's most recent version.

    Each input artifact contributes exactly one coordinate to the result:
    unchanged when it is not locked, rewritten to the group maximum when it is.
    Modifications are recorded per group in declared order, members sorted by
    package specifier.

    Raises:
        MalformedVersionError: If a locked member's version cannot be compared.
    """
    result = ReconciliationResult()
    members: Dict[int, List[ResolvedArtifact]] = {id(g): [] for g in lock_groups}

    for artifact in sorted(resolved, key=lambda a: a.package):
        group = lock_group_for(artifact.module_string, lock_groups)
        if group is None:
            result.coordinates.add(_as_package(artifact))
            continue
        logger.info("Version locked %s in group %s", artifact.module_string, group)
        members[id(group)].append(artifact)

    for group in lock_groups:
        artifacts = members[id(group)]
        if not artifacts:
            continue
        available = sorted({a.coordinate.version for a in artifacts if a.coordinate.version})
        if not available:
            result.coordinates.update(_as_package(a) for a in artifacts)
            continue
        pinned = max_version(available)
        logger.info("Max version %s found in %s for group %s", pinned, available, group)
        for artifact in artifacts:
            original = artifact.module_string
            rewritten = artifact.coordinate.with_version(pinned).module_string
            # The same module may be resolved under two types (e.g. aar and srcaar).
            if original != rewritten and (original, rewritten) not in result.modifications:
                result.modifications.append((original, rewritten))
            result.coordinates.add(_as_package(artifact, pinned))
    return result
