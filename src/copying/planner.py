"""Copy planning, execution and report assembly."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, List, Sequence, Tuple

from constants import Constants
from versioning.models import Coordinate, CopyPlanEntry, Report, ResolvedArtifact
from versioning.parser import versionless_key, versionless_keys
from .transfer import FileTransfer

logger = logging.getLogger(__name__)


def target_filename(artifact: ResolvedArtifact) -> str:
    """``<group>.<artifact>-<version>.<extension>`` for ``artifact``.

    Fallback-classifier artifacts take the default extension, so a package
    found only through the fallback lookup is indistinguishable on disk.
    """
    extension = artifact.type
    if extension == Constants.FALLBACK_CLASSIFIER:
        extension = Constants.FALLBACK_EXTENSION
    coordinate = artifact.coordinate
    return f"{versionless_key(coordinate)}-{coordinate.version}.{extension}"


class CopyPlanner:
    """Maps resolved artifacts onto unique files in a destination directory."""

    def __init__(self, transfer: FileTransfer):
        self._transfer = transfer

    def plan(self, artifacts: Iterable[ResolvedArtifact], destination: Path) -> List[CopyPlanEntry]:
        """One entry per distinct target filename, sorted by filename.

        When two artifacts map to the same filename (a package resolved under
        both its default type and the fallback classifier) the default-type
        artifact is kept.
        """
        by_filename = {}
        ordered = sorted(
            artifacts,
            key=lambda a: (a.type == Constants.FALLBACK_CLASSIFIER, a.package),
        )
        for artifact in ordered:
            filename = target_filename(artifact)
            if filename in by_filename:
                logger.debug("Skipping %s, %s is already planned", artifact.package, filename)
                continue
            by_filename[filename] = CopyPlanEntry(
                artifact=artifact,
                target_filename=filename,
                target_path=destination / filename,
            )
        return [by_filename[name] for name in sorted(by_filename)]

    def execute(self, entries: Sequence[CopyPlanEntry]) -> List[CopyPlanEntry]:
        """Copy each planned entry; return the entries that are now in place.

        An existing destination file counts as copied without a transfer.

        Raises:
            TransferError: On the first failed transfer.
        """
        copied = []
        for entry in entries:
            if self._transfer.exists(entry.target_path):
                logger.debug("%s already exists, skipping copy", entry.target_path)
            else:
                logger.info("Copy %s (%s) to %s", entry.artifact.package,
                            entry.artifact.location, entry.target_filename)
                self._transfer.copy(entry.artifact, entry.target_path)
            copied.append(entry)
        return copied


def build_report(
    copied: Iterable[CopyPlanEntry],
    copy_requests: Iterable[Coordinate],
    modifications: Iterable[Tuple[str, str]],
) -> Report:
    """Assemble the sorted copied / missing / modified report.

    A copy request is missing when no copied artifact shares its versionless
    key, so a package is never reported both copied and missing.
    """
    copied = list(copied)
    found = versionless_keys(entry.artifact for entry in copied)
    missing = {
        coordinate
        for coordinate in copy_requests
        if coordinate.is_complete and versionless_key(coordinate) not in found
    }
    return Report(
        copied=tuple(sorted(entry.target_filename for entry in copied)),
        missing=tuple(sorted(missing)),
        modifications=tuple(sorted(set(modifications))),
    )
