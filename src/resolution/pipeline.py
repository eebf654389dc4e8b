"""End-to-end run: resolve, lock versions, detect gaps, copy and report."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Sequence

from common.logging_utils import extra_context, Timer
from copying.planner import CopyPlanner, build_report
from copying.transfer import FileTransfer
from versioning.models import LockGroup, RepoLocation, Report
from versioning.parser import parse_coordinate
from .gaps import find_missing
from .orchestrator import RepositoryClient, complete_coordinates, resolve
from .version_lock import reconcile

logger = logging.getLogger(__name__)


def run_pipeline(
    packages: Iterable[str],
    repos: Sequence[RepoLocation],
    target_dir: Path,
    lock_groups: Sequence[LockGroup],
    client: RepositoryClient,
    transfer: FileTransfer,
) -> Report:
    """Copy the artifacts for ``packages`` into ``target_dir``.

    Each stage returns its output to the next: two-phase resolution, version
    locking, gap detection against the request, a final lookup of the locked
    coordinates, then copy planning and execution.

    Raises:
        MalformedVersionError: If a locked version cannot be compared.
        TransferError: If copying an artifact fails.
    """
    requested = {parse_coordinate(p) for p in packages}
    with Timer() as timer:
        resolved = resolve(requested, repos, client)
        reconciled = reconcile(resolved, lock_groups)
        missing = find_missing(requested, reconciled.coordinates)
        for coordinate in sorted(missing):
            logger.info("No artifacts resolved for %s", coordinate)

        # Missing packages already failed both lookup phases; they only need
        # to be carried through to the report.
        copy_requests = reconciled.coordinates | missing
        artifacts = client.lookup(complete_coordinates(reconciled.coordinates), repos)

        planner = CopyPlanner(transfer)
        entries = planner.plan(artifacts, target_dir)
        copied = planner.execute(entries)
        report = build_report(copied, copy_requests, reconciled.modifications)

    logger.info(
        "Copied %d artifacts to %s",
        len(report.copied),
        target_dir,
        extra=extra_context(
            event="function_exit",
            component="pipeline",
            action="run_pipeline",
            copied=len(report.copied),
            missing=len(report.missing),
            modified=len(report.modifications),
            duration_ms=timer.duration_ms(),
        )
    )
    return report
