"""Artifact resolution, version locking and gap detection."""

from .gaps import find_missing
from .orchestrator import RepositoryClient, resolve
from .pipeline import run_pipeline
from .version_lock import build_lock_groups, lock_group_for, reconcile

__all__ = [
    "RepositoryClient",
    "build_lock_groups",
    "find_missing",
    "lock_group_for",
    "reconcile",
    "resolve",
    "run_pipeline",
]
