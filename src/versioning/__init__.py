"""Coordinate model and version ordering."""

from .compare import MalformedVersionError, compare_versions, max_version, sort_version_strings
from .models import (
    Coordinate,
    CopyPlanEntry,
    LockGroup,
    ReconciliationResult,
    RepoLocation,
    Report,
    ResolvedArtifact,
)
from .parser import group_artifact_key, parse_coordinate, versionless_key

__all__ = [
    "Coordinate",
    "CopyPlanEntry",
    "LockGroup",
    "MalformedVersionError",
    "ReconciliationResult",
    "RepoLocation",
    "Report",
    "ResolvedArtifact",
    "compare_versions",
    "group_artifact_key",
    "max_version",
    "parse_coordinate",
    "sort_version_strings",
    "versionless_key",
]
