"""Data models for package coordinates, resolution and copy reporting."""

from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import List, Optional, Pattern, Set, Tuple
from urllib.parse import urlsplit
from urllib.request import url2pathname


@dataclass(frozen=True, eq=False)
class Coordinate:
    """A Maven package identity: ``group:artifact[:version][@classifier]``.

    Equality and hashing use the full string form, so two coordinates are the
    same exactly when they print the same.
    """
    group: str
    artifact: str = ""
    version: Optional[str] = None
    classifier: Optional[str] = None

    def __str__(self) -> str:
        parts = [p for p in (self.group, self.artifact, self.version) if p]
        text = ":".join(parts)
        if self.classifier:
            text += "@" + self.classifier
        return text

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Coordinate):
            return NotImplemented
        return str(self) == str(other)

    def __hash__(self) -> int:
        return hash(str(self))

    def __lt__(self, other: "Coordinate") -> bool:
        return str(self) < str(other)

    @property
    def is_complete(self) -> bool:
        """True when both group and artifact are present."""
        return bool(self.group) and bool(self.artifact)

    @property
    def module_string(self) -> str:
        """``group:artifact:version`` without the classifier."""
        return ":".join(p for p in (self.group, self.artifact, self.version) if p)

    def with_version(self, version: Optional[str]) -> "Coordinate":
        return replace(self, version=version)

    def with_classifier(self, classifier: Optional[str]) -> "Coordinate":
        return replace(self, classifier=classifier)


@dataclass(frozen=True)
class RepoLocation:
    """A Maven repository root, remote (http/https) or local (file)."""
    url: str
    name: str = ""

    @property
    def is_local(self) -> bool:
        return urlsplit(self.url).scheme == "file"

    @property
    def local_path(self) -> Path:
        """Filesystem root of a ``file://`` repository."""
        return Path(url2pathname(urlsplit(self.url).path))

    def __str__(self) -> str:
        return self.url


@dataclass(frozen=True)
class ResolvedArtifact:
    """An artifact file located by the repository client.

    ``coordinate`` is the module actually resolved, which may differ from the
    requested one (e.g. a transitive dependency raised its version).
    """
    coordinate: Coordinate
    type: str
    location: str
    repository: Optional[str] = None

    @property
    def package(self) -> str:
        """``group:artifact:version@type`` package specifier."""
        return str(self.coordinate.with_classifier(self.type or None))

    @property
    def module_string(self) -> str:
        return self.coordinate.module_string


@dataclass(frozen=True)
class LockGroup:
    """Coordinates matching ``pattern`` must share a single version.

    Patterns are matched against ``group:artifact:version`` in full.
    """
    pattern: Pattern[str]
    exclude: Optional[Pattern[str]] = None

    def __str__(self) -> str:
        return self.pattern.pattern


@dataclass
class ReconciliationResult:
    """Output of version locking."""
    coordinates: Set[Coordinate] = field(default_factory=set)
    # (original, rewritten) module strings in the order they were recorded.
    modifications: List[Tuple[str, str]] = field(default_factory=list)


@dataclass(frozen=True)
class CopyPlanEntry:
    """A resolved artifact and the file it is copied to."""
    artifact: ResolvedArtifact
    target_filename: str
    target_path: Path


@dataclass(frozen=True)
class Report:
    """Final outcome of a run, sorted for display."""
    copied: Tuple[str, ...] = ()
    missing: Tuple[Coordinate, ...] = ()
    modifications: Tuple[Tuple[str, str], ...] = ()

    @property
    def has_missing(self) -> bool:
        return bool(self.missing)
