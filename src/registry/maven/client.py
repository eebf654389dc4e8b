"""Maven repository client resolving coordinates to artifact files.

Walks the POM dependency graph of the requested coordinates (compile and
runtime scopes, optional dependencies skipped), keeps the most recent version
of every ``group:artifact`` seen in the graph, and locates the artifact file
of each selected module in the first repository that has it. Lookups are
lenient: anything that cannot be resolved is left out of the result.
"""
from __future__ import annotations

import logging
from collections import deque
from pathlib import Path
from typing import Deque, Dict, Iterable, List, Optional, Sequence, Set, Tuple

from constants import ArtifactTypes, Constants
from common import http_client
from common.logging_utils import extra_context, is_debug_enabled, safe_url
from versioning.compare import MalformedVersionError, max_version
from versioning.models import Coordinate, RepoLocation, ResolvedArtifact
from versioning.ranges import is_dynamic, pick_version
from .pom import PomModel, packaging_extension, parse_metadata_versions, parse_pom

logger = logging.getLogger(__name__)

# Parent chains deeper than this are treated as cycles.
_MAX_PARENT_DEPTH = 16

# Node in the dependency walk: group, artifact, version, requested type.
_Node = Tuple[str, str, str, Optional[str]]


def module_path(group: str, artifact: str, version: Optional[str] = None) -> str:
    """Repository-relative directory of a module (or of all its versions)."""
    parts = [group.replace(".", "/"), artifact]
    if version:
        parts.append(version)
    return "/".join(parts)


class MavenRepositoryClient:
    """Resolves coordinates against Maven-layout repositories."""

    def __init__(self, transitive: bool = True):
        self._transitive = transitive
        self._text_cache: Dict[Tuple[str, str], Optional[str]] = {}
        self._pom_cache: Dict[Tuple[str, str, str], Optional[PomModel]] = {}

    def lookup(
        self, coordinates: Iterable[Coordinate], repos: Sequence[RepoLocation]
    ) -> Set[ResolvedArtifact]:
        """Resolve ``coordinates`` and their dependencies to artifact files."""
        repos = list(repos)
        versions: Dict[str, List[str]] = {}
        types: Dict[str, Set[Optional[str]]] = {}
        queue: Deque[_Node] = deque()

        for coordinate in coordinates:
            if not coordinate.is_complete:
                continue
            version = self._select_version(coordinate.group, coordinate.artifact, coordinate.version, repos)
            if version is None:
                logger.debug("No version of %s available", coordinate)
                continue
            queue.append((coordinate.group, coordinate.artifact, version, coordinate.classifier))

        visited: Set[Tuple[str, str, str]] = set()
        while queue:
            group, artifact, version, requested_type = queue.popleft()
            key = f"{group}:{artifact}"
            types.setdefault(key, set()).add(requested_type)
            if (group, artifact, version) in visited:
                continue
            visited.add((group, artifact, version))
            versions.setdefault(key, []).append(version)
            if self._transitive:
                queue.extend(self._dependencies(group, artifact, version, repos))

        resolved: Set[ResolvedArtifact] = set()
        for key, candidates in versions.items():
            group, artifact = key.split(":", 1)
            try:
                version = max_version(candidates)
            except MalformedVersionError:
                version = candidates[0]
            if len(set(candidates)) > 1:
                logger.debug("Conflict on %s between %s, selected %s", key, sorted(set(candidates)), version)
            for requested_type in sorted(types[key], key=lambda t: t or ""):
                found = self._locate_artifact(group, artifact, version, requested_type, repos)
                if found is not None:
                    resolved.add(found)
        return resolved

    # Repository access

    def _read(self, repo: RepoLocation, relative: str) -> Optional[str]:
        cache_key = (repo.url, relative)
        if cache_key in self._text_cache:
            return self._text_cache[cache_key]
        text = None
        if repo.is_local:
            path = repo.local_path / relative
            if path.is_file():
                try:
                    text = path.read_text(encoding="utf-8")
                except (OSError, UnicodeDecodeError) as exc:
                    logger.debug("Unable to read %s: %s", path, exc)
        else:
            status, _, body = http_client.robust_get(f"{repo.url}/{relative}")
            if status == 200 and body:
                text = body
        self._text_cache[cache_key] = text
        return text

    def _exists(self, repo: RepoLocation, relative: str) -> Optional[str]:
        """Location of ``relative`` in ``repo`` if the file exists there."""
        if repo.is_local:
            path: Path = repo.local_path / relative
            return path.as_uri() if path.is_file() else None
        url = f"{repo.url}/{relative}"
        res = http_client.safe_head(url, context="maven")
        if res is not None and res.status_code == 200:
            return url
        return None

    # Version and POM resolution

    def _available_versions(self, group: str, artifact: str, repos: Sequence[RepoLocation]) -> List[str]:
        versions: List[str] = []
        relative = f"{module_path(group, artifact)}/{Constants.MAVEN_METADATA_FILE}"
        for repo in repos:
            text = self._read(repo, relative)
            if text:
                versions.extend(v for v in parse_metadata_versions(text) if v not in versions)
        return versions

    def _select_version(
        self, group: str, artifact: str, spec: Optional[str], repos: Sequence[RepoLocation]
    ) -> Optional[str]:
        if spec and not is_dynamic(spec):
            return spec
        candidates = self._available_versions(group, artifact, repos)
        try:
            return pick_version(spec, candidates)
        except MalformedVersionError as exc:
            logger.debug("Cannot resolve %s:%s:%s: %s", group, artifact, spec, exc)
            return None

    def _pom(self, group: str, artifact: str, version: str, repos: Sequence[RepoLocation],
             depth: int = 0) -> Optional[PomModel]:
        """Effective POM of a module (parents merged), or None if unavailable."""
        cache_key = (group, artifact, version)
        if cache_key in self._pom_cache:
            return self._pom_cache[cache_key]

        model = None
        relative = f"{module_path(group, artifact, version)}/{artifact}-{version}.pom"
        for repo in repos:
            text = self._read(repo, relative)
            if text is None:
                continue
            try:
                model = parse_pom(text)
            except ValueError as exc:
                logger.warning("Ignoring malformed POM %s in %s: %s", relative, safe_url(repo.url), exc)
                continue
            break

        if model is not None and model.parent is not None:
            if depth >= _MAX_PARENT_DEPTH:
                logger.warning("Parent POM chain of %s:%s:%s is too deep", group, artifact, version)
            else:
                parent = model.parent
                parent_model = self._pom(parent.group, parent.artifact, parent.version, repos, depth + 1)
                if parent_model is not None:
                    model = model.inherit(parent_model)

        self._pom_cache[cache_key] = model
        return model

    def _dependencies(self, group: str, artifact: str, version: str,
                      repos: Sequence[RepoLocation]) -> List[_Node]:
        model = self._pom(group, artifact, version, repos)
        if model is None:
            return []
        nodes = []
        for dependency in model.dependencies:
            scope = dependency.scope or "compile"
            if dependency.optional or scope not in Constants.TRANSITIVE_SCOPES:
                continue
            dep_group = model.interpolate(dependency.group)
            dep_artifact = model.interpolate(dependency.artifact)
            if not dep_group or not dep_artifact:
                continue
            dep_version = self._select_version(dep_group, dep_artifact, model.dependency_version(dependency), repos)
            if dep_version is None:
                logger.debug("Unable to determine version of %s required by %s:%s:%s",
                             dependency.key, group, artifact, version)
                continue
            dep_type = dependency.type
            if dep_type in (None, Constants.DEFAULT_PACKAGING, ArtifactTypes.POM.value):
                dep_type = None
            nodes.append((dep_group, dep_artifact, dep_version, dep_type))
        return nodes

    # Artifact files

    def _locate_artifact(self, group: str, artifact: str, version: str, requested_type: Optional[str],
                         repos: Sequence[RepoLocation]) -> Optional[ResolvedArtifact]:
        if requested_type:
            extension = requested_type
        else:
            model = self._pom(group, artifact, version, repos)
            extension = packaging_extension(model.packaging) if model else Constants.DEFAULT_PACKAGING
            if extension == ArtifactTypes.POM.value:
                return None

        relative = f"{module_path(group, artifact, version)}/{artifact}-{version}.{extension}"
        for repo in repos:
            location = self._exists(repo, relative)
            if location is None:
                continue
            if is_debug_enabled(logger):
                logger.debug(
                    "Artifact located",
                    extra=extra_context(
                        event="decision",
                        component="maven_client",
                        action="locate_artifact",
                        target=f"{group}:{artifact}:{version}@{extension}",
                        repository=safe_url(repo.url),
                    )
                )
            return ResolvedArtifact(
                coordinate=Coordinate(group=group, artifact=artifact, version=version),
                type=extension,
                location=location,
                repository=repo.url,
            )
        return None
