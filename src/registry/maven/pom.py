"""POM parsing into the subset of the Maven model needed for resolution."""
from __future__ import annotations

import logging
import re
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field, replace
from typing import Dict, List, Optional

from constants import Constants

logger = logging.getLogger(__name__)

_PROPERTY_RE = re.compile(r"\$\{([^}]+)\}")
_MAX_INTERPOLATION_PASSES = 10


@dataclass(frozen=True)
class PomDependency:
    """A ``<dependency>`` entry, not yet interpolated."""
    group: str
    artifact: str
    version: Optional[str] = None
    scope: Optional[str] = None
    type: Optional[str] = None
    optional: bool = False

    @property
    def key(self) -> str:
        return f"{self.group}:{self.artifact}"


@dataclass(frozen=True)
class PomParent:
    group: str
    artifact: str
    version: str


@dataclass
class PomModel:
    """Project coordinates, packaging, properties and dependencies of a POM."""
    group: Optional[str]
    artifact: str
    version: Optional[str]
    packaging: str = Constants.DEFAULT_PACKAGING
    parent: Optional[PomParent] = None
    properties: Dict[str, str] = field(default_factory=dict)
    # group:artifact -> version from <dependencyManagement>
    managed_versions: Dict[str, str] = field(default_factory=dict)
    dependencies: List[PomDependency] = field(default_factory=list)

    def inherit(self, parent: "PomModel") -> "PomModel":
        """Merge inherited values from an already-effective parent model."""
        properties = dict(parent.properties)
        properties.update(self.properties)
        managed = dict(parent.managed_versions)
        managed.update(self.managed_versions)
        return replace(
            self,
            group=self.group or parent.group,
            version=self.version or parent.version,
            properties=properties,
            managed_versions=managed,
            dependencies=list(self.dependencies),
        )

    def interpolate(self, value: Optional[str]) -> Optional[str]:
        """Expand ``${...}`` references; unresolvable references yield None."""
        if value is None or "${" not in value:
            return value
        context = dict(self.properties)
        for name in ("project.groupId", "pom.groupId", "groupId"):
            context.setdefault(name, self.group or "")
        for name in ("project.version", "pom.version", "version"):
            context.setdefault(name, self.version or "")
        context.setdefault("project.artifactId", self.artifact)
        if self.parent is not None:
            context.setdefault("project.parent.version", self.parent.version)
            context.setdefault("project.parent.groupId", self.parent.group)

        for _ in range(_MAX_INTERPOLATION_PASSES):
            if "${" not in value:
                return value
            value = _PROPERTY_RE.sub(lambda m: context.get(m.group(1), m.group(0)), value)
        if "${" in value:
            logger.debug("Unresolved property reference in %r for %s", value, self.artifact)
            return None
        return value

    def dependency_version(self, dependency: PomDependency) -> Optional[str]:
        """Declared or managed version of ``dependency`` with properties expanded."""
        version = dependency.version
        if not version:
            key = self.interpolate(dependency.key) or dependency.key
            managed = {self.interpolate(k) or k: v for k, v in self.managed_versions.items()}
            version = managed.get(key)
        return self.interpolate(version) if version else None


def _strip_namespaces(root: ET.Element) -> None:
    for element in root.iter():
        if isinstance(element.tag, str) and element.tag.startswith("{"):
            element.tag = element.tag.split("}", 1)[1]


def _text(element: Optional[ET.Element], path: str) -> Optional[str]:
    if element is None:
        return None
    node = element.find(path)
    if node is None or node.text is None:
        return None
    return node.text.strip() or None


def _parse_dependencies(container: Optional[ET.Element]) -> List[PomDependency]:
    dependencies = []
    if container is None:
        return dependencies
    for node in container.findall("dependency"):
        group = _text(node, "groupId")
        artifact = _text(node, "artifactId")
        if not group or not artifact:
            continue
        dependencies.append(PomDependency(
            group=group,
            artifact=artifact,
            version=_text(node, "version"),
            scope=(_text(node, "scope") or "").lower() or None,
            type=_text(node, "type"),
            optional=(_text(node, "optional") or "").lower() == "true",
        ))
    return dependencies


def parse_pom(text: str) -> PomModel:
    """Parse POM XML.

    Raises:
        ValueError: If the document is not XML or has no artifactId.
    """
    try:
        root = ET.fromstring(text)
    except ET.ParseError as exc:
        raise ValueError(f"invalid POM: {exc}") from exc
    _strip_namespaces(root)

    parent = None
    parent_node = root.find("parent")
    if parent_node is not None:
        p_group = _text(parent_node, "groupId")
        p_artifact = _text(parent_node, "artifactId")
        p_version = _text(parent_node, "version")
        if p_group and p_artifact and p_version:
            parent = PomParent(p_group, p_artifact, p_version)

    artifact = _text(root, "artifactId")
    if not artifact:
        raise ValueError("invalid POM: missing artifactId")

    properties = {}
    props_node = root.find("properties")
    if props_node is not None:
        for prop in props_node:
            properties[prop.tag] = (prop.text or "").strip()

    managed = {}
    for dependency in _parse_dependencies(root.find("dependencyManagement/dependencies")):
        if dependency.scope == "import":
            logger.debug("Ignoring imported BOM %s", dependency.key)
            continue
        if dependency.version:
            managed[dependency.key] = dependency.version

    return PomModel(
        group=_text(root, "groupId") or (parent.group if parent else None),
        artifact=artifact,
        version=_text(root, "version") or (parent.version if parent else None),
        packaging=_text(root, "packaging") or Constants.DEFAULT_PACKAGING,
        parent=parent,
        properties=properties,
        managed_versions=managed,
        dependencies=_parse_dependencies(root.find("dependencies")),
    )


def packaging_extension(packaging: str) -> str:
    """File extension of the main artifact for a Maven packaging type.

    Packagings without a known artifact layout resolve to ``jar``.
    """
    if packaging in Constants.PACKAGING_EXTENSIONS:
        return Constants.PACKAGING_EXTENSIONS[packaging]
    if packaging in Constants.ARTIFACT_PACKAGINGS:
        return packaging
    return Constants.DEFAULT_PACKAGING


def parse_metadata_versions(text: str) -> List[str]:
    """Return versions listed in maven-metadata.xml in source order."""
    try:
        root = ET.fromstring(text)
    except ET.ParseError:
        return []
    _strip_namespaces(root)
    versions = []
    versions_elem = root.find("versioning/versions")
    if versions_elem is not None:
        for item in versions_elem.findall("version"):
            if item.text and item.text.strip():
                versions.append(item.text.strip())
    if not versions:
        for path in ("versioning/release", "versioning/latest", "version"):
            value = _text(root, path)
            if value:
                versions.append(value)
                break
    return versions
