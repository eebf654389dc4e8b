"""Maven registry package.

This package provides Maven repository support:
- pom.py: POM and maven-metadata.xml parsing
- repos.py: construction of the ordered repository search list
- client.py: resolution of coordinates to artifact files over HTTP(S) and file:// repositories
"""

from .client import MavenRepositoryClient, module_path
from .pom import PomModel, packaging_extension, parse_metadata_versions, parse_pom
from .repos import build_repositories, to_repo_location

__all__ = [
    "MavenRepositoryClient",
    "PomModel",
    "build_repositories",
    "module_path",
    "packaging_extension",
    "parse_metadata_versions",
    "parse_pom",
    "to_repo_location",
]
