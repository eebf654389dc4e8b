"""Construction of the ordered repository search list."""
from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Iterable, List, Optional
from urllib.parse import urlsplit

from constants import Constants
from versioning.models import RepoLocation

logger = logging.getLogger(__name__)


def to_repo_location(uri: str, name: str = "") -> RepoLocation:
    """Build a RepoLocation from a URI or a filesystem path."""
    uri = uri.strip()
    scheme = urlsplit(uri).scheme
    # Single letters are Windows drive letters, not schemes.
    if scheme in ("http", "https", "file"):
        return RepoLocation(url=uri.rstrip("/"), name=name or uri)
    path = Path(os.path.expanduser(uri)).resolve()
    return RepoLocation(url=path.as_uri(), name=name or str(path))


def android_sdk_repositories(android_home: Optional[str]) -> List[RepoLocation]:
    """Local m2repository directories shipped with the Android SDK."""
    if not android_home:
        return []
    repos = []
    for subdir in Constants.ANDROID_SDK_REPO_DIRS:
        path = Path(android_home) / subdir
        if path.is_dir():
            repos.append(to_repo_location(str(path), name=f"android-sdk:{subdir}"))
    return repos


def default_remote_repositories() -> List[RepoLocation]:
    return [
        RepoLocation(url=Constants.REPO_URL_GOOGLE, name="google"),
        to_repo_location(Constants.MAVEN_LOCAL_DIR, name="mavenLocal"),
        RepoLocation(url=Constants.REPO_URL_JCENTER, name="jcenter"),
        RepoLocation(url=Constants.REPO_URL_MAVEN_CENTRAL, name="mavenCentral"),
    ]


def build_repositories(
    user_uris: Iterable[str],
    android_home: Optional[str] = None,
    include_defaults: bool = True,
) -> List[RepoLocation]:
    """User repositories, then Android SDK repositories, then the defaults.

    Duplicates keep their first position.
    """
    repos: List[RepoLocation] = [to_repo_location(uri) for uri in user_uris if uri.strip()]
    repos.extend(android_sdk_repositories(android_home))
    if include_defaults:
        repos.extend(default_remote_repositories())

    unique: List[RepoLocation] = []
    seen = set()
    for repo in repos:
        if repo.url in seen:
            continue
        seen.add(repo.url)
        unique.append(repo)
    for repo in unique:
        logger.info("MAVEN_REPOS: name=%s url=%s", repo.name, repo.url)
    return unique
