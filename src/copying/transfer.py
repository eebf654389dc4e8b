"""Byte transfer of resolved artifacts into the target directory."""
from __future__ import annotations

import logging
import os
import shutil
from pathlib import Path
from typing import Protocol
from urllib.parse import urlsplit
from urllib.request import url2pathname

import requests

from common import http_client
from common.logging_utils import safe_url
from versioning.models import ResolvedArtifact

logger = logging.getLogger(__name__)


class TransferError(RuntimeError):
    """Copying an artifact to its destination failed."""

    def __init__(self, artifact: ResolvedArtifact, destination: Path, reason: str):
        super().__init__(f"Failed to copy {artifact.package} to {destination}: {reason}")
        self.artifact = artifact
        self.destination = destination


class FileTransfer(Protocol):
    """Collaborator that places artifact bytes at a destination path."""

    def exists(self, path: Path) -> bool:
        ...

    def copy(self, artifact: ResolvedArtifact, destination: Path) -> None:
        ...


class ArtifactTransfer:
    """Copies artifacts from ``file://`` locations or downloads them over HTTP."""

    def exists(self, path: Path) -> bool:
        return path.exists()

    def copy(self, artifact: ResolvedArtifact, destination: Path) -> None:
        """Copy ``artifact`` to ``destination``.

        Raises:
            TransferError: If the source cannot be read or the destination written.
        """
        location = artifact.location
        scheme = urlsplit(location).scheme
        try:
            if scheme in ("http", "https"):
                logger.info("Downloading %s from %s", artifact.package, safe_url(location))
                http_client.download(location, destination, context="transfer")
            else:
                source = Path(url2pathname(urlsplit(location).path)) if scheme == "file" else Path(location)
                logger.info("Copying %s from %s", artifact.package, source)
                destination.parent.mkdir(parents=True, exist_ok=True)
                tmp = destination.with_name(f".{destination.name}.part")
                try:
                    shutil.copyfile(source, tmp)
                    os.replace(tmp, destination)
                except BaseException:
                    if tmp.exists():
                        tmp.unlink()
                    raise
        except (OSError, requests.RequestException) as exc:
            raise TransferError(artifact, destination, str(exc)) from exc
