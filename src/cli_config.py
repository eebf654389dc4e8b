"""Run configuration assembled from CLI arguments, environment and YAML.

Extracted from m2copy.py to keep the entrypoint slim. Precedence is
CLI > environment > YAML file > built-in defaults, evaluated per setting.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

import yaml

from constants import Constants
from registry.maven.repos import build_repositories
from resolution.version_lock import build_lock_groups
from versioning.models import LockGroup, RepoLocation
from versioning.parser import split_list

logger = logging.getLogger(__name__)


class ConfigError(ValueError):
    """Required configuration is missing or invalid."""


@dataclass
class RunConfig:
    """Everything a run needs, already validated."""
    packages: List[str]
    target_dir: Path
    repositories: List[RepoLocation] = field(default_factory=list)
    lock_groups: List[LockGroup] = field(default_factory=list)
    android_home: Optional[str] = None
    output: Optional[str] = None


def load_pkgs_file(file_name: str) -> List[str]:
    """Loads artifact specifications from a file, skipping blanks and # comments.

    Raises:
        ConfigError: If the file cannot be read.
    """
    try:
        with open(file_name, encoding="utf-8") as file:
            lines = [line.split("#", 1)[0].strip() for line in file]
    except OSError as e:
        raise ConfigError(f"Unable to read package list {file_name}: {e}") from e
    packages = []
    for line in lines:
        packages.extend(split_list(line, Constants.LIST_SEPARATOR))
    return packages


def load_yaml_config(path: str) -> Dict[str, Any]:
    """Load a YAML config file into a dict.

    Raises:
        ConfigError: If the file cannot be read or is not a YAML mapping.
    """
    try:
        with open(path, "r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh) or {}
    except OSError as e:
        raise ConfigError(f"Unable to read config file {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in config file {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping at the top level")
    return data


def _as_list(value: Any, name: str) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return split_list(value, Constants.LIST_SEPARATOR)
    if isinstance(value, list):
        items = []
        for item in value:
            items.extend(split_list(str(item), Constants.LIST_SEPARATOR))
        return items
    raise ConfigError(f"'{name}' must be a list or a semicolon separated string")


def _dedupe(items: List[str]) -> List[str]:
    return list(dict.fromkeys(items))


def _first(*values: Optional[str]) -> Optional[str]:
    for value in values:
        if value:
            return value
    return None


def load_run_config(args, environ: Optional[Mapping[str, str]] = None) -> RunConfig:
    """Build a RunConfig from parsed arguments.

    Args:
        args: Namespace returned by ``args.parse_args``.
        environ: Environment mapping; defaults to ``os.environ``.

    Raises:
        ConfigError: If no packages or no target directory are configured,
            or the YAML file / lock patterns are invalid.
    """
    env = os.environ if environ is None else environ
    file_cfg = load_yaml_config(args.CONFIG) if getattr(args, "CONFIG", None) else {}

    cli_packages = []
    for value in getattr(args, "PACKAGES", None) or []:
        cli_packages.extend(split_list(value, Constants.LIST_SEPARATOR))
    if getattr(args, "LIST_FROM_FILE", None):
        cli_packages.extend(load_pkgs_file(args.LIST_FROM_FILE))
    packages = _dedupe(
        cli_packages
        or split_list(env.get(Constants.ENV_PACKAGES), Constants.LIST_SEPARATOR)
        or _as_list(file_cfg.get("packages"), "packages")
    )
    if not packages:
        raise ConfigError(f"{Constants.ENV_PACKAGES} must be specified (--package or --load_list).")
    for package in packages:
        logger.info("PACKAGES_TO_COPY: %s", package)

    target_dir = _first(getattr(args, "TARGET_DIR", None), env.get(Constants.ENV_TARGET_DIR),
                        file_cfg.get("target_dir"))
    if not target_dir:
        raise ConfigError(f"{Constants.ENV_TARGET_DIR} must be specified (--target-dir).")
    target_path = Path(os.path.expanduser(str(target_dir))).resolve()
    logger.info("TARGET_DIR: %s", target_path)

    android_home = _first(getattr(args, "ANDROID_HOME", None), env.get(Constants.ENV_ANDROID_HOME),
                          file_cfg.get("android_home"))
    if android_home:
        logger.info("ANDROID_HOME: %s", android_home)

    cli_repos = []
    for value in getattr(args, "MAVEN_REPOS", None) or []:
        cli_repos.extend(split_list(value, Constants.LIST_SEPARATOR))
    user_repos = (
        cli_repos
        or split_list(env.get(Constants.ENV_MAVEN_REPOS), Constants.LIST_SEPARATOR)
        or _as_list(file_cfg.get("repositories"), "repositories")
    )
    include_defaults = not getattr(args, "NO_DEFAULT_REPOS", False) and file_cfg.get("default_repositories", True)
    repositories = build_repositories(user_repos, android_home, include_defaults=bool(include_defaults))
    if not repositories:
        raise ConfigError("No Maven repositories configured.")

    if getattr(args, "NO_LOCK", False):
        lock_entries: List[Any] = []
    else:
        lock_entries = file_cfg.get("version_locks", Constants.DEFAULT_VERSION_LOCKS)
        if not isinstance(lock_entries, list):
            raise ConfigError("'version_locks' must be a list of {pattern, exclude} mappings")
    try:
        lock_groups = build_lock_groups(lock_entries)
    except ValueError as e:
        raise ConfigError(str(e)) from e

    return RunConfig(
        packages=packages,
        target_dir=target_path,
        repositories=repositories,
        lock_groups=lock_groups,
        android_home=android_home,
        output=getattr(args, "OUTPUT", None),
    )
