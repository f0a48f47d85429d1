"""Project discovery and settings loading.

Supports YAML and JSON settings files with schema validation. The project
root is the directory holding the ``VERSION`` file.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

import yaml
from pydantic import ValidationError

from omniprobe_containers.core.constants import (
    CONTAINERS_DIRNAME,
    SETTINGS_FILENAME,
    VERSION_FILENAME,
)
from omniprobe_containers.core.exceptions import ProjectConfigError
from omniprobe_containers.core.schemas import ContainerSettings, ProjectContext

logger = logging.getLogger(__name__)


def find_project_root(start: Path | str | None = None) -> Path:
    """Find the nearest directory at or above ``start`` containing a VERSION file.

    Args:
        start: Directory to start searching from (defaults to cwd)

    Returns:
        Resolved project root

    Raises:
        ProjectConfigError: If no ancestor holds a VERSION file
    """
    start_dir = Path(start or Path.cwd()).resolve()
    for candidate in (start_dir, *start_dir.parents):
        if (candidate / VERSION_FILENAME).is_file():
            return candidate
    raise ProjectConfigError(
        f"Could not find a {VERSION_FILENAME} file in {start_dir} or any parent directory"
    )


def read_project_version(project_dir: Path) -> str:
    """Read the opaque project version string from ``<project_dir>/VERSION``.

    Raises:
        ProjectConfigError: If the file is missing, unreadable or empty
    """
    version_file = Path(project_dir) / VERSION_FILENAME
    try:
        version = version_file.read_text(encoding="utf-8").strip()
    except OSError as e:
        raise ProjectConfigError(f"Cannot read version file {version_file}: {e}") from e

    if not version:
        raise ProjectConfigError(f"Version file {version_file} is empty")
    return version


def load_settings(path: Path | str) -> ContainerSettings:
    """Load and validate a container settings file.

    Args:
        path: Path to YAML or JSON settings file

    Returns:
        Validated ContainerSettings object

    Raises:
        ProjectConfigError: If the file is missing, unreadable, malformed,
            has an unsupported format or fails validation
    """
    path = Path(path)
    if not path.exists():
        raise ProjectConfigError(f"Settings file not found: {path}")

    suffix = path.suffix.lower()
    if suffix not in (".yaml", ".yml", ".json"):
        raise ProjectConfigError(
            f"Unsupported settings format: {suffix}. Use .yaml, .yml, or .json"
        )

    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f) if suffix == ".json" else yaml.safe_load(f)
    except (OSError, UnicodeDecodeError, yaml.YAMLError, json.JSONDecodeError) as e:
        raise ProjectConfigError(f"Cannot parse settings file {path}: {e}") from e

    try:
        return ContainerSettings.model_validate(data or {})
    except ValidationError as e:
        raise ProjectConfigError(f"Invalid settings in {path}:\n{e}") from e


def load_project(
    project_dir: Path | str | None = None,
    config_path: Path | str | None = None,
) -> ProjectContext:
    """Resolve the project root, its version and the active settings.

    Settings come from ``config_path`` if given, else from
    ``<project>/containers/omniprobe-containers.yaml`` if it exists, else
    the built-in defaults.
    """
    root = Path(project_dir).resolve() if project_dir else find_project_root()

    if config_path is not None:
        settings = load_settings(config_path)
    else:
        default_path = root / CONTAINERS_DIRNAME / SETTINGS_FILENAME
        if default_path.is_file():
            logger.debug(f"Using settings from {default_path}")
            settings = load_settings(default_path)
        else:
            settings = ContainerSettings()

    return ProjectContext(
        project_dir=root,
        version=read_project_version(root),
        settings=settings,
    )
