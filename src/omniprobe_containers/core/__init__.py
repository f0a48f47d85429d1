"""Core module - settings, schemas and errors."""

from __future__ import annotations

from omniprobe_containers.core.config import (
    find_project_root,
    load_project,
    load_settings,
    read_project_version,
)
from omniprobe_containers.core.exceptions import (
    ContainerEngineError,
    ContainerToolError,
    ProjectConfigError,
    ToolNotFoundError,
    UnsupportedRocmVersionError,
    UsageError,
)
from omniprobe_containers.core.schemas import (
    ApptainerOptions,
    Backend,
    BackendSelection,
    ContainerSettings,
    DockerRunOptions,
    ProjectContext,
    validate_selection,
)

__all__ = [
    "ApptainerOptions",
    "Backend",
    "BackendSelection",
    "ContainerEngineError",
    "ContainerSettings",
    "ContainerToolError",
    "DockerRunOptions",
    "find_project_root",
    "load_project",
    "load_settings",
    "ProjectConfigError",
    "ProjectContext",
    "read_project_version",
    "ToolNotFoundError",
    "UnsupportedRocmVersionError",
    "UsageError",
    "validate_selection",
]
