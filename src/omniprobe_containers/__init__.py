"""omniprobe container tooling - build and run the development container."""

from __future__ import annotations

from omniprobe_containers.core.schemas import (
    Backend,
    BackendSelection,
    ContainerSettings,
    ProjectContext,
    validate_selection,
)

__version__ = "0.1.0"

__all__ = [
    "Backend",
    "BackendSelection",
    "ContainerSettings",
    "ProjectContext",
    "validate_selection",
    "__version__",
]
