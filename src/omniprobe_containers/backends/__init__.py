"""Backends module - container engine integrations.

Provides one implementation per engine:
- DockerBackend: Image tags in the local Docker daemon
- ApptainerBackend: Standalone .sif image files
"""

from __future__ import annotations

from omniprobe_containers.backends.apptainer_backend import ApptainerBackend
from omniprobe_containers.backends.base import ContainerBackend
from omniprobe_containers.backends.docker_backend import DockerBackend
from omniprobe_containers.core.schemas import Backend, ProjectContext

BACKENDS: dict[Backend, type[ContainerBackend]] = {
    Backend.DOCKER: DockerBackend,
    Backend.APPTAINER: ApptainerBackend,
}


def create_backend(backend: Backend, project: ProjectContext) -> ContainerBackend:
    """Instantiate the backend implementation for ``backend``."""
    return BACKENDS[backend](project)


__all__ = [
    "ApptainerBackend",
    "BACKENDS",
    "ContainerBackend",
    "DockerBackend",
    "create_backend",
]
