"""Base backend abstract class for container engines.

Each backend knows how to name, find, build and launch the omniprobe
container with one engine, so the build and run workflows stay
engine-agnostic.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from pathlib import Path

from omniprobe_containers.core.schemas import Backend, ProjectContext
from omniprobe_containers.utils.process import run_command

logger = logging.getLogger(__name__)


class ContainerBackend(ABC):
    """Abstract base class for container engine backends.

    Subclasses must implement:
    - artifact_exists(): Whether the image/file for a ROCm version is present
    - build(): Produce the artifact, raising on failure
    - launch_command(): Argument vector for the interactive session
    """

    backend: Backend

    def __init__(self, project: ProjectContext) -> None:
        self.project = project

    @property
    def name(self) -> str:
        """Display name of this backend."""
        return self.backend.display_name

    def artifact_ref(self, rocm_version: str) -> str:
        """Image tag or .sif path for the given ROCm version."""
        return self.project.artifact_ref(self.backend, rocm_version)

    def check_available(self) -> None:
        """Raise ToolNotFoundError if the engine cannot be used.

        Engines that report their absence lazily may leave this a no-op.
        """

    @abstractmethod
    def artifact_exists(self, rocm_version: str) -> bool:
        """Check whether the artifact for this ROCm version already exists."""
        ...

    @abstractmethod
    def build(self, rocm_version: str) -> None:
        """Build the artifact for this ROCm version.

        Raises:
            ContainerEngineError: If the engine reports a failure
            ToolNotFoundError: If the engine is not installed
        """
        ...

    @abstractmethod
    def launch_command(self, rocm_version: str) -> list[str]:
        """Return the command that starts an interactive session."""
        ...

    @property
    def launch_cwd(self) -> Path | None:
        """Working directory for the session command (None = inherit)."""
        return None

    def launch(self, rocm_version: str) -> int:
        """Start the interactive session and block until it ends.

        Returns:
            Exit status of the session
        """
        self.check_available()
        return run_command(self.launch_command(rocm_version), cwd=self.launch_cwd)

    def close(self) -> None:
        """Release engine resources (clients, sockets)."""
