"""Interactive container session workflow.

Ensures the artifact for the selected backend exists (building it through
``ContainerBuilder`` when missing), then starts an interactive session with
the project directory bind-mounted read-write.
"""

from __future__ import annotations

import logging

from rich.console import Console

from omniprobe_containers.backends import ContainerBackend, create_backend
from omniprobe_containers.builder import BackendFactory, ContainerBuilder
from omniprobe_containers.core.exceptions import ContainerEngineError, ContainerToolError
from omniprobe_containers.core.schemas import BackendSelection, ProjectContext

logger = logging.getLogger(__name__)


class ContainerLauncher:
    """Runs the omniprobe container for exactly one backend."""

    def __init__(
        self,
        project: ProjectContext,
        builder: ContainerBuilder | None = None,
        console: Console | None = None,
        backend_factory: BackendFactory = create_backend,
    ) -> None:
        self.project = project
        self.console = console or Console()
        self.builder = builder or ContainerBuilder(
            project, console=self.console, backend_factory=backend_factory
        )
        self._backend_factory = backend_factory

    def run(self, selection: BackendSelection) -> int:
        """Ensure the artifact exists and start an interactive session.

        Returns:
            Exit status of the container session

        Raises:
            ContainerToolError: If the engine is missing or the build fails;
                nothing is launched in that case
        """
        rocm_version = selection.rocm_version
        mount = self.project.settings.workspace_mount

        self.console.print(
            f"Starting {self.project.settings.name} container with ROCm {rocm_version}..."
        )
        self.console.print(f"Project directory will be mounted at {mount}")
        self.console.print("Any files you create/modify will persist after the container closes.")
        self.console.print()

        backend = self._backend_factory(selection.backend, self.project)
        try:
            self.console.print(f"Using {backend.name} containerization...")
            backend.check_available()
            self.ensure_artifact(backend, rocm_version)

            self.console.print(
                f"Running {backend.name} container with project directory mounted..."
            )
            returncode = backend.launch(rocm_version)
        finally:
            backend.close()

        if returncode != 0:
            logger.info(f"Container session exited with status {returncode}")
        self.console.print("Container session ended.")
        return returncode

    def ensure_artifact(self, backend: ContainerBackend, rocm_version: str) -> bool:
        """Build the artifact if it does not exist yet.

        Returns:
            True if a build was performed

        Raises:
            ContainerEngineError: If the build fails
        """
        if backend.artifact_exists(rocm_version):
            self.console.print(f"{backend.name} image found.")
            return False

        self.console.print(f"{backend.name} image {backend.artifact_ref(rocm_version)} not found.")
        self.console.print(f"Building {backend.name} image...")
        self.console.print()

        try:
            self.builder.build(
                BackendSelection(backends=[backend.backend], rocm_version=rocm_version)
            )
        except ContainerToolError as e:
            logger.error(f"{backend.name} build failed: {e}")
            raise ContainerEngineError(f"Failed to build {backend.name} image.") from e

        self.console.print()
        self.console.print(f"[bold green]{backend.name} image built successfully![/]")
        return True
