"""Container build workflow.

Builds the omniprobe development container for every requested backend,
Docker first. Unlike the launcher, the builder accepts both backends in one
invocation.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from rich.console import Console

from omniprobe_containers.backends import ContainerBackend, create_backend
from omniprobe_containers.core.schemas import Backend, BackendSelection, ProjectContext
from omniprobe_containers.utils.process import sync_submodules

logger = logging.getLogger(__name__)

BackendFactory = Callable[[Backend, ProjectContext], ContainerBackend]


class ContainerBuilder:
    """Builds container artifacts for one project.

    Example:
        ```python
        project = load_project()
        selection = validate_selection(True, True, "6.4", allow_multiple=True)
        ContainerBuilder(project).build(selection)
        ```
    """

    def __init__(
        self,
        project: ProjectContext,
        console: Console | None = None,
        backend_factory: BackendFactory = create_backend,
    ) -> None:
        self.project = project
        self.console = console or Console()
        self._backend_factory = backend_factory

    def build(self, selection: BackendSelection) -> None:
        """Build every backend in the selection, stopping at the first failure.

        Raises:
            ContainerToolError: Propagated from the failing backend
        """
        for kind in selection.backends:
            backend = self._backend_factory(kind, self.project)
            try:
                self._build_one(backend, selection.rocm_version)
            finally:
                backend.close()

    def _build_one(self, backend: ContainerBackend, rocm_version: str) -> None:
        self.console.print(f"Building {backend.name} container with ROCm {rocm_version}...")
        sync_submodules(self.project.project_dir)

        backend.build(rocm_version)

        logger.info(f"Built {backend.artifact_ref(rocm_version)}")
        self.console.print(f"[bold green]{backend.name} build complete![/]")
