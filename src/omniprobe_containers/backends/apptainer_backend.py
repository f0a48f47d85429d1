"""Apptainer backend for the omniprobe container.

Artifacts are standalone ``.sif`` files next to the def file, so existence
is a plain file check.
"""

from __future__ import annotations

import logging
from pathlib import Path

from omniprobe_containers.backends.base import ContainerBackend
from omniprobe_containers.core.schemas import Backend
from omniprobe_containers.utils.process import require_tool, run_checked

logger = logging.getLogger(__name__)


class ApptainerBackend(ContainerBackend):
    """Builds and runs the omniprobe container as an Apptainer SIF image."""

    backend = Backend.APPTAINER

    def check_available(self) -> None:
        require_tool("apptainer", self.project.settings.apptainer.install_hint_url)

    def artifact_exists(self, rocm_version: str) -> bool:
        return self.project.sif_path(rocm_version).is_file()

    def build(self, rocm_version: str) -> None:
        self.check_available()
        sif_path = self.project.sif_path(rocm_version)
        logger.info(f"Building {sif_path} from {self.project.definition_path}")
        run_checked(
            [
                "apptainer",
                "build",
                "--build-arg",
                f"ROCM_VERSION={rocm_version}",
                str(sif_path),
                str(self.project.definition_path),
            ],
            description="apptainer build",
            cwd=self.project.project_dir,
        )

    @property
    def launch_cwd(self) -> Path:
        return self.project.project_dir

    def launch_command(self, rocm_version: str) -> list[str]:
        settings = self.project.settings
        opts = settings.apptainer

        command = ["apptainer", "exec"]
        if opts.cleanenv:
            command.append("--cleanenv")
        command += [
            "--bind",
            f"{self.project.project_dir}:{settings.workspace_mount}",
            "--pwd",
            settings.workspace_mount,
            str(self.project.sif_path(rocm_version)),
            opts.shell,
            "--rcfile",
            opts.rcfile,
        ]
        return command
