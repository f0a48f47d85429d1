"""Docker backend for the omniprobe container.

Image lookup goes through the Docker SDK. Builds use the docker CLI with
BuildKit enabled by default, since the SDK's legacy builder cannot handle
BuildKit-only Dockerfile syntax; set ``buildkit: false`` in the settings to
build through the SDK instead. The interactive session always uses
``docker run -it`` because the SDK cannot hand a TTY to the user.
"""

from __future__ import annotations

import contextlib
import logging
from typing import TYPE_CHECKING

import docker
from docker.errors import APIError, BuildError, DockerException, ImageNotFound

from omniprobe_containers.backends.base import ContainerBackend
from omniprobe_containers.core.exceptions import ContainerEngineError
from omniprobe_containers.core.schemas import Backend, ProjectContext
from omniprobe_containers.utils.process import require_tool, run_checked

if TYPE_CHECKING:
    from docker import DockerClient

logger = logging.getLogger(__name__)


class DockerBackend(ContainerBackend):
    """Builds and runs the omniprobe image in the local Docker daemon.

    Example:
        ```python
        backend = DockerBackend(project)
        if not backend.artifact_exists("6.4"):
            backend.build("6.4")
        backend.launch("6.4")
        ```
    """

    backend = Backend.DOCKER

    def __init__(self, project: ProjectContext, client: DockerClient | None = None) -> None:
        """Initialize the backend.

        Args:
            project: Resolved project context
            client: Optional pre-built Docker client (connected lazily otherwise)
        """
        super().__init__(project)
        self._client = client

    @property
    def client(self) -> DockerClient:
        """Docker SDK client, connected on first use."""
        if self._client is None:
            try:
                self._client = docker.from_env()
            except DockerException as e:
                raise ContainerEngineError(f"Cannot connect to the Docker daemon: {e}") from e
        return self._client

    def check_available(self) -> None:
        require_tool("docker")

    def artifact_exists(self, rocm_version: str) -> bool:
        tag = self.project.docker_tag(rocm_version)
        try:
            self.client.images.get(tag)
        except ImageNotFound:
            logger.debug(f"Image {tag} not present")
            return False
        except APIError as e:
            raise ContainerEngineError(f"Failed to inspect image {tag}: {e}") from e
        logger.debug(f"Image {tag} already present")
        return True

    def build(self, rocm_version: str) -> None:
        if self.project.settings.buildkit:
            self._build_with_cli(rocm_version)
        else:
            self._build_with_sdk(rocm_version)

    def _build_with_cli(self, rocm_version: str) -> None:
        """Build with ``docker build`` and DOCKER_BUILDKIT=1."""
        require_tool("docker")
        run_checked(
            [
                "docker",
                "build",
                "--build-arg",
                f"ROCM_VERSION={rocm_version}",
                "-t",
                self.project.docker_tag(rocm_version),
                "-f",
                str(self.project.dockerfile_path),
                ".",
            ],
            description="docker build",
            cwd=self.project.project_dir,
            env={"DOCKER_BUILDKIT": "1"},
        )

    def _build_with_sdk(self, rocm_version: str) -> None:
        """Build through the Docker SDK, streaming build output to the log."""
        tag = self.project.docker_tag(rocm_version)
        dockerfile = self.project.dockerfile_path

        # docker-py takes the Dockerfile relative to the context when possible
        try:
            dockerfile_arg = str(dockerfile.relative_to(self.project.project_dir))
        except ValueError:
            dockerfile_arg = str(dockerfile)

        logger.info(f"Building image {tag} from {dockerfile}")
        try:
            _image, build_logs = self.client.images.build(
                path=str(self.project.project_dir),
                dockerfile=dockerfile_arg,
                tag=tag,
                buildargs={"ROCM_VERSION": rocm_version},
                rm=True,
            )
        except BuildError as e:
            for chunk in e.build_log:
                _log_build_chunk(chunk)
            raise ContainerEngineError(f"docker build failed: {e.msg}") from e
        except APIError as e:
            raise ContainerEngineError(f"docker build failed: {e}") from e

        for chunk in build_logs:
            _log_build_chunk(chunk)
        logger.info(f"Successfully built {tag}")

    def launch_command(self, rocm_version: str) -> list[str]:
        settings = self.project.settings
        run_opts = settings.docker

        command = ["docker", "run", "-it", "--rm"]
        command += [f"--device={device}" for device in run_opts.devices]
        for group in run_opts.group_add:
            command += ["--group-add", group]
        command += [f"--cap-add={cap}" for cap in run_opts.cap_add]
        for opt in run_opts.security_opt:
            command += ["--security-opt", opt]
        command += [
            "-v",
            f"{self.project.project_dir}:{settings.workspace_mount}",
            "-w",
            settings.workspace_mount,
            self.project.docker_tag(rocm_version),
        ]
        return command

    def close(self) -> None:
        if self._client is not None:
            with contextlib.suppress(Exception):
                self._client.close()
            self._client = None


def _log_build_chunk(chunk: dict) -> None:
    """Forward one decoded build-log chunk from the SDK to the logger."""
    if "stream" in chunk:
        line = chunk["stream"].rstrip()
        if line:
            logger.info(line)
    elif "error" in chunk:
        logger.error(chunk["error"].rstrip())
