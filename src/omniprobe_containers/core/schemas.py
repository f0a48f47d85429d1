"""Pydantic schemas for omniprobe container tooling.

This module defines the data contracts shared by the build and run workflows:
backend selection, user-tunable settings, and the project context from which
artifact names are derived.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field, field_validator, model_validator

from omniprobe_containers.core.constants import (
    APPTAINER_INSTALL_URL,
    CONTAINERS_DIRNAME,
    DEFAULT_CONTAINER_NAME,
    DEFAULT_ROCM_VERSION,
    DEFINITION_FILE_NAME,
    DOCKERFILE_NAME,
    SUPPORTED_ROCM_VERSIONS,
    WORKSPACE_MOUNT,
)
from omniprobe_containers.core.exceptions import UnsupportedRocmVersionError, UsageError


class Backend(str, Enum):
    """Supported containerization backends."""

    DOCKER = "docker"  # Image tag in the local Docker daemon
    APPTAINER = "apptainer"  # Standalone .sif archive file

    @property
    def display_name(self) -> str:
        return self.value.capitalize()


class DockerRunOptions(BaseModel):
    """Device passthrough and privilege flags for ``docker run``."""

    devices: list[str] = Field(default_factory=lambda: ["/dev/kfd", "/dev/dri"])
    group_add: list[str] = Field(default_factory=lambda: ["video"])
    cap_add: list[str] = Field(default_factory=lambda: ["SYS_PTRACE"])
    security_opt: list[str] = Field(default_factory=lambda: ["seccomp=unconfined"])


class ApptainerOptions(BaseModel):
    """Options for the interactive ``apptainer exec`` session."""

    shell: str = Field(default="/bin/bash", description="Shell started inside the container")
    rcfile: str = Field(default="/etc/bashrc", description="Startup file passed to the shell")
    cleanenv: bool = Field(default=True, description="Do not leak host environment")
    install_hint_url: str = Field(default=APPTAINER_INSTALL_URL)


class ContainerSettings(BaseModel):
    """Settings for building and running the omniprobe container.

    Loaded from ``containers/omniprobe-containers.yaml`` when present,
    otherwise the defaults below reproduce the stock project layout.

    Attributes:
        name: Base name for image tags and .sif files
        supported_rocm_versions: ROCm versions accepted by --rocm
        default_rocm_version: Version used when --rocm is omitted
        containers_dir: Directory holding definition files and .sif artifacts
        dockerfile: Dockerfile name inside containers_dir
        definition_file: Apptainer def file name inside containers_dir
        workspace_mount: Mount point of the project directory in the container
        buildkit: Build Docker images through the BuildKit CLI path
    """

    name: str = Field(default=DEFAULT_CONTAINER_NAME, min_length=1)
    supported_rocm_versions: list[str] = Field(
        default_factory=lambda: list(SUPPORTED_ROCM_VERSIONS), min_length=1
    )
    default_rocm_version: str = Field(default=DEFAULT_ROCM_VERSION)
    containers_dir: Path = Field(default=Path(CONTAINERS_DIRNAME))
    dockerfile: str = Field(default=DOCKERFILE_NAME)
    definition_file: str = Field(default=DEFINITION_FILE_NAME)
    workspace_mount: str = Field(default=WORKSPACE_MOUNT)
    buildkit: bool = Field(default=True)
    docker: DockerRunOptions = Field(default_factory=DockerRunOptions)
    apptainer: ApptainerOptions = Field(default_factory=ApptainerOptions)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        """Image names may not carry their own tag."""
        if ":" in v:
            raise ValueError(f"Container name must not contain a tag: {v}")
        return v

    @field_validator("workspace_mount")
    @classmethod
    def validate_workspace_mount(cls, v: str) -> str:
        if not v.startswith("/"):
            raise ValueError(f"workspace_mount must be an absolute path: {v}")
        return v

    @model_validator(mode="after")
    def check_default_supported(self) -> ContainerSettings:
        """Default ROCm version must be one of the supported versions."""
        if self.default_rocm_version not in self.supported_rocm_versions:
            raise ValueError(
                f"default_rocm_version {self.default_rocm_version!r} is not in "
                f"supported_rocm_versions {self.supported_rocm_versions}"
            )
        return self


class BackendSelection(BaseModel):
    """Validated backend choice plus ROCm version for one invocation."""

    backends: list[Backend] = Field(..., min_length=1)
    rocm_version: str

    @property
    def backend(self) -> Backend:
        """The single backend of a runner selection."""
        return self.backends[0]


def validate_selection(
    docker: bool,
    apptainer: bool,
    rocm_version: str,
    supported_versions: tuple[str, ...] | list[str] = SUPPORTED_ROCM_VERSIONS,
    allow_multiple: bool = False,
) -> BackendSelection:
    """Validate command-line backend flags and ROCm version.

    The version is checked before the backend flags, so an unsupported
    version is reported even when the flags are also wrong.

    Args:
        docker: Whether --docker was given
        apptainer: Whether --apptainer was given
        rocm_version: Value of --rocm
        supported_versions: Accepted ROCm versions
        allow_multiple: Builder mode; accept both flags at once

    Returns:
        BackendSelection with backends in build order (Docker first)

    Raises:
        UnsupportedRocmVersionError: If rocm_version is not supported
        UsageError: If the backend flags are missing or conflicting
    """
    if rocm_version not in supported_versions:
        raise UnsupportedRocmVersionError(rocm_version, supported_versions)

    backends = [
        backend
        for backend, requested in ((Backend.DOCKER, docker), (Backend.APPTAINER, apptainer))
        if requested
    ]

    if allow_multiple:
        if not backends:
            raise UsageError("At least one of the options --docker or --apptainer is required.")
    elif len(backends) > 1:
        raise UsageError("Cannot use both --docker and --apptainer simultaneously.")
    elif not backends:
        raise UsageError("Must specify either --docker or --apptainer.")

    return BackendSelection(backends=backends, rocm_version=rocm_version)


class ProjectContext(BaseModel):
    """Resolved project root, its VERSION and the active settings.

    All artifact names are derived here so the builder and the launcher
    always agree on them.
    """

    project_dir: Path
    version: str = Field(..., min_length=1)
    settings: ContainerSettings = Field(default_factory=ContainerSettings)

    @property
    def containers_path(self) -> Path:
        if self.settings.containers_dir.is_absolute():
            return self.settings.containers_dir
        return self.project_dir / self.settings.containers_dir

    @property
    def dockerfile_path(self) -> Path:
        return self.containers_path / self.settings.dockerfile

    @property
    def definition_path(self) -> Path:
        return self.containers_path / self.settings.definition_file

    def artifact_label(self, rocm_version: str) -> str:
        """Version label shared by both backends, e.g. ``1.2-rocm6.4``."""
        return f"{self.version}-rocm{rocm_version}"

    def docker_tag(self, rocm_version: str) -> str:
        """Docker image tag, e.g. ``omniprobe:1.2-rocm6.4``."""
        return f"{self.settings.name}:{self.artifact_label(rocm_version)}"

    def sif_path(self, rocm_version: str) -> Path:
        """Apptainer image path, e.g. ``containers/omniprobe_1.2-rocm6.4.sif``."""
        return self.containers_path / f"{self.settings.name}_{self.artifact_label(rocm_version)}.sif"

    def artifact_ref(self, backend: Backend, rocm_version: str) -> str:
        """Human-readable artifact identifier for either backend."""
        if backend is Backend.DOCKER:
            return self.docker_tag(rocm_version)
        return str(self.sif_path(rocm_version))
