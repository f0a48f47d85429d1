"""Shared constants for omniprobe container tooling.

Centralized defaults used by the settings schema and the CLI help text.
"""

from __future__ import annotations

# Container/image base name
DEFAULT_CONTAINER_NAME = "omniprobe"

# ROCm versions the Dockerfile and def file know how to install
SUPPORTED_ROCM_VERSIONS = ("6.3", "6.4")
DEFAULT_ROCM_VERSION = "6.3"

# Project layout (relative to the project root)
VERSION_FILENAME = "VERSION"
CONTAINERS_DIRNAME = "containers"
DOCKERFILE_NAME = "omniprobe.Dockerfile"
DEFINITION_FILE_NAME = "omniprobe.def"
SETTINGS_FILENAME = "omniprobe-containers.yaml"

# Where the project directory is bind-mounted inside the container
WORKSPACE_MOUNT = "/workspace"

APPTAINER_INSTALL_URL = "https://apptainer.org/docs/admin/main/installation.html"
