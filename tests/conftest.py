"""Shared fixtures for omniprobe container tooling tests."""

import io
from pathlib import Path

import pytest
from rich.console import Console

from omniprobe_containers.backends.base import ContainerBackend
from omniprobe_containers.core.exceptions import ContainerEngineError
from omniprobe_containers.core.schemas import Backend, ContainerSettings, ProjectContext


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    """A minimal project tree: VERSION plus an empty containers/ directory."""
    (tmp_path / "VERSION").write_text("1.2\n")
    (tmp_path / "containers").mkdir()
    return tmp_path


@pytest.fixture
def project(project_dir: Path) -> ProjectContext:
    return ProjectContext(project_dir=project_dir, version="1.2", settings=ContainerSettings())


@pytest.fixture
def console() -> Console:
    """Console that records output instead of writing to the terminal."""
    return Console(file=io.StringIO(), width=200)


class FakeBackend(ContainerBackend):
    """In-memory backend that records every engine interaction."""

    def __init__(
        self,
        project: ProjectContext,
        kind: Backend,
        exists: bool = False,
        build_error: Exception | None = None,
        available_error: Exception | None = None,
        launch_status: int = 0,
        calls: list | None = None,
    ) -> None:
        super().__init__(project)
        self.backend = kind
        self.exists = exists
        self.build_error = build_error
        self.available_error = available_error
        self.launch_status = launch_status
        self.calls = calls if calls is not None else []

    def check_available(self) -> None:
        self.calls.append(("check_available", self.backend))
        if self.available_error is not None:
            raise self.available_error

    def artifact_exists(self, rocm_version: str) -> bool:
        self.calls.append(("exists", self.backend, rocm_version))
        return self.exists

    def build(self, rocm_version: str) -> None:
        self.calls.append(("build", self.backend, rocm_version))
        if self.build_error is not None:
            raise self.build_error
        self.exists = True

    def launch_command(self, rocm_version: str) -> list[str]:
        return ["true"]

    def launch(self, rocm_version: str) -> int:
        self.calls.append(("launch", self.backend, rocm_version))
        return self.launch_status

    def close(self) -> None:
        self.calls.append(("close", self.backend))


class FakeBackendFactory:
    """Backend factory handing out one FakeBackend per kind, sharing one call log.

    Reusing the instance lets a build performed by the builder be seen by
    the launcher's later existence check.
    """

    def __init__(self, **overrides: dict) -> None:
        # overrides: backend value ("docker"/"apptainer") -> FakeBackend kwargs
        self.overrides = overrides
        self.calls: list = []
        self.created: dict[Backend, FakeBackend] = {}

    def __call__(self, kind: Backend, project: ProjectContext) -> FakeBackend:
        if kind not in self.created:
            self.created[kind] = FakeBackend(
                project, kind, calls=self.calls, **self.overrides.get(kind.value, {})
            )
        return self.created[kind]


@pytest.fixture
def fake_factory():
    """Factory for FakeBackendFactory; pass per-backend kwargs by backend value."""
    return FakeBackendFactory


@pytest.fixture
def engine_failure() -> ContainerEngineError:
    return ContainerEngineError("docker build failed with exit status 1")
