"""Exception hierarchy for omniprobe container tooling.

Every failure the build and run workflows can hit maps to one of these types.
The CLI catches ``ContainerToolError`` at the boundary, prints a one-line
cause and exits with status 1.
"""

from __future__ import annotations


class ContainerToolError(Exception):
    """Base class for all omniprobe container tooling errors."""


class UsageError(ContainerToolError):
    """Invalid command-line usage, e.g. missing or conflicting backend flags.

    Attributes:
        show_usage: Whether the CLI should print the flag summary after the message
    """

    def __init__(self, message: str, show_usage: bool = True) -> None:
        super().__init__(message)
        self.show_usage = show_usage


class UnsupportedRocmVersionError(ContainerToolError):
    """Requested ROCm version is not in the supported set."""

    def __init__(self, version: str, supported: tuple[str, ...] | list[str]) -> None:
        self.version = version
        self.supported = tuple(supported)
        super().__init__(f"Unsupported ROCm version '{version}'")


class ProjectConfigError(ContainerToolError):
    """Project layout or settings file is unusable (missing VERSION, bad YAML, ...)."""


class ToolNotFoundError(ContainerToolError):
    """A required container engine executable is not on PATH."""

    def __init__(self, tool: str, install_hint: str | None = None) -> None:
        self.tool = tool
        self.install_hint = install_hint
        super().__init__(f"{tool.capitalize()} is not installed or not in PATH")


class ContainerEngineError(ContainerToolError):
    """A delegated engine command (build, inspect, run) failed.

    Attributes:
        returncode: Exit status reported by the engine, 1 when unknown
    """

    def __init__(self, message: str, returncode: int = 1) -> None:
        super().__init__(message)
        self.returncode = returncode
