"""CLI for omniprobe container tooling.

Provides a command-line interface using Typer for:
- Building the development container (Docker and/or Apptainer)
- Running an interactive session in it, building first when needed

Installed as ``omniprobe-container {build,run}`` plus the standalone
``omniprobe-build`` and ``omniprobe-run`` shortcuts.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import NoReturn

import typer
from rich.console import Console
from rich.markup import escape

from omniprobe_containers.builder import ContainerBuilder
from omniprobe_containers.core.config import load_project
from omniprobe_containers.core.constants import DEFAULT_ROCM_VERSION, SUPPORTED_ROCM_VERSIONS
from omniprobe_containers.core.exceptions import (
    ContainerToolError,
    ToolNotFoundError,
    UnsupportedRocmVersionError,
    UsageError,
)
from omniprobe_containers.core.schemas import ProjectContext, validate_selection
from omniprobe_containers.launcher import ContainerLauncher
from omniprobe_containers.utils.logging import LogLevel, setup_logging

app = typer.Typer(
    name="omniprobe-container",
    help="Build and run the omniprobe development container",
    add_completion=False,
)

logger = logging.getLogger(__name__)

console = Console()

_SUPPORTED = ", ".join(SUPPORTED_ROCM_VERSIONS)

DOCKER_OPTION = typer.Option(False, "--docker", help="Use the Docker backend")
APPTAINER_OPTION = typer.Option(False, "--apptainer", help="Use the Apptainer backend")
ROCM_OPTION = typer.Option(
    None,
    "--rocm",
    metavar="VERSION",
    help=f"ROCm version (default: {DEFAULT_ROCM_VERSION}, supported: {_SUPPORTED})",
)
PROJECT_DIR_OPTION = typer.Option(
    None,
    "--project-dir",
    "-p",
    help="Project root holding VERSION (default: nearest ancestor of the cwd)",
)
CONFIG_OPTION = typer.Option(
    None, "--config", "-c", help="Settings file (YAML/JSON) overriding the defaults"
)
LOG_LEVEL_OPTION = typer.Option(
    LogLevel.WARNING, "--log-level", "-l", case_sensitive=False, help="Logging level"
)
JSON_LOGS_OPTION = typer.Option(False, "--json-logs", help="Output logs in JSON format")
LOG_FILE_OPTION = typer.Option(
    None, "--log-file", help="Write logs to file in addition to the console"
)


@app.command()
def build(
    docker: bool = DOCKER_OPTION,
    apptainer: bool = APPTAINER_OPTION,
    rocm: str | None = ROCM_OPTION,
    project_dir: Path | None = PROJECT_DIR_OPTION,
    config: Path | None = CONFIG_OPTION,
    log_level: LogLevel = LOG_LEVEL_OPTION,
    json_logs: bool = JSON_LOGS_OPTION,
    log_file: Path | None = LOG_FILE_OPTION,
) -> None:
    """Build the container image for one or both backends."""
    setup_logging(
        level=log_level.value,
        log_file=log_file,
        json_format=json_logs,
        rich_console=not json_logs,
    )

    project: ProjectContext | None = None
    try:
        project = load_project(project_dir, config)
        selection = validate_selection(
            docker,
            apptainer,
            rocm if rocm is not None else project.settings.default_rocm_version,
            project.settings.supported_rocm_versions,
            allow_multiple=True,
        )
        ContainerBuilder(project, console=console).build(selection)
    except ContainerToolError as e:
        _fail("build", e, project)


@app.command()
def run(
    docker: bool = DOCKER_OPTION,
    apptainer: bool = APPTAINER_OPTION,
    rocm: str | None = ROCM_OPTION,
    project_dir: Path | None = PROJECT_DIR_OPTION,
    config: Path | None = CONFIG_OPTION,
    log_level: LogLevel = LOG_LEVEL_OPTION,
    json_logs: bool = JSON_LOGS_OPTION,
    log_file: Path | None = LOG_FILE_OPTION,
) -> None:
    """Run an interactive session, building the image first if missing."""
    setup_logging(
        level=log_level.value,
        log_file=log_file,
        json_format=json_logs,
        rich_console=not json_logs,
    )

    project: ProjectContext | None = None
    try:
        project = load_project(project_dir, config)
        selection = validate_selection(
            docker,
            apptainer,
            rocm if rocm is not None else project.settings.default_rocm_version,
            project.settings.supported_rocm_versions,
            allow_multiple=False,
        )
        returncode = ContainerLauncher(project, console=console).run(selection)
    except ContainerToolError as e:
        _fail("run", e, project)

    # Exit codes are 0 or 1; the shell's own status is only logged
    if returncode != 0:
        logger.info("Reporting session exit status %d as 1", returncode)
        raise typer.Exit(1)


def _fail(command: str, error: ContainerToolError, project: ProjectContext | None) -> NoReturn:
    """Report a tooling error with its context and exit with status 1."""
    console.print(f"[bold red]Error:[/] {escape(str(error))}")

    if isinstance(error, UnsupportedRocmVersionError):
        console.print(f"Supported ROCm versions: {' '.join(error.supported)}")
    elif isinstance(error, ToolNotFoundError) and error.install_hint:
        console.print(f"Please install {error.tool.capitalize()} first: {error.install_hint}")
    elif isinstance(error, UsageError) and error.show_usage:
        _print_usage(command, project)

    raise typer.Exit(1)


def _print_usage(command: str, project: ProjectContext | None) -> None:
    supported = (
        " ".join(project.settings.supported_rocm_versions)
        if project is not None
        else " ".join(SUPPORTED_ROCM_VERSIONS)
    )
    default = project.settings.default_rocm_version if project else DEFAULT_ROCM_VERSION
    verb = "Build" if command == "build" else "Run using"

    console.print(f"Usage: omniprobe-{command} [--docker] [--apptainer] [--rocm VERSION]")
    console.print(f"  --docker      {verb} Docker container")
    console.print(f"  --apptainer   {verb} Apptainer container")
    console.print(f"  --rocm        ROCm version (default: {default}, supported: {supported})")


def main(args: list[str] | None = None, prog_name: str | None = None) -> None:
    """Console-script entry point.

    Typer prints usage for unknown flags, missing option values and bad
    choices, then exits with status 2; that is normalized to status 1
    here like every other validation failure.
    """
    try:
        app(args=args, prog_name=prog_name)
    except SystemExit as e:
        sys.exit(1 if e.code == 2 else e.code)


def build_main() -> None:
    """Entry point for ``omniprobe-build``."""
    main(["build", *sys.argv[1:]], prog_name="omniprobe-build")


def run_main() -> None:
    """Entry point for ``omniprobe-run``."""
    main(["run", *sys.argv[1:]], prog_name="omniprobe-run")


if __name__ == "__main__":
    main()
