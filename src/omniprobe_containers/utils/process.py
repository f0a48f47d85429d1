"""Helpers for invoking external tools (git, docker, apptainer).

All calls are blocking. Commands inherit the terminal so interactive
sessions and build progress reach the user directly.
"""

from __future__ import annotations

import logging
import os
import shlex
import shutil
import subprocess
from collections.abc import Mapping, Sequence
from pathlib import Path

from omniprobe_containers.core.exceptions import ContainerEngineError, ToolNotFoundError

logger = logging.getLogger(__name__)


def require_tool(tool: str, install_hint: str | None = None) -> str:
    """Return the absolute path of ``tool`` on PATH.

    Raises:
        ToolNotFoundError: If the executable cannot be found
    """
    path = shutil.which(tool)
    if path is None:
        raise ToolNotFoundError(tool, install_hint)
    return path


def run_command(
    command: Sequence[str],
    cwd: Path | None = None,
    env: Mapping[str, str] | None = None,
) -> int:
    """Run a command in the foreground and return its exit status.

    Args:
        command: Argument vector; command[0] is looked up on PATH
        cwd: Working directory for the child process
        env: Extra environment variables layered over os.environ

    Returns:
        The child's exit status

    Raises:
        ToolNotFoundError: If command[0] does not exist
    """
    logger.info(f"Running: {shlex.join(command)}")
    child_env = {**os.environ, **env} if env else None
    try:
        completed = subprocess.run(list(command), cwd=cwd, env=child_env, check=False)
    except FileNotFoundError as e:
        raise ToolNotFoundError(command[0]) from e
    logger.debug(f"{command[0]} exited with status {completed.returncode}")
    return completed.returncode


def run_checked(
    command: Sequence[str],
    description: str,
    cwd: Path | None = None,
    env: Mapping[str, str] | None = None,
) -> None:
    """Run a command and raise if it exits non-zero.

    Raises:
        ContainerEngineError: Carrying the child's exit status
    """
    returncode = run_command(command, cwd=cwd, env=env)
    if returncode != 0:
        raise ContainerEngineError(
            f"{description} failed with exit status {returncode}", returncode=returncode
        )


def sync_submodules(project_dir: Path) -> bool:
    """Initialize and update git submodules of the project recursively.

    A failure here does not stop the build: source tarballs and exported
    trees have no submodules to sync. The problem is logged instead.

    Returns:
        True if the submodules were synced
    """
    if shutil.which("git") is None:
        logger.warning("git not found in PATH; skipping submodule sync")
        return False

    returncode = run_command(
        ["git", "submodule", "update", "--init", "--recursive", str(project_dir)],
        cwd=project_dir,
    )
    if returncode != 0:
        logger.warning(f"git submodule update exited with status {returncode}; continuing")
        return False
    return True
