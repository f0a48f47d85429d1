"""Utils module - Shared utilities."""

from __future__ import annotations

from omniprobe_containers.utils.logging import LogLevel, setup_logging
from omniprobe_containers.utils.process import (
    require_tool,
    run_checked,
    run_command,
    sync_submodules,
)

__all__ = [
    "LogLevel",
    "require_tool",
    "run_checked",
    "run_command",
    "setup_logging",
    "sync_submodules",
]
