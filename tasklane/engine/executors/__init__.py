"""Executor abstraction for external coding-agent CLIs."""
from .base import CommandMode, Executor, ResolvedCommand
from .claude_executor import ClaudeExecutor, ClaudeFollowupExecutor
from .process import ProcessGroupChild, get_shell_command, spawn_shell
from .resolver import (
    CommandResolver,
    InstallCache,
    build_claude_command,
    detect_local_install,
    read_claude_config_path,
)
from .watchkill import PLAN_STOP_SENTINEL, PlanPauseWatcher, create_watchkill_script

__all__ = [
    "CommandMode",
    "Executor",
    "ResolvedCommand",
    "ClaudeExecutor",
    "ClaudeFollowupExecutor",
    "ProcessGroupChild",
    "get_shell_command",
    "spawn_shell",
    "CommandResolver",
    "InstallCache",
    "build_claude_command",
    "detect_local_install",
    "read_claude_config_path",
    "PLAN_STOP_SENTINEL",
    "PlanPauseWatcher",
    "create_watchkill_script",
]
