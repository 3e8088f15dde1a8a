"""Claude CLI invocation resolution.

Picks the command line that launches Claude Code, in order:

1. explicit override (verbatim)
2. ``claudeCodePath`` from ``~/.claude.json``
3. a locally detected install (PATH, then common install dirs)
4. the universal ``npx`` fallback

Resolution never fails; every problem just moves on to the next step.
"""
from __future__ import annotations

import json
import logging
import os
import shutil
import threading
from pathlib import Path

from .base import CommandMode, ResolvedCommand

logger = logging.getLogger(__name__)

FALLBACK_BASE_COMMAND = "npx -y @anthropic-ai/claude-code@latest"
DEFAULT_COMMAND_NAME = "claude-code"
DEFAULT_INSTALL_DIRS = (
    "/usr/local/bin",
    "/usr/bin",
    "/opt/homebrew/bin",
    "~/.local/bin",
)

_STREAM_FLAGS = "--verbose --output-format=stream-json"


def build_claude_command(base_command: str, mode: CommandMode) -> str:
    """Append the mode flags to a base invocation."""
    if mode is CommandMode.PLAN:
        return f"{base_command} -p --permission-mode=plan {_STREAM_FLAGS}"
    return f"{base_command} -p --dangerously-skip-permissions {_STREAM_FLAGS}"


def read_claude_config_path(config_path: str | Path) -> str | None:
    """Return ``claudeCodePath`` from the user config, or None."""
    path = Path(config_path).expanduser()
    try:
        config = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, ValueError):
        return None
    if not isinstance(config, dict):
        return None
    value = config.get("claudeCodePath")
    if isinstance(value, str) and value.strip():
        return value
    return None


def detect_local_install(
    command_name: str = DEFAULT_COMMAND_NAME,
    install_dirs: tuple[str, ...] | list[str] = DEFAULT_INSTALL_DIRS,
) -> str | None:
    """Probe PATH, then the common install locations."""
    found = shutil.which(command_name)
    if found:
        logger.info("Detected local %s at: %s", command_name, found)
        return found

    for directory in install_dirs:
        candidate = Path(os.path.expanduser(directory)) / command_name
        if candidate.exists():
            logger.info("Found %s at common location: %s", command_name, candidate)
            return str(candidate)

    return None


class InstallCache:
    """Caller-owned memo for the local install lookup.

    A found install is sticky for the cache's lifetime. A miss is never
    stored, so a tool installed later is picked up on the next call.
    Concurrent callers may both probe; either result is the same fact.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._path: str | None = None

    @property
    def cached(self) -> str | None:
        with self._lock:
            return self._path

    def lookup(
        self,
        command_name: str = DEFAULT_COMMAND_NAME,
        install_dirs: tuple[str, ...] | list[str] = DEFAULT_INSTALL_DIRS,
    ) -> str | None:
        with self._lock:
            if self._path is not None:
                return self._path
        path = detect_local_install(command_name, install_dirs)
        if path is not None:
            with self._lock:
                if self._path is None:
                    self._path = path
                return self._path
        return None

    def clear(self) -> None:
        with self._lock:
            self._path = None


# Process-wide default; pass an explicit cache to isolate callers.
DEFAULT_INSTALL_CACHE = InstallCache()


class CommandResolver:
    """Resolves the Claude invocation for a given mode."""

    def __init__(
        self,
        *,
        override: str | None = None,
        claude_config_path: str | Path | None = None,
        install_cache: InstallCache | None = None,
        command_name: str = DEFAULT_COMMAND_NAME,
        install_dirs: tuple[str, ...] | list[str] = DEFAULT_INSTALL_DIRS,
        fallback_command: str = FALLBACK_BASE_COMMAND,
    ) -> None:
        self._override = override
        self._claude_config_path = (
            Path(claude_config_path) if claude_config_path
            else Path.home() / ".claude.json"
        )
        self._cache = install_cache if install_cache is not None else DEFAULT_INSTALL_CACHE
        self._command_name = command_name
        self._install_dirs = install_dirs
        self._fallback_command = fallback_command

    @classmethod
    def from_config(cls, config, install_cache: InstallCache | None = None) -> CommandResolver:
        """Build a resolver from an ExecutorConfig."""
        return cls(
            override=config.command,
            claude_config_path=config.claude_config_path,
            install_cache=install_cache,
            command_name=config.command_name,
            install_dirs=config.common_install_dirs,
            fallback_command=config.fallback_command,
        )

    @property
    def has_override(self) -> bool:
        return bool(self._override)

    def resolve(self, mode: CommandMode = CommandMode.DEFAULT) -> ResolvedCommand:
        """Resolve the command for *mode*. Never raises."""
        if self._override:
            return ResolvedCommand(self._override)

        config_path = read_claude_config_path(self._claude_config_path)
        if config_path:
            logger.info("Using Claude Code from config: %s", config_path)
            return ResolvedCommand(build_claude_command(config_path, mode))

        local_path = self._cache.lookup(self._command_name, self._install_dirs)
        if local_path:
            logger.info("Using local Claude Code: %s", local_path)
            return ResolvedCommand(build_claude_command(local_path, mode))

        logger.info("Falling back to npx Claude Code")
        return self.fallback(mode)

    def fallback(self, mode: CommandMode = CommandMode.DEFAULT) -> ResolvedCommand:
        """The universal fetch-and-run invocation."""
        return ResolvedCommand(
            build_claude_command(self._fallback_command, mode),
            is_fallback=True,
        )
