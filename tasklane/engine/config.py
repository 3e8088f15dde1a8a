"""Executor configuration loaded from environment variables.

All settings have sensible defaults. Override via TASKLANE_* env vars,
or load a YAML file with ``tasklane.engine.yaml_config``.
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

logger = logging.getLogger(__name__)

_TRUTHY = {"1", "true", "yes"}


def _default_claude_config_path() -> str:
    return str(Path.home() / ".claude.json")


@dataclass
class ExecutorConfig:
    """Claude executor configuration."""

    # Explicit command override. Used verbatim: no flags, no wrapping.
    command: str | None = None
    # Run in plan mode (restricted permissions + watch-kill wrapper).
    plan_mode: bool = False
    # Label reported as NormalizedConversation.executor_kind.
    executor_kind: str | None = None

    # User config file carrying an optional ``claudeCodePath``.
    claude_config_path: str = field(default_factory=_default_claude_config_path)
    # Binary name probed on PATH and in the common install locations.
    command_name: str = "claude-code"
    # Universal "fetch and run latest" invocation.
    fallback_command: str = "npx -y @anthropic-ai/claude-code@latest"
    common_install_dirs: list[str] = field(default_factory=lambda: [
        "/usr/local/bin",
        "/usr/bin",
        "/opt/homebrew/bin",
        "~/.local/bin",
    ])

    # Logging
    log_level: str = "INFO"

    @property
    def resolved_executor_kind(self) -> str:
        if self.executor_kind:
            return self.executor_kind
        return "ClaudePlan" if self.plan_mode else "Claude"

    @classmethod
    def from_env(cls) -> ExecutorConfig:
        """Load configuration from TASKLANE_* environment variables."""
        overrides = {
            k: v for k, v in os.environ.items() if k.startswith("TASKLANE_")
        }
        if overrides:
            logger.info(
                "ExecutorConfig.from_env: TASKLANE_* env overrides: %s",
                ", ".join(sorted(overrides)),
            )
        else:
            logger.debug("ExecutorConfig.from_env: no TASKLANE_* env vars set, using defaults")

        config = cls(
            command=os.getenv("TASKLANE_CLAUDE_COMMAND") or None,
            plan_mode=os.getenv("TASKLANE_PLAN_MODE", "").lower() in _TRUTHY,
            executor_kind=os.getenv("TASKLANE_EXECUTOR_KIND") or None,
            claude_config_path=(
                os.getenv("TASKLANE_CLAUDE_CONFIG_PATH")
                or _default_claude_config_path()
            ),
            command_name=os.getenv("TASKLANE_COMMAND_NAME", cls.command_name),
            fallback_command=os.getenv(
                "TASKLANE_FALLBACK_COMMAND", cls.fallback_command
            ),
            log_level=os.getenv("TASKLANE_LOG_LEVEL", cls.log_level),
        )
        logger.info(
            "ExecutorConfig.from_env: kind=%s override=%s config=%s",
            config.resolved_executor_kind,
            config.command or "<none>",
            config.claude_config_path,
        )
        return config
