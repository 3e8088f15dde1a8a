"""Abstract base for task executors.

An executor wraps one external coding-agent CLI. The orchestration
platform calls spawn() to start the agent for a task (or to resume a
session) and normalize_logs() to turn captured output into entries.
"""
from __future__ import annotations

import abc
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from tasklane.shared.models.conversation import NormalizedConversation
from tasklane.shared.services.log_normalize import normalize_logs

if TYPE_CHECKING:
    from tasklane.engine.tasks import TaskStore

    from .process import ProcessGroupChild


class CommandMode(Enum):
    DEFAULT = "default"
    PLAN = "plan"


@dataclass(frozen=True)
class ResolvedCommand:
    """A fully-formed shell command line for one launch attempt."""
    command: str
    # True when this already is the universal fallback invocation;
    # a failed fallback is never retried.
    is_fallback: bool = False

    def with_suffix(self, suffix: str) -> ResolvedCommand:
        return ResolvedCommand(f"{self.command} {suffix}", self.is_fallback)


class Executor(abc.ABC):
    """Abstract executor interface."""

    @property
    @abc.abstractmethod
    def executor_kind(self) -> str:
        """Label reported on normalized conversations (e.g. 'Claude')."""

    @abc.abstractmethod
    async def spawn(
        self,
        task_store: TaskStore,
        task_id: str,
        working_directory: str,
    ) -> ProcessGroupChild:
        """Start the agent process in *working_directory*.

        The prompt has been written to the child's stdin and stdin is
        closed by the time this returns. Reading stdout/stderr is the
        caller's job.
        """

    def normalize_logs(
        self,
        logs: str,
        working_directory: str,
    ) -> NormalizedConversation:
        """Normalize captured output. Pure; safe to call repeatedly."""
        return normalize_logs(
            logs, working_directory, executor_kind=self.executor_kind,
        )
