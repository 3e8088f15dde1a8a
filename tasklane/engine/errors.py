"""Exception hierarchy for the executor layer.

Resolution problems (missing config, failed install probes) never
surface here; only terminal launch failures do.
"""
from __future__ import annotations

from typing import Any


class ExecutorError(Exception):
    """Base exception for all executor errors."""


class TaskNotFoundError(ExecutorError):
    """The task record for a new-task launch does not exist."""
    def __init__(self, task_id: str):
        self.task_id = task_id
        super().__init__(f"Task not found: {task_id}")


class SpawnError(ExecutorError):
    """Failed to start the agent process or hand it the prompt."""
    # Live process left behind by a failed stdin hand-off, if any.
    child: Any = None

    def __init__(
        self,
        command: str,
        executor_kind: str,
        context: str,
        *,
        task_id: str | None = None,
        session_id: str | None = None,
        cause: BaseException | None = None,
    ):
        self.command = command
        self.executor_kind = executor_kind
        self.context = context
        self.task_id = task_id
        self.session_id = session_id
        self.cause = cause
        parts = [context]
        if task_id:
            parts.append(f"task={task_id}")
        if session_id:
            parts.append(f"session={session_id}")
        parts.append(f"command={_first_line(command)!r}")
        if cause is not None:
            parts.append(f"{type(cause).__name__}: {cause}")
        super().__init__(" | ".join(parts))


class StdinWriteError(SpawnError):
    """The process started but writing the prompt to stdin failed.

    ``child`` is the live process; the caller must still kill it.
    """
    def __init__(self, *args: Any, child: Any = None, **kwargs: Any):
        self.child = child
        super().__init__(*args, **kwargs)


class StdinCloseError(SpawnError):
    """The prompt was written but closing stdin failed.

    ``child`` is the live process; the caller must still kill it.
    """
    def __init__(self, *args: Any, child: Any = None, **kwargs: Any):
        self.child = child
        super().__init__(*args, **kwargs)


class FallbackExhaustedError(SpawnError):
    """Both the primary command and the universal fallback failed."""
    def __init__(self, fallback_error: SpawnError):
        self.fallback_error = fallback_error
        self.child = fallback_error.child
        super().__init__(
            fallback_error.command,
            fallback_error.executor_kind,
            f"Fallback failed after primary command failed: "
            f"{fallback_error.context}",
            task_id=fallback_error.task_id,
            session_id=fallback_error.session_id,
            cause=fallback_error.cause,
        )


def _first_line(command: str) -> str:
    """Generated wrapper scripts are multi-line; keep messages readable."""
    lines = [line for line in command.splitlines() if line.strip()]
    if len(lines) <= 1:
        return command.strip()
    for line in lines:
        if line.startswith("command="):
            return line
    return lines[0]
