"""tasklane engine: launch and supervise coding-agent CLIs for tasks."""
from .config import ExecutorConfig
from .errors import (
    ExecutorError,
    FallbackExhaustedError,
    SpawnError,
    StdinCloseError,
    StdinWriteError,
    TaskNotFoundError,
)
from .tasks import InMemoryTaskStore, TaskRecord, TaskStore, build_task_prompt

__all__ = [
    # Config
    "ExecutorConfig",
    "load_yaml_config",
    # Tasks
    "InMemoryTaskStore",
    "TaskRecord",
    "TaskStore",
    "build_task_prompt",
    # Executors (lazy import)
    "ClaudeExecutor",
    "ClaudeFollowupExecutor",
    "CommandResolver",
    # Errors
    "ExecutorError",
    "FallbackExhaustedError",
    "SpawnError",
    "StdinCloseError",
    "StdinWriteError",
    "TaskNotFoundError",
]


def __getattr__(name: str):
    if name == "load_yaml_config":
        from .yaml_config import load_yaml_config
        return load_yaml_config
    if name == "ClaudeExecutor":
        from .executors.claude_executor import ClaudeExecutor
        return ClaudeExecutor
    if name == "ClaudeFollowupExecutor":
        from .executors.claude_executor import ClaudeFollowupExecutor
        return ClaudeFollowupExecutor
    if name == "CommandResolver":
        from .executors.resolver import CommandResolver
        return CommandResolver
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
