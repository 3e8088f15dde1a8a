"""Task records and the store interface executors read them from."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True)
class TaskRecord:
    id: str
    project_id: str
    title: str
    description: str | None = None


class TaskStore(Protocol):
    async def get_task(self, task_id: str) -> TaskRecord | None: ...


class InMemoryTaskStore:
    """Dict-backed TaskStore for the CLI and tests."""

    def __init__(self, tasks: list[TaskRecord] | None = None) -> None:
        self._tasks = {task.id: task for task in tasks or []}

    def add(self, task: TaskRecord) -> None:
        self._tasks[task.id] = task

    async def get_task(self, task_id: str) -> TaskRecord | None:
        return self._tasks.get(task_id)


def build_task_prompt(task: TaskRecord) -> str:
    """Prompt handed to the agent for a new task."""
    prompt = f"project_id: {task.project_id}\n\nTask title: {task.title}"
    if task.description:
        prompt += f"\nTask description: {task.description}"
    return prompt
