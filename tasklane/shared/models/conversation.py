"""Normalized conversation models.

Every executor reduces its provider-specific log output to these
types. All of them are immutable once built.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Union


# ── Action types ──


@dataclass(frozen=True)
class FileRead:
    path: str


@dataclass(frozen=True)
class FileWrite:
    path: str


@dataclass(frozen=True)
class CommandRun:
    command: str


@dataclass(frozen=True)
class Search:
    query: str


@dataclass(frozen=True)
class WebFetch:
    url: str


@dataclass(frozen=True)
class TaskCreate:
    description: str


@dataclass(frozen=True)
class PlanPresentation:
    plan: str


@dataclass(frozen=True)
class Other:
    description: str


ActionType = Union[
    FileRead,
    FileWrite,
    CommandRun,
    Search,
    WebFetch,
    TaskCreate,
    PlanPresentation,
    Other,
]

_ACTION_TAGS: dict[type, str] = {
    FileRead: "file_read",
    FileWrite: "file_write",
    CommandRun: "command_run",
    Search: "search",
    WebFetch: "web_fetch",
    TaskCreate: "task_create",
    PlanPresentation: "plan_presentation",
    Other: "other",
}


def action_to_dict(action: ActionType) -> dict[str, str]:
    """Serialize an action as a ``type``-tagged mapping."""
    data = {"type": _ACTION_TAGS[type(action)]}
    data.update(vars(action))
    return data


# ── Entry types ──


@dataclass(frozen=True)
class UserMessage:
    pass


@dataclass(frozen=True)
class AssistantMessage:
    pass


@dataclass(frozen=True)
class SystemMessage:
    pass


@dataclass(frozen=True)
class ToolUse:
    tool_name: str
    action: ActionType


EntryType = Union[UserMessage, AssistantMessage, SystemMessage, ToolUse]


def entry_type_to_dict(entry_type: EntryType) -> dict[str, Any]:
    if isinstance(entry_type, ToolUse):
        return {
            "type": "tool_use",
            "tool_name": entry_type.tool_name,
            "action_type": action_to_dict(entry_type.action),
        }
    if isinstance(entry_type, UserMessage):
        return {"type": "user_message"}
    if isinstance(entry_type, AssistantMessage):
        return {"type": "assistant_message"}
    return {"type": "system_message"}


@dataclass(frozen=True)
class NormalizedEntry:
    entry_type: EntryType
    content: str
    timestamp: datetime | None = None
    metadata: Any = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "timestamp": self.timestamp.isoformat() if self.timestamp else None,
            "entry_type": entry_type_to_dict(self.entry_type),
            "content": self.content,
            "metadata": self.metadata,
        }


@dataclass(frozen=True)
class NormalizedConversation:
    """Result of one normalization pass over captured executor output."""

    executor_kind: str
    entries: tuple[NormalizedEntry, ...] = field(default_factory=tuple)
    session_id: str | None = None
    prompt: str | None = None
    summary: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "entries": [entry.to_dict() for entry in self.entries],
            "session_id": self.session_id,
            "executor_type": self.executor_kind,
            "prompt": self.prompt,
            "summary": self.summary,
        }
