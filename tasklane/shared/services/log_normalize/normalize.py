"""Normalize captured Claude ``stream-json`` output into conversation entries."""

from __future__ import annotations

import logging
from typing import Any

from tasklane.shared.models.conversation import (
    AssistantMessage,
    NormalizedConversation,
    NormalizedEntry,
    SystemMessage,
    ToolUse,
    UserMessage,
)

from .actions import classify_action, summarize_tool_use
from .records import (
    AssistantRecord,
    InitRecord,
    LineRecord,
    RawTextRecord,
    ResultRecord,
    SystemRecord,
    UnrecognizedRecord,
    UserRecord,
    parse_line,
)

logger = logging.getLogger(__name__)

DEFAULT_EXECUTOR_KIND = "Claude"


def normalize_logs(
    logs: str,
    working_directory: str,
    *,
    executor_kind: str = DEFAULT_EXECUTOR_KIND,
) -> NormalizedConversation:
    """Re-derive the full conversation from a (possibly partial) log buffer.

    Pure and total: unparseable lines become raw system entries, and
    calling it again on the same text yields the same entries.
    """
    entries: list[NormalizedEntry] = []
    session_id: str | None = None

    for line in logs.split("\n"):
        trimmed = line.strip()
        if not trimmed:
            continue

        record, line_session_id = parse_line(trimmed)
        if session_id is None and line_session_id is not None:
            session_id = line_session_id

        entries.extend(_entries_for(record, working_directory))

    logger.debug(
        "Normalized %d entries (session=%s) for %s",
        len(entries), session_id, executor_kind,
    )
    return NormalizedConversation(
        executor_kind=executor_kind,
        entries=tuple(entries),
        session_id=session_id,
    )


def _entries_for(record: LineRecord, working_directory: str) -> list[NormalizedEntry]:
    if isinstance(record, RawTextRecord):
        return [
            NormalizedEntry(
                entry_type=SystemMessage(),
                content=f"Raw output: {record.line}",
            )
        ]
    if isinstance(record, AssistantRecord):
        return _assistant_entries(record.content, working_directory)
    if isinstance(record, UserRecord):
        return _user_entries(record.content)
    if isinstance(record, InitRecord):
        return [
            NormalizedEntry(
                entry_type=SystemMessage(),
                content=f"System initialized with model: {record.model or 'unknown'}",
                metadata=record.value,
            )
        ]
    if isinstance(record, (SystemRecord, ResultRecord)):
        return []
    if isinstance(record, UnrecognizedRecord):
        return [
            NormalizedEntry(
                entry_type=SystemMessage(),
                content=f"Unrecognized JSON: {record.line}",
                metadata=record.value,
            )
        ]
    raise TypeError(f"Unhandled record type: {type(record).__name__}")


def _assistant_entries(
    content: tuple[Any, ...],
    working_directory: str,
) -> list[NormalizedEntry]:
    entries: list[NormalizedEntry] = []
    for item in content:
        if not isinstance(item, dict):
            continue
        item_type = item.get("type")
        if item_type == "text":
            text = item.get("text")
            if isinstance(text, str):
                entries.append(
                    NormalizedEntry(
                        entry_type=AssistantMessage(),
                        content=text,
                        metadata=item,
                    )
                )
        elif item_type == "tool_use":
            tool_name = item.get("name")
            if not isinstance(tool_name, str):
                continue
            arguments = item.get("input")
            action = classify_action(tool_name, arguments, working_directory)
            entries.append(
                NormalizedEntry(
                    entry_type=ToolUse(tool_name=tool_name, action=action),
                    content=summarize_tool_use(
                        tool_name, arguments, action, working_directory,
                    ),
                    metadata=item,
                )
            )
    return entries


def _user_entries(content: tuple[Any, ...]) -> list[NormalizedEntry]:
    entries: list[NormalizedEntry] = []
    for item in content:
        if not isinstance(item, dict) or item.get("type") != "text":
            continue
        text = item.get("text")
        if isinstance(text, str):
            entries.append(
                NormalizedEntry(
                    entry_type=UserMessage(),
                    content=text,
                    metadata=item,
                )
            )
    return entries
