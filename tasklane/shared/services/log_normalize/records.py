"""Tagged records for one line of Claude ``stream-json`` output.

``parse_line`` turns a raw line into exactly one record variant so the
normalizer can dispatch on type instead of probing nested dicts.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Union


@dataclass(frozen=True)
class RawTextRecord:
    """A line that is not JSON at all."""

    line: str


@dataclass(frozen=True)
class InitRecord:
    """``{"type": "system", "subtype": "init", ...}``."""

    value: dict
    model: str | None


@dataclass(frozen=True)
class SystemRecord:
    """A ``system`` line with a subtype other than ``init``."""

    value: dict
    subtype: str


@dataclass(frozen=True)
class AssistantRecord:
    value: dict
    content: tuple[Any, ...]


@dataclass(frozen=True)
class UserRecord:
    value: dict
    content: tuple[Any, ...]


@dataclass(frozen=True)
class ResultRecord:
    """Final ``result`` summary; never shown."""

    value: dict


@dataclass(frozen=True)
class UnrecognizedRecord:
    """Valid JSON whose shape is not one of the above."""

    line: str
    value: Any


LineRecord = Union[
    RawTextRecord,
    InitRecord,
    SystemRecord,
    AssistantRecord,
    UserRecord,
    ResultRecord,
    UnrecognizedRecord,
]


def _reject_constant(name: str) -> Any:
    # NaN and Infinity are not JSON.
    raise ValueError(f"Invalid JSON constant: {name}")


def parse_line(line: str) -> tuple[LineRecord, str | None]:
    """Parse one stripped, non-blank line.

    Returns the record and the line's ``session_id`` (or None).
    """
    try:
        value = json.loads(line, parse_constant=_reject_constant)
    except (ValueError, RecursionError):
        return RawTextRecord(line=line), None

    if not isinstance(value, dict):
        return UnrecognizedRecord(line=line, value=value), None

    session_id = value.get("session_id")
    if not isinstance(session_id, str):
        session_id = None

    return _classify(line, value), session_id


def _classify(line: str, value: dict) -> LineRecord:
    msg_type = value.get("type")

    if msg_type in ("assistant", "user"):
        message = value.get("message")
        if isinstance(message, dict):
            content = message.get("content")
            items = tuple(content) if isinstance(content, list) else ()
            if msg_type == "assistant":
                return AssistantRecord(value=value, content=items)
            return UserRecord(value=value, content=items)
    elif msg_type == "system":
        subtype = value.get("subtype")
        if isinstance(subtype, str):
            if subtype == "init":
                model = value.get("model")
                return InitRecord(
                    value=value,
                    model=model if isinstance(model, str) else None,
                )
            return SystemRecord(value=value, subtype=subtype)
    elif msg_type == "result":
        return ResultRecord(value=value)

    return UnrecognizedRecord(line=line, value=value)
