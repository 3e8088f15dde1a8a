"""Log normalization for Claude ``stream-json`` executor output."""

from .actions import classify_action, summarize_tool_use
from .normalize import normalize_logs
from .paths import make_path_relative
from .records import parse_line

__all__ = [
    "classify_action",
    "summarize_tool_use",
    "normalize_logs",
    "make_path_relative",
    "parse_line",
]
