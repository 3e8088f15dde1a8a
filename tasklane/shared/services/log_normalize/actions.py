"""Tool-use classification and concise summaries.

Maps a Claude tool invocation (name + ``input`` object) to one of the
closed ``ActionType`` variants, and renders the one-line (or, for todo
lists, multi-line) content shown for the entry.

Adding a tool only needs a decorated function:

    @action_classifier("mytool")
    def _classify_my_tool(args, working_directory):
        return Other(description="...")
"""

from __future__ import annotations

from typing import Any, Callable

from tasklane.shared.models.conversation import (
    ActionType,
    CommandRun,
    FileRead,
    FileWrite,
    Other,
    PlanPresentation,
    Search,
    TaskCreate,
    WebFetch,
)

from .paths import make_path_relative

ClassifierFn = Callable[[dict, str], ActionType]
SummaryFn = Callable[[str, dict, str], str]

_CLASSIFIERS: dict[str, ClassifierFn] = {}
_OTHER_SUMMARIES: dict[str, SummaryFn] = {}

TODO_FALLBACK = "Managing TODO list"

_TODO_STATUS_GLYPHS = {
    "completed": "✅",
    "in_progress": "\U0001f504",
    "pending": "⏳",
    "todo": "⏳",
}
_TODO_OTHER_GLYPH = "\U0001f4dd"


def action_classifier(*names: str):
    """Register a classifier for one or more lower-cased tool names."""

    def decorator(fn: ClassifierFn) -> ClassifierFn:
        for name in names:
            _CLASSIFIERS[name] = fn
        return fn

    return decorator


def other_summary(*names: str):
    """Register a summary renderer for tools classified as ``Other``."""

    def decorator(fn: SummaryFn) -> SummaryFn:
        for name in names:
            _OTHER_SUMMARIES[name] = fn
        return fn

    return decorator


def _str_field(args: dict, key: str) -> str | None:
    value = args.get(key)
    return value if isinstance(value, str) else None


def _as_args(arguments: Any) -> dict:
    return arguments if isinstance(arguments, dict) else {}


# ── Classification ──


def classify_action(
    tool_name: str,
    arguments: Any,
    working_directory: str,
) -> ActionType:
    """Classify a tool invocation. Never raises; defaults to ``Other``."""
    classifier = _CLASSIFIERS.get(tool_name.lower())
    if classifier is None:
        return Other(description=f"Tool: {tool_name}")
    return classifier(_as_args(arguments), working_directory)


@action_classifier("read")
def _classify_read(args: dict, working_directory: str) -> ActionType:
    file_path = _str_field(args, "file_path")
    if file_path is None:
        return Other(description="File read operation")
    return FileRead(path=make_path_relative(file_path, working_directory))


@action_classifier("edit", "write", "multiedit")
def _classify_write(args: dict, working_directory: str) -> ActionType:
    file_path = _str_field(args, "file_path")
    if file_path is None:
        file_path = _str_field(args, "path")
    if file_path is None:
        return Other(description="File write operation")
    return FileWrite(path=make_path_relative(file_path, working_directory))


@action_classifier("bash")
def _classify_bash(args: dict, working_directory: str) -> ActionType:
    command = _str_field(args, "command")
    if command is None:
        return Other(description="Command execution")
    return CommandRun(command=command)


@action_classifier("grep")
def _classify_grep(args: dict, working_directory: str) -> ActionType:
    pattern = _str_field(args, "pattern")
    if pattern is None:
        return Other(description="Search operation")
    return Search(query=pattern)


@action_classifier("glob")
def _classify_glob(args: dict, working_directory: str) -> ActionType:
    # Glob stays Other rather than Search; see DESIGN.md.
    pattern = _str_field(args, "pattern")
    if pattern is None:
        return Other(description="File pattern search")
    return Other(description=f"Find files: {pattern}")


@action_classifier("webfetch")
def _classify_web_fetch(args: dict, working_directory: str) -> ActionType:
    url = _str_field(args, "url")
    if url is None:
        return Other(description="Web fetch operation")
    return WebFetch(url=url)


@action_classifier("task")
def _classify_task(args: dict, working_directory: str) -> ActionType:
    description = _str_field(args, "description")
    if description is None:
        description = _str_field(args, "prompt")
    if description is None:
        return Other(description="Task creation")
    return TaskCreate(description=description)


@action_classifier("exit_plan_mode")
def _classify_exit_plan_mode(args: dict, working_directory: str) -> ActionType:
    plan = _str_field(args, "plan")
    if plan is None:
        return Other(description="Plan presentation")
    return PlanPresentation(plan=plan)


# ── Summaries ──


def summarize_tool_use(
    tool_name: str,
    arguments: Any,
    action: ActionType,
    working_directory: str,
) -> str:
    """Render the display content for a classified tool invocation."""
    if isinstance(action, (FileRead, FileWrite)):
        return f"`{action.path}`"
    if isinstance(action, CommandRun):
        return f"`{action.command}`"
    if isinstance(action, Search):
        return f"`{action.query}`"
    if isinstance(action, WebFetch):
        return f"`{action.url}`"
    if isinstance(action, TaskCreate):
        return action.description
    if isinstance(action, PlanPresentation):
        return action.plan

    renderer = _OTHER_SUMMARIES.get(tool_name.lower())
    if renderer is None:
        return tool_name
    return renderer(tool_name, _as_args(arguments), working_directory)


@other_summary("todoread", "todowrite")
def _summarize_todos(tool_name: str, args: dict, working_directory: str) -> str:
    todos = args.get("todos")
    if not isinstance(todos, list):
        return TODO_FALLBACK

    items: list[str] = []
    for todo in todos:
        if not isinstance(todo, dict):
            continue
        content = _str_field(todo, "content")
        if content is None:
            continue
        status = _str_field(todo, "status") or "pending"
        glyph = _TODO_STATUS_GLYPHS.get(status, _TODO_OTHER_GLYPH)
        priority = _str_field(todo, "priority") or "medium"
        items.append(f"{glyph} {content} ({priority})")

    if not items:
        return TODO_FALLBACK
    return "TODO List:\n" + "\n".join(items)


@other_summary("ls")
def _summarize_ls(tool_name: str, args: dict, working_directory: str) -> str:
    path = _str_field(args, "path")
    if path is None:
        return "List directory"
    relative = make_path_relative(path, working_directory)
    if not relative:
        return "List directory"
    return f"List directory: `{relative}`"


@other_summary("glob")
def _summarize_glob(tool_name: str, args: dict, working_directory: str) -> str:
    pattern = _str_field(args, "pattern") or "*"
    path = _str_field(args, "path")
    if path is None:
        return f"Find files: `{pattern}`"
    relative = make_path_relative(path, working_directory)
    return f"Find files: `{pattern}` in `{relative}`"


@other_summary("codebase_search_agent")
def _summarize_codebase_search(
    tool_name: str, args: dict, working_directory: str,
) -> str:
    query = _str_field(args, "query")
    if query is None:
        return "Codebase search"
    return f"Search: {query}"
