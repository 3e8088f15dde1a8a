from __future__ import annotations

import pytest

from tasklane.shared.models.conversation import (
    CommandRun,
    FileRead,
    FileWrite,
    Other,
    PlanPresentation,
    Search,
    TaskCreate,
    WebFetch,
    action_to_dict,
)
from tasklane.shared.services.log_normalize import classify_action, summarize_tool_use
from tasklane.shared.services.log_normalize.actions import TODO_FALLBACK


WD = "/tmp/work"


@pytest.mark.parametrize(
    ("tool_name", "arguments", "expected"),
    [
        ("Read", {"file_path": "/tmp/work/a.py"}, FileRead(path="a.py")),
        ("Edit", {"file_path": "/tmp/work/b.py"}, FileWrite(path="b.py")),
        ("Write", {"path": "/tmp/work/c.py"}, FileWrite(path="c.py")),
        ("MultiEdit", {"file_path": "d.py"}, FileWrite(path="d.py")),
        ("Bash", {"command": "ls -la"}, CommandRun(command="ls -la")),
        ("Grep", {"pattern": "TODO"}, Search(query="TODO")),
        ("Glob", {"pattern": "**/*.py"}, Other(description="Find files: **/*.py")),
        ("WebFetch", {"url": "https://example.com"}, WebFetch(url="https://example.com")),
        ("Task", {"description": "Audit auth"}, TaskCreate(description="Audit auth")),
        ("Task", {"prompt": "Write docs"}, TaskCreate(description="Write docs")),
        ("exit_plan_mode", {"plan": "1. do it"}, PlanPresentation(plan="1. do it")),
    ],
)
def test_classify_known_tools(tool_name, arguments, expected) -> None:
    assert classify_action(tool_name, arguments, WD) == expected


@pytest.mark.parametrize(
    ("tool_name", "expected"),
    [
        ("Read", "File read operation"),
        ("Edit", "File write operation"),
        ("Bash", "Command execution"),
        ("Grep", "Search operation"),
        ("Glob", "File pattern search"),
        ("WebFetch", "Web fetch operation"),
        ("Task", "Task creation"),
        ("exit_plan_mode", "Plan presentation"),
    ],
)
def test_missing_fields_fall_back_to_other(tool_name, expected) -> None:
    assert classify_action(tool_name, {}, WD) == Other(description=expected)


def test_non_string_fields_count_as_missing() -> None:
    assert classify_action("Bash", {"command": ["ls"]}, WD) == Other(
        description="Command execution"
    )


def test_non_object_arguments_count_as_empty() -> None:
    assert classify_action("Read", None, WD) == Other(description="File read operation")
    assert classify_action("Read", "a.py", WD) == Other(description="File read operation")


def test_tool_names_are_case_insensitive() -> None:
    assert classify_action("bash", {"command": "make"}, WD) == CommandRun(command="make")
    assert classify_action("READ", {"file_path": "x"}, WD) == FileRead(path="x")
    assert classify_action("EXIT_PLAN_MODE", {"plan": "p"}, WD) == PlanPresentation(plan="p")


def test_unknown_tool_keeps_original_name() -> None:
    assert classify_action("NotebookEdit", {}, WD) == Other(description="Tool: NotebookEdit")


def test_file_path_outside_workspace_is_kept() -> None:
    assert classify_action("Read", {"file_path": "/etc/hosts"}, WD) == FileRead(path="/etc/hosts")


@pytest.mark.parametrize(
    ("action", "expected"),
    [
        (FileRead(path="a.py"), "`a.py`"),
        (FileWrite(path="b.py"), "`b.py`"),
        (CommandRun(command="make"), "`make`"),
        (Search(query="foo"), "`foo`"),
        (WebFetch(url="https://x.dev"), "`https://x.dev`"),
        (TaskCreate(description="Audit auth"), "Audit auth"),
        (PlanPresentation(plan="1. step"), "1. step"),
    ],
)
def test_summary_for_specific_actions(action, expected) -> None:
    assert summarize_tool_use("Whatever", {}, action, WD) == expected


def _summarize(tool_name: str, arguments) -> str:
    action = classify_action(tool_name, arguments, WD)
    return summarize_tool_use(tool_name, arguments, action, WD)


def test_todo_summary_lists_items_with_glyphs() -> None:
    summary = _summarize("TodoWrite", {
        "todos": [
            {"content": "Write tests", "status": "completed", "priority": "high"},
            {"content": "Fix bug", "status": "in_progress"},
            {"content": "Update docs", "status": "pending", "priority": "low"},
            {"content": "Refactor", "status": "blocked"},
            {"status": "pending"},
        ],
    })
    assert summary == (
        "TODO List:\n"
        "✅ Write tests (high)\n"
        "\U0001f504 Fix bug (medium)\n"
        "⏳ Update docs (low)\n"
        "\U0001f4dd Refactor (medium)"
    )


def test_todo_summary_defaults_missing_status_to_pending() -> None:
    summary = _summarize("todoread", {"todos": [{"content": "Ship it"}]})
    assert summary == "TODO List:\n⏳ Ship it (medium)"


@pytest.mark.parametrize("arguments", [{}, {"todos": []}, {"todos": "none"}, {"todos": [{}]}])
def test_todo_summary_falls_back(arguments) -> None:
    assert _summarize("TodoWrite", arguments) == TODO_FALLBACK


def test_ls_summary() -> None:
    assert _summarize("LS", {"path": "/tmp/work/src"}) == "List directory: `src`"
    assert _summarize("LS", {"path": "/tmp/work"}) == "List directory"
    assert _summarize("LS", {}) == "List directory"


def test_glob_summary() -> None:
    assert _summarize("Glob", {"pattern": "*.rs"}) == "Find files: `*.rs`"
    assert _summarize("Glob", {"pattern": "*.rs", "path": "/tmp/work/src"}) == (
        "Find files: `*.rs` in `src`"
    )
    assert _summarize("Glob", {}) == "Find files: `*`"


def test_codebase_search_summary() -> None:
    assert _summarize("codebase_search_agent", {"query": "auth flow"}) == "Search: auth flow"
    assert _summarize("codebase_search_agent", {}) == "Codebase search"


def test_other_tools_summarize_to_their_name() -> None:
    assert _summarize("mcp__github__create_pr", {"title": "x"}) == "mcp__github__create_pr"


def test_action_to_dict_is_type_tagged() -> None:
    assert action_to_dict(CommandRun(command="ls")) == {"type": "command_run", "command": "ls"}
    assert action_to_dict(Other(description="d")) == {"type": "other", "description": "d"}
