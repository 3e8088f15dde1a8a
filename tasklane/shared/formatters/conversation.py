"""Terminal rendering for normalized conversations (Rich)."""

from __future__ import annotations

from rich.console import Console, Group
from rich.markdown import Markdown as RichMarkdown
from rich.text import Text

from tasklane.shared.models.conversation import (
    AssistantMessage,
    CommandRun,
    FileRead,
    FileWrite,
    NormalizedConversation,
    NormalizedEntry,
    PlanPresentation,
    Search,
    TaskCreate,
    ToolUse,
    UserMessage,
    WebFetch,
)

_ACTION_ICONS: dict[type, str] = {
    FileRead: "\U0001f4c4",
    FileWrite: "✏️",
    CommandRun: "\U0001f4bb",
    Search: "\U0001f50e",
    WebFetch: "\U0001f310",
    TaskCreate: "\U0001f500",
    PlanPresentation: "\U0001f4cb",
}
_DEFAULT_TOOL_ICON = "\U0001f527"


def _esc(text: str) -> str:
    """Escape Rich markup characters in dynamic content."""
    return text.replace("[", "\\[")


def render_entry(entry: NormalizedEntry):
    """Return a Rich renderable for one entry."""
    entry_type = entry.entry_type
    if isinstance(entry_type, UserMessage):
        return Text.from_markup(f"[bold cyan]You[/bold cyan]  {_esc(entry.content)}")
    if isinstance(entry_type, AssistantMessage):
        return Group(
            Text.from_markup("[bold green]Claude[/bold green]"),
            RichMarkdown(entry.content),
        )
    if isinstance(entry_type, ToolUse):
        icon = _ACTION_ICONS.get(type(entry_type.action), _DEFAULT_TOOL_ICON)
        return Text.from_markup(
            f"{icon} [bold]{_esc(entry_type.tool_name)}[/bold]  "
            f"{_esc(entry.content)}"
        )
    return Text.from_markup(f"[dim]{_esc(entry.content)}[/dim]")


def render_conversation(
    conversation: NormalizedConversation,
    console: Console | None = None,
) -> None:
    console = console or Console()
    header = f"[bold]{_esc(conversation.executor_kind)}[/bold]"
    if conversation.session_id:
        header += f"  [dim]session {_esc(conversation.session_id)}[/dim]"
    console.print(Text.from_markup(header))
    for entry in conversation.entries:
        console.print(render_entry(entry))
