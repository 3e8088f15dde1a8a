"""CLI entry point for the Claude executor.

Usage:
    tasklane command [--plan]
    tasklane normalize logs/run.jsonl --cwd /path/to/worktree
    tasklane run --title "Fix login bug" --project-id web --cwd .
    tasklane resume <session_id> "Now add tests" --plan
"""
from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
import uuid
from pathlib import Path

from rich.console import Console

from .config import ExecutorConfig
from .errors import ExecutorError
from .executors.claude_executor import ClaudeExecutor, ClaudeFollowupExecutor
from .executors.process import ProcessGroupChild
from .tasks import InMemoryTaskStore, TaskRecord

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tasklane",
        description="Launch Claude Code for tasks and normalize its output",
    )
    parser.add_argument(
        "--config", "-c",
        default=None,
        help="YAML config file (default: TASKLANE_* env vars)",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable debug logging",
    )
    sub = parser.add_subparsers(dest="action", required=True)

    cmd = sub.add_parser("command", help="Print the resolved Claude command")
    cmd.add_argument("--plan", action="store_true", help="Plan mode")
    cmd.add_argument("--resume", default=None, metavar="SESSION_ID")

    norm = sub.add_parser("normalize", help="Normalize a captured log file")
    norm.add_argument("logfile", help="Captured stream-json output ('-' for stdin)")
    norm.add_argument("--cwd", default=".", help="Worktree root for relative paths")
    norm.add_argument("--json", action="store_true", help="Dump JSON instead of rendering")

    run = sub.add_parser("run", help="Launch Claude for a new task")
    run.add_argument("--title", required=True)
    run.add_argument("--description", default=None)
    run.add_argument("--project-id", default="default")
    run.add_argument("--plan", action="store_true", help="Plan mode")
    run.add_argument("--cwd", default=".", help="Working directory")

    resume = sub.add_parser("resume", help="Resume a Claude session")
    resume.add_argument("session_id")
    resume.add_argument("prompt")
    resume.add_argument("--plan", action="store_true", help="Plan mode")
    resume.add_argument("--cwd", default=".", help="Working directory")

    return parser


def _load_config(path: str | None) -> ExecutorConfig:
    if path:
        from .yaml_config import load_yaml_config
        return load_yaml_config(path)
    return ExecutorConfig.from_env()


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)

    config = _load_config(args.config)
    level = logging.DEBUG if args.verbose else getattr(
        logging, config.log_level.upper(), logging.INFO,
    )
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
    )

    if getattr(args, "plan", False):
        config.plan_mode = True

    if args.action == "command":
        return _print_command(config, args.resume)
    if args.action == "normalize":
        return _normalize(config, args.logfile, args.cwd, args.json)
    if args.action == "run":
        task = TaskRecord(
            id=str(uuid.uuid4()),
            project_id=args.project_id,
            title=args.title,
            description=args.description,
        )
        executor = ClaudeExecutor.from_config(config)
        return asyncio.run(_run_task(executor, task, args.cwd))
    if args.action == "resume":
        executor = ClaudeFollowupExecutor.from_config(
            config, session_id=args.session_id, prompt=args.prompt,
        )
        return asyncio.run(_stream(executor.spawn(None, None, args.cwd)))
    return 2


def _print_command(config: ExecutorConfig, session_id: str | None) -> int:
    if session_id:
        executor = ClaudeFollowupExecutor.from_config(config, session_id=session_id)
    else:
        executor = ClaudeExecutor.from_config(config)
    resolved = executor.resolve_command()
    print(resolved.command)
    if resolved.is_fallback:
        print("(universal fallback)", file=sys.stderr)
    return 0


def _normalize(config: ExecutorConfig, logfile: str, cwd: str, as_json: bool) -> int:
    if logfile == "-":
        logs = sys.stdin.read()
    else:
        path = Path(logfile)
        if not path.is_file():
            print(f"Error: Log file not found: {logfile}", file=sys.stderr)
            return 1
        logs = path.read_text(encoding="utf-8", errors="replace")

    executor = ClaudeExecutor.from_config(config)
    conversation = executor.normalize_logs(logs, str(Path(cwd).absolute()))

    if as_json:
        print(json.dumps(conversation.to_dict(), ensure_ascii=False, indent=2))
        return 0

    from tasklane.shared.formatters.conversation import render_conversation
    render_conversation(conversation, Console())
    return 0


async def _run_task(executor: ClaudeExecutor, task: TaskRecord, cwd: str) -> int:
    store = InMemoryTaskStore([task])
    return await _stream(executor.spawn(store, task.id, cwd))


async def _stream(spawning) -> int:
    try:
        child: ProcessGroupChild = await spawning
    except ExecutorError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        orphan = getattr(exc, "child", None)
        if orphan is not None:
            await orphan.close()
        return 1

    async with child:
        stderr_relay = asyncio.create_task(_relay(child.stderr, sys.stderr))
        await _relay(child.stdout, sys.stdout)
        await stderr_relay
        code = await child.wait()
    logger.info("Agent exited with status %s", code)
    return code


async def _relay(reader: asyncio.StreamReader | None, out) -> None:
    if reader is None:
        return
    while True:
        line = await reader.readline()
        if not line:
            break
        out.write(line.decode("utf-8", errors="replace"))
        out.flush()


if __name__ == "__main__":
    sys.exit(main())
