"""Claude Code CLI executor.

Spawns ``claude -p`` (resolved by CommandResolver) through a shell,
writes the task prompt to stdin and closes it. If the preferred
invocation cannot be started, retries once with the ``npx`` fallback.
"""
from __future__ import annotations

import asyncio
import logging

from tasklane.engine.errors import (
    FallbackExhaustedError,
    SpawnError,
    StdinCloseError,
    StdinWriteError,
    TaskNotFoundError,
)
from tasklane.engine.tasks import TaskStore, build_task_prompt

from .base import CommandMode, Executor, ResolvedCommand
from .process import ProcessGroupChild, spawn_shell
from .resolver import CommandResolver, InstallCache
from .watchkill import create_watchkill_script

logger = logging.getLogger(__name__)


class ClaudeExecutor(Executor):
    """Runs a new task through the Claude Code CLI.

    In plan mode the command is wrapped in the watch-kill script so the
    process exits once Claude pauses for plan approval. An explicit
    command (``with_command``) is used verbatim and never wrapped.
    """

    def __init__(
        self,
        *,
        plan_mode: bool = False,
        resolver: CommandResolver | None = None,
        executor_kind: str | None = None,
    ) -> None:
        self._mode = CommandMode.PLAN if plan_mode else CommandMode.DEFAULT
        self._resolver = resolver or CommandResolver()
        self._executor_kind = executor_kind or (
            "ClaudePlan" if plan_mode else "Claude"
        )

    @classmethod
    def new_plan_mode(cls, resolver: CommandResolver | None = None) -> ClaudeExecutor:
        return cls(plan_mode=True, resolver=resolver)

    @classmethod
    def with_command(cls, executor_kind: str, command: str) -> ClaudeExecutor:
        return cls(
            resolver=CommandResolver(override=command),
            executor_kind=executor_kind,
        )

    @classmethod
    def from_config(
        cls,
        config,
        install_cache: InstallCache | None = None,
    ) -> ClaudeExecutor:
        return cls(
            plan_mode=config.plan_mode,
            resolver=CommandResolver.from_config(config, install_cache),
            executor_kind=config.resolved_executor_kind,
        )

    @property
    def executor_kind(self) -> str:
        return self._executor_kind

    @property
    def plan_mode(self) -> bool:
        return self._mode is CommandMode.PLAN

    # ── Command resolution ──

    def _command_suffix(self) -> str | None:
        return None

    def _finalize(self, resolved: ResolvedCommand, *, verbatim: bool) -> ResolvedCommand:
        suffix = self._command_suffix()
        if suffix:
            resolved = resolved.with_suffix(suffix)
        if self.plan_mode and not verbatim:
            resolved = ResolvedCommand(
                create_watchkill_script(resolved.command),
                resolved.is_fallback,
            )
        return resolved

    def resolve_command(self) -> ResolvedCommand:
        """The command the next launch will try first."""
        resolved = self._resolver.resolve(self._mode)
        verbatim = self._resolver.has_override and not resolved.is_fallback
        return self._finalize(resolved, verbatim=verbatim)

    def fallback_command(self) -> ResolvedCommand:
        return self._finalize(self._resolver.fallback(self._mode), verbatim=False)

    # ── Launch ──

    async def spawn(
        self,
        task_store: TaskStore,
        task_id: str,
        working_directory: str,
    ) -> ProcessGroupChild:
        task = await task_store.get_task(task_id)
        if task is None:
            raise TaskNotFoundError(task_id)
        prompt = build_task_prompt(task)
        return await self.launch(prompt, working_directory, task_id=task_id)

    async def launch(
        self,
        prompt: str,
        working_directory: str,
        *,
        task_id: str | None = None,
    ) -> ProcessGroupChild:
        """Spawn with the resolved command, falling back to npx once."""
        primary = self.resolve_command()
        try:
            return await self._spawn_with_command(
                primary, prompt, working_directory, task_id,
            )
        except SpawnError as exc:
            if primary.is_fallback:
                raise
            await _close_orphan(exc)
            logger.warning(
                "Primary command failed: %s. Attempting fallback to npx...", exc,
            )

        fallback = self.fallback_command()
        try:
            return await self._spawn_with_command(
                fallback, prompt, working_directory, task_id,
            )
        except SpawnError as fallback_exc:
            logger.error("Fallback command also failed: %s", fallback_exc)
            raise FallbackExhaustedError(fallback_exc) from fallback_exc

    def _session_id(self) -> str | None:
        return None

    def _spawn_context(self) -> str:
        return f"{self.executor_kind} CLI execution for new task"

    def _stdin_context(self, action: str) -> str:
        return f"Failed to {action} {self.executor_kind} CLI stdin"

    async def _spawn_with_command(
        self,
        resolved: ResolvedCommand,
        prompt: str,
        working_directory: str,
        task_id: str | None,
    ) -> ProcessGroupChild:
        command = resolved.command
        session_id = self._session_id()
        try:
            child = await spawn_shell(command, working_directory)
        except OSError as exc:
            raise SpawnError(
                command, self.executor_kind, self._spawn_context(),
                task_id=task_id, session_id=session_id, cause=exc,
            ) from exc

        try:
            await self._write_prompt(child, prompt, task_id)
        except asyncio.CancelledError:
            child.kill()
            raise
        return child

    async def _write_prompt(
        self,
        child: ProcessGroupChild,
        prompt: str,
        task_id: str | None,
    ) -> None:
        stdin = child.stdin
        if stdin is None:
            return
        session_id = self._session_id()
        logger.debug(
            "Writing prompt to %s stdin (task=%s session=%s): %r",
            self.executor_kind, task_id, session_id, prompt,
        )
        try:
            stdin.write(prompt.encode("utf-8"))
            await stdin.drain()
        except OSError as exc:
            raise StdinWriteError(
                child.command, self.executor_kind,
                self._stdin_context("write prompt to"),
                task_id=task_id, session_id=session_id, cause=exc, child=child,
            ) from exc
        try:
            stdin.close()
            await stdin.wait_closed()
        except OSError as exc:
            raise StdinCloseError(
                child.command, self.executor_kind,
                self._stdin_context("close"),
                task_id=task_id, session_id=session_id, cause=exc, child=child,
            ) from exc


class ClaudeFollowupExecutor(ClaudeExecutor):
    """Resumes an existing Claude session with a caller-supplied prompt."""

    def __init__(
        self,
        session_id: str,
        prompt: str,
        *,
        plan_mode: bool = False,
        resolver: CommandResolver | None = None,
        executor_kind: str | None = None,
    ) -> None:
        super().__init__(
            plan_mode=plan_mode, resolver=resolver, executor_kind=executor_kind,
        )
        self.session_id = session_id
        self.prompt = prompt

    @classmethod
    def new_plan_mode(
        cls,
        session_id: str,
        prompt: str,
        resolver: CommandResolver | None = None,
    ) -> ClaudeFollowupExecutor:
        return cls(session_id, prompt, plan_mode=True, resolver=resolver)

    @classmethod
    def with_command(
        cls,
        session_id: str,
        prompt: str,
        executor_kind: str,
        command_base: str,
    ) -> ClaudeFollowupExecutor:
        return cls(
            session_id, prompt,
            resolver=CommandResolver(override=command_base),
            executor_kind=executor_kind,
        )

    @classmethod
    def from_config(
        cls,
        config,
        install_cache: InstallCache | None = None,
        *,
        session_id: str = "",
        prompt: str = "",
    ) -> ClaudeFollowupExecutor:
        return cls(
            session_id, prompt,
            plan_mode=config.plan_mode,
            resolver=CommandResolver.from_config(config, install_cache),
            executor_kind=config.resolved_executor_kind,
        )

    def _command_suffix(self) -> str:
        return f"--resume={self.session_id}"

    def _session_id(self) -> str:
        return self.session_id

    def _spawn_context(self) -> str:
        return (
            f"{self.executor_kind} CLI followup execution "
            f"for session {self.session_id}"
        )

    def _stdin_context(self, action: str) -> str:
        return (
            f"Failed to {action} {self.executor_kind} CLI stdin "
            f"for session {self.session_id}"
        )

    async def spawn(
        self,
        task_store: TaskStore | None,
        task_id: str | None,
        working_directory: str,
    ) -> ProcessGroupChild:
        return await self.launch(self.prompt, working_directory)


async def _close_orphan(exc: SpawnError) -> None:
    if exc.child is not None:
        await exc.child.close()
