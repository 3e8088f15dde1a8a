"""Shell spawning with process-group ownership.

Agent commands run through a shell (``bash -c`` when available) in
their own process group, so killing the handle takes down npx, node
and anything else the agent started.
"""
from __future__ import annotations

import asyncio
import logging
import os
import shutil
import signal
import sys
import weakref

logger = logging.getLogger(__name__)


def get_shell_command() -> tuple[str, str]:
    """Return (shell, flag) for running a command string."""
    if sys.platform == "win32":
        return "cmd", "/C"
    bash = shutil.which("bash")
    if bash:
        return bash, "-c"
    return "sh", "-c"


def _child_env() -> dict[str, str]:
    env = os.environ.copy()
    env["NODE_NO_WARNINGS"] = "1"
    # A nested Claude session refuses to start otherwise.
    env.pop("CLAUDECODE", None)
    return env


def _kill_group(proc: asyncio.subprocess.Process) -> None:
    # The group can outlive its leader (e.g. the watch-kill wrapper exits
    # while the paused agent it started is still running).
    try:
        if sys.platform == "win32":
            if proc.returncode is None:
                proc.kill()
        else:
            os.killpg(proc.pid, signal.SIGKILL)
    except (ProcessLookupError, PermissionError):
        pass


class ProcessGroupChild:
    """Handle for a spawned agent process and its process group.

    The group is killed on ``kill()``, ``close()``, leaving ``async with``,
    and when the handle is garbage collected before it was closed.
    """

    def __init__(self, process: asyncio.subprocess.Process, command: str) -> None:
        self.process = process
        self.command = command
        self._finalizer = weakref.finalize(self, _kill_group, process)

    @property
    def pid(self) -> int:
        return self.process.pid

    @property
    def returncode(self) -> int | None:
        return self.process.returncode

    @property
    def stdin(self) -> asyncio.StreamWriter | None:
        return self.process.stdin

    @property
    def stdout(self) -> asyncio.StreamReader | None:
        return self.process.stdout

    @property
    def stderr(self) -> asyncio.StreamReader | None:
        return self.process.stderr

    def kill(self) -> None:
        """Kill the whole process group, including any orphaned members."""
        _kill_group(self.process)

    async def wait(self) -> int:
        return await self.process.wait()

    async def __aenter__(self) -> ProcessGroupChild:
        return self

    async def close(self) -> None:
        """Kill the group and reap the leader."""
        self.kill()
        await self.process.wait()
        # Reaped; the pgid may be reused by an unrelated session from here on.
        self._finalizer.detach()

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()


async def spawn_shell(command: str, cwd: str) -> ProcessGroupChild:
    """Spawn *command* through the platform shell with piped stdio.

    Raises OSError when the OS refuses the spawn (missing shell,
    missing working directory, ...).
    """
    shell, flag = get_shell_command()
    kwargs = {}
    if sys.platform != "win32":
        kwargs["start_new_session"] = True
    process = await asyncio.create_subprocess_exec(
        shell, flag, command,
        stdin=asyncio.subprocess.PIPE,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE,
        cwd=cwd,
        env=_child_env(),
        **kwargs,
    )
    logger.debug("Spawned %s %s (pid=%d) in %s", shell, flag, process.pid, cwd)
    return ProcessGroupChild(process, command)
