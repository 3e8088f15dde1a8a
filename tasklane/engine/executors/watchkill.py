"""Plan-mode pause detection.

In plan mode Claude never exits once a plan is ready; it blocks waiting
for approval of ``exit_plan_mode`` and prints a fixed phrase. Both
helpers here turn that pause into a clean exit.

The generated script needs bash 4.4 or newer: it waits on a process
substitution through ``$!``. Stock macOS ``/bin/bash`` is 3.2, so a
Homebrew bash must come first on ``PATH`` there.
"""
from __future__ import annotations

import asyncio
import logging
import shlex
from typing import AsyncIterator

logger = logging.getLogger(__name__)

MIN_BASH_VERSION = (4, 4)

PLAN_STOP_SENTINEL = (
    "Claude requested permissions to use exit_plan_mode, "
    "but you haven't granted it yet"
)

_SCRIPT_TEMPLATE = """#!/usr/bin/env bash
set -uo pipefail

word={word}
command={command}

exec 3< <(exec 2>&1; eval "$command" <&0)
child=$!
while IFS= read -r line <&3 || [[ -n "$line" ]]; do
    printf '%s\\n' "$line"
    if [[ $line == *"$word"* ]]; then
        exit 0
    fi
done

wait "$child"
exit $?
"""


def create_watchkill_script(command: str, sentinel: str = PLAN_STOP_SENTINEL) -> str:
    """Wrap *command* in a bash script that exits 0 on the sentinel.

    The script relays the command's merged stdout/stderr line by line.
    Without the sentinel it exits with the command's own status.
    """
    return _SCRIPT_TEMPLATE.format(
        word=shlex.quote(sentinel),
        command=shlex.quote(command),
    )


class PlanPauseWatcher:
    """In-process alternative to the watch-kill script.

    Relays lines from a child's stdout and, on the sentinel, terminates
    the child's process group instead of waiting forever.

        watcher = PlanPauseWatcher(child)
        async for line in watcher.lines():
            ...
        if watcher.paused: ...
    """

    def __init__(self, child, sentinel: str = PLAN_STOP_SENTINEL) -> None:
        self._child = child
        self._sentinel = sentinel
        self.paused = False

    async def lines(self) -> AsyncIterator[str]:
        stdout = self._child.stdout
        if stdout is None:
            return
        while True:
            raw = await stdout.readline()
            if not raw:
                break
            line = raw.decode("utf-8", errors="replace").rstrip("\n")
            yield line
            if self._sentinel in line:
                self.paused = True
                logger.info(
                    "Plan approval pause detected (pid=%s); stopping process group",
                    self._child.pid,
                )
                self._child.kill()
                break

    async def wait(self) -> int:
        """Drain the output and return 0 on pause, else the exit status."""
        async for _ in self.lines():
            pass
        if self.paused:
            try:
                await asyncio.wait_for(self._child.wait(), timeout=5.0)
            except asyncio.TimeoutError:
                logger.warning("Process group did not exit after kill (pid=%s)", self._child.pid)
            return 0
        return await self._child.wait()
