"""Asynchronous subprocess execution with a bounded process budget."""

from __future__ import annotations

import asyncio
import logging
import os

from git_introspect.domain.errors import ProcessFailure, ProcessTimeout

logger = logging.getLogger(__name__)

# Locale-independent, never-interactive output.
_CHILD_ENV_OVERRIDES = {
    "LC_ALL": "C",
    "LANG": "C",
    "GIT_TERMINAL_PROMPT": "0",
}


class ProcessRunner:
    """Runs one external command per call.

    Arguments are always passed as a discrete vector, never through a shell.
    Any non-empty stderr, non-zero exit status or launch error is a failure.
    At most *max_processes* children run at once; the rest wait their turn.
    """

    def __init__(self, max_processes: int = 16, timeout: float | None = 30.0) -> None:
        if max_processes < 1:
            raise ValueError("max_processes must be at least 1")
        self._semaphore = asyncio.Semaphore(max_processes)
        self._timeout = timeout
        self._env = {**os.environ, **_CHILD_ENV_OVERRIDES}

    @property
    def timeout(self) -> float | None:
        return self._timeout

    async def run(self, command: str, args: list[str], cwd: str) -> str:
        argv = [command, *args]
        async with self._semaphore:
            logger.debug("exec %s (cwd=%s)", argv, cwd)
            try:
                proc = await asyncio.create_subprocess_exec(
                    *argv,
                    cwd=cwd,
                    env=self._env,
                    stdin=asyncio.subprocess.DEVNULL,
                    stdout=asyncio.subprocess.PIPE,
                    stderr=asyncio.subprocess.PIPE,
                )
            except OSError as exc:
                raise ProcessFailure(
                    f"Failed to launch {command}: {exc}", command=argv
                ) from exc

            try:
                stdout, stderr = await asyncio.wait_for(
                    proc.communicate(), timeout=self._timeout
                )
            except asyncio.TimeoutError:
                await _kill(proc)
                logger.warning("Timed out after %ss: %s", self._timeout, argv)
                raise ProcessTimeout(
                    f"Command timed out after {self._timeout}s: {' '.join(argv)}",
                    command=argv,
                ) from None
            except asyncio.CancelledError:
                await _kill(proc)
                raise

        err = stderr.decode("utf-8", errors="replace").strip()
        if proc.returncode != 0 or err:
            logger.warning(
                "Command failed (exit %s): %s: %s", proc.returncode, argv, err
            )
            raise ProcessFailure(
                f"Command failed: {' '.join(argv)}\nError: {err}",
                command=argv,
                returncode=proc.returncode,
                stderr=err,
            )
        # surrogateescape keeps non-UTF-8 paths byte-exact when passed back as argv
        return stdout.decode("utf-8", errors="surrogateescape")


async def _kill(proc: asyncio.subprocess.Process) -> None:
    if proc.returncode is None:
        try:
            proc.kill()
        except ProcessLookupError:
            pass
    await proc.wait()
