"""Subprocess launching with cancellation-safe teardown."""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import Mapping, Sequence
from typing import Protocol

from pyxcsettings.exceptions import ProcessExitError, ProcessSpawnError

_logger = logging.getLogger(__name__)


class ProcessInvoker(Protocol):
    """Structural process interface used by the loader and SDK resolver.

    Having a protocol here makes it easy to pass test doubles while keeping
    the production implementation (`SubprocessInvoker`) concrete.
    """

    async def run(
        self,
        executable: str,
        arguments: Sequence[str],
        environment: Mapping[str, str] | None = None,
    ) -> bytes:
        ...


async def _terminate(process: asyncio.subprocess.Process) -> None:
    """Kill *process* if it is still running and reap it."""
    if process.returncode is None:
        with contextlib.suppress(ProcessLookupError):
            process.kill()
    await process.wait()


class SubprocessInvoker:
    """Run an executable and return everything it wrote to stdout.

    When *environment* is given it replaces the ambient environment
    entirely. Cancelling the awaiting task kills the child.
    """

    async def run(
        self,
        executable: str,
        arguments: Sequence[str],
        environment: Mapping[str, str] | None = None,
    ) -> bytes:
        if not executable:
            raise ProcessSpawnError("No executable given")

        _logger.debug("Launching %s %s", executable, " ".join(arguments))

        try:
            process = await asyncio.create_subprocess_exec(
                executable,
                *arguments,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                env=dict(environment) if environment is not None else None,
            )
        except OSError as exc:
            raise ProcessSpawnError(
                f"Could not launch {executable}: {exc}",
                executable=executable,
            ) from exc

        try:
            stdout, stderr = await process.communicate()
        except asyncio.CancelledError:
            _logger.debug("Cancelled; killing %s (pid %s)", executable, process.pid)
            # Shielded so the child is reaped even though we are being cancelled.
            await asyncio.shield(_terminate(process))
            raise

        if process.returncode != 0:
            detail = stderr.decode("utf-8", errors="replace").strip()
            raise ProcessExitError(
                f"{executable} exited with status {process.returncode}: {detail[:200]}",
                status=process.returncode if process.returncode is not None else -1,
                executable=executable,
            )
        return stdout
