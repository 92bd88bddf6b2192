"""Bounded, cancellable subprocess execution shared by the shell-backed tools."""

from __future__ import annotations

import asyncio
import os
import shlex
import signal
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence, Tuple, Union

from ...exceptions import CommandTimeoutError
from ...logger import get_logger

logger = get_logger(__name__)

DEFAULT_MAX_OUTPUT = 1024 * 1024
_READ_CHUNK = 64 * 1024


@dataclass(frozen=True)
class CompletedCommand:
    """Captured outcome of a finished subprocess.

    Attributes:
        command: Display form of the command.
        exit_code: Process return code.
        stdout: Decoded standard output, capped at the configured size.
        stderr: Decoded standard error, capped at the configured size.
        truncated: True if either stream exceeded the cap.
    """

    command: str
    exit_code: int
    stdout: str
    stderr: str
    truncated: bool = False

    @property
    def ok(self) -> bool:
        return self.exit_code == 0


async def _read_bounded(stream: Optional[asyncio.StreamReader], limit: int) -> Tuple[bytes, bool]:
    """Drain ``stream`` completely, keeping at most ``limit`` bytes."""
    if stream is None:
        return b"", False

    kept = bytearray()
    truncated = False
    while True:
        chunk = await stream.read(_READ_CHUNK)
        if not chunk:
            break
        room = limit - len(kept)
        if room > 0:
            kept.extend(chunk[:room])
        if len(chunk) > room:
            truncated = True
    return bytes(kept), truncated


def _kill(process: asyncio.subprocess.Process) -> None:
    try:
        # The process leads its own session, so this also reaches children spawned by a shell.
        os.killpg(process.pid, signal.SIGKILL)
    except (ProcessLookupError, PermissionError):
        try:
            process.kill()
        except ProcessLookupError:
            pass


async def run_subprocess(
    command: Union[str, Sequence[str]],
    *,
    cwd: Optional[Path] = None,
    timeout: float = 30.0,
    max_output: int = DEFAULT_MAX_OUTPUT,
    stdin: Optional[bytes] = None,
) -> CompletedCommand:
    """Run a command with a timeout and a cap on captured output.

    Args:
        command: A shell command line (run through ``/bin/sh``) or an argv sequence (run directly).
        cwd: Working directory for the process.
        timeout: Seconds before the process is killed.
        max_output: Maximum bytes kept per stream. Extra output is read and discarded.
        stdin: Optional bytes fed to the process.

    Returns:
        The CompletedCommand. A non-zero exit code is not an error at this level.

    Raises:
        CommandTimeoutError: If the process did not finish within ``timeout``.
        FileNotFoundError: If the executable (or ``cwd``) does not exist.
    """
    if isinstance(command, str):
        display = command
        process = await asyncio.create_subprocess_shell(
            command,
            cwd=cwd,
            stdin=asyncio.subprocess.PIPE if stdin is not None else asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            start_new_session=True,
        )
    else:
        display = shlex.join(command)
        process = await asyncio.create_subprocess_exec(
            *command,
            cwd=cwd,
            stdin=asyncio.subprocess.PIPE if stdin is not None else asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            start_new_session=True,
        )

    logger.debug("Started subprocess %s (pid %s)", display, process.pid)

    async def _communicate() -> Tuple[Tuple[bytes, bool], Tuple[bytes, bool]]:
        if stdin is not None and process.stdin is not None:
            process.stdin.write(stdin)
            await process.stdin.drain()
            process.stdin.close()
        out, err = await asyncio.gather(
            _read_bounded(process.stdout, max_output),
            _read_bounded(process.stderr, max_output),
        )
        await process.wait()
        return out, err

    try:
        (stdout, out_truncated), (stderr, err_truncated) = await asyncio.wait_for(_communicate(), timeout=timeout)
    except asyncio.TimeoutError:
        logger.warning("Subprocess timed out after %ss: %s", timeout, display)
        _kill(process)
        await process.wait()
        raise CommandTimeoutError(display, timeout) from None
    except asyncio.CancelledError:
        _kill(process)
        raise

    truncated = out_truncated or err_truncated
    if truncated:
        logger.warning("Output of '%s' exceeded %d bytes and was truncated.", display, max_output)

    return CompletedCommand(
        command=display,
        exit_code=process.returncode if process.returncode is not None else -1,
        stdout=stdout.decode("utf-8", errors="replace"),
        stderr=stderr.decode("utf-8", errors="replace"),
        truncated=truncated,
    )
