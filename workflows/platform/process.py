"""Spawning external programs with Result-based error handling.

Usage:
    result = spawn("make", ["build"], inherit_io=True, wait=True)
    match result:
        case Ok(outcome):
            print(outcome.returncode)
        case Err(error):
            print(error)
"""

from __future__ import annotations

import subprocess
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path

from workflows.core.result import Err, Ok, Result

__all__ = ["ProcessError", "ProcessOutcome", "detached_processes", "reap_detached", "spawn"]

# Daemonized children, kept so they can be reaped once they exit
_detached: list[subprocess.Popen[bytes]] = []


@dataclass(frozen=True, slots=True)
class ProcessError:
    """Error from a process that could not start or exited non-zero.

    Attributes:
        command: The command that was executed.
        returncode: Exit code, or -1 if the process never started.
        message: Details (OS error text or exit description).
    """

    command: tuple[str, ...]
    returncode: int
    message: str

    def __str__(self) -> str:
        cmd_str = " ".join(self.command[:3])
        if len(self.command) > 3:
            cmd_str += " ..."
        if self.returncode < 0:
            return f"{cmd_str}: {self.message}"
        return f"{cmd_str} failed (exit {self.returncode})"


@dataclass(frozen=True, slots=True)
class ProcessOutcome:
    """A started process.

    ``returncode`` is None when the process was left running.
    """

    pid: int
    returncode: int | None


def spawn(
    program: str,
    args: Sequence[str] = (),
    *,
    inherit_io: bool = False,
    wait: bool = True,
    cwd: Path | None = None,
    env: Mapping[str, str] | None = None,
) -> Result[ProcessOutcome, ProcessError]:
    """Start ``program`` with ``args``.

    Args:
        program: Executable name or path.
        args: Arguments passed verbatim (no shell).
        inherit_io: Share this process's stdout/stderr; otherwise discard them.
        wait: Block until exit and fail on non-zero status.
        cwd: Working directory (current directory if None).
        env: Environment (inherited if None).

    Returns:
        Ok(ProcessOutcome) or Err(ProcessError).
    """
    reap_detached()
    cmd = [program, *args]
    sink = None if inherit_io else subprocess.DEVNULL
    try:
        proc = subprocess.Popen(
            cmd,
            cwd=str(cwd) if cwd is not None else None,
            env=dict(env) if env is not None else None,
            stdin=sink,
            stdout=sink,
            stderr=sink,
        )
    except OSError as e:
        return Err(ProcessError(command=tuple(cmd), returncode=-1, message=str(e)))

    if not wait:
        _detached.append(proc)
        return Ok(ProcessOutcome(pid=proc.pid, returncode=None))

    returncode = proc.wait()
    if returncode != 0:
        return Err(
            ProcessError(
                command=tuple(cmd),
                returncode=returncode,
                message=f"exited with status {returncode}",
            )
        )
    return Ok(ProcessOutcome(pid=proc.pid, returncode=returncode))


def detached_processes() -> tuple[subprocess.Popen[bytes], ...]:
    """Daemonized children that have not been reaped yet."""
    return tuple(_detached)


def reap_detached() -> int:
    """Collect daemonized children that have exited. Returns how many."""
    finished = [proc for proc in _detached if proc.poll() is not None]
    for proc in finished:
        _detached.remove(proc)
    return len(finished)
