"""Run external commands while streaming their output into the logger."""

from __future__ import annotations

import logging
import subprocess
import threading
import typing as typ
from pathlib import Path

from .errors import ProcessError

logger = logging.getLogger(__name__)


def _drain(stream: typ.IO[str], level: int) -> None:
    for line in stream:
        logger.log(level, line.rstrip("\n"))


def run_command(
    command: str | Path,
    args: typ.Sequence[str],
    *,
    cwd: Path | None = None,
    env: dict[str, str] | None = None,
) -> int:
    """Spawn ``command`` with ``args`` and wait for it to exit cleanly.

    Stdout lines are logged at DEBUG and stderr lines at WARNING as soon as
    they arrive; both pipes are drained concurrently so a chatty child never
    blocks on a full pipe.

    Parameters
    ----------
    command : str or Path
        Executable to run. It is never passed through a shell.
    args : Sequence[str]
        Arguments appended after ``command``.
    cwd : Path, optional
        Working directory of the child.
    env : dict[str, str], optional
        Full environment for the child; inherits ours when omitted.

    Returns
    -------
    int
        Always ``0``.

    Raises
    ------
    ProcessError
        If the child cannot be spawned or exits with a non-zero status.
    """
    name = str(command)
    logger.debug("Run command %s %s", name, " ".join(args))
    try:
        proc = subprocess.Popen(  # noqa: S603 - argument list, no shell
            [name, *args],
            cwd=cwd,
            env=env,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
            errors="replace",
        )
    except OSError as exc:
        logger.error("Run command failed")
        msg = f"run {name} failed"
        raise ProcessError(msg, command=name) from exc

    # both streams are set because of PIPE
    stdout = typ.cast(typ.IO[str], proc.stdout)
    stderr = typ.cast(typ.IO[str], proc.stderr)
    stderr_reader = threading.Thread(target=_drain, args=(stderr, logging.WARNING), daemon=True)
    stderr_reader.start()
    _drain(stdout, logging.DEBUG)
    returncode = proc.wait()
    stderr_reader.join()
    stdout.close()
    stderr.close()

    logger.debug("Run command finished")
    if returncode != 0:
        msg = f"run {name} finished, but the exit code is: {returncode}"
        raise ProcessError(msg, command=name, returncode=returncode)
    return returncode


__all__ = ["run_command"]
