"""Run the kaniko executor and stream its output.

stdout is drained on a background thread and stderr on the calling
thread, so neither pipe fills up and blocks the child. Both streams are
forwarded line by line and also kept for the returned CompletedProcess.
There is no timeout: the CI job kills the whole plugin if it runs too long.
"""

import logging
import subprocess
import threading
from typing import IO

import click

from vela_kaniko.errors import ExecutorError
from vela_kaniko.models.config import KANIKO_BIN
from vela_kaniko.services.command_builder import version_command

logger = logging.getLogger(__name__)


def run_executor(
    args: list[str],
    binary: str = KANIKO_BIN,
) -> subprocess.CompletedProcess:
    """Run `binary args...`, forwarding stdout/stderr live.

    Raises ExecutorError if the binary cannot be started, a stream cannot
    be copied, or the process exits with a non-zero status.
    """
    cmd = [binary, *args]
    logger.debug("executing cmd %s", " ".join(cmd))
    click.echo(f"$ {' '.join(cmd)}")

    try:
        proc = subprocess.Popen(
            cmd,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
            errors="replace",
        )
    except FileNotFoundError as e:
        raise ExecutorError(f"executor not found: {binary}") from e
    except OSError as e:
        raise ExecutorError(f"unable to start {binary}: {e}") from e

    stdout_lines: list[str] = []
    stderr_lines: list[str] = []
    stream_errors: list[BaseException] = []

    reader = threading.Thread(
        target=_drain,
        args=(proc.stdout, stdout_lines, False, stream_errors),
        daemon=True,
    )
    reader.start()
    _drain(proc.stderr, stderr_lines, True, stream_errors)
    reader.join()

    returncode = proc.wait()
    if returncode != 0:
        raise ExecutorError(f"{binary} exited with status {returncode}")
    if stream_errors:
        raise ExecutorError(f"unable to stream output of {binary}: {stream_errors[0]}")

    return subprocess.CompletedProcess(
        cmd, returncode, "".join(stdout_lines), "".join(stderr_lines)
    )


def print_version(binary: str = KANIKO_BIN) -> subprocess.CompletedProcess:
    """Output the executor version for troubleshooting."""
    return run_executor(version_command(), binary=binary)


def _drain(stream: IO[str], sink: list[str], err: bool, errors: list[BaseException]) -> None:
    try:
        with stream:
            for line in stream:
                sink.append(line)
                click.echo(line, nl=False, err=err)
    except (OSError, ValueError) as e:
        errors.append(e)
