"""
Pulumi command runner — execute the pulumi CLI and capture its output.

Two paths:
    - captured: ``subprocess.run`` with everything buffered.
    - streaming: ``subprocess.Popen`` with stdout read line by line; each
      line is queued to a dispatcher thread that calls the caller's sink,
      so the sink never holds up the process.

Output is decoded as UTF-8; undecodable bytes become U+FFFD instead of
failing the run.

Both return the full stdout/stderr at the end and raise CommandError
on a non-zero exit.
"""

from __future__ import annotations

import logging
import os
import queue
import shutil
import subprocess
import threading
import time
from typing import IO, Mapping, Sequence

from stackauto.adapters.base import CommandRunner
from stackauto.core.errors import CommandError
from stackauto.core.models.options import OutputCallback
from stackauto.core.models.results import CommandResult

logger = logging.getLogger(__name__)


def _text(value: str | bytes | None) -> str:
    if value is None:
        return ""
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return value


def emit_output(on_output: OutputCallback, chunk: str) -> None:
    """Hand a chunk to the caller's sink; a failing sink never stops the run."""
    try:
        on_output(chunk)
    except Exception as e:
        logger.warning("Output callback raised, ignoring: %s", e)


class PulumiCommandRunner(CommandRunner):
    """Run the pulumi binary as a subprocess.

    Args:
        command: Binary to execute (default: ``pulumi`` on PATH).
        timeout: Seconds before the process is killed (default: no limit).
    """

    def __init__(self, command: str = "pulumi", timeout: float | None = None):
        self._command = command
        self._timeout = timeout

    @property
    def name(self) -> str:
        return "pulumi"

    @property
    def command(self) -> str:
        return self._command

    @property
    def timeout(self) -> float | None:
        return self._timeout

    def is_available(self) -> bool:
        return shutil.which(self._command) is not None

    def run(
        self,
        args: Sequence[str],
        *,
        cwd: str,
        env: Mapping[str, str] | None = None,
        on_output: OutputCallback | None = None,
    ) -> CommandResult:
        cmd = [self._command, *args]
        full_env = {**os.environ, **(env or {})}

        logger.debug("Executing: %s (cwd=%s)", " ".join(cmd), cwd)
        start = time.monotonic()

        try:
            if on_output is None:
                stdout, stderr, code = self._run_captured(cmd, cwd, full_env)
            else:
                stdout, stderr, code = self._run_streaming(cmd, cwd, full_env, on_output)
        except subprocess.TimeoutExpired as e:
            raise CommandError(
                cmd,
                stdout=_text(e.stdout),
                stderr=_text(e.stderr),
                message=f"Command timed out after {self._timeout}s: {' '.join(cmd)}",
            ) from e
        except OSError as e:
            raise CommandError(cmd, message=f"Command execution error: {e}") from e

        elapsed_ms = int((time.monotonic() - start) * 1000)

        if code != 0:
            logger.debug("Command exited with code %d after %dms", code, elapsed_ms)
            raise CommandError(cmd, stdout=stdout, stderr=stderr, exit_code=code)

        return CommandResult(
            stdout=stdout,
            stderr=stderr,
            exit_code=code,
            command=cmd,
            duration_ms=elapsed_ms,
        )

    def _run_captured(
        self, cmd: list[str], cwd: str, env: dict[str, str]
    ) -> tuple[str, str, int]:
        result = subprocess.run(
            cmd,
            cwd=cwd,
            env=env,
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
            timeout=self._timeout,
        )
        return result.stdout, result.stderr, result.returncode

    def _run_streaming(
        self,
        cmd: list[str],
        cwd: str,
        env: dict[str, str],
        on_output: OutputCallback,
    ) -> tuple[str, str, int]:
        proc = subprocess.Popen(
            cmd,
            cwd=cwd,
            env=env,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
            encoding="utf-8",
            errors="replace",
        )

        # stderr is drained on its own thread so a chatty stderr can't
        # fill the pipe while we block on stdout.
        stderr_chunks: list[str] = []
        drain = threading.Thread(
            target=_read_all, args=(proc.stderr, stderr_chunks), daemon=True
        )
        drain.start()

        # The sink runs on its own thread too: the stdout loop only
        # enqueues, so a slow sink never stalls the pipe or the process.
        lines: queue.Queue[str | None] = queue.Queue()
        dispatcher = threading.Thread(
            target=_dispatch, args=(lines, on_output), daemon=True
        )
        dispatcher.start()

        timed_out = threading.Event()
        timer: threading.Timer | None = None
        if self._timeout:
            def _kill() -> None:
                timed_out.set()
                proc.kill()

            timer = threading.Timer(self._timeout, _kill)
            timer.start()

        stdout_chunks: list[str] = []
        try:
            if proc.stdout:
                for line in proc.stdout:
                    stdout_chunks.append(line)
                    lines.put(line)
            proc.wait()
        except BaseException:
            proc.kill()
            proc.wait()
            raise
        finally:
            if timer is not None:
                timer.cancel()
            lines.put(None)
            drain.join()

        # every line reaches the sink before run() returns
        dispatcher.join()

        stdout = "".join(stdout_chunks)
        stderr = "".join(stderr_chunks)
        if timed_out.is_set():
            raise subprocess.TimeoutExpired(cmd, self._timeout or 0, output=stdout, stderr=stderr)
        return stdout, stderr, proc.returncode


def _read_all(stream: IO[str] | None, into: list[str]) -> None:
    if stream is not None:
        into.append(stream.read())


def _dispatch(lines: queue.Queue[str | None], on_output: OutputCallback) -> None:
    while True:
        line = lines.get()
        if line is None:
            return
        emit_output(on_output, line)
