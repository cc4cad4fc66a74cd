"""
Mock runner — scripted stand-in for the pulumi binary.

Used in tests (and dry experiments) to drive a Stack without touching a
real engine. Responses are keyed by an argument prefix; the longest
matching prefix wins, anything unmatched succeeds with empty output.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping, Sequence

from stackauto.adapters.base import CommandRunner
from stackauto.adapters.shell.command import emit_output
from stackauto.core.errors import CommandError
from stackauto.core.models.options import OutputCallback
from stackauto.core.models.results import CommandResult


@dataclass
class RunnerCall:
    """One recorded invocation."""

    args: list[str]
    cwd: str
    env: dict[str, str] = field(default_factory=dict)
    streamed: bool = False


@dataclass
class _Scripted:
    stdout: str = ""
    stderr: str = ""
    exit_code: int = 0


class MockCommandRunner(CommandRunner):
    """Universal runner double.

    By default every command succeeds with empty output. Individual
    commands are scripted with ``set_response`` / ``set_failure``.
    """

    def __init__(self, runner_name: str = "mock", available: bool = True):
        self._name = runner_name
        self._available = available
        self._responses: dict[tuple[str, ...], _Scripted] = {}
        self._call_log: list[RunnerCall] = []

    @property
    def name(self) -> str:
        return self._name

    @property
    def call_log(self) -> list[RunnerCall]:
        """All invocations this mock has received, in order."""
        return self._call_log

    @property
    def call_count(self) -> int:
        return len(self._call_log)

    def calls_for(self, *prefix: str) -> list[RunnerCall]:
        """Invocations whose arguments start with ``prefix``."""
        return [c for c in self._call_log if tuple(c.args[: len(prefix)]) == prefix]

    def is_available(self) -> bool:
        return self._available

    def set_response(self, prefix: Sequence[str], stdout: str = "", stderr: str = "") -> None:
        """Script a successful response for commands starting with ``prefix``."""
        self._responses[tuple(prefix)] = _Scripted(stdout=stdout, stderr=stderr)

    def set_failure(
        self,
        prefix: Sequence[str],
        stderr: str = "mock failure",
        exit_code: int = 1,
        stdout: str = "",
    ) -> None:
        """Script a failing response for commands starting with ``prefix``."""
        self._responses[tuple(prefix)] = _Scripted(stdout=stdout, stderr=stderr, exit_code=exit_code)

    def _lookup(self, args: list[str]) -> _Scripted:
        best: tuple[str, ...] | None = None
        for prefix in self._responses:
            if tuple(args[: len(prefix)]) == prefix:
                if best is None or len(prefix) > len(best):
                    best = prefix
        if best is None:
            return _Scripted()
        return self._responses[best]

    def run(
        self,
        args: Sequence[str],
        *,
        cwd: str,
        env: Mapping[str, str] | None = None,
        on_output: OutputCallback | None = None,
    ) -> CommandResult:
        arg_list = list(args)
        self._call_log.append(
            RunnerCall(args=arg_list, cwd=cwd, env=dict(env or {}), streamed=on_output is not None)
        )
        scripted = self._lookup(arg_list)
        cmd = ["pulumi", *arg_list]

        if on_output is not None:
            for line in scripted.stdout.splitlines(keepends=True):
                emit_output(on_output, line)

        if scripted.exit_code != 0:
            raise CommandError(
                cmd,
                stdout=scripted.stdout,
                stderr=scripted.stderr,
                exit_code=scripted.exit_code,
            )
        return CommandResult(stdout=scripted.stdout, stderr=scripted.stderr, command=cmd)

    def reset(self) -> None:
        """Clear call log and scripted responses."""
        self._call_log.clear()
        self._responses.clear()
