"""
Runner base — the contract between a Stack and the pulumi process.

A Stack never spawns processes itself. It hands an argument list, a
working directory and extra environment to a CommandRunner and gets a
CommandResult back, or a CommandError when the process fails.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Mapping, Sequence

from stackauto.core.models.options import OutputCallback
from stackauto.core.models.results import CommandResult


class CommandRunner(ABC):
    """Abstract command execution endpoint.

    To create a new runner:
        1. Subclass CommandRunner
        2. Implement name, is_available, run
        3. Pass it to a Workspace
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """The runner identifier (e.g., 'pulumi', 'mock')."""

    @abstractmethod
    def is_available(self) -> bool:
        """Check whether the underlying tool can be invoked.

        Should be fast and never raise.
        """

    @abstractmethod
    def run(
        self,
        args: Sequence[str],
        *,
        cwd: str,
        env: Mapping[str, str] | None = None,
        on_output: OutputCallback | None = None,
    ) -> CommandResult:
        """Run one command to completion.

        Args:
            args: Arguments passed to the engine binary.
            cwd: Working directory for the process.
            env: Variables overlaid on the current process environment.
            on_output: Optional sink called once per line of stdout,
                in production order.

        Returns:
            CommandResult with captured stdout/stderr.

        Raises:
            CommandError: If the process exits non-zero, cannot be
                started, or times out.
        """

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r}>"
