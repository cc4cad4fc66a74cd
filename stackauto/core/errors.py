"""
Error taxonomy — everything stackauto raises on purpose.

Construction, execution, and parse failures all surface to the
immediate caller. Nothing here is retried automatically.
"""

from __future__ import annotations

from typing import Sequence


class AutomationError(Exception):
    """Base class for all stackauto errors."""


class InvalidInitModeError(AutomationError, ValueError):
    """Raised when a Stack is constructed with an unknown init mode."""

    def __init__(self, mode: object):
        self.mode = mode
        super().__init__(f"unexpected Stack creation mode: {mode}")


class InlineProgramNotSupportedError(AutomationError, NotImplementedError):
    """Raised when an operation is asked to run an in-process program."""

    def __init__(self, operation: str):
        self.operation = operation
        super().__init__(f"NYI: inline programs ({operation})")


class CommandError(AutomationError):
    """A pulumi invocation failed or timed out.

    The captured stdout/stderr are kept for diagnostics.
    """

    def __init__(
        self,
        command: Sequence[str],
        *,
        stdout: str = "",
        stderr: str = "",
        exit_code: int | None = None,
        message: str | None = None,
    ):
        self.command = list(command)
        self.stdout = stdout
        self.stderr = stderr
        self.exit_code = exit_code
        if message is None:
            message = f"command failed with exit code {exit_code}: {' '.join(self.command)}"
            if stderr.strip():
                message += f"\n{stderr.strip()}"
        super().__init__(message)

    @classmethod
    def wrap(cls, err: CommandError) -> CommandError:
        """Re-raise ``err`` as this (more specific) subclass."""
        return cls(
            err.command,
            stdout=err.stdout,
            stderr=err.stderr,
            exit_code=err.exit_code,
            message=str(err),
        )


class StackAlreadyExistsError(CommandError):
    """``stack init`` failed because the stack already exists."""


class StackNotFoundError(CommandError):
    """``stack select`` failed because the stack does not exist."""


class CommandOutputError(AutomationError):
    """A query returned output that is not the JSON shape we expect."""

    def __init__(self, what: str, detail: str, raw: str = ""):
        self.what = what
        self.raw = raw
        super().__init__(f"Unable to parse {what}: {detail}")


class MonitorConnectionError(AutomationError):
    """The language runtime could not reach the resource monitor."""
