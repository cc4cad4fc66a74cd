"""
Results — what the command runner and lifecycle operations hand back.

CommandResult is the raw outcome of one pulumi invocation. The
operation results wrap it together with the freshest UpdateSummary
(and, for ``up``, the reconciled outputs).
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from stackauto.core.models.summary import UpdateSummary


class CommandResult(BaseModel):
    """Captured output of a single successful command invocation."""

    stdout: str = ""
    stderr: str = ""
    exit_code: int = 0
    command: list[str] = Field(default_factory=list)
    duration_ms: int = 0


class OutputValue(BaseModel):
    """A stack output value and whether the engine treats it as secret."""

    value: Any = None
    secret: bool = False


OutputMap = dict[str, OutputValue]


class _OperationResult(BaseModel):
    stdout: str = ""
    stderr: str = ""
    summary: UpdateSummary | None = None


class UpResult(_OperationResult):
    """Result of ``Stack.up``."""

    outputs: OutputMap = Field(default_factory=dict)


class PreviewResult(_OperationResult):
    """Result of ``Stack.preview``."""


class RefreshResult(_OperationResult):
    """Result of ``Stack.refresh``."""


class DestroyResult(_OperationResult):
    """Result of ``Stack.destroy``."""
