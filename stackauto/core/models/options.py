"""
Operation options — one explicit structure per lifecycle operation.

Every field is optional; a field left at its default contributes no
flag. The mapping to command-line flags lives in
``stackauto.core.engine.flags`` so it can be tested without a process.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable

# Receives one chunk (a line) of engine output as it is produced.
OutputCallback = Callable[[str], None]

# An in-process pulumi program. Accepted so callers get a clear error,
# but never executed by this package.
PulumiFn = Callable[[], None]


@dataclass
class UpOptions:
    """Options for ``Stack.up``."""

    parallel: int | None = None
    message: str | None = None
    expect_no_changes: bool = False
    replace: list[str] = field(default_factory=list)
    target: list[str] = field(default_factory=list)
    target_dependents: bool = False
    on_output: OutputCallback | None = None
    program: PulumiFn | None = None


@dataclass
class PreviewOptions:
    """Options for ``Stack.preview``."""

    parallel: int | None = None
    message: str | None = None
    expect_no_changes: bool = False
    replace: list[str] = field(default_factory=list)
    target: list[str] = field(default_factory=list)
    target_dependents: bool = False
    program: PulumiFn | None = None


@dataclass
class RefreshOptions:
    """Options for ``Stack.refresh``."""

    parallel: int | None = None
    message: str | None = None
    expect_no_changes: bool = False
    target: list[str] = field(default_factory=list)
    on_output: OutputCallback | None = None


@dataclass
class DestroyOptions:
    """Options for ``Stack.destroy``."""

    parallel: int | None = None
    message: str | None = None
    target: list[str] = field(default_factory=list)
    target_dependents: bool = False
    on_output: OutputCallback | None = None
