"""Adapters — command execution endpoints for the pulumi engine.

Public re-exports for convenient access.
"""

from stackauto.adapters.base import CommandRunner
from stackauto.adapters.mock import MockCommandRunner, RunnerCall
from stackauto.adapters.shell.command import PulumiCommandRunner

__all__ = [
    "CommandRunner",
    "MockCommandRunner",
    "PulumiCommandRunner",
    "RunnerCall",
]
