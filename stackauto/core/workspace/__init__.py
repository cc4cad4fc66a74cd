"""Workspaces — where stacks, settings and the runner live."""

from stackauto.core.workspace.base import Workspace
from stackauto.core.workspace.local import LocalWorkspace

__all__ = ["LocalWorkspace", "Workspace"]
