"""
Shared helpers for CLI commands.
"""

from __future__ import annotations

import functools
import sys
from typing import Any, Callable, NoReturn

import click

from stackauto.core.config.loader import ConfigError, build_workspace, load_settings
from stackauto.core.engine.stack import Stack
from stackauto.core.errors import AutomationError
from stackauto.core.models.stack import StackInitMode
from stackauto.core.models.summary import UpdateSummary

STACK_OPTION_HELP = "Stack name (or org/project/stack)."
MODE_CHOICE = click.Choice([m.value for m in StackInitMode])


def fail(message: str) -> NoReturn:
    click.secho(f"❌ {message}", fg="red", err=True)
    sys.exit(1)


def handle_errors(fn: Callable[..., None]) -> Callable[..., None]:
    """Turn stackauto/settings errors into a red message and exit code 1."""

    @functools.wraps(fn)
    def wrapper(*args: Any, **kwargs: Any) -> None:
        try:
            fn(*args, **kwargs)
        except (AutomationError, ConfigError) as e:
            fail(str(e))

    return wrapper


def open_stack(ctx: click.Context, stack_name: str, mode: str) -> Stack:
    """Load settings, build the workspace, and establish the stack."""
    settings = load_settings(ctx.obj.get("config_path"))
    workspace = build_workspace(settings)
    return Stack(stack_name, workspace, mode)


def summary_dict(summary: UpdateSummary | None) -> dict[str, Any] | None:
    if summary is None:
        return None
    return summary.model_dump(mode="json", by_alias=True)


def print_summary(summary: UpdateSummary | None) -> None:
    if summary is None:
        click.echo("   No update history")
        return

    color = "green" if summary.succeeded else "red" if summary.result == "failed" else "yellow"
    click.secho(f"   {summary.kind} #{summary.version}: {summary.result}", fg=color, bold=True)
    if summary.message:
        click.echo(f"   💬 {summary.message}")
    if summary.resource_changes:
        changes = ", ".join(f"{op}={n}" for op, n in summary.resource_changes.items())
        click.echo(f"   📋 {changes}")
