"""
CLI commands for stack lifecycle operations and queries.

Thin wrappers over ``stackauto.core.engine.stack.Stack``.
"""

from __future__ import annotations

import json

import click

from stackauto.core.models.options import (
    DestroyOptions,
    PreviewOptions,
    RefreshOptions,
    UpOptions,
)
from stackauto.ui.cli._common import (
    MODE_CHOICE,
    STACK_OPTION_HELP,
    handle_errors,
    open_stack,
    print_summary,
    summary_dict,
)


def _stream(line: str) -> None:
    click.echo(line, nl=False)


def _stack_options(fn):  # type: ignore[no-untyped-def]
    fn = click.option("--mode", type=MODE_CHOICE, default="select", show_default=True,
                      help="How to establish the stack.")(fn)
    fn = click.option("--stack", "-s", "stack_name", required=True, help=STACK_OPTION_HELP)(fn)
    return fn


# ── Lifecycle ───────────────────────────────────────────────────


@click.command("up")
@_stack_options
@click.option("--message", "-m", default=None, help="Message for this update.")
@click.option("--target", "-t", "targets", multiple=True, help="Resource URN to target (repeatable).")
@click.option("--replace", "replaces", multiple=True, help="Resource URN to replace (repeatable).")
@click.option("--target-dependents", is_flag=True, help="Also target dependents of --target.")
@click.option("--parallel", "-p", type=int, default=None, help="Max parallel resource operations.")
@click.option("--expect-no-changes", is_flag=True, help="Fail if any changes occur.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
@handle_errors
def up(
    ctx: click.Context,
    stack_name: str,
    mode: str,
    message: str | None,
    targets: tuple[str, ...],
    replaces: tuple[str, ...],
    target_dependents: bool,
    parallel: int | None,
    expect_no_changes: bool,
    as_json: bool,
) -> None:
    """Create or update the stack's resources."""
    stack = open_stack(ctx, stack_name, mode)
    result = stack.up(UpOptions(
        message=message,
        target=list(targets),
        replace=list(replaces),
        target_dependents=target_dependents,
        parallel=parallel,
        expect_no_changes=expect_no_changes,
        on_output=None if as_json else _stream,
    ))

    if as_json:
        click.echo(json.dumps({
            "summary": summary_dict(result.summary),
            "outputs": {k: v.model_dump(mode="json") for k, v in result.outputs.items()},
        }, indent=2))
        return

    click.echo()
    click.secho(f"🚀 Update of '{stack.name}' finished", fg="cyan", bold=True)
    print_summary(result.summary)
    _print_outputs(result.outputs)


@click.command("preview")
@_stack_options
@click.option("--message", "-m", default=None, help="Message for this preview.")
@click.option("--target", "-t", "targets", multiple=True, help="Resource URN to target (repeatable).")
@click.option("--replace", "replaces", multiple=True, help="Resource URN to replace (repeatable).")
@click.option("--target-dependents", is_flag=True, help="Also target dependents of --target.")
@click.option("--parallel", "-p", type=int, default=None, help="Max parallel resource operations.")
@click.option("--expect-no-changes", is_flag=True, help="Fail if any changes occur.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
@handle_errors
def preview(
    ctx: click.Context,
    stack_name: str,
    mode: str,
    message: str | None,
    targets: tuple[str, ...],
    replaces: tuple[str, ...],
    target_dependents: bool,
    parallel: int | None,
    expect_no_changes: bool,
    as_json: bool,
) -> None:
    """Show the changes an update would make."""
    stack = open_stack(ctx, stack_name, mode)
    result = stack.preview(PreviewOptions(
        message=message,
        target=list(targets),
        replace=list(replaces),
        target_dependents=target_dependents,
        parallel=parallel,
        expect_no_changes=expect_no_changes,
    ))

    if as_json:
        click.echo(json.dumps({
            "stdout": result.stdout,
            "summary": summary_dict(result.summary),
        }, indent=2))
        return

    click.echo(result.stdout, nl=False)
    click.secho(f"📋 Preview of '{stack.name}'", fg="cyan", bold=True)
    print_summary(result.summary)


@click.command("refresh")
@_stack_options
@click.option("--message", "-m", default=None, help="Message for this refresh.")
@click.option("--target", "-t", "targets", multiple=True, help="Resource URN to target (repeatable).")
@click.option("--parallel", "-p", type=int, default=None, help="Max parallel resource operations.")
@click.option("--expect-no-changes", is_flag=True, help="Fail if any changes occur.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
@handle_errors
def refresh(
    ctx: click.Context,
    stack_name: str,
    mode: str,
    message: str | None,
    targets: tuple[str, ...],
    parallel: int | None,
    expect_no_changes: bool,
    as_json: bool,
) -> None:
    """Sync the stack's state with its real resources."""
    stack = open_stack(ctx, stack_name, mode)
    result = stack.refresh(RefreshOptions(
        message=message,
        target=list(targets),
        parallel=parallel,
        expect_no_changes=expect_no_changes,
        on_output=None if as_json else _stream,
    ))

    if as_json:
        click.echo(json.dumps({"summary": summary_dict(result.summary)}, indent=2))
        return

    click.echo()
    click.secho(f"🔄 Refresh of '{stack.name}' finished", fg="cyan", bold=True)
    print_summary(result.summary)


@click.command("destroy")
@_stack_options
@click.option("--message", "-m", default=None, help="Message for this destroy.")
@click.option("--target", "-t", "targets", multiple=True, help="Resource URN to target (repeatable).")
@click.option("--target-dependents", is_flag=True, help="Also target dependents of --target.")
@click.option("--parallel", "-p", type=int, default=None, help="Max parallel resource operations.")
@click.option("--yes", "-y", is_flag=True, help="Skip the confirmation prompt.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
@handle_errors
def destroy(
    ctx: click.Context,
    stack_name: str,
    mode: str,
    message: str | None,
    targets: tuple[str, ...],
    target_dependents: bool,
    parallel: int | None,
    yes: bool,
    as_json: bool,
) -> None:
    """Delete all of the stack's resources."""
    if not yes:
        click.confirm(f"Destroy all resources in stack '{stack_name}'?", abort=True)

    stack = open_stack(ctx, stack_name, mode)
    result = stack.destroy(DestroyOptions(
        message=message,
        target=list(targets),
        target_dependents=target_dependents,
        parallel=parallel,
        on_output=None if as_json else _stream,
    ))

    if as_json:
        click.echo(json.dumps({"summary": summary_dict(result.summary)}, indent=2))
        return

    click.echo()
    click.secho(f"💥 Destroy of '{stack.name}' finished", fg="cyan", bold=True)
    print_summary(result.summary)


# ── Queries ─────────────────────────────────────────────────────


def _print_outputs(outputs: dict) -> None:
    if not outputs:
        return
    click.echo(f"\n   📤 Outputs ({len(outputs)}):")
    for key, out in sorted(outputs.items()):
        shown = "[secret]" if out.secret else json.dumps(out.value)
        click.echo(f"      {key:<30} {shown}")


@click.command("outputs")
@_stack_options
@click.option("--show-secrets", is_flag=True, help="Print secret values in plaintext.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
@handle_errors
def outputs(
    ctx: click.Context, stack_name: str, mode: str, show_secrets: bool, as_json: bool
) -> None:
    """Show stack outputs."""
    stack = open_stack(ctx, stack_name, mode)
    result = stack.outputs()

    if as_json:
        data = {
            key: {
                "value": out.value if (show_secrets or not out.secret) else "[secret]",
                "secret": out.secret,
            }
            for key, out in result.items()
        }
        click.echo(json.dumps(data, indent=2))
        return

    if not result:
        click.echo("No outputs")
        return
    for key, out in sorted(result.items()):
        shown = json.dumps(out.value) if (show_secrets or not out.secret) else "[secret]"
        click.echo(f"{key:<30} {shown}")


@click.command("history")
@_stack_options
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
@handle_errors
def history(ctx: click.Context, stack_name: str, mode: str, as_json: bool) -> None:
    """List the stack's update history, most recent first."""
    stack = open_stack(ctx, stack_name, mode)
    entries = stack.history()

    if as_json:
        click.echo(json.dumps([summary_dict(e) for e in entries], indent=2))
        return

    if not entries:
        click.echo("No update history")
        return
    for entry in entries:
        print_summary(entry)


@click.command("info")
@_stack_options
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
@handle_errors
def info(ctx: click.Context, stack_name: str, mode: str, as_json: bool) -> None:
    """Show the most recent update."""
    stack = open_stack(ctx, stack_name, mode)
    summary = stack.info()

    if as_json:
        click.echo(json.dumps(summary_dict(summary), indent=2))
        return

    click.secho(f"📋 {stack.name}", fg="cyan", bold=True)
    print_summary(summary)
