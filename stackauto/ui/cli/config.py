"""
CLI commands for stack configuration.
"""

from __future__ import annotations

import json

import click

from stackauto.core.models.config import ConfigValue
from stackauto.ui.cli._common import MODE_CHOICE, STACK_OPTION_HELP, handle_errors, open_stack


@click.group("config")
@click.option("--stack", "-s", "stack_name", required=True, help=STACK_OPTION_HELP)
@click.option("--mode", type=MODE_CHOICE, default="select", show_default=True,
              help="How to establish the stack.")
@click.pass_context
def config(ctx: click.Context, stack_name: str, mode: str) -> None:
    """Read and write stack configuration."""
    ctx.obj["stack_name"] = stack_name
    ctx.obj["mode"] = mode


@config.command("get")
@click.argument("key")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
@handle_errors
def get(ctx: click.Context, key: str, as_json: bool) -> None:
    """Print one configuration value."""
    stack = open_stack(ctx, ctx.obj["stack_name"], ctx.obj["mode"])
    value = stack.get_config(key)
    if as_json:
        click.echo(json.dumps(value.model_dump(), indent=2))
        return
    click.echo(value.value)


@config.command("set")
@click.argument("key")
@click.argument("value")
@click.option("--secret", is_flag=True, help="Encrypt the value as a secret.")
@click.pass_context
@handle_errors
def set_(ctx: click.Context, key: str, value: str, secret: bool) -> None:
    """Set a configuration value."""
    stack = open_stack(ctx, ctx.obj["stack_name"], ctx.obj["mode"])
    stack.set_config(key, ConfigValue(value=value, secret=secret))
    click.secho(f"✅ {key} set", fg="green")


@config.command("rm")
@click.argument("keys", nargs=-1, required=True)
@click.pass_context
@handle_errors
def rm(ctx: click.Context, keys: tuple[str, ...]) -> None:
    """Remove one or more configuration values."""
    stack = open_stack(ctx, ctx.obj["stack_name"], ctx.obj["mode"])
    if len(keys) == 1:
        stack.remove_config(keys[0])
    else:
        stack.remove_all_config(list(keys))
    click.secho(f"✅ Removed {', '.join(keys)}", fg="green")


@config.command("ls")
@click.option("--show-secrets", is_flag=True, help="Print secret values in plaintext.")
@click.option("--refresh", "do_refresh", is_flag=True, help="Refresh from the backend first.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
@handle_errors
def ls(ctx: click.Context, show_secrets: bool, do_refresh: bool, as_json: bool) -> None:
    """List all configuration values."""
    stack = open_stack(ctx, ctx.obj["stack_name"], ctx.obj["mode"])
    values = stack.refresh_config() if do_refresh else stack.get_all_config()

    rendered = {
        key: (val.value if (show_secrets or not val.secret) else "[secret]")
        for key, val in values.items()
    }
    if as_json:
        click.echo(json.dumps(rendered, indent=2))
        return

    if not rendered:
        click.echo("No configuration")
        return
    for key in sorted(rendered):
        click.echo(f"{key:<30} {rendered[key]}")
