"""
stackauto — CLI entrypoint.

Usage:
    python -m stackauto.main --help
    stackauto up --stack dev
    stackauto outputs --stack dev --json
    stackauto config --stack dev set region us-east-1
"""

from __future__ import annotations

import json
import os
from pathlib import Path

import click

from stackauto import __version__
from stackauto.core.observability.logging_config import (
    ENV_LOG_FILE,
    ENV_LOG_FILE_LEVEL,
    resolve_level,
    setup_logging,
)
from stackauto.ui.cli._common import handle_errors


@click.group()
@click.version_option(version=__version__, prog_name="stackauto")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False),
    default=None,
    help="Path to stackauto.yml (default: auto-detect).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: str | None,
) -> None:
    """stackauto — run pulumi stack operations from one place."""
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = Path(config_path) if config_path else None

    # ── Logging setup (once, at process start) ──────────────────
    setup_logging(
        level=resolve_level(debug=debug, verbose=verbose, quiet=quiet),
        log_file=os.environ.get(ENV_LOG_FILE),
        log_file_level=os.environ.get(ENV_LOG_FILE_LEVEL),
    )


@cli.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
@handle_errors
def check(ctx: click.Context, as_json: bool) -> None:
    """Show resolved settings and whether the pulumi CLI is available."""
    from stackauto.core.config.loader import build_workspace, load_settings

    settings = load_settings(ctx.obj.get("config_path"))
    workspace = build_workspace(settings)
    available = workspace.runner.is_available()

    if as_json:
        click.echo(json.dumps({
            "settings": settings.model_dump(mode="json"),
            "runner": {"name": workspace.runner.name, "available": available},
        }, indent=2))
        return

    click.secho("🔧 stackauto", fg="cyan", bold=True)
    click.echo(f"   📁 Work dir: {settings.work_dir}")
    if settings.pulumi_home:
        click.echo(f"   🏠 PULUMI_HOME: {settings.pulumi_home}")
    if available:
        click.secho(f"   ✅ {settings.pulumi_command} found", fg="green")
    else:
        click.secho(f"   ⚠️  {settings.pulumi_command} not found on PATH", fg="yellow")


# ── Register sub-commands from stackauto/ui/cli/ ─────────────────

from stackauto.ui.cli.config import config  # noqa: E402
from stackauto.ui.cli.lifecycle import destroy, history, info, outputs, preview, refresh, up  # noqa: E402

cli.add_command(up)
cli.add_command(preview)
cli.add_command(refresh)
cli.add_command(destroy)
cli.add_command(outputs)
cli.add_command(history)
cli.add_command(info)
cli.add_command(config)


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
