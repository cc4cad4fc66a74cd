"""
Settings loader — reads stackauto.yml into AutomationSettings.

The settings file is optional. When present it is searched for upward
from the working directory, parsed as YAML, validated with Pydantic,
and used to build a LocalWorkspace.

Precedence for each value:
    environment variable  >  stackauto.yml  >  built-in default
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

import yaml
from pydantic import BaseModel, Field, ValidationError

from stackauto.adapters.shell.command import PulumiCommandRunner
from stackauto.core.persistence.audit import AuditWriter
from stackauto.core.workspace.local import LocalWorkspace

logger = logging.getLogger(__name__)

# Default settings filename
SETTINGS_FILE = "stackauto.yml"


class ConfigError(Exception):
    """Raised when the settings file is invalid or unreadable."""


class AutomationSettings(BaseModel):
    """Everything needed to build a workspace."""

    work_dir: str = "."
    pulumi_home: str | None = None
    pulumi_command: str = "pulumi"
    timeout: float | None = None
    env: dict[str, str] = Field(default_factory=dict)
    audit: bool = False


def find_settings_file(start_dir: Path | None = None) -> Path | None:
    """Search for stackauto.yml starting from the given directory, walking up.

    Args:
        start_dir: Directory to start searching from (default: cwd).

    Returns:
        Path to stackauto.yml, or None if not found.
    """
    current = (start_dir or Path.cwd()).resolve()

    for _ in range(20):  # safety limit
        candidate = current / SETTINGS_FILE
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            break  # filesystem root
        current = parent

    return None


def load_settings(path: Path | None = None) -> AutomationSettings:
    """Load and validate settings.

    Args:
        path: Explicit path to stackauto.yml. If None, searches upward;
            if nothing is found, defaults are used.

    Returns:
        Validated AutomationSettings. A relative ``work_dir`` is
        resolved against the settings file's directory.

    Raises:
        ConfigError: If an explicit file is missing, or any file is invalid.
    """
    if path is None:
        path = find_settings_file()

    if path is None:
        logger.debug("No %s found, using defaults", SETTINGS_FILE)
        return _apply_env(AutomationSettings(work_dir=str(Path.cwd())))

    if not path.is_file():
        raise ConfigError(f"Settings file not found: {path}")

    logger.debug("Loading settings from %s", path)

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    try:
        settings = AutomationSettings.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid settings in {path}: {e}") from e

    work_dir = Path(settings.work_dir).expanduser()
    if not work_dir.is_absolute():
        work_dir = path.parent.resolve() / work_dir
    settings = settings.model_copy(update={"work_dir": str(work_dir)})

    return _apply_env(settings)


def _apply_env(settings: AutomationSettings) -> AutomationSettings:
    updates: dict[str, str] = {}
    command = os.environ.get("STACKAUTO_PULUMI_COMMAND")
    if command:
        updates["pulumi_command"] = command
    home = os.environ.get("PULUMI_HOME")
    if home:
        updates["pulumi_home"] = home
    return settings.model_copy(update=updates) if updates else settings


def build_workspace(settings: AutomationSettings) -> LocalWorkspace:
    """Construct a LocalWorkspace from settings."""
    work_dir = Path(settings.work_dir)
    audit = AuditWriter(work_dir=work_dir) if settings.audit else None
    return LocalWorkspace(
        work_dir=work_dir,
        pulumi_home=settings.pulumi_home,
        env_vars=settings.env,
        runner=PulumiCommandRunner(settings.pulumi_command, timeout=settings.timeout),
        audit_writer=audit,
    )
