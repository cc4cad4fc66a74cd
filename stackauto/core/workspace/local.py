"""
LocalWorkspace — a workspace backed by the pulumi CLI and a local directory.

Stack lifecycle and configuration primitives are thin wrappers around
``pulumi stack ...`` and ``pulumi config ...``. Every command carries
``--stack <name>`` explicitly, so correctness never depends solely on
which stack happens to be selected in the shared project directory.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Mapping

from stackauto.adapters.base import CommandRunner
from stackauto.adapters.shell.command import PulumiCommandRunner
from stackauto.core.errors import (
    CommandError,
    CommandOutputError,
    StackAlreadyExistsError,
    StackNotFoundError,
)
from stackauto.core.models.config import ConfigMap, ConfigValue
from stackauto.core.models.options import PulumiFn
from stackauto.core.models.results import CommandResult
from stackauto.core.persistence.audit import AuditEntry, AuditWriter
from stackauto.core.workspace.base import Workspace

logger = logging.getLogger(__name__)

# stderr fragments the CLI prints for the two classified failures
_ALREADY_EXISTS_MARKERS = ("already exists",)
_NOT_FOUND_MARKERS = ("no stack named", "not found")


def _matches(err: CommandError, markers: tuple[str, ...]) -> bool:
    text = f"{err.stderr}\n{err.stdout}".lower()
    return any(m in text for m in markers)


class LocalWorkspace(Workspace):
    """Workspace rooted at a project directory on the local filesystem.

    Args:
        work_dir: Directory containing the pulumi project (default: cwd).
        pulumi_home: Optional ``PULUMI_HOME`` override.
        env_vars: Extra environment for every invocation.
        program: Inline program; accepted but unsupported by Stack operations.
        runner: Command runner (default: PulumiCommandRunner).
        audit_writer: When set, each completed command is logged to it.
    """

    def __init__(
        self,
        work_dir: str | Path | None = None,
        *,
        pulumi_home: str | None = None,
        env_vars: Mapping[str, str] | None = None,
        program: PulumiFn | None = None,
        runner: CommandRunner | None = None,
        audit_writer: AuditWriter | None = None,
    ):
        super().__init__()
        self._work_dir = str(Path(work_dir) if work_dir is not None else Path.cwd())
        self._pulumi_home = pulumi_home
        self._env_vars = dict(env_vars or {})
        self._program = program
        self._runner = runner or PulumiCommandRunner()
        self._audit = audit_writer

    @property
    def work_dir(self) -> str:
        return self._work_dir

    @property
    def pulumi_home(self) -> str | None:
        return self._pulumi_home

    @property
    def runner(self) -> CommandRunner:
        return self._runner

    @property
    def program(self) -> PulumiFn | None:
        return self._program

    def env_vars(self) -> dict[str, str]:
        return dict(self._env_vars)

    def set_env_var(self, key: str, value: str) -> None:
        self._env_vars[key] = value

    def unset_env_var(self, key: str) -> None:
        self._env_vars.pop(key, None)

    # ── Internals ────────────────────────────────────────────────

    def _run(self, *args: str) -> CommandResult:
        return self._runner.run(list(args), cwd=self._work_dir, env=self.command_env())

    @staticmethod
    def _parse(result: CommandResult, what: str) -> object:
        try:
            return json.loads(result.stdout)
        except json.JSONDecodeError as e:
            raise CommandOutputError(what, str(e), raw=result.stdout) from e

    # ── Stack lifecycle ──────────────────────────────────────────

    def create_stack(self, stack_name: str) -> None:
        try:
            self._run("stack", "init", stack_name)
        except CommandError as e:
            if _matches(e, _ALREADY_EXISTS_MARKERS):
                raise StackAlreadyExistsError.wrap(e) from e
            raise
        logger.info("Created stack '%s'", stack_name)

    def select_stack(self, stack_name: str) -> None:
        try:
            self._run("stack", "select", stack_name)
        except CommandError as e:
            if _matches(e, _NOT_FOUND_MARKERS):
                raise StackNotFoundError.wrap(e) from e
            raise
        logger.debug("Selected stack '%s'", stack_name)

    # ── Configuration ────────────────────────────────────────────

    def get_config(self, stack_name: str, key: str) -> ConfigValue:
        result = self._run("config", "get", key, "--json", "--stack", stack_name)
        data = self._parse(result, f"config value '{key}'")
        try:
            return ConfigValue.model_validate(data)
        except ValueError as e:
            raise CommandOutputError(f"config value '{key}'", str(e), raw=result.stdout) from e

    def get_all_config(self, stack_name: str) -> ConfigMap:
        result = self._run("config", "--show-secrets", "--json", "--stack", stack_name)
        data = self._parse(result, "config")
        if not isinstance(data, dict):
            raise CommandOutputError("config", f"expected an object, got {type(data).__name__}")
        try:
            return {key: ConfigValue.model_validate(val) for key, val in data.items()}
        except ValueError as e:
            raise CommandOutputError("config", str(e), raw=result.stdout) from e

    def set_config(self, stack_name: str, key: str, value: ConfigValue) -> None:
        secret_flag = "--secret" if value.secret else "--plaintext"
        self._run("config", "set", key, secret_flag, "--stack", stack_name, "--", value.value)

    def remove_config(self, stack_name: str, key: str) -> None:
        self._run("config", "rm", key, "--stack", stack_name)

    def refresh_config(self, stack_name: str) -> ConfigMap:
        self._run("config", "refresh", "--force", "--stack", stack_name)
        return self.get_all_config(stack_name)

    # ── Per-operation hooks ──────────────────────────────────────

    def serialize_args_for_op(self, stack_name: str) -> list[str]:
        return ["--stack", stack_name]

    def post_command_callback(self, stack_name: str) -> None:
        if self._audit is None:
            return
        self._audit.write(
            AuditEntry(stack=stack_name, event="post-command", work_dir=self._work_dir)
        )
