"""
Shared test fixtures and configuration.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Mapping, Sequence

import pytest

from stackauto.adapters.mock import MockCommandRunner
from stackauto.core.errors import StackAlreadyExistsError, StackNotFoundError
from stackauto.core.models.config import ConfigMap, ConfigValue
from stackauto.core.models.options import OutputCallback, PulumiFn
from stackauto.core.models.results import CommandResult
from stackauto.core.workspace.base import Workspace


HISTORY_JSON = json.dumps([
    {
        "kind": "update",
        "startTime": 1600000100,
        "message": "second update",
        "environment": {"exec.kind": "auto.local"},
        "config": {"aws:region": {"value": "us-west-2", "secret": False}},
        "result": "succeeded",
        "endTime": 1600000150,
        "version": 2,
        "resourceChanges": {"create": 1, "same": 3},
    },
    {
        "kind": "update",
        "startTime": 1600000000,
        "message": "first update",
        "environment": {},
        "config": {},
        "result": "failed",
        "endTime": 1600000020,
        "version": 1,
    },
])

MASKED_OUTPUTS_JSON = json.dumps({
    "url": "https://example.com",
    "password": "[secret]",
    "count": 3,
})

PLAINTEXT_OUTPUTS_JSON = json.dumps({
    "url": "https://example.com",
    "password": "hunter2",
    "count": 3,
})


class RecordingRunner(MockCommandRunner):
    """MockCommandRunner that also appends to a shared event list."""

    def __init__(self, events: list[tuple[str, str]]):
        super().__init__()
        self.events = events

    def run(
        self,
        args: Sequence[str],
        *,
        cwd: str,
        env: Mapping[str, str] | None = None,
        on_output: OutputCallback | None = None,
    ) -> CommandResult:
        self.events.append(("run", " ".join(args)))
        return super().run(args, cwd=cwd, env=env, on_output=on_output)


class InMemoryWorkspace(Workspace):
    """Workspace keeping stacks and config in dicts; commands go to a mock runner."""

    def __init__(
        self,
        work_dir: str = "/work",
        pulumi_home: str | None = None,
        env: dict[str, str] | None = None,
        program: PulumiFn | None = None,
    ):
        super().__init__()
        self.events: list[tuple[str, str]] = []
        self._runner = RecordingRunner(self.events)
        self._work_dir = work_dir
        self._pulumi_home = pulumi_home
        self._env = dict(env or {})
        self._program = program
        self.stacks: set[str] = set()
        self.config: dict[str, dict[str, ConfigValue]] = {}
        self.create_error: Exception | None = None

    @property
    def work_dir(self) -> str:
        return self._work_dir

    @property
    def pulumi_home(self) -> str | None:
        return self._pulumi_home

    @property
    def runner(self) -> RecordingRunner:
        return self._runner

    @property
    def program(self) -> PulumiFn | None:
        return self._program

    def env_vars(self) -> dict[str, str]:
        return dict(self._env)

    def create_stack(self, stack_name: str) -> None:
        self.events.append(("create", stack_name))
        if self.create_error is not None:
            raise self.create_error
        if stack_name in self.stacks:
            raise StackAlreadyExistsError(
                ["pulumi", "stack", "init", stack_name],
                stderr=f"error: stack '{stack_name}' already exists",
                exit_code=255,
            )
        self.stacks.add(stack_name)
        self.config.setdefault(stack_name, {})

    def select_stack(self, stack_name: str) -> None:
        self.events.append(("select", stack_name))
        if stack_name not in self.stacks:
            raise StackNotFoundError(
                ["pulumi", "stack", "select", stack_name],
                stderr=f"error: no stack named '{stack_name}' found",
                exit_code=255,
            )

    def get_config(self, stack_name: str, key: str) -> ConfigValue:
        return self.config[stack_name][key]

    def get_all_config(self, stack_name: str) -> ConfigMap:
        return dict(self.config[stack_name])

    def set_config(self, stack_name: str, key: str, value: ConfigValue) -> None:
        self.config[stack_name][key] = value

    def remove_config(self, stack_name: str, key: str) -> None:
        self.config[stack_name].pop(key, None)

    def refresh_config(self, stack_name: str) -> ConfigMap:
        self.events.append(("refresh-config", stack_name))
        return self.get_all_config(stack_name)

    def serialize_args_for_op(self, stack_name: str) -> list[str]:
        return ["--stack", stack_name]

    def post_command_callback(self, stack_name: str) -> None:
        self.events.append(("post", stack_name))


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the caller's pulumi/stackauto environment out of the tests."""
    for var in (
        "PULUMI_HOME",
        "STACKAUTO_PULUMI_COMMAND",
        "STACKAUTO_LOG_LEVEL",
        "STACKAUTO_LOG_FILE",
        "STACKAUTO_LOG_FILE_LEVEL",
    ):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def restore_logging():
    """Undo setup_logging's changes to the root logger."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield root
    for h in root.handlers:
        if h not in handlers:
            h.close()
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def workspace() -> InMemoryWorkspace:
    """An in-memory workspace where stack 'dev' already exists."""
    ws = InMemoryWorkspace()
    ws.stacks.add("dev")
    ws.config["dev"] = {}
    return ws


@pytest.fixture
def scripted_workspace(workspace: InMemoryWorkspace) -> InMemoryWorkspace:
    """Workspace whose runner returns realistic history and output payloads."""
    runner = workspace.runner
    runner.set_response(["history", "--json", "--show-secrets"], stdout=HISTORY_JSON)
    runner.set_response(["stack", "output", "--json"], stdout=MASKED_OUTPUTS_JSON)
    runner.set_response(
        ["stack", "output", "--json", "--show-secrets"], stdout=PLAINTEXT_OUTPUTS_JSON
    )
    return workspace


@pytest.fixture
def tmp_work_dir(tmp_path: Path) -> Path:
    """A temporary pulumi project directory."""
    work_dir = tmp_path / "infra"
    work_dir.mkdir()
    return work_dir
