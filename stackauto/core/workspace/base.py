"""
Workspace — the narrow interface a Stack needs from its surroundings.

A workspace owns project/stack settings, environment defaults and the
command runner. Stacks hold a reference to one and call back into it
for stack lifecycle primitives, configuration, and the per-operation
arguments/environment that accompany every engine call.

Concurrency:
    The engine's "currently selected stack" is workspace-global state.
    Two operations interleaving on the same stack name would race on
    it, so every workspace hands out one re-entrant lock per stack name
    (``stack_lock``) and Stack holds it for the whole operation.
"""

from __future__ import annotations

import threading
from abc import ABC, abstractmethod

from stackauto.adapters.base import CommandRunner
from stackauto.core.models.config import ConfigMap, ConfigValue
from stackauto.core.models.options import PulumiFn


class Workspace(ABC):
    """Abstract workspace."""

    def __init__(self) -> None:
        self._locks: dict[str, threading.RLock] = {}
        self._locks_guard = threading.Lock()

    # ── Environment ──────────────────────────────────────────────

    @property
    @abstractmethod
    def work_dir(self) -> str:
        """Directory the engine runs in."""

    @property
    @abstractmethod
    def pulumi_home(self) -> str | None:
        """Override for ``PULUMI_HOME``, or None to inherit."""

    @property
    @abstractmethod
    def runner(self) -> CommandRunner:
        """The command execution endpoint."""

    @property
    def program(self) -> PulumiFn | None:
        """Inline program registered with the workspace, if any."""
        return None

    @abstractmethod
    def env_vars(self) -> dict[str, str]:
        """Extra environment variables for every engine invocation."""

    def command_env(self) -> dict[str, str]:
        """Environment overlay for an engine invocation.

        ``PULUMI_HOME`` comes first so an explicit ``env_vars`` entry wins.
        """
        env: dict[str, str] = {}
        if self.pulumi_home:
            env["PULUMI_HOME"] = self.pulumi_home
        env.update(self.env_vars())
        return env

    # ── Stack lifecycle ──────────────────────────────────────────

    @abstractmethod
    def create_stack(self, stack_name: str) -> None:
        """Create and select a new stack.

        Raises:
            StackAlreadyExistsError: If the stack already exists.
            CommandError: For any other failure.
        """

    @abstractmethod
    def select_stack(self, stack_name: str) -> None:
        """Select an existing stack.

        Raises:
            StackNotFoundError: If no such stack exists.
            CommandError: For any other failure.
        """

    # ── Configuration ────────────────────────────────────────────

    @abstractmethod
    def get_config(self, stack_name: str, key: str) -> ConfigValue: ...

    @abstractmethod
    def get_all_config(self, stack_name: str) -> ConfigMap: ...

    @abstractmethod
    def set_config(self, stack_name: str, key: str, value: ConfigValue) -> None: ...

    def set_all_config(self, stack_name: str, config: ConfigMap) -> None:
        for key, value in config.items():
            self.set_config(stack_name, key, value)

    @abstractmethod
    def remove_config(self, stack_name: str, key: str) -> None: ...

    def remove_all_config(self, stack_name: str, keys: list[str]) -> None:
        for key in keys:
            self.remove_config(stack_name, key)

    @abstractmethod
    def refresh_config(self, stack_name: str) -> ConfigMap:
        """Pull config from the backend into local settings and return it."""

    # ── Per-operation hooks ──────────────────────────────────────

    @abstractmethod
    def serialize_args_for_op(self, stack_name: str) -> list[str]:
        """Extra arguments appended to every command run for ``stack_name``."""

    @abstractmethod
    def post_command_callback(self, stack_name: str) -> None:
        """Called after each engine command completes for ``stack_name``."""

    def stack_lock(self, stack_name: str) -> threading.RLock:
        """The lock serializing operations against ``stack_name``."""
        with self._locks_guard:
            lock = self._locks.get(stack_name)
            if lock is None:
                lock = threading.RLock()
                self._locks[stack_name] = lock
            return lock
