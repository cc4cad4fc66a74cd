"""
Stack — the orchestrator for one named stack in a workspace.

A Stack binds a stack name to a Workspace, establishes the backing
stack when it is built, and exposes the lifecycle operations.

Construction (synchronous; the constructor returns only once the stack
is ready):

    uninitialized → establishing → ready

    create  → workspace.create_stack
    select  → workspace.select_stack
    upsert  → create, falling back to select when the stack already exists

Operation flow (up / preview / refresh / destroy):

    reject inline program → lock stack → select → build args
      → run (+ workspace args/env) → post-command hook
      → history (+ outputs for up) → typed result

Only one operation runs per stack name per workspace at a time: each
public method holds ``workspace.stack_lock(name)`` for its duration.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Sequence

from stackauto.core.engine.flags import (
    build_destroy_args,
    build_preview_args,
    build_refresh_args,
    build_up_args,
)
from stackauto.core.engine.history import current_summary, parse_history
from stackauto.core.engine.outputs import parse_output_view, reconcile_outputs
from stackauto.core.errors import (
    InlineProgramNotSupportedError,
    InvalidInitModeError,
    StackAlreadyExistsError,
)
from stackauto.core.models.config import ConfigMap, ConfigValue
from stackauto.core.models.options import (
    DestroyOptions,
    OutputCallback,
    PreviewOptions,
    PulumiFn,
    RefreshOptions,
    UpOptions,
)
from stackauto.core.models.results import (
    CommandResult,
    DestroyResult,
    OutputMap,
    PreviewResult,
    RefreshResult,
    UpResult,
)
from stackauto.core.models.stack import StackInitMode, StackState, fully_qualified_stack_name
from stackauto.core.models.summary import UpdateSummary
from stackauto.core.workspace.base import Workspace

logger = logging.getLogger(__name__)

__all__ = ["Stack", "fully_qualified_stack_name"]


class Stack:
    """A deployable stack bound to a workspace.

    Args:
        name: Stack name (or fully qualified ``org/project/stack``).
        workspace: The workspace the stack lives in. Shared, not owned.
        mode: ``create``, ``select`` or ``upsert``.

    Raises:
        InvalidInitModeError: For an unknown mode.
        CommandError: If the stack cannot be created/selected.
    """

    def __init__(self, name: str, workspace: Workspace, mode: StackInitMode | str):
        self._name = name
        self._workspace = workspace
        self._state = StackState.UNINITIALIZED

        try:
            init_mode = StackInitMode(mode)
        except ValueError:
            raise InvalidInitModeError(mode) from None

        self._establish(init_mode)

    @classmethod
    def create(cls, name: str, workspace: Workspace) -> Stack:
        """Create a new stack; fails if it already exists."""
        return cls(name, workspace, StackInitMode.CREATE)

    @classmethod
    def select(cls, name: str, workspace: Workspace) -> Stack:
        """Select an existing stack; fails if it does not exist."""
        return cls(name, workspace, StackInitMode.SELECT)

    @classmethod
    def upsert(cls, name: str, workspace: Workspace) -> Stack:
        """Create the stack, or select it if it already exists."""
        return cls(name, workspace, StackInitMode.UPSERT)

    def _establish(self, mode: StackInitMode) -> None:
        ws = self._workspace
        self._state = StackState.ESTABLISHING
        try:
            with ws.stack_lock(self._name):
                if mode is StackInitMode.CREATE:
                    ws.create_stack(self._name)
                elif mode is StackInitMode.SELECT:
                    ws.select_stack(self._name)
                else:
                    try:
                        ws.create_stack(self._name)
                    except StackAlreadyExistsError:
                        logger.debug("Stack '%s' already exists, selecting it", self._name)
                        ws.select_stack(self._name)
        except BaseException:
            self._state = StackState.UNINITIALIZED
            raise
        self._state = StackState.READY
        logger.debug("Stack '%s' ready (%s)", self._name, mode)

    # ── Accessors ────────────────────────────────────────────────

    @property
    def name(self) -> str:
        return self._name

    @property
    def workspace(self) -> Workspace:
        return self._workspace

    @property
    def state(self) -> StackState:
        return self._state

    @property
    def is_ready(self) -> bool:
        return self._state is StackState.READY

    def __repr__(self) -> str:
        return f"<Stack name={self._name!r} state={self._state}>"

    # ── Lifecycle operations ─────────────────────────────────────

    def up(self, opts: UpOptions | None = None) -> UpResult:
        """Create or update the stack's resources."""
        opts = opts or UpOptions()
        self._reject_inline("up", opts.program)
        args = build_up_args(opts)

        with self._workspace.stack_lock(self._name):
            self._workspace.select_stack(self._name)
            logger.info("Running up on stack '%s'", self._name)
            result = self._run_command(args, on_output=opts.on_output)

            with ThreadPoolExecutor(max_workers=2) as pool:
                summary_future = pool.submit(self._info)
                outputs_future = pool.submit(self._outputs)
                summary = summary_future.result()
                outputs = outputs_future.result()

        return UpResult(
            stdout=result.stdout,
            stderr=result.stderr,
            summary=summary,
            outputs=outputs,
        )

    def preview(self, opts: PreviewOptions | None = None) -> PreviewResult:
        """Compute the changes an update would make."""
        opts = opts or PreviewOptions()
        self._reject_inline("preview", opts.program)
        args = build_preview_args(opts)

        with self._workspace.stack_lock(self._name):
            self._workspace.select_stack(self._name)
            logger.info("Running preview on stack '%s'", self._name)
            result = self._run_command(args)
            summary = self._info()

        return PreviewResult(stdout=result.stdout, stderr=result.stderr, summary=summary)

    def refresh(self, opts: RefreshOptions | None = None) -> RefreshResult:
        """Reconcile the stack's state with the real resources."""
        opts = opts or RefreshOptions()
        args = build_refresh_args(opts)

        with self._workspace.stack_lock(self._name):
            self._workspace.select_stack(self._name)
            logger.info("Running refresh on stack '%s'", self._name)
            result = self._run_command(args, on_output=opts.on_output)
            summary = self._info()

        return RefreshResult(stdout=result.stdout, stderr=result.stderr, summary=summary)

    def destroy(self, opts: DestroyOptions | None = None) -> DestroyResult:
        """Delete all of the stack's resources."""
        opts = opts or DestroyOptions()
        args = build_destroy_args(opts)

        with self._workspace.stack_lock(self._name):
            self._workspace.select_stack(self._name)
            logger.info("Running destroy on stack '%s'", self._name)
            result = self._run_command(args, on_output=opts.on_output)
            summary = self._info()

        return DestroyResult(stdout=result.stdout, stderr=result.stderr, summary=summary)

    # ── Queries ──────────────────────────────────────────────────

    def outputs(self) -> OutputMap:
        """Current stack outputs, each tagged secret or plain."""
        with self._workspace.stack_lock(self._name):
            return self._outputs()

    def history(self) -> list[UpdateSummary]:
        """All update records, in the order the engine reports them."""
        with self._workspace.stack_lock(self._name):
            return self._history()

    def info(self) -> UpdateSummary | None:
        """The most recent update record, or None if there is no history."""
        with self._workspace.stack_lock(self._name):
            return self._info()

    def _outputs(self) -> OutputMap:
        self._workspace.select_stack(self._name)
        with ThreadPoolExecutor(max_workers=2) as pool:
            masked_future = pool.submit(self._run_command, ["stack", "output", "--json"])
            plaintext_future = pool.submit(
                self._run_command, ["stack", "output", "--json", "--show-secrets"]
            )
            masked_raw = masked_future.result().stdout
            plaintext_raw = plaintext_future.result().stdout

        masked = parse_output_view(masked_raw, "masked stack outputs")
        plaintext = parse_output_view(plaintext_raw, "plaintext stack outputs")
        return reconcile_outputs(masked, plaintext)

    def _history(self) -> list[UpdateSummary]:
        result = self._run_command(["history", "--json", "--show-secrets"])
        return parse_history(result.stdout)

    def _info(self) -> UpdateSummary | None:
        return current_summary(self._history())

    # ── Configuration (proxied to the workspace) ─────────────────

    def get_config(self, key: str) -> ConfigValue:
        return self._workspace.get_config(self._name, key)

    def get_all_config(self) -> ConfigMap:
        return self._workspace.get_all_config(self._name)

    def set_config(self, key: str, value: ConfigValue) -> None:
        self._workspace.set_config(self._name, key, value)

    def set_all_config(self, config: ConfigMap) -> None:
        self._workspace.set_all_config(self._name, config)

    def remove_config(self, key: str) -> None:
        self._workspace.remove_config(self._name, key)

    def remove_all_config(self, keys: list[str]) -> None:
        self._workspace.remove_all_config(self._name, keys)

    def refresh_config(self) -> ConfigMap:
        return self._workspace.refresh_config(self._name)

    # ── Internals ────────────────────────────────────────────────

    def _reject_inline(self, operation: str, program: PulumiFn | None) -> None:
        # Checked before anything is selected or spawned.
        if program is not None or self._workspace.program is not None:
            raise InlineProgramNotSupportedError(operation)

    def _run_command(
        self, args: Sequence[str], on_output: OutputCallback | None = None
    ) -> CommandResult:
        ws = self._workspace
        full_args = [*args, *ws.serialize_args_for_op(self._name)]
        result = ws.runner.run(full_args, cwd=ws.work_dir, env=ws.command_env(), on_output=on_output)
        ws.post_command_callback(self._name)
        return result
