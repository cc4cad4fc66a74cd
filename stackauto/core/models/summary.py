"""
UpdateSummary — one entry of a stack's update history.

Parsed straight from ``pulumi history --json``. The engine emits
camelCase keys; the model exposes snake_case attributes and accepts
either spelling on input.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from stackauto.core.models.config import ConfigValue

UpdateKind = Literal["update", "preview", "refresh", "rename", "destroy", "import"]

UpdateResult = Literal["not-started", "in-progress", "succeeded", "failed"]

OpType = Literal[
    "same",
    "create",
    "update",
    "delete",
    "replace",
    "create-replacement",
    "delete-replaced",
]

# str keys: the engine also reports kinds beyond OpType (import, read, discard)
OpMap = dict[str, int]


class UpdateSummary(BaseModel):
    """Immutable record of one historical (or the current) operation."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    # ── Pre-update info ──────────────────────────────────────────
    kind: UpdateKind
    start_time: int | str = Field(default=0, alias="startTime")
    message: str = ""
    environment: dict[str, str] = Field(default_factory=dict)
    config: dict[str, ConfigValue] = Field(default_factory=dict)

    # ── Post-update info ─────────────────────────────────────────
    result: UpdateResult = "not-started"
    end_time: int | str = Field(default=0, alias="endTime")
    version: int = 0
    deployment: Any = Field(default=None, alias="Deployment")
    resource_changes: OpMap | None = Field(default=None, alias="resourceChanges")

    @property
    def succeeded(self) -> bool:
        return self.result == "succeeded"

    def change_count(self, op: OpType | str) -> int:
        """Number of resources that saw ``op`` (0 when not reported)."""
        if not self.resource_changes:
            return 0
        return self.resource_changes.get(op, 0)
