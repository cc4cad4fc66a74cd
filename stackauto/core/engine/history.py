"""
History reader — decode the update history and pick the current entry.

The engine reports history most-recent-first. That order is kept
as-is; "current" is simply the first element.
"""

from __future__ import annotations

import json

from pydantic import ValidationError

from stackauto.core.errors import CommandOutputError
from stackauto.core.models.summary import UpdateSummary


def parse_history(raw: str) -> list[UpdateSummary]:
    """Decode ``pulumi history --json`` output.

    An empty payload (``null`` or ``[]``) is an empty history.

    Raises:
        CommandOutputError: If the payload is not a JSON array of summaries.
    """
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise CommandOutputError("history", str(e), raw=raw) from e

    if data is None:
        return []
    if not isinstance(data, list):
        raise CommandOutputError("history", f"expected an array, got {type(data).__name__}", raw=raw)

    try:
        return [UpdateSummary.model_validate(item) for item in data]
    except ValidationError as e:
        raise CommandOutputError("history", str(e), raw=raw) from e


def current_summary(history: list[UpdateSummary]) -> UpdateSummary | None:
    """The most recent update, or None when there is no history."""
    if not history:
        return None
    return history[0]
