"""
Output reconciliation — merge the masked and plaintext output views.

``pulumi stack output --json`` replaces secret values with the literal
string ``[secret]``; ``--show-secrets`` reveals them. Neither view alone
says both *what* a value is and *whether* it is secret, so the two are
combined key by key:

    value  ← plaintext[key]
    secret ← masked[key] == "[secret]"

The plaintext view defines the key set. A key that appears only in the
masked view is dropped.
"""

from __future__ import annotations

import json
from typing import Any

from stackauto.core.errors import CommandOutputError
from stackauto.core.models.results import OutputMap, OutputValue

SECRET_SENTINEL = "[secret]"


def parse_output_view(raw: str, what: str) -> dict[str, Any]:
    """Decode one ``stack output --json`` payload into a mapping."""
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise CommandOutputError(what, str(e), raw=raw) from e
    if not isinstance(data, dict):
        raise CommandOutputError(what, f"expected an object, got {type(data).__name__}", raw=raw)
    return data


def reconcile_outputs(masked: dict[str, Any], plaintext: dict[str, Any]) -> OutputMap:
    """Combine both views into an OutputMap."""
    outputs: OutputMap = {}
    for key, value in plaintext.items():
        secret = key in masked and masked[key] == SECRET_SENTINEL
        outputs[key] = OutputValue(value=value, secret=secret)
    return outputs
