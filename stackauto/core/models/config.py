"""
Stack configuration values.
"""

from __future__ import annotations

from pydantic import BaseModel


class ConfigValue(BaseModel):
    """A single configuration value, optionally marked secret."""

    value: str
    secret: bool = False


ConfigMap = dict[str, ConfigValue]
