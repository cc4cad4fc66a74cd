"""Test doubles for exercising the engine ↔ language host protocol."""

from stackauto.deploytest.language_runtime import (
    LanguageRuntime,
    PluginInfo,
    ResourceMonitor,
    RunInfo,
    connect_monitor,
)

__all__ = [
    "LanguageRuntime",
    "PluginInfo",
    "ResourceMonitor",
    "RunInfo",
    "connect_monitor",
]
