"""
Test language runtime — run a Python callable as if it were a pulumi program.

Integration tests of the orchestration ↔ engine protocol need a
"language host" that, given a resource monitor address, connects to it
and lets a test program register resources. This module is that host:

    runtime = LanguageRuntime(program, required_plugins=[PluginInfo("aws")])
    error = runtime.run(RunInfo(monitor_address="127.0.0.1:50051"))

``run`` returns "" when the program succeeds and the program's error
message when it fails. Failing to reach the monitor is a setup problem,
not a program failure, and raises MonitorConnectionError instead.
"""

from __future__ import annotations

import json
import logging
import socket
import urllib.error
import urllib.request
from dataclasses import dataclass
from typing import Any, Callable, Iterable
from urllib.parse import urlsplit

from pydantic import BaseModel, Field

from stackauto.core.errors import MonitorConnectionError

logger = logging.getLogger(__name__)

RUNTIME_NAME = "TestLanguage"


@dataclass(frozen=True)
class PluginInfo:
    """A plugin the program needs (or the runtime's own identity)."""

    name: str
    kind: str = "resource"
    version: str | None = None


class RunInfo(BaseModel):
    """What the engine tells a language host when it asks it to run."""

    monitor_address: str
    project: str = ""
    stack: str = ""
    pwd: str = ""
    program: str = ""
    args: list[str] = Field(default_factory=list)
    config: dict[str, str] = Field(default_factory=dict)
    dry_run: bool = False
    parallel: int = 0


class ResourceMonitor:
    """Client handle for the engine's resource monitor.

    Requests are JSON documents POSTed to ``http://<address>/<method>``.
    """

    def __init__(self, address: str, *, enable_secrets: bool = False, timeout: float = 10.0):
        self._address = address
        self._enable_secrets = enable_secrets
        self._timeout = timeout

    @property
    def address(self) -> str:
        return self._address

    @property
    def enable_secrets(self) -> bool:
        return self._enable_secrets

    def invoke(self, method: str, payload: dict[str, Any]) -> dict[str, Any]:
        """Send one request and return the decoded JSON response."""
        url = f"http://{self._address}/{method}"
        body = json.dumps(payload).encode("utf-8")
        req = urllib.request.Request(
            url,
            data=body,
            headers={"Content-Type": "application/json"},
            method="POST",
        )
        logger.debug("Monitor request %s", method)
        with urllib.request.urlopen(req, timeout=self._timeout) as resp:
            raw = resp.read().decode("utf-8")
        return json.loads(raw) if raw.strip() else {}

    def register_resource(
        self,
        type_: str,
        name: str,
        *,
        custom: bool = True,
        inputs: dict[str, Any] | None = None,
        parent: str | None = None,
    ) -> dict[str, Any]:
        """Register a desired resource with the monitor."""
        payload: dict[str, Any] = {
            "type": type_,
            "name": name,
            "custom": custom,
            "object": inputs or {},
            "acceptSecrets": self._enable_secrets,
        }
        if parent:
            payload["parent"] = parent
        return self.invoke("RegisterResource", payload)


ProgramFunc = Callable[[RunInfo, ResourceMonitor], None]


def _split_address(address: str) -> tuple[str, int]:
    try:
        parts = urlsplit(f"//{address}")
        host, port = parts.hostname, parts.port
    except ValueError as e:
        raise MonitorConnectionError(
            f"could not connect to resource monitor: invalid address {address!r}: {e}"
        ) from e
    if not host or port is None:
        raise MonitorConnectionError(
            f"could not connect to resource monitor: invalid address {address!r}"
        )
    return host, port


def connect_monitor(
    address: str, *, enable_secrets: bool = False, timeout: float = 5.0
) -> ResourceMonitor:
    """Check the monitor is reachable and return a client for it.

    Raises:
        MonitorConnectionError: If the address is malformed or unreachable.
    """
    host, port = _split_address(address)
    try:
        with socket.create_connection((host, port), timeout=timeout):
            pass
    except OSError as e:
        raise MonitorConnectionError(f"could not connect to resource monitor: {e}") from e
    return ResourceMonitor(address, enable_secrets=enable_secrets)


class LanguageRuntime:
    """A language host whose "program" is a Python callable.

    Args:
        program: Called as ``program(run_info, monitor)``; raising means failure.
        required_plugins: Reported verbatim by ``get_required_plugins``.
        enable_secrets: Whether the monitor client accepts secret values.
        connect_timeout: Seconds to wait when connecting to the monitor.
    """

    def __init__(
        self,
        program: ProgramFunc,
        *,
        required_plugins: Iterable[PluginInfo] = (),
        enable_secrets: bool = False,
        connect_timeout: float = 5.0,
    ):
        self._program = program
        self._required_plugins = list(required_plugins)
        self._enable_secrets = enable_secrets
        self._connect_timeout = connect_timeout

    def get_required_plugins(self, info: RunInfo | None = None) -> list[PluginInfo]:
        return list(self._required_plugins)

    def get_plugin_info(self) -> PluginInfo:
        return PluginInfo(name=RUNTIME_NAME, kind="language")

    def run(self, info: RunInfo) -> str:
        """Run the program against the monitor at ``info.monitor_address``.

        Returns:
            "" on success, otherwise the program's error message.

        Raises:
            MonitorConnectionError: If the monitor cannot be reached.
        """
        monitor = connect_monitor(
            info.monitor_address,
            enable_secrets=self._enable_secrets,
            timeout=self._connect_timeout,
        )
        try:
            self._program(info, monitor)
        except Exception as e:
            logger.debug("Program failed: %s", e)
            return str(e) or e.__class__.__name__
        return ""

    def close(self) -> None:
        """Nothing to release; kept for parity with real language hosts."""
