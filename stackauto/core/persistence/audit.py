"""
Audit ledger — a local trail of which stacks were touched, and when.

LocalWorkspace's post-command hook appends one record per completed
pulumi command to ``<work_dir>/.state/audit.ndjson``, one JSON object
per line. Records are only ever appended.
"""

from __future__ import annotations

import json
import logging
import threading
from datetime import UTC, datetime
from pathlib import Path
from typing import Any, Iterator

from pydantic import BaseModel, Field, ValidationError

logger = logging.getLogger(__name__)

LEDGER_RELPATH = Path(".state") / "audit.ndjson"


def _now() -> str:
    return datetime.now(UTC).isoformat()


class AuditEntry(BaseModel):
    """One ledger record."""

    timestamp: str = Field(default_factory=_now)
    stack: str = ""
    event: str = ""                # e.g. post-command
    work_dir: str = ""
    context: dict[str, Any] = Field(default_factory=dict)


class AuditWriter:
    """Appends AuditEntry records to an NDJSON file.

    Args:
        path: Ledger file. Takes precedence over ``work_dir``.
        work_dir: Directory whose ``.state/audit.ndjson`` is used.
            With neither given, the path is relative to the cwd.

    Writes from several threads (the parallel output queries of a
    single ``up``) are serialized on an internal lock. A failed write
    is logged, never raised: the ledger must not break an operation.
    """

    def __init__(self, path: Path | None = None, work_dir: Path | None = None):
        if path is None:
            path = (work_dir or Path()) / LEDGER_RELPATH
        self._path = path
        self._write_lock = threading.Lock()

    @property
    def path(self) -> Path:
        return self._path

    def write(self, entry: AuditEntry) -> None:
        line = json.dumps(entry.model_dump(mode="json"), ensure_ascii=False)
        with self._write_lock:
            try:
                self._path.parent.mkdir(parents=True, exist_ok=True)
                with self._path.open("a", encoding="utf-8") as f:
                    f.write(line + "\n")
            except OSError as e:
                logger.error("Could not append to audit ledger %s: %s", self._path, e)
                return
        logger.debug("Audit: %s %s", entry.event, entry.stack)

    def read_all(self) -> list[AuditEntry]:
        """Every readable record, oldest first. Corrupt lines are skipped."""
        entries: list[AuditEntry] = []
        for line_num, raw in self._lines():
            try:
                entries.append(AuditEntry.model_validate_json(raw))
            except ValidationError as e:
                logger.warning("Skipping corrupt audit line %d: %s", line_num, e)
        return entries

    def read_recent(self, n: int = 20) -> list[AuditEntry]:
        return self.read_all()[-n:]

    def entry_count(self) -> int:
        return sum(1 for _ in self._lines())

    def _lines(self) -> Iterator[tuple[int, str]]:
        if not self._path.is_file():
            return
        try:
            with self._path.open(encoding="utf-8") as f:
                for line_num, line in enumerate(f, start=1):
                    if line.strip():
                        yield line_num, line.strip()
        except OSError as e:
            logger.error("Could not read audit ledger %s: %s", self._path, e)
