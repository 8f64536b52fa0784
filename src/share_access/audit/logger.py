"""Append-only JSONL audit trail for access-rule changes.

Every processed path is written as one newline-delimited JSON record
carrying a UTC ISO-8601 timestamp, a session identifier, and the outcome
of the operation.

Thread-safety is achieved with a threading.Lock so one logger can be
shared by several managers in the same process.

Example
-------
>>> from pathlib import Path
>>> audit = AuditLogger(Path("/tmp/share_access_audit.jsonl"))
>>> audit.log({"event": "deny_access", "path": "/shared/examBank"})
>>> audit.query({"event": "deny_access"})[0]["path"]
'/shared/examBank'
"""
from __future__ import annotations

import json
import threading
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING, Iterator

if TYPE_CHECKING:
    from share_access.manager import AccessUpdate


class AuditLogger:
    """Append-only JSONL audit logger.

    Parameters
    ----------
    log_path:
        Path to the ``.jsonl`` audit file.  Parent directories are created
        automatically on first write.
    session_id:
        Optional session identifier stamped on every record.  A random UUID
        is generated if not supplied.
    """

    def __init__(
        self,
        log_path: Path,
        session_id: str | None = None,
    ) -> None:
        self._log_path = Path(log_path)
        self._session_id: str = session_id or str(uuid.uuid4())
        self._lock = threading.Lock()

    # ------------------------------------------------------------------
    # Write API
    # ------------------------------------------------------------------

    def log(self, entry: dict[str, object]) -> None:
        """Append an event record; ``timestamp`` and ``session_id`` are added."""
        record: dict[str, object] = {
            "timestamp": datetime.now(tz=timezone.utc).isoformat(),
            "session_id": self._session_id,
            **entry,
        }
        self._write(record)

    def record_update(self, update: "AccessUpdate") -> None:
        """Append the outcome of one per-path rule mutation.

        The record's ``event`` is the manager operation name, and ``rules``
        lists the identity's rules as written back.
        """
        entry = update.to_dict()
        entry["event"] = entry.pop("operation")
        self.log(entry)

    # ------------------------------------------------------------------
    # Read API
    # ------------------------------------------------------------------

    def read_all(self) -> list[dict[str, object]]:
        """Return all records in chronological order (empty if no file)."""
        return list(self._iter_records())

    def query(self, filters: dict[str, object]) -> list[dict[str, object]]:
        """Return records whose top-level fields equal every filter value.

        Example
        -------
        >>> audit.query({"event": "grant_access", "identity": "AllStudents"})
        [...]
        """
        return [
            record
            for record in self._iter_records()
            if all(record.get(k) == v for k, v in filters.items())
        ]

    def history_for(self, path: str) -> list[dict[str, object]]:
        """Return every record for *path*, oldest first."""
        return self.query({"path": path})

    def count(self) -> int:
        """Return the total number of audit records."""
        return sum(1 for _ in self._iter_records())

    def last_n(self, n: int) -> list[dict[str, object]]:
        """Return the ``n`` most recent audit records; empty when ``n`` is not positive."""
        if n <= 0:
            return []
        return list(self._iter_records())[-n:]

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _write(self, record: dict[str, object]) -> None:
        with self._lock:
            self._log_path.parent.mkdir(parents=True, exist_ok=True)
            with self._log_path.open("a", encoding="utf-8") as fh:
                fh.write(json.dumps(record, default=str) + "\n")

    def _iter_records(self) -> Iterator[dict[str, object]]:
        if not self._log_path.exists():
            return
        with self._lock:
            with self._log_path.open("r", encoding="utf-8") as fh:
                lines = fh.readlines()
        for line in lines:
            line = line.strip()
            if line:
                try:
                    yield json.loads(line)
                except json.JSONDecodeError:
                    continue  # Skip partially written lines.

    @property
    def log_path(self) -> Path:
        """The filesystem path of the audit log file."""
        return self._log_path

    @property
    def session_id(self) -> str:
        """The session identifier stamped on every record."""
        return self._session_id
