"""AuditLogger — append-only, hash-chained record of patch outcomes in SQLite."""

from __future__ import annotations

import json
import logging
import sqlite3
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from pydantic import BaseModel

from vcspatch.security.hasher import Hasher

logger = logging.getLogger(__name__)

_SCHEMA = """\
CREATE TABLE IF NOT EXISTS patch_audit (
    id              INTEGER PRIMARY KEY AUTOINCREMENT,
    timestamp       TEXT    NOT NULL,
    actor           TEXT    NOT NULL,
    action          TEXT    NOT NULL,
    vcs_root_uuid   TEXT    NOT NULL DEFAULT '',
    description     TEXT    NOT NULL DEFAULT '',
    before_hash     TEXT    NOT NULL DEFAULT '',
    after_hash      TEXT    NOT NULL DEFAULT '',
    entry_hash      TEXT    NOT NULL,
    prev_entry_hash TEXT    NOT NULL DEFAULT ''
);
"""

_COLUMNS = (
    "id, timestamp, actor, action, vcs_root_uuid, description, "
    "before_hash, after_hash, entry_hash, prev_entry_hash"
)


class AuditEntry(BaseModel):
    """Single immutable audit record."""

    id: int = 0
    timestamp: str = ""
    actor: str = ""
    action: str = ""
    """``patch_applied`` or ``drift_detected``."""

    vcs_root_uuid: str = ""
    description: str = ""
    before_hash: str = ""
    """Fingerprint of the live configuration before the patch."""

    after_hash: str = ""
    """Fingerprint after the patch; empty when the patch was rejected."""

    entry_hash: str = ""
    prev_entry_hash: str = ""


class AuditLogger:
    """Append-only audit log; each entry hashes its predecessor.

    Parameters
    ----------
    db_path:
        Path to the SQLite file.  Defaults to ``':memory:'``.
    """

    def __init__(self, db_path: str | Path = ":memory:") -> None:
        self._db_path = str(db_path)
        self._conn = sqlite3.connect(self._db_path)
        self._conn.execute("PRAGMA journal_mode=WAL")
        self._conn.executescript(_SCHEMA)
        self._conn.commit()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def log(
        self,
        actor: str,
        action: str,
        vcs_root_uuid: str,
        description: str = "",
        before_hash: str | None = None,
        after_hash: str | None = None,
    ) -> AuditEntry:
        """Append an event and return the created AuditEntry."""
        ts = datetime.now(timezone.utc).isoformat()
        bh = before_hash or ""
        ah = after_hash or ""
        prev = self._last_hash()

        entry_hash = Hasher.hash_string(
            f"{ts}{actor}{action}{vcs_root_uuid}{description}{bh}{ah}{prev}"
        )

        cur = self._conn.execute(
            "INSERT INTO patch_audit "
            "(timestamp, actor, action, vcs_root_uuid, description, before_hash, "
            "after_hash, entry_hash, prev_entry_hash) VALUES (?,?,?,?,?,?,?,?,?)",
            (ts, actor, action, vcs_root_uuid, description, bh, ah, entry_hash, prev),
        )
        self._conn.commit()
        logger.debug("Audit %s on %s by %s", action, vcs_root_uuid, actor)

        return AuditEntry(
            id=cur.lastrowid or 0,
            timestamp=ts,
            actor=actor,
            action=action,
            vcs_root_uuid=vcs_root_uuid,
            description=description,
            before_hash=bh,
            after_hash=ah,
            entry_hash=entry_hash,
            prev_entry_hash=prev,
        )

    def verify_chain(self) -> bool:
        """Validate the entire hash chain.  Returns False if tampered."""
        prev_hash = ""
        for entry in self.get_log():
            if entry.prev_entry_hash != prev_hash:
                return False

            expected = Hasher.hash_string(
                f"{entry.timestamp}{entry.actor}{entry.action}{entry.vcs_root_uuid}"
                f"{entry.description}{entry.before_hash}{entry.after_hash}{prev_hash}"
            )
            if expected != entry.entry_hash:
                return False

            prev_hash = entry.entry_hash

        return True

    def get_log(
        self,
        vcs_root_uuid: str | None = None,
        action: str | None = None,
    ) -> list[AuditEntry]:
        """Query the audit log with optional filters, oldest first."""
        clauses: list[str] = []
        params: list[Any] = []
        if vcs_root_uuid is not None:
            clauses.append("vcs_root_uuid = ?")
            params.append(vcs_root_uuid)
        if action is not None:
            clauses.append("action = ?")
            params.append(action)

        where = (" WHERE " + " AND ".join(clauses)) if clauses else ""
        rows = self._conn.execute(
            f"SELECT {_COLUMNS} FROM patch_audit{where} ORDER BY id", params
        ).fetchall()
        return [
            AuditEntry(
                id=r[0], timestamp=r[1], actor=r[2], action=r[3],
                vcs_root_uuid=r[4], description=r[5], before_hash=r[6],
                after_hash=r[7], entry_hash=r[8], prev_entry_hash=r[9],
            )
            for r in rows
        ]

    def export_log(self) -> str:
        """Export the full audit trail as JSON."""
        return json.dumps([e.model_dump() for e in self.get_log()], indent=2)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _last_hash(self) -> str:
        row = self._conn.execute(
            "SELECT entry_hash FROM patch_audit ORDER BY id DESC LIMIT 1"
        ).fetchone()
        return row[0] if row else ""

    def close(self) -> None:
        self._conn.close()
