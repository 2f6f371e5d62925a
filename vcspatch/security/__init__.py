"""Audit trail for patch application.

Provides configuration fingerprints and a hash-chained log of applied and
rejected patches.
"""

from vcspatch.security.audit import AuditEntry, AuditLogger
from vcspatch.security.hasher import Hasher

__all__ = [
    "AuditEntry",
    "AuditLogger",
    "Hasher",
]
