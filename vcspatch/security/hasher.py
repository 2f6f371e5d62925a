"""Content fingerprints for VCS root configurations (SHA-256)."""

from __future__ import annotations

import hashlib
import json

from vcspatch.models.vcs_root import VcsRootConfig


class Hasher:
    """SHA-256 hashing for strings and configuration snapshots."""

    @staticmethod
    def hash_string(text: str) -> str:
        """Return the SHA-256 hex digest of *text*."""
        return hashlib.sha256(text.encode("utf-8")).hexdigest()

    @staticmethod
    def fingerprint(config: VcsRootConfig) -> str:
        """Return a digest covering every field of *config*.

        Keys are sorted so the digest does not depend on field order.
        """
        canonical = json.dumps(config.model_dump(mode="json"), sort_keys=True)
        return Hasher.hash_string(canonical)
