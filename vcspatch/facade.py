"""PatchSession — one entry point for loading settings, roots and patches.

Usage::

    from vcspatch import PatchSession

    session = PatchSession(project_root="/path/to/settings")
    session.load_roots("vcs_roots.json")
    session.apply_patch_file("patches.json")
    session.snapshot()
    session.verify_audit_chain()
"""

from __future__ import annotations

import logging
from pathlib import Path

from vcspatch.models.vcs_root import VcsRootConfig
from vcspatch.patches.loader import load_patches, load_vcs_roots
from vcspatch.patches.patch import VcsRootPatch
from vcspatch.patches.registry import VcsRootRegistry
from vcspatch.reconcile.guard import check_drift
from vcspatch.security.audit import AuditEntry, AuditLogger
from vcspatch.settings import ConfigManager, configure_logging, is_enabled

logger = logging.getLogger(__name__)


class PatchSession:
    """Settings-driven wrapper around a :class:`VcsRootRegistry`.

    Parameters
    ----------
    project_root:
        Directory holding ``.vcspatch/config.json`` and ``.env``.
    config:
        Pre-loaded settings; read from *project_root* when omitted.
    """

    def __init__(
        self,
        project_root: str | Path = ".",
        config: dict[str, str] | None = None,
    ) -> None:
        self.project_root = Path(project_root)
        self.config = config if config is not None else ConfigManager().load_config(self.project_root)
        configure_logging(self.config)

        self.mask_secrets = is_enabled(self.config.get("VCSPATCH_MASK_SECRETS", "true"))
        self.audit = AuditLogger(self._audit_path())
        self.registry = VcsRootRegistry(
            audit=self.audit,
            actor=self.config.get("VCSPATCH_ACTOR", "vcspatch"),
            mask_secrets=self.mask_secrets,
        )

    def load_roots(self, path: str | Path) -> list[VcsRootConfig]:
        """Register every root in the JSON document at *path*."""
        roots = load_vcs_roots(path)
        for root in roots:
            self.registry.add(root)
        logger.info("Registered %d VCS root(s) from %s", len(roots), path)
        return roots

    def apply_patch_file(self, path: str | Path) -> list[VcsRootConfig]:
        """Apply every patch in *path*, halting at the first drift."""
        return self.registry.apply_all(load_patches(path))

    def drift_report(self, patch: VcsRootPatch) -> str:
        """Describe how the targeted root differs from *patch*'s expectation."""
        current = self.registry.get(patch.target_uuid)
        return check_drift(current, patch.expected).to_text(mask_secrets=self.mask_secrets)

    def snapshot(self) -> list[VcsRootConfig]:
        return self.registry.snapshot()

    def get_audit_log(self, vcs_root_uuid: str | None = None) -> list[AuditEntry]:
        return self.audit.get_log(vcs_root_uuid=vcs_root_uuid)

    def verify_audit_chain(self) -> bool:
        return self.audit.verify_chain()

    def close(self) -> None:
        self.audit.close()

    def _audit_path(self) -> str:
        db = self.config.get("VCSPATCH_AUDIT_DB", ":memory:")
        if db == ":memory:" or Path(db).is_absolute():
            return db
        return str(self.project_root / db)
