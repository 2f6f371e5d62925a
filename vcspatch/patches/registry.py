"""VcsRootRegistry — in-memory settings host that applies patches by uuid."""

from __future__ import annotations

import logging
from typing import Iterable

from vcspatch.config import ACTION_DRIFT_DETECTED, ACTION_PATCH_APPLIED, ACTION_PATCH_REJECTED
from vcspatch.models.vcs_root import VcsRootConfig
from vcspatch.patches.patch import VcsRootPatch
from vcspatch.reconcile.errors import (
    ConfigurationDriftError,
    ImmutableFieldError,
    UnknownVcsRootError,
)
from vcspatch.security.audit import AuditLogger
from vcspatch.security.hasher import Hasher

logger = logging.getLogger(__name__)


class VcsRootRegistry:
    """Hold VCS roots keyed by uuid and apply patches to them.

    Parameters
    ----------
    roots:
        Initial roots.  Duplicate uuids raise ``ValueError``.
    audit:
        Optional audit log receiving one entry per patch outcome.
    actor:
        Name recorded in audit entries.
    mask_secrets:
        Whether drift error messages hide secret values.
    """

    def __init__(
        self,
        roots: Iterable[VcsRootConfig] = (),
        audit: AuditLogger | None = None,
        actor: str = "vcspatch",
        mask_secrets: bool = True,
    ) -> None:
        self._roots: dict[str, VcsRootConfig] = {}
        self.audit = audit
        self.actor = actor
        self.mask_secrets = mask_secrets
        for root in roots:
            self.add(root)

    def __contains__(self, uuid: object) -> bool:
        return uuid in self._roots

    def __len__(self) -> int:
        return len(self._roots)

    def add(self, root: VcsRootConfig) -> None:
        if root.uuid in self._roots:
            raise ValueError(f"VCS root {root.uuid!r} is already registered")
        self._roots[root.uuid] = root.model_copy(deep=True)

    def get(self, uuid: str) -> VcsRootConfig:
        """Return a copy of the stored root; edits go through :meth:`apply`."""
        try:
            return self._roots[uuid].model_copy(deep=True)
        except KeyError:
            raise UnknownVcsRootError(f"No VCS root with uuid {uuid!r}") from None

    def snapshot(self) -> list[VcsRootConfig]:
        """Copies of all roots, in registration order."""
        return [root.model_copy(deep=True) for root in self._roots.values()]

    def apply(self, patch: VcsRootPatch) -> VcsRootConfig:
        """Reconcile the targeted root and persist the result.

        Drift and rejected mutations are recorded in the audit log, then
        re-raised; the stored root is left as it was.
        """
        current = self.get(patch.target_uuid)
        before = Hasher.fingerprint(current)

        try:
            updated = patch.apply(current, mask_secrets=self.mask_secrets)
        except ConfigurationDriftError:
            self._record(ACTION_DRIFT_DETECTED, patch, before, None)
            raise
        except (ImmutableFieldError, TypeError, ValueError):
            # ValueError covers pydantic validation of the mutated result
            self._record(ACTION_PATCH_REJECTED, patch, before, None)
            raise

        self._roots[patch.target_uuid] = updated
        self._record(ACTION_PATCH_APPLIED, patch, before, Hasher.fingerprint(updated))
        return updated.model_copy(deep=True)

    def apply_all(self, patches: Iterable[VcsRootPatch]) -> list[VcsRootConfig]:
        """Apply *patches* in order, stopping at the first failure.

        Patches applied before the failure stay applied.
        """
        results: list[VcsRootConfig] = []
        for patch in patches:
            results.append(self.apply(patch))
        logger.info("Applied %d patch(es)", len(results))
        return results

    def _record(
        self,
        action: str,
        patch: VcsRootPatch,
        before_hash: str,
        after_hash: str | None,
    ) -> None:
        if self.audit is None:
            return
        self.audit.log(
            self.actor,
            action,
            patch.target_uuid,
            description=patch.description,
            before_hash=before_hash,
            after_hash=after_hash,
        )
