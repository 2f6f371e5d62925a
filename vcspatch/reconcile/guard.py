"""Reconciliation guard — check a VCS root against its expected state, then mutate.

Settings kept as code must never overwrite a root whose live state has
drifted from what the patch author last saw (for instance, a branch edited
through the UI).  :func:`reconcile` compares the whole configuration,
including the nested auth descriptor, and only calls the mutation when the
two snapshots are structurally equal.  Otherwise it raises
:class:`ConfigurationDriftError` and leaves the live configuration alone.

The guard performs no I/O; loading and persisting belong to the host.
"""

from __future__ import annotations

import logging
from typing import Callable, Optional

from vcspatch.models.vcs_root import VcsRootConfig
from vcspatch.reconcile.diff import FieldDiff, diff_configs
from vcspatch.reconcile.errors import (
    ConfigurationDriftError,
    IdentifierMismatchError,
    ImmutableFieldError,
)
from vcspatch.reconcile.report import DriftReport

logger = logging.getLogger(__name__)

Mutation = Callable[[VcsRootConfig], Optional[VcsRootConfig]]
"""Receives a working copy; returns the new config, or ``None`` after
mutating its argument in place."""


def check_drift(current: VcsRootConfig, expected: VcsRootConfig) -> DriftReport:
    """Compare *current* with *expected* without raising."""
    return DriftReport(
        vcs_root_uuid=current.uuid,
        vcs_root_id=current.id,
        differences=diff_configs(current, expected),
    )


def reconcile(
    current: VcsRootConfig,
    expected: VcsRootConfig,
    mutation: Mutation,
    mask_secrets: bool = True,
) -> VcsRootConfig:
    """Apply *mutation* to *current* if it still equals *expected*.

    Parameters
    ----------
    current:
        Live configuration supplied by the host.  Never modified.
    expected:
        Snapshot the patch was written against.  Must carry the same uuid.
    mutation:
        Change to apply.  Called on a deep copy of *current*.
    mask_secrets:
        Whether a drift error message hides secret values.

    Returns
    -------
    VcsRootConfig
        The mutated configuration, for the host to persist.

    Raises
    ------
    IdentifierMismatchError
        If *current* and *expected* have different uuids.
    ConfigurationDriftError
        If any field of *current* differs from *expected*.
    ImmutableFieldError
        If the mutation changed the uuid.
    """
    logger.debug("Reconciling VCS root %s (%s)", current.uuid, current.id)

    if current.uuid != expected.uuid:
        report = DriftReport(
            vcs_root_uuid=current.uuid,
            vcs_root_id=current.id,
            differences=[FieldDiff(path="uuid", expected=expected.uuid, actual=current.uuid)],
        )
        raise IdentifierMismatchError(
            report,
            f"Expected snapshot describes VCS root {expected.uuid!r}, "
            f"not {current.uuid!r}",
        )

    report = check_drift(current, expected)
    if report.has_drift:
        logger.warning(
            "Drift detected on VCS root %s: %d field(s) differ",
            current.id, len(report.differences),
        )
        raise ConfigurationDriftError(report, mask_secrets=mask_secrets)

    working = current.model_copy(deep=True)
    result = mutation(working)
    if result is None:
        result = working

    if not isinstance(result, VcsRootConfig):
        raise TypeError(
            f"Mutation must return a VcsRootConfig or None, got {type(result).__name__}"
        )
    if result.uuid != current.uuid:
        raise ImmutableFieldError(
            f"Mutation changed uuid of VCS root {current.id} "
            f"from {current.uuid!r} to {result.uuid!r}"
        )

    # model_copy(update=...) skips validation
    result = VcsRootConfig.model_validate(result.model_dump())

    changed = [d.path for d in diff_configs(result, current)]
    logger.info("Patched VCS root %s: %s", current.id, ", ".join(changed) or "no changes")
    return result
