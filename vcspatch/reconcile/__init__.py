"""Reconciliation guard.

Checks a live VCS root against the snapshot a patch was written for and
applies the patch's mutation only when the two match.
"""

from vcspatch.reconcile.diff import FieldDiff, diff_configs
from vcspatch.reconcile.errors import (
    ConfigurationDriftError,
    IdentifierMismatchError,
    ImmutableFieldError,
    PatchError,
    PatchLoadError,
    UnknownVcsRootError,
)
from vcspatch.reconcile.guard import Mutation, check_drift, reconcile
from vcspatch.reconcile.mutations import chain, replace_auth, set_fields
from vcspatch.reconcile.report import DriftReport

__all__ = [
    "ConfigurationDriftError",
    "DriftReport",
    "FieldDiff",
    "IdentifierMismatchError",
    "ImmutableFieldError",
    "Mutation",
    "PatchError",
    "PatchLoadError",
    "UnknownVcsRootError",
    "chain",
    "check_drift",
    "diff_configs",
    "reconcile",
    "replace_auth",
    "set_fields",
]
