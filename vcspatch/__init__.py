"""vcspatch — guarded, drift-checked patches for build-server VCS roots."""

__version__ = "1.0.0"

from vcspatch.facade import PatchSession
from vcspatch.models.vcs_root import (
    AnonymousAuth,
    DefaultPrivateKeyAuth,
    PasswordAuth,
    UploadedKeyAuth,
    VcsRootConfig,
)
from vcspatch.patches.loader import load_patches, load_vcs_roots
from vcspatch.patches.patch import VcsRootPatch, change_vcs_root
from vcspatch.patches.registry import VcsRootRegistry
from vcspatch.reconcile.diff import FieldDiff, diff_configs
from vcspatch.reconcile.errors import (
    ConfigurationDriftError,
    IdentifierMismatchError,
    ImmutableFieldError,
    PatchError,
    PatchLoadError,
    UnknownVcsRootError,
)
from vcspatch.reconcile.guard import check_drift, reconcile
from vcspatch.reconcile.mutations import chain, replace_auth, set_fields
from vcspatch.reconcile.report import DriftReport
from vcspatch.security.audit import AuditEntry, AuditLogger
from vcspatch.security.hasher import Hasher
from vcspatch.settings import ConfigManager, configure_logging

__all__ = [
    "__version__",
    # Facade
    "PatchSession",
    # Model
    "AnonymousAuth",
    "DefaultPrivateKeyAuth",
    "PasswordAuth",
    "UploadedKeyAuth",
    "VcsRootConfig",
    # Reconciliation guard
    "ConfigurationDriftError",
    "DriftReport",
    "FieldDiff",
    "IdentifierMismatchError",
    "ImmutableFieldError",
    "PatchError",
    "PatchLoadError",
    "UnknownVcsRootError",
    "chain",
    "check_drift",
    "diff_configs",
    "reconcile",
    "replace_auth",
    "set_fields",
    # Patches
    "VcsRootPatch",
    "VcsRootRegistry",
    "change_vcs_root",
    "load_patches",
    "load_vcs_roots",
    # Audit & settings
    "AuditEntry",
    "AuditLogger",
    "ConfigManager",
    "Hasher",
    "configure_logging",
]
