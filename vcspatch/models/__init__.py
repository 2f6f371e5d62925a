"""Data model for VCS roots and their authentication descriptors."""

from vcspatch.models.vcs_root import (
    AnonymousAuth,
    AuthDescriptor,
    DefaultPrivateKeyAuth,
    PasswordAuth,
    UploadedKeyAuth,
    VcsRootConfig,
)

__all__ = [
    "AnonymousAuth",
    "AuthDescriptor",
    "DefaultPrivateKeyAuth",
    "PasswordAuth",
    "UploadedKeyAuth",
    "VcsRootConfig",
]
