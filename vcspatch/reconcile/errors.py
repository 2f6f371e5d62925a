"""Exceptions raised while checking and applying VCS root patches."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from vcspatch.reconcile.report import DriftReport


class PatchError(Exception):
    """Base class for every patch-application failure."""


class ConfigurationDriftError(PatchError):
    """Raised when a live VCS root does not match its expected snapshot.

    Attributes
    ----------
    report : DriftReport
        The field-level differences that caused the rejection.

    The message masks secret values unless *mask_secrets* is false.
    """

    def __init__(
        self,
        report: "DriftReport",
        message: str | None = None,
        mask_secrets: bool = True,
    ) -> None:
        self.report = report
        super().__init__(message or report.to_text(mask_secrets))


class IdentifierMismatchError(ConfigurationDriftError):
    """Raised when the compared snapshots do not describe the same VCS root."""


class ImmutableFieldError(PatchError):
    """Raised when a mutation tries to change a VCS root's uuid."""


class UnknownVcsRootError(PatchError):
    """Raised when a patch targets a uuid the registry does not hold."""


class PatchLoadError(PatchError):
    """Raised when a patch or VCS root document cannot be parsed."""
