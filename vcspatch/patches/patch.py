"""VcsRootPatch — a guarded change targeting one VCS root by uuid."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, model_validator

from vcspatch.models.vcs_root import VcsRootConfig
from vcspatch.reconcile.diff import FieldDiff
from vcspatch.reconcile.errors import IdentifierMismatchError
from vcspatch.reconcile.guard import Mutation, reconcile
from vcspatch.reconcile.report import DriftReport


class VcsRootPatch(BaseModel):
    """Expected snapshot plus the mutation to apply when it still holds."""

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    target_uuid: str
    expected: VcsRootConfig
    mutation: Mutation
    description: str = ""

    @model_validator(mode="after")
    def _expected_matches_target(self) -> "VcsRootPatch":
        if self.expected.uuid != self.target_uuid:
            report = DriftReport(
                vcs_root_uuid=self.target_uuid,
                vcs_root_id=self.expected.id,
                differences=[
                    FieldDiff(path="uuid", expected=self.expected.uuid, actual=self.target_uuid)
                ],
            )
            raise IdentifierMismatchError(
                report,
                f"Patch targets {self.target_uuid!r} but its expected snapshot "
                f"describes {self.expected.uuid!r}",
            )
        return self

    def apply(self, current: VcsRootConfig, mask_secrets: bool = True) -> VcsRootConfig:
        """Reconcile *current* against this patch's expected snapshot."""
        return reconcile(current, self.expected, self.mutation, mask_secrets=mask_secrets)


def change_vcs_root(
    target_uuid: str,
    expected: VcsRootConfig,
    mutation: Mutation,
    description: str = "",
) -> VcsRootPatch:
    """Declare a patch for the VCS root with *target_uuid*."""
    return VcsRootPatch(
        target_uuid=target_uuid,
        expected=expected,
        mutation=mutation,
        description=description,
    )
