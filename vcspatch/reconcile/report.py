"""DriftReport model and text/Markdown rendering."""

from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, Field

from vcspatch.config import SECRET_MASK
from vcspatch.reconcile.diff import FieldDiff


class DriftReport(BaseModel):
    """Outcome of comparing a live VCS root with its expected snapshot."""

    vcs_root_uuid: str = ""
    vcs_root_id: str = ""
    differences: list[FieldDiff] = Field(default_factory=list)

    checked_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    """Timestamp of the comparison."""

    @property
    def has_drift(self) -> bool:
        return len(self.differences) > 0

    def to_text(self, mask_secrets: bool = True) -> str:
        """Render the report as plain text, one differing field per line."""
        label = self.vcs_root_id or self.vcs_root_uuid or "unknown"
        if not self.has_drift:
            return f"VCS root {label}: settings match expected snapshot"

        lines = [
            f"Unexpected VCS root settings for {label} "
            f"(uuid={self.vcs_root_uuid}): {len(self.differences)} field(s) differ"
        ]
        for d in self.differences:
            lines.append(f"  {d.describe(mask_secrets)}")
        return "\n".join(lines)

    def to_markdown(self, mask_secrets: bool = True) -> str:
        """Render the report as a Markdown document."""
        lines: list[str] = []

        lines.append(f"# Drift Report — {self.vcs_root_id or self.vcs_root_uuid or 'Unknown'}")
        lines.append("")
        lines.append(f"**UUID:** `{self.vcs_root_uuid}`")
        lines.append(f"**Status:** {'DRIFTED' if self.has_drift else 'IN SYNC'}")
        lines.append(f"**Checked:** {self.checked_at.strftime('%Y-%m-%d %H:%M UTC')}")
        lines.append("")

        if self.differences:
            lines.append("## Differences")
            lines.append("")
            lines.append("| Field | Expected | Actual |")
            lines.append("|-------|----------|--------|")
            for d in self.differences:
                expected, actual = _cell(d, d.expected, mask_secrets), _cell(d, d.actual, mask_secrets)
                lines.append(f"| `{d.path}` | {expected} | {actual} |")
            lines.append("")

        return "\n".join(lines)


def _cell(diff: FieldDiff, value: object, mask_secrets: bool) -> str:
    if value is None:
        return "—"
    if mask_secrets and diff.is_secret:
        return f"`{SECRET_MASK}`"
    text = str(value).replace("|", "\\|")
    return f"`{text}`"
