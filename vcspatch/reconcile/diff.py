"""Field-level structural diff between two VCS root configurations."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel

from vcspatch.config import SECRET_FIELDS, SECRET_MASK
from vcspatch.models.vcs_root import VcsRootConfig


class FieldDiff(BaseModel):
    """A single differing field."""

    path: str
    """Dot-notation path, e.g. ``auth_method.password``."""

    expected: Any = None
    actual: Any = None

    @property
    def is_secret(self) -> bool:
        return self.path.rsplit(".", 1)[-1] in SECRET_FIELDS

    def describe(self, mask_secrets: bool = True) -> str:
        """One-line human-readable form of the difference."""
        expected, actual = self.expected, self.actual
        if mask_secrets and self.is_secret:
            if expected is not None and actual is not None:
                return f"{self.path}: secret value differs"
            expected = _mask(expected)
            actual = _mask(actual)
        return f"{self.path}: expected {expected!r}, actual {actual!r}"


def _mask(value: Any) -> Any:
    return None if value is None else SECRET_MASK


def diff_configs(current: VcsRootConfig, expected: VcsRootConfig) -> list[FieldDiff]:
    """Compare *current* against *expected*, field by field.

    Nested models (the auth descriptor) are compared recursively.  Fields
    present on only one side, as happens when the auth method differs, are
    reported with ``None`` on the missing side.

    Returns
    -------
    list[FieldDiff]
        Empty when the two configurations are structurally equal.
    """
    return _diff_dicts(current.model_dump(), expected.model_dump(), prefix="")


def _diff_dicts(
    actual: dict[str, Any],
    expected: dict[str, Any],
    prefix: str,
) -> list[FieldDiff]:
    diffs: list[FieldDiff] = []

    keys = list(actual)
    keys.extend(k for k in expected if k not in actual)

    for key in keys:
        path = f"{prefix}{key}"
        actual_val = actual.get(key)
        expected_val = expected.get(key)

        if isinstance(actual_val, dict) and isinstance(expected_val, dict):
            diffs.extend(_diff_dicts(actual_val, expected_val, prefix=f"{path}."))
            continue

        if actual_val != expected_val:
            diffs.append(FieldDiff(path=path, expected=expected_val, actual=actual_val))

    return diffs
