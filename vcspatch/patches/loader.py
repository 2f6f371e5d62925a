"""Load VCS root snapshots and declarative patches from JSON documents.

Roots document — a list of root objects, or ``{"vcs_roots": [...]}``::

    [{"uuid": "...", "id": "...", "name": "...", "url": "...",
      "branch": "refs/heads/main",
      "auth_method": {"method": "password", "user_name": "...", "password": "..."}}]

Patches document::

    {"patches": [{"target": "<uuid>",
                  "description": "...",
                  "expected": {...root object...},
                  "set": {"auth_method": {...}, "branch": "..."}}]}

``expected`` may omit ``uuid``; it defaults to ``target``.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from vcspatch.models.vcs_root import VcsRootConfig
from vcspatch.patches.patch import VcsRootPatch, change_vcs_root
from vcspatch.reconcile.errors import PatchLoadError
from vcspatch.reconcile.guard import Mutation
from vcspatch.reconcile.mutations import chain, replace_auth, set_fields

logger = logging.getLogger(__name__)


def load_vcs_roots(path: str | Path) -> list[VcsRootConfig]:
    """Read VCS root snapshots from the JSON file at *path*."""
    data = _read_json(path)
    if isinstance(data, dict):
        data = data.get("vcs_roots")
    if not isinstance(data, list):
        raise PatchLoadError(f"{path}: expected a list of VCS roots")

    roots: list[VcsRootConfig] = []
    for index, item in enumerate(data):
        try:
            roots.append(VcsRootConfig.model_validate(item))
        except ValidationError as exc:
            raise PatchLoadError(f"{path}: VCS root #{index} is invalid: {exc}") from exc

    logger.debug("Loaded %d VCS root(s) from %s", len(roots), path)
    return roots


def load_patches(path: str | Path) -> list[VcsRootPatch]:
    """Read declarative patches from the JSON file at *path*."""
    data = _read_json(path)
    items = data.get("patches") if isinstance(data, dict) else None
    if not isinstance(items, list):
        raise PatchLoadError(f"{path}: expected an object with a 'patches' list")

    patches = [_parse_patch(item, f"{path}: patch #{i}") for i, item in enumerate(items)]
    logger.debug("Loaded %d patch(es) from %s", len(patches), path)
    return patches


def parse_patch(item: dict[str, Any]) -> VcsRootPatch:
    """Build a patch from one entry of a patches document."""
    return _parse_patch(item, "patch")


def _parse_patch(item: Any, where: str) -> VcsRootPatch:
    if not isinstance(item, dict):
        raise PatchLoadError(f"{where}: expected an object")

    target = item.get("target")
    if not isinstance(target, str) or not target:
        raise PatchLoadError(f"{where}: 'target' must be a non-empty uuid string")

    expected_data = item.get("expected")
    updates = item.get("set")
    if not isinstance(expected_data, dict):
        raise PatchLoadError(f"{where}: 'expected' must be an object")
    if not isinstance(updates, dict) or not updates:
        raise PatchLoadError(f"{where}: 'set' must be a non-empty object")

    try:
        expected = VcsRootConfig.model_validate({"uuid": target, **expected_data})
        mutation = _build_mutation(updates)
        # the patched result must itself be a valid root
        VcsRootConfig.model_validate({**expected.model_dump(), **updates})
    except ValueError as exc:
        # pydantic's ValidationError is a ValueError
        raise PatchLoadError(f"{where}: {exc}") from exc

    return change_vcs_root(
        target,
        expected,
        mutation,
        description=str(item.get("description", "")),
    )


def _build_mutation(updates: dict[str, Any]) -> Mutation:
    fields = dict(updates)
    mutations: list[Mutation] = []
    if "auth_method" in fields:
        mutations.append(replace_auth(fields.pop("auth_method")))
    if fields:
        mutations.insert(0, set_fields(**fields))
    return chain(*mutations)


def _read_json(path: str | Path) -> Any:
    p = Path(path)
    try:
        return json.loads(p.read_text(encoding="utf-8"))
    except OSError as exc:
        raise PatchLoadError(f"Cannot read {p}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise PatchLoadError(f"{p} is not valid JSON: {exc}") from exc
