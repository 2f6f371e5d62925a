"""Patches — guarded changes to VCS roots and the host that applies them."""

from vcspatch.patches.loader import load_patches, load_vcs_roots, parse_patch
from vcspatch.patches.patch import VcsRootPatch, change_vcs_root
from vcspatch.patches.registry import VcsRootRegistry

__all__ = [
    "VcsRootPatch",
    "VcsRootRegistry",
    "change_vcs_root",
    "load_patches",
    "load_vcs_roots",
    "parse_patch",
]
