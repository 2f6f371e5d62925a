"""Mutation factories for use with :func:`vcspatch.reconcile.guard.reconcile`."""

from __future__ import annotations

from typing import Any

from pydantic import TypeAdapter

from vcspatch.models.vcs_root import AuthDescriptor, VcsRootConfig
from vcspatch.reconcile.guard import Mutation

_AUTH_ADAPTER: TypeAdapter[Any] = TypeAdapter(AuthDescriptor)


def replace_auth(auth: Any) -> Mutation:
    """Swap the auth descriptor.

    *auth* may be a descriptor model or a dict with a ``method`` key.
    """
    descriptor = _AUTH_ADAPTER.validate_python(auth)

    def _apply(config: VcsRootConfig) -> VcsRootConfig:
        config.auth_method = descriptor
        return config

    return _apply


def set_fields(**updates: Any) -> Mutation:
    """Assign the given fields by name.

    Raises
    ------
    ValueError
        If a name is not a VcsRootConfig field, or is ``uuid``.
    """
    unknown = sorted(set(updates) - set(VcsRootConfig.model_fields))
    if unknown:
        raise ValueError(f"Unknown VCS root field(s): {', '.join(unknown)}")
    if "uuid" in updates:
        raise ValueError("The uuid of a VCS root cannot be changed")

    def _apply(config: VcsRootConfig) -> VcsRootConfig:
        for name, value in updates.items():
            setattr(config, name, value)
        return config

    return _apply


def chain(*mutations: Mutation) -> Mutation:
    """Apply *mutations* in order; each sees the previous one's result."""

    def _apply(config: VcsRootConfig) -> VcsRootConfig:
        for mutation in mutations:
            result = mutation(config)
            if result is not None:
                config = result
        return config

    return _apply
