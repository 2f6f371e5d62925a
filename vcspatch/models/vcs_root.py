"""VcsRootConfig — a version-control root as declared in build settings.

A VCS root names a repository location (fetch URL, default branch) and the
method the build host uses to authenticate against it.  Roots are looked up
by ``uuid``, which never changes over the life of the root; every other
field may be edited through a guarded patch.
"""

from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field


class PasswordAuth(BaseModel):
    """Username plus password (or token) authentication."""

    model_config = ConfigDict(frozen=True)

    method: Literal["password"] = "password"
    user_name: str = ""
    password: str = ""
    """Opaque secret: a parameter reference such as ``%github.token%`` or a
    credential-store reference such as ``credentialsJSON:<uuid>``."""


class AnonymousAuth(BaseModel):
    """No authentication."""

    model_config = ConfigDict(frozen=True)

    method: Literal["anonymous"] = "anonymous"


class UploadedKeyAuth(BaseModel):
    """SSH key previously uploaded to the build host."""

    model_config = ConfigDict(frozen=True)

    method: Literal["uploaded_key"] = "uploaded_key"
    user_name: str = ""
    uploaded_key: str = ""
    """Name under which the key was uploaded."""

    passphrase: str = ""


class DefaultPrivateKeyAuth(BaseModel):
    """Private key from the agent's default SSH configuration."""

    model_config = ConfigDict(frozen=True)

    method: Literal["default_private_key"] = "default_private_key"
    user_name: str = ""


AuthDescriptor = Annotated[
    Union[PasswordAuth, AnonymousAuth, UploadedKeyAuth, DefaultPrivateKeyAuth],
    Field(discriminator="method"),
]


class VcsRootConfig(BaseModel):
    """A git VCS root.

    Mirrors the settings block of a Git VCS root in the host's
    configuration-as-code DSL.
    """

    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    uuid: str = Field(frozen=True, min_length=1)
    """Stable unique identifier; assignment is rejected."""

    id: str
    """External id, e.g. ``DistributedTest_DistributedTest``."""

    name: str
    url: str
    branch: str
    """Default branch reference, e.g. ``refs/heads/main``."""

    push_url: str | None = None
    branch_spec: str = ""
    """Newline-separated branch specification; empty means default only."""

    auth_method: AuthDescriptor = Field(default_factory=AnonymousAuth)
