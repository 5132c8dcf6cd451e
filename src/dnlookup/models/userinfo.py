"""Models for resolved authorization records."""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from .identity import SubjectIssuerDNPair

__all__ = [
    "ClassifiedGroups",
    "EntityType",
    "UserRecord",
]


class EntityType(Enum):
    """Kind of entity behind a certificate principal."""

    USER = "user"
    """An interactive user found in the identity directory."""

    SERVER = "server"
    """A service or server with no matching directory user."""


class ClassifiedGroups(BaseModel):
    """Group memberships sorted into authorizations and roles."""

    model_config = ConfigDict(frozen=True)

    auths: frozenset[str] = Field(
        frozenset(),
        title="Authorizations",
        description="Coarse-grained authorization tokens",
        examples=[["Prog1_READ", "eng"]],
    )

    roles: frozenset[str] = Field(
        frozenset(),
        title="Roles",
        description="Role tokens with the ``ROLE_`` prefix removed",
        examples=[["AUDITOR"]],
    )


class UserRecord(BaseModel):
    """Authorization record for a certificate principal.

    A fresh record is built for every uncached lookup. Records are immutable
    and hold no reference back to the directory.
    """

    model_config = ConfigDict(frozen=True)

    identity: SubjectIssuerDNPair = Field(
        ..., title="Identity", description="Principal that was resolved"
    )

    entity_type: EntityType = Field(
        ...,
        title="Entity type",
        description="Whether the principal is a directory user or a server",
        examples=[EntityType.USER],
    )

    email: str = Field(
        "",
        title="Email address",
        description="Empty if no directory user matched",
        examples=["alice@example.com"],
    )

    auths: frozenset[str] = Field(
        frozenset(),
        title="Authorizations",
        description="Coarse-grained authorization tokens",
    )

    roles: frozenset[str] = Field(
        frozenset(),
        title="Roles",
        description="Role tokens granted to the principal",
    )

    created: datetime = Field(
        ...,
        title="Creation time",
        description="When this record was built",
    )
