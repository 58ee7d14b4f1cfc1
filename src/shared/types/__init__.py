"""Shared domain types used across layers.

These types flow through Port interfaces and the decision engine and must
remain stable. All of them are immutable; AuthContext, ResourceContext and
Decision are built per call and discarded.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, unique
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from uuid import UUID


@unique
class AuthMode(str, Enum):
    """Execution mode carried by the identity token."""

    TENANT = "tenant"
    PLATFORM = "platform"


@unique
class Scope(str, Enum):
    """Breadth of a grant."""

    OWN = "own"
    ORG = "org"
    ASSIGNED = "assigned"
    ANY = "any"


@unique
class AccessLevel(str, Enum):
    """Organization reach of a platform role assignment."""

    GLOBAL = "GLOBAL"
    LIMITED = "LIMITED"


# -- RBAC definitions (owned by external admin flows, read-only here) --


@dataclass(frozen=True)
class Grant:
    """A (permission key, scope) pair bundled into a role."""

    key: str
    scope: Scope


@dataclass(frozen=True)
class TenantRole:
    """Role scoped to exactly one organization.

    Lower ``level`` means more authority (see src.authz.hierarchy).
    """

    role_id: UUID
    org_id: UUID
    code: str
    name: str
    level: int
    grants: tuple[Grant, ...] = ()


@dataclass(frozen=True)
class PlatformRole:
    """Global role; at most one per identity."""

    role_id: UUID
    code: str
    name: str
    is_root: bool = False
    access_level: AccessLevel = AccessLevel.LIMITED
    level: int = 0
    grants: tuple[Grant, ...] = ()


@dataclass(frozen=True)
class Organization:
    """Tenant boundary."""

    org_id: UUID
    name: str
    slug: str = ""


@dataclass(frozen=True)
class MembershipEntry:
    """An org the identity belongs to, with its tenant role if assigned."""

    organization: Organization
    role: TenantRole | None = None


# -- Per-call evaluation inputs --


@dataclass(frozen=True)
class AuthContext:
    """Full evaluation context expanded from a minimal identity token."""

    identity_id: UUID
    mode: AuthMode
    is_platform: bool = False
    is_root: bool = False
    current_org_id: UUID | None = None


@dataclass(frozen=True)
class ResourceContext:
    """Caller-supplied description of the target resource."""

    resource_owner_id: UUID | None = None
    assigned_identity_ids: frozenset[UUID] = field(default_factory=frozenset)
    resource_org_id: UUID | None = None


@dataclass(frozen=True)
class ResolvedPermissions:
    """Grant list plus the role it came from (None when no role applies)."""

    grants: tuple[Grant, ...] = ()
    role: TenantRole | PlatformRole | None = None


# -- Session flow results --


@dataclass(frozen=True)
class AvailableOrg:
    """An organization the identity may bind its session to."""

    org_id: UUID
    org_name: str
    org_slug: str = ""
    role: str = ""
    role_level: int | None = None
    is_platform: bool = False


@dataclass(frozen=True)
class RoleSummary:
    """Role description exposed by the ability introspection."""

    code: str
    name: str
    is_platform: bool = False
    is_root: bool = False
    level: int | None = None


@dataclass(frozen=True)
class UserAbility:
    """The caller's own resolved role, grants and enabled modules."""

    org_id: UUID | None
    mode: AuthMode
    role: RoleSummary
    grants: tuple[Grant, ...] = ()
    modules: tuple[str, ...] = ()


__all__ = [
    "AccessLevel",
    "AuthContext",
    "AuthMode",
    "AvailableOrg",
    "Grant",
    "MembershipEntry",
    "Organization",
    "PlatformRole",
    "ResolvedPermissions",
    "ResourceContext",
    "RoleSummary",
    "Scope",
    "TenantRole",
    "UserAbility",
]
