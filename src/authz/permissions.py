"""Permission registry: the closed table of (resource, action) pairs.

Permission keys are "<resource>.<action>" strings on the wire and in the
grant tables, but every valid key is declared here once. Grants are
matched by exact key only; there is no wildcard or prefix matching.

LAW: the table is frozen at import time. Adding a permission means adding
a row here and a grant row in the database.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, unique
from types import MappingProxyType

from src.shared.types import Scope


@unique
class Resource(str, Enum):
    EVENT = "event"
    ATTENDEE = "attendee"
    REGISTRATION = "registration"
    BADGE = "badge"
    USER = "user"
    ANALYTICS = "analytics"
    ORG = "org"
    PLATFORM = "platform"


@unique
class Action(str, Enum):
    CREATE = "create"
    READ = "read"
    UPDATE = "update"
    DELETE = "delete"
    PUBLISH = "publish"
    CHECKIN = "checkin"
    EXPORT = "export"
    APPROVE = "approve"
    PRINT = "print"
    INVITE = "invite"
    MANAGE = "manage"
    REMOVE = "remove"
    VIEW = "view"
    ADVANCED = "advanced"
    ADMIN = "admin"
    VIEW_ALL_ORGS = "view_all_orgs"
    IMPERSONATE = "impersonate"


@dataclass(frozen=True)
class PermissionDefinition:
    """One registered permission."""

    resource: Resource
    action: Action
    module: str
    description: str
    default_scope: Scope = Scope.ORG

    @property
    def key(self) -> str:
        return permission_key(self.resource, self.action)


def permission_key(resource: Resource, action: Action) -> str:
    """Build the wire key for a (resource, action) pair."""
    return f"{resource.value}.{action.value}"


def _define(
    resource: Resource,
    action: Action,
    module: str,
    description: str,
    default_scope: Scope = Scope.ORG,
) -> PermissionDefinition:
    return PermissionDefinition(resource, action, module, description, default_scope)


_R, _A, _S = Resource, Action, Scope

_DEFINITIONS: tuple[PermissionDefinition, ...] = (
    # Events
    _define(_R.EVENT, _A.CREATE, "events", "Create an event"),
    _define(_R.EVENT, _A.READ, "events", "View events"),
    _define(_R.EVENT, _A.UPDATE, "events", "Edit an event", _S.ASSIGNED),
    _define(_R.EVENT, _A.DELETE, "events", "Delete an event", _S.OWN),
    _define(_R.EVENT, _A.PUBLISH, "events", "Publish an event", _S.ASSIGNED),
    # Attendees
    _define(_R.ATTENDEE, _A.CREATE, "attendees", "Create an attendee"),
    _define(_R.ATTENDEE, _A.READ, "attendees", "View attendees"),
    _define(_R.ATTENDEE, _A.UPDATE, "attendees", "Edit an attendee", _S.ASSIGNED),
    _define(_R.ATTENDEE, _A.DELETE, "attendees", "Delete an attendee", _S.ASSIGNED),
    _define(_R.ATTENDEE, _A.CHECKIN, "attendees", "Check an attendee in"),
    _define(_R.ATTENDEE, _A.EXPORT, "attendees", "Export attendees"),
    # Registrations
    _define(_R.REGISTRATION, _A.CREATE, "registrations", "Create a registration"),
    _define(_R.REGISTRATION, _A.READ, "registrations", "View registrations"),
    _define(_R.REGISTRATION, _A.UPDATE, "registrations", "Edit a registration", _S.ASSIGNED),
    _define(_R.REGISTRATION, _A.DELETE, "registrations", "Delete a registration", _S.ASSIGNED),
    _define(
        _R.REGISTRATION, _A.APPROVE, "registrations", "Approve a registration", _S.ASSIGNED
    ),
    # Badges
    _define(_R.BADGE, _A.CREATE, "badges", "Create a badge"),
    _define(_R.BADGE, _A.READ, "badges", "View badges"),
    _define(_R.BADGE, _A.UPDATE, "badges", "Edit a badge", _S.ASSIGNED),
    _define(_R.BADGE, _A.DELETE, "badges", "Delete a badge", _S.ASSIGNED),
    _define(_R.BADGE, _A.PRINT, "badges", "Print a badge"),
    # Users
    _define(_R.USER, _A.INVITE, "users", "Invite a user"),
    _define(_R.USER, _A.READ, "users", "View users"),
    _define(_R.USER, _A.MANAGE, "users", "Manage users and their roles"),
    _define(_R.USER, _A.REMOVE, "users", "Remove a user"),
    # Analytics
    _define(_R.ANALYTICS, _A.VIEW, "analytics", "View basic analytics"),
    _define(_R.ANALYTICS, _A.ADVANCED, "analytics", "View advanced analytics"),
    _define(_R.ANALYTICS, _A.EXPORT, "analytics", "Export analytics"),
    # Organizations
    _define(_R.ORG, _A.READ, "organizations", "View organization details"),
    _define(_R.ORG, _A.UPDATE, "organizations", "Edit the organization"),
    _define(_R.ORG, _A.MANAGE, "organizations", "Manage plan and modules"),
    _define(_R.ORG, _A.DELETE, "organizations", "Delete the organization"),
    # Platform (root / support)
    _define(_R.PLATFORM, _A.ADMIN, "platform", "Platform administration", _S.ANY),
    _define(_R.PLATFORM, _A.VIEW_ALL_ORGS, "platform", "View every organization", _S.ANY),
    _define(_R.PLATFORM, _A.IMPERSONATE, "platform", "Act as another user", _S.ANY),
)

PERMISSIONS: MappingProxyType[str, PermissionDefinition] = MappingProxyType(
    {p.key: p for p in _DEFINITIONS}
)

MODULES: frozenset[str] = frozenset(p.module for p in _DEFINITIONS)


def get_permission(key: str) -> PermissionDefinition | None:
    """Return the definition registered under ``key``."""
    return PERMISSIONS.get(key)


def get_permissions_by_module(module: str) -> list[PermissionDefinition]:
    """Return every permission belonging to ``module``, in declaration order."""
    return [p for p in _DEFINITIONS if p.module == module]


def is_valid_permission_key(key: str) -> bool:
    """Return True if ``key`` names a registered permission."""
    return key in PERMISSIONS


def module_for(key: str) -> str | None:
    """Return the module that owns ``key``, None for unknown keys."""
    definition = PERMISSIONS.get(key)
    return definition.module if definition else None


__all__ = [
    "MODULES",
    "PERMISSIONS",
    "Action",
    "PermissionDefinition",
    "Resource",
    "get_permission",
    "get_permissions_by_module",
    "is_valid_permission_key",
    "module_for",
    "permission_key",
]
