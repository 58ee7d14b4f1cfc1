"""MembershipStore - org membership and platform org-access lookups.

Read-only view over externally owned data. Membership is the precondition
for any tenant-mode grant to apply; the platform allow-list is consulted
only for platform identities holding a LIMITED assignment.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from uuid import UUID

    from src.shared.types import MembershipEntry


class MembershipStore(ABC):
    """Port: organization membership lookups."""

    @abstractmethod
    async def is_member(self, identity_id: UUID, org_id: UUID) -> bool:
        """Return True if a Membership row exists for (identity, org)."""

    @abstractmethod
    async def get_platform_org_access(self, identity_id: UUID) -> list[UUID] | None:
        """Return the platform allow-list for an identity.

        Returns:
            None when the identity is unrestricted (GLOBAL access, root, or
            no platform role at all); otherwise the explicit list of org ids
            from PlatformOrgAccess, which may be empty.
        """

    @abstractmethod
    async def list_memberships(self, identity_id: UUID) -> list[MembershipEntry]:
        """Return every org the identity belongs to, with its tenant role."""
