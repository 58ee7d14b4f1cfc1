"""RoleAssignmentStore - the one write path behind the role-assignment route.

The decision engine never writes; this port is used by the HTTP layer
after the permission and hierarchy checks have passed.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from uuid import UUID

    from src.shared.types import TenantRole


class RoleAssignmentStore(ABC):
    """Port: tenant role assignment."""

    @abstractmethod
    async def get_org_role(self, org_id: UUID, role_id: UUID) -> TenantRole | None:
        """Return the role definition if it belongs to ``org_id``."""

    @abstractmethod
    async def assign_tenant_role(
        self,
        org_id: UUID,
        identity_id: UUID,
        role_id: UUID,
    ) -> TenantRole:
        """Replace the identity's tenant role in ``org_id``.

        Raises:
            NotFoundError: ``role_id`` is not a role of ``org_id``.
        """
