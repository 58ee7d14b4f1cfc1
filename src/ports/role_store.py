"""RoleStore - tenant and platform role lookups."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from uuid import UUID

    from src.shared.types import PlatformRole, TenantRole


class RoleStore(ABC):
    """Port: role definitions and assignments."""

    @abstractmethod
    async def get_tenant_role(self, identity_id: UUID, org_id: UUID) -> TenantRole | None:
        """Return the active TenantRole for (identity, org), if any."""

    @abstractmethod
    async def get_platform_role(self, identity_id: UUID) -> PlatformRole | None:
        """Return the identity's PlatformRole, if any."""
