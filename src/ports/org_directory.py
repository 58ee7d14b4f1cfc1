"""OrgDirectory - organization listing used by the org picker."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable
    from uuid import UUID

    from src.shared.types import Organization


class OrgDirectory(ABC):
    """Port: organization display data."""

    @abstractmethod
    async def list_organizations(
        self,
        org_ids: Iterable[UUID] | None = None,
    ) -> list[Organization]:
        """Return organizations.

        Args:
            org_ids: Restrict the listing to these ids. None lists every
                active organization in the system.
        """
