"""GrantStore - grants attached to a role."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from uuid import UUID

    from src.shared.types import Grant


class GrantStore(ABC):
    """Port: role -> grant list."""

    @abstractmethod
    async def get_grants(self, role_id: UUID) -> list[Grant]:
        """Return every grant bundled into the role (empty if none)."""
