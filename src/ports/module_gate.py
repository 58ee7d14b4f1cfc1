"""ModuleGate - per-organization feature gating.

Extension point consulted by callers wrapping the decision engine
(AuthorizationService.can_with_module, the ability endpoint), never by
AuthorizationService.can itself.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from uuid import UUID


class ModuleGate(ABC):
    """Port: module enablement per organization."""

    @abstractmethod
    async def is_module_enabled(self, org_id: UUID, module_key: str) -> bool:
        """Return True if ``module_key`` is enabled for the organization."""

    @abstractmethod
    async def list_enabled_modules(self, org_id: UUID) -> list[str]:
        """Return the keys of every module enabled for the organization."""
