"""CredentialStore - credential verification for the login flow.

Password hashing and account state live behind this port so the session
flow stays storage-agnostic.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from uuid import UUID


class CredentialStore(ABC):
    """Port: email + password -> identity id."""

    @abstractmethod
    async def verify_credentials(self, email: str, password: str) -> UUID | None:
        """Return the identity id when the credentials are valid and active."""
