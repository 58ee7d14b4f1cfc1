"""AuthContext construction from a minimal, already-verified token.

The token only says who the caller is and which mode/org it selected;
root and platform flags are re-read from the RoleStore on every build so
a revoked platform role stops applying at the next request.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from src.shared.errors import AuthenticationError
from src.shared.types import AuthContext, AuthMode

if TYPE_CHECKING:
    from src.ports.role_store import RoleStore
    from src.session.tokens import TokenPayload

logger = logging.getLogger(__name__)


class AuthContextBuilder:
    """Expand a TokenPayload into a full AuthContext.

    Args:
        role_store: RoleStore used to look up the platform role.
        reject_revoked_platform: When True, a platform-mode token whose
            identity no longer holds a PlatformRole is rejected with
            AuthenticationError. When False (default) it degrades to a
            non-root platform context with no grants.
    """

    def __init__(
        self,
        *,
        role_store: RoleStore,
        reject_revoked_platform: bool = False,
    ) -> None:
        self._role_store = role_store
        self._reject_revoked_platform = reject_revoked_platform

    async def build(self, token: TokenPayload) -> AuthContext:
        if token.mode == AuthMode.PLATFORM:
            role = await self._role_store.get_platform_role(token.subject_id)
            if role is None:
                if self._reject_revoked_platform:
                    raise AuthenticationError("Platform role no longer assigned")
                logger.warning(
                    "Platform token without platform role: identity=%s",
                    token.subject_id,
                )
            return AuthContext(
                identity_id=token.subject_id,
                mode=AuthMode.PLATFORM,
                is_platform=True,
                is_root=bool(role and role.is_root),
                current_org_id=None,
            )

        return AuthContext(
            identity_id=token.subject_id,
            mode=AuthMode.TENANT,
            is_platform=False,
            is_root=False,
            current_org_id=token.current_org_id,
        )
