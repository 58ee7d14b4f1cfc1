"""Scope evaluation for a single grant.

Pure function; root identities never reach it (AuthorizationService
short-circuits them first).

The ``org`` scope carries no restriction of its own: the organization
boundary is enforced by the context check that runs before any grant is
looked up, so once a grant is found the whole current org is in reach.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from src.shared.types import Scope

if TYPE_CHECKING:
    from src.shared.types import AuthContext, ResourceContext


def evaluate(scope: Scope | str, ctx: AuthContext, resource_ctx: ResourceContext) -> bool:
    """Return True if ``scope`` is satisfied for the caller and resource.

    Unknown scope values fail closed.
    """
    try:
        scope = Scope(scope)
    except ValueError:
        return False

    if scope in (Scope.ANY, Scope.ORG):
        return True

    if scope is Scope.ASSIGNED:
        return ctx.identity_id in resource_ctx.assigned_identity_ids

    # Scope.OWN
    owner = resource_ctx.resource_owner_id
    return owner is not None and owner == ctx.identity_id
