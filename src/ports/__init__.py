"""Port interfaces - storage boundary contracts of the authorization core.

Store Ports (read-only over externally owned data):
    MembershipStore - Org membership + platform org-access allow-lists
    RoleStore       - Tenant / platform role assignments
    GrantStore      - Grants per role
    OrgDirectory    - Organization display data

Extension Ports:
    ModuleGate      - Per-org feature gating (consulted by callers)
    CredentialStore - Credential verification for login
    RoleAssignmentStore - Tenant role assignment (HTTP write path)
"""

from src.ports.credential_store import CredentialStore
from src.ports.grant_store import GrantStore
from src.ports.membership_store import MembershipStore
from src.ports.module_gate import ModuleGate
from src.ports.org_directory import OrgDirectory
from src.ports.role_assignment import RoleAssignmentStore
from src.ports.role_store import RoleStore

__all__ = [
    "CredentialStore",
    "GrantStore",
    "MembershipStore",
    "ModuleGate",
    "OrgDirectory",
    "RoleAssignmentStore",
    "RoleStore",
]
