from enum import Enum
from typing import Optional
from pydantic import BaseModel

class Role(str, Enum):
    ADMIN = "admin"
    MANAGER = "manager"
    CONTRACTOR = "contractor"

# Roles that see every org project and may manage projects/membership
PRIVILEGED_ROLES: frozenset["Role"] = frozenset({Role.ADMIN, Role.MANAGER})


def is_privileged(role: Optional[str]) -> bool:
    """True for admin/manager. Unknown or missing roles are not privileged."""
    if role is None:
        return False
    try:
        return Role(role) in PRIVILEGED_ROLES
    except ValueError:
        return False


def is_active_flag(value: Optional[bool]) -> bool:
    """Tri-state active check: only an explicit ``False`` means inactive."""
    return value is not False


class APIResponse(BaseModel):
    data: Optional[object] = None
    error: Optional[str] = None
