"""Profile (directory) schemas."""

from __future__ import annotations

from typing import Optional
from uuid import UUID

from pydantic import BaseModel

from .common import Role, is_active_flag, is_privileged


# Columns the directory reads from the ``profiles`` table
PROFILE_COLUMNS = ["id", "full_name", "role", "is_active", "manager_id"]


class ProfileRow(BaseModel):
    """A person in the org directory."""
    id: UUID
    full_name: Optional[str] = None
    role: Role
    is_active: Optional[bool] = None
    manager_id: Optional[UUID] = None

    @property
    def active(self) -> bool:
        return is_active_flag(self.is_active)

    @property
    def privileged(self) -> bool:
        return is_privileged(self.role)

    @property
    def label(self) -> str:
        """Name for pickers: full name (or id) truncated, followed by the role."""
        return f"{(self.full_name or str(self.id))[:45]} — {self.role.value}"
