"""Profile model: a person within an organization (managed by the identity service)."""

from typing import Optional
import uuid

from sqlmodel import Field, SQLModel

from .base import CreatedAtMixin, UUIDMixin


class Profile(UUIDMixin, CreatedAtMixin, SQLModel, table=True):
    __tablename__ = "profiles"

    org_id: uuid.UUID = Field(foreign_key="organizations.id", nullable=False, index=True)
    full_name: Optional[str] = None
    role: str = Field(nullable=False, default="contractor")  # admin | manager | contractor
    is_active: Optional[bool] = Field(default=True)
    manager_id: Optional[uuid.UUID] = Field(default=None, foreign_key="profiles.id")
