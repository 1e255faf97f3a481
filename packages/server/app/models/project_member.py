"""Project membership join table (RLS-scoped).

Rows are never deleted: removal sets ``is_active`` to false. Nothing at this
layer prevents two active rows for the same (project, profile) pair.
"""

from typing import Optional
import uuid

from sqlmodel import Field, SQLModel

from .base import CreatedAtMixin, UUIDMixin


class ProjectMember(UUIDMixin, CreatedAtMixin, SQLModel, table=True):
    __tablename__ = "project_members"

    org_id: uuid.UUID = Field(foreign_key="organizations.id", nullable=False, index=True)
    project_id: uuid.UUID = Field(foreign_key="projects.id", nullable=False, index=True)
    profile_id: uuid.UUID = Field(foreign_key="profiles.id", nullable=False, index=True)
    is_active: Optional[bool] = Field(default=True)
