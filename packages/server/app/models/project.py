"""Project model."""

from typing import Optional
import uuid

from sqlmodel import Field, SQLModel

from .base import CreatedAtMixin, UUIDMixin


class Project(UUIDMixin, CreatedAtMixin, SQLModel, table=True):
    __tablename__ = "projects"

    org_id: uuid.UUID = Field(foreign_key="organizations.id", nullable=False, index=True)
    name: str = Field(nullable=False)
    parent_id: Optional[uuid.UUID] = Field(default=None, foreign_key="projects.id")
    # NULL counts as active; only an explicit false retires a project
    is_active: Optional[bool] = Field(default=True)
