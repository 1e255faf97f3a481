from typing import Optional, List
from pydantic import BaseModel, Field, field_validator
from uuid import UUID

from .common import Role, is_active_flag


PROJECT_COLUMNS = ["id", "org_id", "name", "parent_id", "is_active"]
MEMBER_COLUMNS = ["id", "project_id", "profile_id", "is_active"]


class ProjectRow(BaseModel):
    id: UUID
    org_id: UUID
    name: str
    parent_id: Optional[UUID] = None
    is_active: Optional[bool] = None

    @property
    def active(self) -> bool:
        return is_active_flag(self.is_active)


class ProjectCreate(BaseModel):
    # Blank names are a silent no-op in the workspace, so no min_length here
    name: str = Field(default="", max_length=200)

    @field_validator("name")
    @classmethod
    def _strip(cls, value: str) -> str:
        return value.strip()


class MemberRow(BaseModel):
    id: UUID
    project_id: UUID
    profile_id: UUID
    is_active: Optional[bool] = None

    @property
    def active(self) -> bool:
        return is_active_flag(self.is_active)


class ProjectMemberAdd(BaseModel):
    profile_id: Optional[UUID] = None

    @field_validator("profile_id", mode="before")
    @classmethod
    def _blank_is_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value


class ProjectMemberRead(BaseModel):
    """Membership row annotated with directory information for display."""
    id: UUID
    profile_id: UUID
    display_name: str
    role: Optional[Role] = None


class ProjectListRead(BaseModel):
    projects: List[ProjectRow]
    mode: str
    focus: Optional[str] = None
