"""
Project endpoints: visibility-filtered listing, creation, membership.

Visibility ("Model B"):
- admin/manager: every project in the org
- contractor: only projects with an active membership row, minus retired projects

Store failures do not produce HTTP errors; they come back in the ``error``
field of the envelope, newline-joined, alongside whatever could be loaded.
"""

from __future__ import annotations

import uuid
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException

from app.core.auth import get_workspace
from app.services.workspace import Workspace
from timecard_shared.schemas.common import APIResponse
from timecard_shared.schemas.projects import (
    ProjectCreate,
    ProjectListRead,
    ProjectMemberAdd,
)

router = APIRouter()

MANAGE_MEMBERS_DENIED = "Only admin/manager can manage project membership."


def _envelope(workspace: Workspace, data: object) -> APIResponse:
    return APIResponse(data=data, error=workspace.messages.text or None)


def _focus(user: Optional[str]) -> Optional[uuid.UUID]:
    """Parse the ``user`` query parameter; blank means no focus."""
    if user is None or not user.strip():
        return None
    try:
        return uuid.UUID(user.strip())
    except ValueError:
        raise HTTPException(status_code=422, detail="user must be a profile id")


# ---------------------------------------------------------------------------
# Projects
# ---------------------------------------------------------------------------


@router.get("/", response_model=APIResponse)
async def list_projects(
    user: Optional[str] = None,
    workspace: Workspace = Depends(get_workspace),
):
    """Projects visible to the viewer. ``user`` focuses the view on one profile."""
    focus = _focus(user)
    await workspace.resolve()
    listing = ProjectListRead(
        projects=workspace.projects,
        mode=workspace.mode_label,
        focus=workspace.focus_label(focus) or None,
    )
    return _envelope(workspace, listing)


@router.post("/", response_model=APIResponse, status_code=201)
async def create_project(
    project_in: ProjectCreate,
    workspace: Workspace = Depends(get_workspace),
):
    """Create a project (admin/manager only). Returns the re-sorted project list."""
    await workspace.resolve()
    created = await workspace.create_project(project_in.name)
    return _envelope(
        workspace,
        {
            "project": created,
            "projects": workspace.projects,
        },
    )


# ---------------------------------------------------------------------------
# Project Membership
# ---------------------------------------------------------------------------


@router.get("/{project_id}/members", response_model=APIResponse)
async def list_project_members(
    project_id: uuid.UUID,
    workspace: Workspace = Depends(get_workspace),
):
    """Active members of a project, with directory names and roles."""
    await workspace.resolve()
    await workspace.load_members(project_id)
    return _envelope(workspace, workspace.member_view(project_id))


@router.post("/{project_id}/members", response_model=APIResponse, status_code=201)
async def add_project_member(
    project_id: uuid.UUID,
    body: ProjectMemberAdd,
    workspace: Workspace = Depends(get_workspace),
):
    """Assign a profile to a project. A blank ``profile_id`` is ignored."""
    if not workspace.viewer.privileged:
        workspace.messages.append(MANAGE_MEMBERS_DENIED)
        return _envelope(workspace, [])
    await workspace.resolve()
    await workspace.add_member(project_id, body.profile_id)
    return _envelope(workspace, workspace.member_view(project_id))


@router.delete("/{project_id}/members/{member_id}", response_model=APIResponse)
async def remove_project_member(
    project_id: uuid.UUID,
    member_id: uuid.UUID,
    workspace: Workspace = Depends(get_workspace),
):
    """Soft-delete a membership row (``is_active`` set to false)."""
    if not workspace.viewer.privileged:
        workspace.messages.append(MANAGE_MEMBERS_DENIED)
        return _envelope(workspace, [])
    await workspace.resolve()
    await workspace.remove_member(project_id, member_id)
    return _envelope(workspace, workspace.member_view(project_id))


@router.get("/{project_id}/candidates", response_model=APIResponse)
async def list_candidates(
    project_id: uuid.UUID,
    user: Optional[str] = None,
    workspace: Workspace = Depends(get_workspace),
):
    """Profiles that can still be added to the project, optionally focused on ``user``."""
    focus = _focus(user)
    await workspace.resolve()
    await workspace.load_members(project_id)
    return _envelope(workspace, workspace.candidates(project_id, focus))
