"""
Org directory endpoint: active profiles, ordered by role then name.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from app.core.auth import get_workspace
from app.services.workspace import Workspace
from timecard_shared.schemas.common import APIResponse

router = APIRouter()


@router.get("/", response_model=APIResponse)
async def list_directory(workspace: Workspace = Depends(get_workspace)):
    await workspace.resolve()
    return APIResponse(
        data=workspace.directory.profiles,
        error=workspace.messages.text or None,
    )
