"""
Session endpoints. Login lives in the external identity service; this
service only reports who is signed in and delegates sign-out.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from app.core.auth import LOGIN_REQUIRED, BearerIdentity, get_identity, get_store
from app.core.config import get_settings
from app.services.workspace import Workspace
from app.store import QueryStore

router = APIRouter()


@router.get("/me")
async def me(identity: BearerIdentity = Depends(get_identity)):
    """The signed-in viewer, or 401 with a login hint."""
    viewer = await identity.current_viewer()
    if viewer is None:
        raise HTTPException(status_code=401, detail=LOGIN_REQUIRED)
    return {
        "id": str(viewer.user_id),
        "org_id": str(viewer.org_id),
        "role": viewer.role.value if viewer.role else None,
        "full_name": viewer.full_name,
        "privileged": viewer.privileged,
    }


@router.post("/logout")
async def logout(
    identity: BearerIdentity = Depends(get_identity),
    store: QueryStore = Depends(get_store),
):
    """Sign out and tell the client where to go next."""
    workspace = Workspace(store, identity, login_path=get_settings().login_path)
    redirect = await workspace.sign_out()
    return {"ok": True, "redirect": redirect}
