"""
Viewer resolution for the HTTP API.

Sessions are issued by the external identity service; requests carry the
viewer's profile id as a bearer token (``Authorization: Bearer <uuid>``).
The role checks in this service are a UX convenience; row-level security
in the store is the real boundary.
"""

from __future__ import annotations

import uuid
from typing import Optional

import structlog
from fastapi import Depends, HTTPException
from fastapi.security import APIKeyHeader

from app.core.config import get_settings
from app.core.database import async_session_factory
from app.core.identity import Viewer
from app.store import QueryStore, SQLModelStore, StoreError
from app.services.workspace import Workspace
from timecard_shared.schemas.common import Role, is_active_flag

log = structlog.get_logger()

api_key_header = APIKeyHeader(name="Authorization", auto_error=False)

LOGIN_REQUIRED = "Please log in."


class BearerIdentity:
    """Identity provider backed by the ``profiles`` table."""

    def __init__(self, store: QueryStore, authorization: Optional[str]):
        self.store = store
        self.authorization = authorization

    def _profile_id(self) -> Optional[uuid.UUID]:
        if not self.authorization:
            return None
        token = self.authorization.replace("Bearer ", "").strip()
        try:
            return uuid.UUID(token)
        except ValueError:
            return None

    async def current_viewer(self) -> Optional[Viewer]:
        profile_id = self._profile_id()
        if profile_id is None:
            return None
        try:
            rows = await self.store.select(
                "profiles",
                ["id", "org_id", "role", "full_name", "is_active"],
                filters={"id": profile_id},
            )
        except StoreError as exc:
            log.warning("auth.lookup_failed", error=exc.message)
            return None
        if not rows or not is_active_flag(rows[0]["is_active"]):
            return None
        row = rows[0]
        try:
            role = Role(row["role"])
        except ValueError:
            role = None
        return Viewer(user_id=row["id"], org_id=row["org_id"], role=role, full_name=row["full_name"])

    async def sign_out(self) -> None:
        # Bearer tokens are revoked by the identity service, nothing is held here
        log.info("auth.sign_out", profile_id=str(self._profile_id()))


# ---------------------------------------------------------------------------
# FastAPI dependencies
# ---------------------------------------------------------------------------


def get_store() -> QueryStore:
    return SQLModelStore(async_session_factory)


def get_identity(
    authorization: Optional[str] = Depends(api_key_header),
    store: QueryStore = Depends(get_store),
) -> BearerIdentity:
    return BearerIdentity(store, authorization)


async def get_workspace(
    identity: BearerIdentity = Depends(get_identity),
    store: QueryStore = Depends(get_store),
) -> Workspace:
    """A workspace for the signed-in viewer. Raises 401 when nobody is signed in."""
    viewer = await identity.current_viewer()
    if viewer is None or not viewer.resolved:
        raise HTTPException(status_code=401, detail=LOGIN_REQUIRED)
    workspace = Workspace(store, identity, login_path=get_settings().login_path)
    workspace.viewer = viewer
    return workspace
