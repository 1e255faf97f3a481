"""
Project membership management: load, add, soft-delete.

Mutations never patch the cache locally; they re-read the project's active
members from the store so store-side defaults and triggers are reflected.
"""

from __future__ import annotations

import uuid
from typing import Optional

import structlog

from app.store import QueryStore, StoreError
from timecard_shared.schemas.projects import MEMBER_COLUMNS, MemberRow

from .messages import MessageBuffer

log = structlog.get_logger()


class MembershipCache:
    """Per-project active members.

    A project that was never loaded has no entry (``get`` returns ``None``);
    a loaded project with no members maps to an empty list. Entries may be
    stale; they are only replaced wholesale by a successful load.
    """

    def __init__(self) -> None:
        self._sets: dict[uuid.UUID, list[MemberRow]] = {}

    def get(self, project_id: uuid.UUID) -> Optional[list[MemberRow]]:
        members = self._sets.get(project_id)
        return None if members is None else list(members)

    def is_loaded(self, project_id: uuid.UUID) -> bool:
        return project_id in self._sets

    def replace(self, project_id: uuid.UUID, members: list[MemberRow]) -> None:
        self._sets[project_id] = list(members)

    def clear(self) -> None:
        self._sets.clear()

    def __contains__(self, project_id: object) -> bool:
        return project_id in self._sets

    def __len__(self) -> int:
        return len(self._sets)


class MembershipManager:
    def __init__(self, store: QueryStore, cache: MembershipCache, messages: MessageBuffer):
        self.store = store
        self.cache = cache
        self.messages = messages

    async def load(self, project_id: uuid.UUID) -> bool:
        """Replace the project's cached member set. On failure the old set stays."""
        try:
            rows = await self.store.select(
                "project_members",
                MEMBER_COLUMNS,
                filters={"project_id": project_id, "is_active": True},
            )
        except StoreError as exc:
            self.messages.append(exc.message)
            return False

        self.cache.replace(project_id, [MemberRow.model_validate(r) for r in rows])
        log.debug("membership.loaded", project_id=str(project_id), count=len(rows))
        return True

    async def add(
        self,
        project_id: uuid.UUID,
        profile_id: Optional[uuid.UUID],
        org_id: Optional[uuid.UUID],
    ) -> bool:
        if not profile_id:
            return False

        try:
            await self.store.insert(
                "project_members",
                {
                    "org_id": org_id,
                    "project_id": project_id,
                    "profile_id": profile_id,
                    "is_active": True,
                },
                returning=["id"],
            )
        except StoreError as exc:
            self.messages.append(exc.message)
            return False

        log.info("membership.added", project_id=str(project_id), profile_id=str(profile_id))
        return await self.load(project_id)

    async def remove(self, project_id: uuid.UUID, member_id: uuid.UUID) -> bool:
        """Soft-delete the membership row ``member_id`` (its own id, not the profile id)."""
        try:
            await self.store.update(
                "project_members",
                {"is_active": False},
                filters={"id": member_id},
            )
        except StoreError as exc:
            self.messages.append(exc.message)
            return False

        log.info("membership.removed", project_id=str(project_id), member_id=str(member_id))
        return await self.load(project_id)
