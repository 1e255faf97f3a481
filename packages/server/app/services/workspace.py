"""
Project workspace: the transient, viewer-scoped view of projects, the org
directory and per-project membership, plus the actions that mutate them.

All state lives on a single event loop and is only touched by the
workspace's own coroutines, so nothing here is locked. A visibility
resolution is tied to the viewer identity that started it; if the identity
changes before it finishes, its results are dropped.
"""

from __future__ import annotations

import asyncio
import uuid
from typing import Optional

import structlog

from app.core.identity import IdentityProvider, Viewer
from app.store import QueryStore
from timecard_shared.schemas.profiles import ProfileRow
from timecard_shared.schemas.projects import ProjectMemberRead, ProjectRow

from .candidates import candidates, focus_label
from .membership import MembershipCache, MembershipManager
from .messages import MessageBuffer
from .projects import ProjectCreator, merge_project
from .visibility import Directory, resolve_visibility, strategy_for

log = structlog.get_logger()


class _Resolution:
    __slots__ = ("key", "cancelled")

    def __init__(self, key: tuple):
        self.key = key
        self.cancelled = False


class Workspace:
    def __init__(
        self,
        store: QueryStore,
        identity: Optional[IdentityProvider] = None,
        *,
        login_path: str = "/login",
    ):
        self.store = store
        self.identity = identity
        self.login_path = login_path

        self.viewer: Optional[Viewer] = None
        self.projects: list[ProjectRow] = []
        self.directory = Directory()
        self.members = MembershipCache()
        self.messages = MessageBuffer()
        self.busy = False
        self.draft_name = ""

        self._membership = MembershipManager(store, self.members, self.messages)
        self._creator = ProjectCreator(store, self.messages)
        self._resolution: Optional[_Resolution] = None
        self._task: Optional[asyncio.Task] = None

    # ------------------------------------------------------------------
    # Viewer & visibility
    # ------------------------------------------------------------------

    @property
    def logged_in(self) -> bool:
        return self.viewer is not None and self.viewer.resolved

    @property
    def mode_label(self) -> str:
        return strategy_for(self.viewer.role if self.viewer else None).mode_label

    async def load_viewer(self) -> Optional[Viewer]:
        """Ask the identity provider who is signed in and resolve for them."""
        if self.identity is None:
            return self.viewer
        viewer = await self.identity.current_viewer()
        if viewer is None:
            self.viewer = None
            return None
        await self.resolve(viewer)
        return viewer

    def set_viewer(self, viewer: Viewer) -> Optional[asyncio.Task]:
        """Schedule a resolution if the viewer's identity key changed.

        Must be called from a running event loop. Returns the task running the
        current resolution, or ``None`` when the viewer is not resolved.
        """
        if self._resolution is not None and self._resolution.key == viewer.key:
            self.viewer = viewer
            return self._task

        resolution = self._begin(viewer)
        if resolution is None:
            self._task = None
            return None
        self._task = asyncio.create_task(self._run(viewer, resolution))
        return self._task

    async def resolve(self, viewer: Optional[Viewer] = None) -> bool:
        """Resolve visibility for ``viewer`` (default: the current viewer) and wait.

        Returns ``True`` when the results were applied.
        """
        viewer = viewer or self.viewer
        if viewer is None:
            return False
        resolution = self._begin(viewer)
        if resolution is None:
            return False
        return await self._run(viewer, resolution)

    def _begin(self, viewer: Viewer) -> Optional[_Resolution]:
        if self._resolution is not None:
            self._resolution.cancelled = True
        self.viewer = viewer
        if not viewer.resolved:
            self._resolution = None
            return None
        self._resolution = _Resolution(viewer.key)
        return self._resolution

    async def _run(self, viewer: Viewer, resolution: _Resolution) -> bool:
        self.messages.clear()
        outcome = await resolve_visibility(self.store, viewer)

        if resolution.cancelled or outcome is None:
            log.info("visibility.discarded", viewer=str(viewer.user_id))
            return False

        for err in outcome.errors:
            self.messages.append(err)
        if outcome.directory is not None:
            self.directory = Directory(outcome.directory)
        if outcome.projects is not None:
            self.projects = outcome.projects

        log.info(
            "visibility.resolved",
            viewer=str(viewer.user_id),
            privileged=viewer.privileged,
            projects=len(self.projects),
            profiles=len(self.directory),
        )
        return True

    # ------------------------------------------------------------------
    # Membership
    # ------------------------------------------------------------------

    async def load_members(self, project_id: uuid.UUID) -> bool:
        self.messages.clear()
        return await self._membership.load(project_id)

    async def add_member(self, project_id: uuid.UUID, profile_id: Optional[uuid.UUID]) -> bool:
        self.messages.clear()
        org_id = self.viewer.org_id if self.viewer else None
        return await self._membership.add(project_id, profile_id, org_id)

    async def remove_member(self, project_id: uuid.UUID, member_id: uuid.UUID) -> bool:
        self.messages.clear()
        return await self._membership.remove(project_id, member_id)

    def candidates(
        self, project_id: uuid.UUID, focus_profile_id: Optional[uuid.UUID] = None
    ) -> list[ProfileRow]:
        return candidates(self.directory, self.members.get(project_id), focus_profile_id)

    def focus_label(self, focus_profile_id: Optional[uuid.UUID]) -> str:
        return focus_label(self.directory, focus_profile_id)

    def member_view(self, project_id: uuid.UUID) -> list[ProjectMemberRead]:
        """Loaded members annotated with directory names (empty if not loaded)."""
        view = []
        for m in self.members.get(project_id) or []:
            profile = self.directory.lookup(m.profile_id)
            view.append(
                ProjectMemberRead(
                    id=m.id,
                    profile_id=m.profile_id,
                    display_name=self.directory.display_name(m.profile_id),
                    role=profile.role if profile else None,
                )
            )
        return view

    # ------------------------------------------------------------------
    # Projects
    # ------------------------------------------------------------------

    async def create_project(self, name: Optional[str] = None) -> Optional[ProjectRow]:
        """Create a project from ``name`` (default: the draft name)."""
        if self.viewer is None:
            return None
        self.messages.clear()
        if name is not None:
            self.draft_name = name

        self.busy = True
        try:
            project = await self._creator.create(self.viewer, self.draft_name)
        finally:
            self.busy = False

        if project is None:
            return None
        self.projects = merge_project(self.projects, project)
        self.draft_name = ""
        return project

    # ------------------------------------------------------------------
    # Session
    # ------------------------------------------------------------------

    async def sign_out(self) -> str:
        """Sign out through the identity provider and drop all viewer state."""
        if self.identity is not None:
            await self.identity.sign_out()
        if self._resolution is not None:
            self._resolution.cancelled = True
        self._resolution = None
        self._task = None
        self.viewer = None
        self.projects = []
        self.directory = Directory()
        self.members.clear()
        self.messages.clear()
        self.draft_name = ""
        log.info("auth.signed_out")
        return self.login_path
