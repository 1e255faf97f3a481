"""
Project visibility ("Model B").

Admins and managers see every project in their organization. Contractors
see only projects they hold an active membership for, and never a project
that has been retired (``is_active`` explicitly false), even while their
membership row is still active.
"""

from __future__ import annotations

import asyncio
import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Awaitable, Iterator, Optional, TypeVar

import structlog
from pydantic import ValidationError

from app.core.identity import Viewer
from app.store import Order, QueryStore, StoreError
from timecard_shared.schemas.common import Role, is_privileged
from timecard_shared.schemas.profiles import PROFILE_COLUMNS, ProfileRow
from timecard_shared.schemas.projects import PROJECT_COLUMNS, ProjectRow

log = structlog.get_logger()

T = TypeVar("T")


def sort_by_name(projects: list[ProjectRow]) -> list[ProjectRow]:
    """Case-insensitive name order, used for every project list the viewer sees."""
    return sorted(projects, key=lambda p: p.name.casefold())


# ---------------------------------------------------------------------------
# Directory
# ---------------------------------------------------------------------------


class Directory:
    """Active profiles of one organization, ordered by role then name."""

    def __init__(self, profiles: Optional[list[ProfileRow]] = None):
        self._profiles = list(profiles or [])
        self._by_id = {p.id: p for p in self._profiles}

    def __iter__(self) -> Iterator[ProfileRow]:
        return iter(self._profiles)

    def __len__(self) -> int:
        return len(self._profiles)

    @property
    def profiles(self) -> list[ProfileRow]:
        return list(self._profiles)

    def lookup(self, profile_id: Optional[uuid.UUID]) -> Optional[ProfileRow]:
        return self._by_id.get(profile_id)

    def display_name(self, profile_id: uuid.UUID) -> str:
        profile = self.lookup(profile_id)
        if profile and profile.full_name:
            return profile.full_name
        return str(profile_id)


async def fetch_directory(store: QueryStore, org_id: uuid.UUID) -> list[ProfileRow]:
    rows = await store.select(
        "profiles",
        PROFILE_COLUMNS,
        filters={"org_id": org_id, "is_active": True},
        order=[Order("role"), Order("full_name")],
    )
    profiles = []
    for r in rows:
        try:
            profiles.append(ProfileRow.model_validate(r))
        except ValidationError as exc:
            # One malformed row (e.g. an unknown role) must not hide the rest
            log.warning(
                "directory.row_skipped",
                profile_id=str(r.get("id")),
                errors=exc.error_count(),
            )
    return profiles


# ---------------------------------------------------------------------------
# Visibility strategies
# ---------------------------------------------------------------------------


class VisibilityStrategy(ABC):
    mode_label: str = ""

    @abstractmethod
    async def fetch_projects(self, store: QueryStore, viewer: Viewer) -> list[ProjectRow]:
        """Projects the viewer may see, ordered by name."""


class OrgWideVisibility(VisibilityStrategy):
    """Every project in the org, regardless of personal membership."""

    mode_label = "Admin/Manager view (all projects)"

    async def fetch_projects(self, store: QueryStore, viewer: Viewer) -> list[ProjectRow]:
        rows = await store.select(
            "projects",
            PROJECT_COLUMNS,
            filters={"org_id": viewer.org_id},
            order=[Order("name")],
        )
        return sort_by_name([ProjectRow.model_validate(r) for r in rows])


class MembershipVisibility(VisibilityStrategy):
    """Only projects reached through the viewer's active membership rows."""

    mode_label = "Contractor view (membership only — Model B)"

    async def fetch_projects(self, store: QueryStore, viewer: Viewer) -> list[ProjectRow]:
        rows = await store.select(
            "project_members",
            ["project_id"],
            filters={"profile_id": viewer.user_id, "is_active": True},
            join={"projects": PROJECT_COLUMNS},
        )
        joined = [ProjectRow.model_validate(r["projects"]) for r in rows if r.get("projects")]
        # Membership rows are not cleaned up when a project is retired
        return sort_by_name([p for p in joined if p.active])


_ORG_WIDE = OrgWideVisibility()
_MEMBERSHIP = MembershipVisibility()


def strategy_for(role: Optional[Role]) -> VisibilityStrategy:
    return _ORG_WIDE if is_privileged(role) else _MEMBERSHIP


# ---------------------------------------------------------------------------
# Resolution
# ---------------------------------------------------------------------------


@dataclass
class VisibilityOutcome:
    """Result of one resolution pass. ``None`` parts failed and must not be applied."""

    directory: Optional[list[ProfileRow]] = None
    projects: Optional[list[ProjectRow]] = None
    errors: list[str] = field(default_factory=list)


async def _attempt(call: Awaitable[T]) -> tuple[Optional[T], Optional[str]]:
    try:
        return await call, None
    except StoreError as exc:
        return None, exc.message


async def resolve_visibility(store: QueryStore, viewer: Viewer) -> Optional[VisibilityOutcome]:
    """Fetch the directory and the visible projects concurrently.

    Returns ``None`` without touching the store when the viewer is not
    resolved. A failure in one fetch never prevents the other.
    """
    if not viewer.resolved:
        return None

    strategy = strategy_for(viewer.role)
    (profiles, profile_err), (projects, project_err) = await asyncio.gather(
        _attempt(fetch_directory(store, viewer.org_id)),
        _attempt(strategy.fetch_projects(store, viewer)),
    )
    outcome = VisibilityOutcome(directory=profiles, projects=projects)
    for err in (profile_err, project_err):
        if err:
            outcome.errors.append(err)

    log.debug(
        "visibility.fetched",
        viewer=str(viewer.user_id),
        strategy=type(strategy).__name__,
        projects=None if projects is None else len(projects),
        errors=len(outcome.errors),
    )
    return outcome
