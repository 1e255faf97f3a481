"""
Project creation (admin/manager only).
"""

from __future__ import annotations

from typing import Optional

import structlog

from app.core.identity import Viewer
from app.store import QueryStore, StoreError
from timecard_shared.schemas.projects import PROJECT_COLUMNS, ProjectRow

from .messages import MessageBuffer
from .visibility import sort_by_name

log = structlog.get_logger()

NOT_PRIVILEGED_MESSAGE = "Only admin/manager can create projects."


class ProjectCreator:
    def __init__(self, store: QueryStore, messages: MessageBuffer):
        self.store = store
        self.messages = messages

    async def create(self, viewer: Viewer, name: str) -> Optional[ProjectRow]:
        """Insert a project in the viewer's org.

        Returns the stored row, or ``None`` when nothing was created: missing
        org, non-privileged viewer (reported), blank name (silent) or a store
        failure (reported).
        """
        if not viewer.org_id:
            return None
        if not viewer.privileged:
            self.messages.append(NOT_PRIVILEGED_MESSAGE)
            return None

        name = (name or "").strip()
        if not name:
            return None

        try:
            row = await self.store.insert(
                "projects",
                {"org_id": viewer.org_id, "name": name, "is_active": True},
                returning=PROJECT_COLUMNS,
            )
        except StoreError as exc:
            self.messages.append(exc.message)
            return None

        project = ProjectRow.model_validate(row)
        log.info("project.created", project_id=str(project.id), org_id=str(viewer.org_id), name=name)
        return project


def merge_project(projects: list[ProjectRow], project: ProjectRow) -> list[ProjectRow]:
    """New list with ``project`` added, re-sorted by name."""
    return sort_by_name([*projects, project])
