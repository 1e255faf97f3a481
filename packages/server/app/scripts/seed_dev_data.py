#!/usr/bin/env python3
"""Seed a development database with an organization, profiles, projects and memberships.

Usage:
    python -m app.scripts.seed_dev_data [--create-tables]

Uses TC_DATABASE_URL (or the default from settings).
"""

import argparse
import asyncio
import uuid

import structlog
from sqlmodel import select

from app.core.config import get_settings
from app.core.logging_config import configure_logging
from app.models.organization import Organization
from app.models.profile import Profile
from app.models.project import Project
from app.models.project_member import ProjectMember

log = structlog.get_logger()

# Deterministic UUIDs for reproducibility
ORG_ID = uuid.UUID("00000000-0000-0000-0000-000000000001")
ADMIN_ID = uuid.UUID("00000000-0000-0000-0000-000000000010")
MANAGER_ID = uuid.UUID("00000000-0000-0000-0000-000000000011")
CONTRACTOR_IDS = [uuid.UUID(f"00000000-0000-0000-0000-0000000000{20 + i}") for i in range(2)]
PROJECT_IDS = [uuid.UUID(f"00000000-0000-0000-0000-0000000001{i:02d}") for i in range(3)]


async def seed(session_factory) -> dict:
    """Insert the seed rows unless the organization already exists. Returns counts."""
    async with session_factory() as session:
        existing = await session.execute(select(Organization).where(Organization.id == ORG_ID))
        if existing.scalar_one_or_none():
            log.info("seed.skipped", org_id=str(ORG_ID))
            return {"profiles": 0, "projects": 0, "members": 0}

        session.add(Organization(id=ORG_ID, name="KeHE Field Services", slug="kehe"))

        profiles = [
            Profile(id=ADMIN_ID, org_id=ORG_ID, full_name="Avery Admin", role="admin"),
            Profile(id=MANAGER_ID, org_id=ORG_ID, full_name="Morgan Manager", role="manager"),
            Profile(
                id=CONTRACTOR_IDS[0], org_id=ORG_ID, full_name="Casey Contractor",
                role="contractor", manager_id=MANAGER_ID,
            ),
            Profile(
                id=CONTRACTOR_IDS[1], org_id=ORG_ID, full_name="Jordan Contractor",
                role="contractor", manager_id=MANAGER_ID,
            ),
        ]
        projects = [
            Project(id=PROJECT_IDS[0], org_id=ORG_ID, name="KeHE — Program Mgmt"),
            Project(id=PROJECT_IDS[1], org_id=ORG_ID, name="KeHE — Ops"),
            Project(id=PROJECT_IDS[2], org_id=ORG_ID, name="Legacy Rollout", is_active=False),
        ]
        members = [
            ProjectMember(org_id=ORG_ID, project_id=PROJECT_IDS[0], profile_id=CONTRACTOR_IDS[0]),
            ProjectMember(org_id=ORG_ID, project_id=PROJECT_IDS[2], profile_id=CONTRACTOR_IDS[0]),
            ProjectMember(org_id=ORG_ID, project_id=PROJECT_IDS[1], profile_id=CONTRACTOR_IDS[1]),
        ]
        session.add_all(profiles)
        session.add_all(projects)
        session.add_all(members)
        await session.commit()

    counts = {"profiles": len(profiles), "projects": len(projects), "members": len(members)}
    log.info("seed.done", org_id=str(ORG_ID), **counts)
    return counts


async def main(create_tables: bool) -> None:
    from app.core.database import async_session_factory, engine, init_db

    if create_tables:
        await init_db()
    await seed(async_session_factory)
    await engine.dispose()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Seed Timecard development data")
    parser.add_argument("--create-tables", action="store_true", help="Create tables first")
    args = parser.parse_args()

    settings = get_settings()
    configure_logging(settings.log_level, "text")
    asyncio.run(main(args.create_tables))
