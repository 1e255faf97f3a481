"""
Shared fixtures: a file-backed SQLite database per test, seeded with the
reference organization.

    profiles:   Alice (admin), Bob (contractor), Cara (contractor)
    projects:   P1, P2
    membership: Bob <-> P1 (active)

A second organization with its own admin and project checks org scoping.
"""

import os

# Never let tests reach for the production database driver
os.environ.setdefault("TC_DATABASE_URL", "sqlite+aiosqlite://")

import uuid
from types import SimpleNamespace

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker

from app.core.database import init_db
from app.core.identity import Viewer
from app.models.organization import Organization
from app.models.profile import Profile
from app.models.project import Project
from app.models.project_member import ProjectMember
from app.store import SQLModelStore
from timecard_shared.schemas.common import Role

from .fakes import RecordingStore


@pytest.fixture
async def engine(tmp_path):
    eng = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'timecard.db'}")
    await init_db(eng)
    yield eng
    await eng.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
def store(session_factory):
    return SQLModelStore(session_factory)


@pytest.fixture
def recording_store(store):
    return RecordingStore(store)


@pytest.fixture
async def org(session_factory):
    ids = SimpleNamespace(
        org=uuid.uuid4(),
        a=uuid.uuid4(),
        b=uuid.uuid4(),
        c=uuid.uuid4(),
        p1=uuid.uuid4(),
        p2=uuid.uuid4(),
        m_b_p1=uuid.uuid4(),
        other_org=uuid.uuid4(),
        other_admin=uuid.uuid4(),
        other_project=uuid.uuid4(),
    )
    async with session_factory() as session:
        session.add_all([
            Organization(id=ids.org, name="Acme", slug="acme"),
            Organization(id=ids.other_org, name="Globex", slug="globex"),
        ])
        session.add_all([
            Profile(id=ids.a, org_id=ids.org, full_name="Alice", role="admin"),
            Profile(id=ids.b, org_id=ids.org, full_name="Bob", role="contractor"),
            Profile(id=ids.c, org_id=ids.org, full_name="Cara", role="contractor"),
            Profile(id=ids.other_admin, org_id=ids.other_org, full_name="Otto", role="admin"),
        ])
        session.add_all([
            Project(id=ids.p1, org_id=ids.org, name="P1"),
            Project(id=ids.p2, org_id=ids.org, name="P2"),
            Project(id=ids.other_project, org_id=ids.other_org, name="P0 Globex"),
        ])
        session.add(ProjectMember(id=ids.m_b_p1, org_id=ids.org, project_id=ids.p1, profile_id=ids.b))
        await session.commit()
    return ids


@pytest.fixture
def viewer_for(org):
    roles = {org.a: Role.ADMIN, org.b: Role.CONTRACTOR, org.c: Role.CONTRACTOR}

    def _viewer(profile_id, role=None):
        return Viewer(user_id=profile_id, org_id=org.org, role=role or roles[profile_id])

    return _viewer
