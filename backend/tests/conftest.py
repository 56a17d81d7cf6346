from __future__ import annotations
import os
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("LOG_LEVEL", "WARNING")

import uuid
from datetime import datetime, timedelta, timezone
import httpx
import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool

from mentor_admin.db import Base, get_session
from mentor_admin.main import app
from mentor_admin.models.teen import Teen, TeenBadge

STAFF = {"X-Staff-Id": "7f1d2c3b-0000-4000-8000-000000000001"}


@pytest_asyncio.fixture
async def engine():
    # fresh in-memory database per test; StaticPool keeps the one connection alive
    eng = create_async_engine("sqlite+aiosqlite://", poolclass=StaticPool, connect_args={"check_same_thread": False})
    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield eng
    await eng.dispose()


@pytest_asyncio.fixture
async def session_factory(engine):
    return async_sessionmaker(engine, expire_on_commit=False)


@pytest_asyncio.fixture
async def client(session_factory):
    async def _session():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_session] = _session
    async with httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def make_challenge(client):
    """POST a challenge (optionally with a badge, optionally published) and return its JSON."""
    async def _make(year=2025, month=1, *, badge=False, publish=False, price=500, go_live=None, closing=None):
        now = datetime.now(timezone.utc)
        payload = {
            "year": year,
            "month": month,
            "theme": f"Theme {year}-{month:02d}",
            "goLiveDate": (go_live or now - timedelta(days=1)).isoformat(),
            "closingDate": (closing or now + timedelta(days=30)).isoformat(),
        }
        r = await client.post("/challenges", json=payload, headers=STAFF)
        assert r.status_code == 201, r.text
        ch = r.json()
        if badge or publish:
            r = await client.post("/badges", json={"challengeId": ch["id"], "name": f"Badge {month}", "price": price})
            assert r.status_code == 201, r.text
            ch["badge"] = r.json()
        if publish:
            r = await client.patch(f"/challenges/{ch['id']}/publish")
            assert r.status_code == 200, r.text
            ch = r.json()
        return ch
    return _make


@pytest.fixture
def make_task(client):
    async def _make(challenge_id, task_type="TEXT", options=None, **extra):
        payload = {
            "challengeId": challenge_id,
            "tabName": extra.pop("tabName", "Daily"),
            "title": extra.pop("title", f"{task_type.title()} task"),
            "taskType": task_type,
            "options": options,
            **extra,
        }
        r = await client.post("/tasks", json=payload)
        assert r.status_code == 201, r.text
        return r.json()
    return _make


@pytest.fixture
def make_teen(session_factory):
    async def _make(name=None):
        async with session_factory() as session:
            teen = Teen(name=name or f"Teen {uuid.uuid4().hex[:6]}", email=f"{uuid.uuid4().hex}@example.org")
            session.add(teen)
            await session.commit()
            return str(teen.id)
    return _make


@pytest.fixture
def give_badges(session_factory):
    """Record TeenBadge rows for one teen against the given badge ids."""
    async def _give(teen_id, badge_ids, status="PURCHASED"):
        async with session_factory() as session:
            for badge_id in badge_ids:
                session.add(TeenBadge(teen_id=uuid.UUID(teen_id), badge_id=uuid.UUID(badge_id), status=status))
            await session.commit()
    return _give


@pytest.fixture
def submit(client):
    async def _submit(task_id, teen_id, content):
        r = await client.post("/submissions", json={"taskId": task_id, "teenId": teen_id, "content": content})
        assert r.status_code == 201, r.text
        return r.json()
    return _submit
