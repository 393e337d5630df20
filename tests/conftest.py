"""Test fixtures — a fresh SQLite database and blob store per test.

Learn: Each test gets its own SQLite file (aiosqlite driver) under
pytest's tmp_path, with all tables created up front. The app's get_db
and get_blob_store dependencies are overridden to point at them.

Auth is NOT mocked: helpers sign real gateway tokens with the configured
secret, so every request runs the real AuthGuard → ProjectGuard chain.
"""

import os

# Must be set before sealnote.config is imported anywhere
os.environ.setdefault("SEALNOTE_DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("SEALNOTE_BCRYPT_ROUNDS", "4")
os.environ.setdefault("SEALNOTE_ENVIRONMENT", "development")

import uuid

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from sealnote.auth.jwt import create_token
from sealnote.auth.password import CredentialVerifier
from sealnote.config import settings
from sealnote.db.engine import get_db
from sealnote.db.models import Base
from sealnote.main import app
from sealnote.services.message_service import MessageService
from sealnote.storage.blob_store import BlobStore, get_blob_store


@pytest_asyncio.fixture()
async def engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture()
async def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture()
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture()
def blob_store(tmp_path):
    return BlobStore(tmp_path / "storage")


@pytest.fixture()
def message_service(db_session, blob_store):
    """Service wired the same way the API wires it."""
    return MessageService(
        db_session,
        credentials=CredentialVerifier(rounds=4),
        blobs=blob_store,
        max_upload_size=settings.max_upload_size,
        allowed_content_types=settings.allowed_content_types,
    )


@pytest_asyncio.fixture()
async def client(session_factory, blob_store):
    """HTTP client against the app, with DB and storage pointed at tmp_path."""

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_blob_store] = lambda: blob_store

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


# ─── Identities ─────────────────────────────────────────


@pytest.fixture()
def make_headers():
    """Build gateway auth headers for a user id."""

    def _make(user_id: uuid.UUID | str) -> dict[str, str]:
        return {settings.auth_header_name: create_token(str(user_id))}

    return _make


@pytest.fixture()
def owner_id():
    return uuid.uuid4()


@pytest.fixture()
def owner_headers(make_headers, owner_id):
    return make_headers(owner_id)


@pytest.fixture()
def stranger_headers(make_headers):
    return make_headers(uuid.uuid4())


# ─── Seed data ──────────────────────────────────────────


@pytest_asyncio.fixture()
async def project(client, owner_headers):
    """A project owned by `owner_id`."""
    r = await client.post(
        "/api/v1/project",
        json={"name": f"proj-{uuid.uuid4().hex[:8]}"},
        headers=owner_headers,
    )
    assert r.status_code == 201
    return r.json()


@pytest.fixture()
def create_message(client, owner_headers, project):
    """Create a message in `project` through the admin API."""

    async def _create(**body):
        r = await client.post(
            f"/api/v1/admin/message/{project['id']}",
            json=body,
            headers=owner_headers,
        )
        assert r.status_code == 201, r.text
        return r.json()

    return _create
