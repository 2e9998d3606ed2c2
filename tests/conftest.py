"""
Shared fixtures.

The database settings are pinned before anything from ``civicpulse`` is
imported, so the engine binds to a throwaway SQLite file.
"""

import asyncio
from datetime import UTC, datetime, timedelta
import os
from pathlib import Path
import tempfile
import uuid

_DB_DIR = Path(tempfile.mkdtemp(prefix="civicpulse-tests-"))
os.environ["ENVIRONMENT"] = "dev"
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_DB_DIR / 'test.db'}"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ.pop("SENTRY_DSN", None)

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from civicpulse.core.db import AsyncSessionLocal, async_engine  # noqa: E402
from civicpulse.models import Base, Issue, IssueCategory, IssueStatus, User  # noqa: E402
from civicpulse.schemas.issues.issue_schemas import IssueResponse  # noqa: E402
from civicpulse.utils.password_utils import get_password_hash  # noqa: E402

BASE_TIME = datetime(2024, 5, 1, 12, 0, tzinfo=UTC)
PASSWORD = "secret123"


# ── in-memory issue records ───────────────────────────────────────────────────

def make_issue(**overrides) -> IssueResponse:
    """Build an IssueResponse without touching the database."""
    fields = {
        "id": uuid.uuid4(),
        "title": "Broken streetlight",
        "description": "The streetlight on the corner has been out for a week.",
        "category": IssueCategory.ELECTRICITY,
        "status": IssueStatus.PENDING,
        "location": "Main Street",
        "latitude": None,
        "longitude": None,
        "image_url": None,
        "user_id": uuid.uuid4(),
        "votes": 0,
        "created_at": BASE_TIME,
        "updated_at": BASE_TIME,
    }
    fields.update(overrides)
    return IssueResponse(**fields)


@pytest.fixture()
def sample_issues():
    """Six issues: 3 pending, 2 in-progress, 1 resolved; one title mentions a pothole."""
    return [
        make_issue(title="Pothole on Elm Street", category=IssueCategory.ROAD, status=IssueStatus.PENDING,
                   location="Elm Street", votes=4, created_at=BASE_TIME + timedelta(hours=1)),
        make_issue(title="Leaking water main", category=IssueCategory.WATER, status=IssueStatus.PENDING,
                   location="Oak Avenue", votes=9, created_at=BASE_TIME + timedelta(hours=2)),
        make_issue(title="Overflowing bins", category=IssueCategory.SANITATION, status=IssueStatus.PENDING,
                   location="Birch Park", votes=1, created_at=BASE_TIME + timedelta(hours=3)),
        make_issue(title="Streetlight flickering", category=IssueCategory.ELECTRICITY,
                   status=IssueStatus.IN_PROGRESS, location="Cedar Lane", votes=4,
                   created_at=BASE_TIME + timedelta(hours=4)),
        make_issue(title="Cracked sidewalk", category=IssueCategory.ROAD, status=IssueStatus.IN_PROGRESS,
                   location="Ash Road", votes=0, created_at=BASE_TIME + timedelta(hours=5)),
        make_issue(title="Graffiti on the library wall", category=IssueCategory.OTHER,
                   status=IssueStatus.RESOLVED, location="Maple Square", votes=2,
                   created_at=BASE_TIME + timedelta(hours=6)),
    ]


# ── database ──────────────────────────────────────────────────────────────────

async def _reset_schema():
    async with async_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)


@pytest.fixture()
def clean_db():
    asyncio.run(_reset_schema())


async def _add(instance):
    async with AsyncSessionLocal() as session:
        session.add(instance)
        await session.commit()
        await session.refresh(instance)
        return instance


def seed_user(email: str = "seed@example.com", name: str | None = "Seed User") -> User:
    return asyncio.run(_add(User(email=email, hashed_password=get_password_hash(PASSWORD), name=name)))


def seed_issue(user_id, **overrides) -> Issue:
    fields = {
        "title": "Broken streetlight",
        "description": "The streetlight on the corner has been out for a week.",
        "category": IssueCategory.ELECTRICITY,
        "status": IssueStatus.PENDING,
        "location": "Main Street",
        "votes": 0,
    }
    fields.update(overrides)
    return asyncio.run(_add(Issue(user_id=uuid.UUID(str(user_id)), **fields)))


# ── HTTP ──────────────────────────────────────────────────────────────────────

class FakeStorage:
    """Stands in for the S3 bucket."""

    def __init__(self):
        self.uploads = {}

    async def upload_file(self, file_data, file_key, content_type=None):
        self.uploads[file_key] = (file_data, content_type)
        return f"http://storage.test/issue-images/{file_key}"


@pytest.fixture()
def storage():
    return FakeStorage()


@pytest.fixture()
def app(clean_db, storage):
    from civicpulse.main import app as fastapi_app
    from civicpulse.services.storage.s3_service import get_storage_service

    fastapi_app.dependency_overrides[get_storage_service] = lambda: storage
    yield fastapi_app
    fastapi_app.dependency_overrides.clear()


@pytest.fixture()
def client(app):
    with TestClient(app) as c:
        yield c


def register(client, email: str, name: str | None = None) -> dict:
    """Register an account, sign in, and return its profile plus auth headers."""
    resp = client.post(
        "/api/v1/auth/register",
        json={"email": email, "password": PASSWORD, "confirm_password": PASSWORD, "name": name},
    )
    assert resp.status_code == 201, resp.text
    profile = resp.json()

    resp = client.post("/api/v1/auth/token", data={"username": email, "password": PASSWORD})
    assert resp.status_code == 200, resp.text
    profile["headers"] = {"Authorization": f"Bearer {resp.json()['access_token']}"}
    return profile


@pytest.fixture()
def alice(client):
    return register(client, "alice@example.com", "Alice")


@pytest.fixture()
def bob(client):
    return register(client, "bob@example.com", "Bob")


ISSUE_PAYLOAD = {
    "title": "Pothole near school",
    "description": "A deep pothole right next to the school crossing.",
    "category": "road",
    "location": "12 School Lane",
}
