"""Shared fixtures for the post settings tests."""

import json
import os

# Keep the module level engine off the local disk
os.environ.setdefault("DATABASE_URL", "sqlite://")

import httpx
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from database import get_db
from lib.errors import SlugGenerationError
from lib.utils import slugify
from main import app
from models.database import Base
from services.notifications import NotificationCenter
from services.post_model import PostModel
from services.post_settings import PostSettingsMenu

API_URL = "http://testserver/api"

EXISTING_POST = {
    "id": 7,
    "uuid": "0d6bfb4c-3f07-4b43-9a55-8f1a0c6f5b11",
    "title": "Old Title",
    "slug": "old-title",
    "status": "published",
    "page": False,
    "published_at": "2024-01-10T09:30:00",
}

DRAFT_POST = {
    "id": 8,
    "uuid": "5d0a1f5e-9a8e-4ce1-a4a9-7d6c1b0e2c22",
    "title": "Work In Progress",
    "slug": "work-in-progress",
    "status": "draft",
    "page": False,
    "published_at": "2024-01-12T18:00:00",
}


class FakeSlugGenerator:
    """Stands in for the slug endpoint. Slugifies unless told otherwise."""

    def __init__(self, mapping=None, error=None):
        self.mapping = mapping or {}
        self.error = error
        self.calls = []

    async def generate_slug(self, text):
        self.calls.append(text)
        if self.error is not None:
            raise self.error
        if not text:
            return ""
        return self.mapping.get(text, slugify(text))


class FakePostsApi:
    """httpx MockTransport handler that echoes saved posts back."""

    def __init__(self):
        self.requests = []
        self.failure = None
        self.next_id = 100

    def fail_with(self, status_code, body):
        self.failure = (status_code, body)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.failure is not None:
            status_code, body = self.failure
            return httpx.Response(status_code, json=body)

        payload = json.loads(request.content)
        if request.method == "POST":
            post_id = self.next_id
            self.next_id += 1
            status_code = 201
        else:
            post_id = int(request.url.path.rsplit("/", 1)[-1])
            status_code = 200
        return httpx.Response(status_code, json={"id": post_id, "uuid": f"uuid-{post_id}", **payload})

    @property
    def saves(self):
        return [r for r in self.requests if r.method in ("POST", "PUT")]


@pytest.fixture
def posts_api():
    return FakePostsApi()


@pytest.fixture
async def http_client(posts_api):
    async with httpx.AsyncClient(transport=httpx.MockTransport(posts_api)) as client:
        yield client


@pytest.fixture
def slug_generator():
    return FakeSlugGenerator()


@pytest.fixture
def failing_slug_generator():
    return FakeSlugGenerator(error=SlugGenerationError("Unable to generate a slug for 'x'"))


@pytest.fixture
def notifications():
    return NotificationCenter()


@pytest.fixture
async def make_menu(http_client, slug_generator, notifications):
    """Factory for settings menus over a PostModel. Menus are destroyed afterwards."""
    menus = []

    def factory(data=None, generator=None, debounce_ms=30):
        post = PostModel(http_client, API_URL, data=dict(data) if data else None)
        menu = PostSettingsMenu(
            post,
            generator or slug_generator,
            notifications,
            slug_debounce_ms=debounce_ms
        )
        menus.append(menu)
        return menu

    yield factory

    for menu in menus:
        menu.destroy()


@pytest.fixture
def db_session():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool
    )
    Base.metadata.create_all(bind=engine)
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def override_db(db_session):
    def _get_db():
        yield db_session

    app.dependency_overrides[get_db] = _get_db
    yield db_session
    app.dependency_overrides.clear()


@pytest.fixture
def api_client(override_db):
    return TestClient(app)


@pytest.fixture
async def asgi_client(override_db):
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as client:
        yield client
