"""
Shared fixtures.

- store: in-memory repositories patched over auth/teams/admin repositories
- storage: fake Cloudinary patched over `core.cloudinary`
- make_user / make_image: small factories
- client: FastAPI TestClient (lifespan not started, so no DB pool is needed)
"""

from __future__ import annotations

import io
import itertools

import pytest
from fastapi.testclient import TestClient
from PIL import Image

from admin import repository as admin_repository
from auth import repository as auth_repository
from core import cloudinary
from main import app
from tests.fakes import (
    ADMIN_REPOSITORY_FUNCTIONS,
    AUTH_REPOSITORY_FUNCTIONS,
    TEAMS_REPOSITORY_FUNCTIONS,
    FakeStorage,
    FakeStore,
)
from teams import repository as teams_repository


@pytest.fixture
def store(monkeypatch) -> FakeStore:
    fake = FakeStore()
    for module, names in (
        (auth_repository, AUTH_REPOSITORY_FUNCTIONS),
        (teams_repository, TEAMS_REPOSITORY_FUNCTIONS),
        (admin_repository, ADMIN_REPOSITORY_FUNCTIONS),
    ):
        for name in names:
            monkeypatch.setattr(module, name, getattr(fake, name))
    return fake


@pytest.fixture
def storage(monkeypatch) -> FakeStorage:
    fake = FakeStorage()
    monkeypatch.setattr(cloudinary, "upload_image", fake.upload_image)
    monkeypatch.setattr(cloudinary, "destroy_image", fake.destroy_image)
    return fake


@pytest.fixture
def make_user(store):
    """
    Async factory: `user = await make_user("alice")`.
    """
    counter = itertools.count(1)

    async def _make(name: str | None = None, *, password_hash: str = "not-a-real-hash") -> dict:
        n = next(counter)
        name = name or f"user{n}"
        return await store.create_user(
            name=name.title(),
            email=f"{name}@example.com",
            registration_number=f"REG{n:03d}",
            password_hash=password_hash,
        )

    return _make


@pytest.fixture
def make_image():
    def _make(size=(2400, 1600), *, mode="RGB", fmt="PNG", color=(200, 30, 30)) -> bytes:
        buf = io.BytesIO()
        Image.new(mode, size, color).save(buf, format=fmt)
        return buf.getvalue()

    return _make


@pytest.fixture
def client() -> TestClient:
    return TestClient(app)
