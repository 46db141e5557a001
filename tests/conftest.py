# tests/conftest.py
from __future__ import annotations

import os
from collections.abc import Generator, Iterator

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault("SECRET_KEY", "test-secret-key-for-forum-core")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("DATABASE_URL", "sqlite://")

from forum_core.core.settings import Settings
from forum_core.db.session import Base, build_session_factory
from forum_core.main import create_app
from forum_core.models import Post, User
from forum_core.services import Identity, Services, build_services

TEST_DB_URL = "sqlite://"


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    """Provide a Settings instance aligned with the test environment."""
    return Settings(SECRET_KEY="test-secret-key-for-forum-core", BCRYPT_ROUNDS=4)  # type: ignore[call-arg]


@pytest.fixture()
def engine() -> Generator[Engine, None, None]:
    engine = create_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def session_factory(engine: Engine) -> sessionmaker:
    return build_session_factory(engine)


@pytest.fixture()
def services(test_settings: Settings, session_factory: sessionmaker) -> Services:
    """Real service objects wired against the in-memory database."""
    return build_services(test_settings, session_factory)


@pytest.fixture()
def app(services: Services) -> FastAPI:
    return create_app(services)


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


@pytest.fixture()
def test_user(services: Services) -> User:
    """Create and return a persisted regular user."""
    services.credentials.register("alice", "alice-password", "Alice@Example.com", "hi")
    return services.credentials.get_by_username("alice")


@pytest.fixture()
def other_user(services: Services) -> User:
    """Create and return a second regular user."""
    services.credentials.register("bob", "bob-password", "bob@example.com")
    return services.credentials.get_by_username("bob")


@pytest.fixture()
def admin_user(services: Services) -> User:
    """Create and return an administrator."""
    services.credentials.create_admin("root", "root-password", "root@example.com")
    return services.credentials.get_by_username("root")


def identity_of(user: User) -> Identity:
    return Identity(id=user.id, username=user.username, role=user.role)


def bearer(services: Services, user: User) -> dict[str, str]:
    token = services.sessions.issue(user)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def auth_token(services: Services, test_user: User) -> dict[str, str]:
    """Return authorization headers for the primary test user."""
    return bearer(services, test_user)


@pytest.fixture()
def other_auth_token(services: Services, other_user: User) -> dict[str, str]:
    """Return authorization headers for the secondary test user."""
    return bearer(services, other_user)


@pytest.fixture()
def admin_auth_token(services: Services, admin_user: User) -> dict[str, str]:
    """Return authorization headers for the administrator."""
    return bearer(services, admin_user)


@pytest.fixture()
def test_tag(services: Services):
    return services.threads.create_tag("general")


@pytest.fixture()
def test_post(services: Services, test_user: User, test_tag) -> Post:
    """Create a baseline post authored by the primary test user."""
    return services.threads.create_post(
        "First thread",
        "Hello **forum**",
        author=test_user.username,
        tag=test_tag.name,
    )
