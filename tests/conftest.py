"""Shared pytest fixtures."""

import os

# Must be set before rbac_admin reads its settings
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET"] = "test-access-secret-0123456789abcdef0123456789abcdef0123456789abcdef"
os.environ["JWT_REFRESH_SECRET"] = "test-refresh-secret-0123456789abcdef0123456789abcdef0123456789ab"
os.environ["JWT_EXPIRATION_MS"] = "600000"
os.environ["JWT_REFRESH_EXPIRATION_MS"] = "3600000"
os.environ["BCRYPT_ROUNDS"] = "4"

from collections.abc import Iterator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from rbac_admin.core.config import JwtConfig, settings
from rbac_admin.core.database import Base, SessionLocal, engine
from rbac_admin.core.tokens import TokenService
from rbac_admin.main import app
from rbac_admin.services.bootstrap import seed_all

ADMIN_EMAIL = "admin@example.com"
ADMIN_PASSWORD = "admin123"


@pytest.fixture()
def db() -> Iterator[Session]:
    """Fresh schema per test on the shared in-memory database."""
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def seeded(db: Session) -> Session:
    seed_all(db, ADMIN_EMAIL, ADMIN_PASSWORD, "Admin User")
    return db


@pytest.fixture()
def tokens() -> TokenService:
    return TokenService(settings.jwt_config())


@pytest.fixture()
def short_lived_tokens() -> TokenService:
    return TokenService(
        JwtConfig(
            secret=settings.JWT_SECRET,
            refresh_secret=settings.JWT_REFRESH_SECRET,
            expiration_ms=1,
            refresh_expiration_ms=1,
        )
    )


@pytest.fixture()
def shared_key_tokens() -> TokenService:
    """Access and refresh tokens signed with the same key."""
    return TokenService(
        JwtConfig(
            secret=settings.JWT_SECRET,
            refresh_secret=settings.JWT_SECRET,
            expiration_ms=settings.JWT_EXPIRATION_MS,
            refresh_expiration_ms=settings.JWT_REFRESH_EXPIRATION_MS,
        )
    )


@pytest.fixture()
def client(db: Session) -> Iterator[TestClient]:
    with TestClient(app) as test_client:
        yield test_client


def login(client: TestClient, email: str, password: str) -> dict:
    response = client.post("/api/v1/auth/login", json={"email": email, "password": password})
    assert response.status_code == 200, response.text
    return response.json()


def bearer(client: TestClient, email: str, password: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {login(client, email, password)['token']}"}
