"""Test configuration and fixtures."""

import io
import os
import tempfile
from typing import Callable, Dict, Generator, Tuple

# Set test env before any app imports
_MEDIA_DIR = tempfile.mkdtemp(prefix="showcase-media-")
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["MEDIA_STORE_URI"] = f"file://{_MEDIA_DIR}"
os.environ["MEDIA_PUBLIC_URL"] = "/media"
os.environ["LOG_FORMAT"] = "console"

import pytest
from fastapi.testclient import TestClient
from PIL import Image
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from creative_showcase.api import app
from creative_showcase.config import get_settings
from creative_showcase.db import models  # noqa: F401
from creative_showcase.db.base import Base, build_engine, get_db
from creative_showcase.deps import get_media_store
from creative_showcase.media import LocalMediaStore, MediaStoreError, create_media_store
from creative_showcase.schemas.auth import RegisterRequest
from creative_showcase.security import TokenIssuer
from creative_showcase.services import ArtworkService, AuthService, UserService


def make_image(
    size: Tuple[int, int] = (64, 48), fmt: str = "PNG", color: str = "orange"
) -> bytes:
    """Encode a solid-colour image with Pillow."""
    buffer = io.BytesIO()
    mode = "RGBA" if fmt == "PNG" else "RGB"
    Image.new(mode, size, color).save(buffer, format=fmt)
    return buffer.getvalue()


@pytest.fixture
def image_bytes() -> Callable[..., bytes]:
    return make_image


@pytest.fixture
def png_bytes() -> bytes:
    return make_image()


# ---------------- DATABASE ----------------


@pytest.fixture
def engine() -> Generator[Engine, None, None]:
    """Fresh in-memory database per test."""
    test_engine = build_engine("sqlite://")
    Base.metadata.create_all(bind=test_engine)
    yield test_engine
    Base.metadata.drop_all(bind=test_engine)
    test_engine.dispose()


@pytest.fixture
def session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db_session(session_factory: sessionmaker) -> Generator[Session, None, None]:
    session = session_factory()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


# ---------------- SERVICES ----------------


@pytest.fixture
def media_store() -> LocalMediaStore:
    """The store the API serves under /media."""
    settings = get_settings()
    return create_media_store(settings.media_store_uri, settings.media_public_url)


class UndeletableMediaStore(LocalMediaStore):
    """Stores images normally; every delete fails."""

    def delete(self, key: str) -> bool:
        raise MediaStoreError(f"Failed to delete {key}: read-only volume")


@pytest.fixture
def undeletable_store(tmp_path) -> UndeletableMediaStore:
    return UndeletableMediaStore(tmp_path / "media")


@pytest.fixture
def token_issuer() -> TokenIssuer:
    return TokenIssuer(secret="test-secret-key")


@pytest.fixture
def auth_service(db_session: Session, token_issuer: TokenIssuer) -> AuthService:
    return AuthService(db_session, token_issuer, password_rounds=4)


@pytest.fixture
def artwork_service(db_session: Session, media_store: LocalMediaStore) -> ArtworkService:
    return ArtworkService(db_session, media_store, max_image_bytes=1024 * 1024)


@pytest.fixture
def user_service(db_session: Session, media_store: LocalMediaStore) -> UserService:
    return UserService(
        db_session,
        media_store,
        password_rounds=4,
        max_avatar_bytes=1024 * 1024,
        max_cover_bytes=1024 * 1024,
    )


@pytest.fixture
def make_user(auth_service: AuthService) -> Callable[..., models.UserModel]:
    """Register a user through the service and return the model."""

    def _make(username: str, password: str = "secret123", **extra) -> models.UserModel:
        auth_service.register(
            RegisterRequest(
                username=username,
                email=f"{username}@example.com",
                password=password,
                **extra,
            )
        )
        return (
            auth_service.db.query(models.UserModel)
            .filter(models.UserModel.username == username)
            .one()
        )

    return _make


# ---------------- API ----------------


@pytest.fixture
def client(
    session_factory: sessionmaker, media_store: LocalMediaStore
) -> Generator[TestClient, None, None]:
    """Test client bound to the per-test database."""

    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_media_store] = lambda: media_store
    yield TestClient(app)
    app.dependency_overrides.clear()


def auth_header(token: str) -> Dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def register(client: TestClient) -> Callable[..., Dict]:
    """Register through the API; returns {token, user, headers}."""

    def _register(username: str, password: str = "secret123") -> Dict:
        response = client.post(
            "/auth/register",
            json={
                "username": username,
                "email": f"{username}@example.com",
                "password": password,
            },
        )
        assert response.status_code == 201, response.text
        data = response.json()
        data["headers"] = auth_header(data["token"])
        return data

    return _register
