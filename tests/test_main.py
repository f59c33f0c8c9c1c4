from __future__ import annotations

from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError

from creative_showcase.deps import get_artwork_service
from creative_showcase.api import app
from creative_showcase.media import MediaStoreError

client = TestClient(app)


def test_health():
    """Test the /health endpoint."""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_version():
    """Test the /version endpoint."""
    response = client.get("/version")
    assert response.status_code == 200
    # The version comes from the installed package metadata
    assert "version" in response.json()
    assert isinstance(response.json()["version"], str)


def test_unknown_route():
    assert client.get("/nope").status_code == 404


class _BrokenArtworks:
    def featured(self, size):
        raise OperationalError("SELECT 1", {}, Exception("database is locked"))

    def search(self, **kwargs):
        raise MediaStoreError("bucket unreachable")


def test_store_failures_render_generic_500():
    app.dependency_overrides[get_artwork_service] = lambda: _BrokenArtworks()
    try:
        for path in ("/artwork/featured", "/artwork/search"):
            response = client.get(path)
            assert response.status_code == 500
            assert response.json() == {
                "detail": {"error": "INTERNAL_ERROR", "message": "Server error"}
            }
    finally:
        app.dependency_overrides.clear()
