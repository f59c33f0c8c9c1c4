"""Tests for /auth endpoints and the bearer gate."""

from fastapi.testclient import TestClient

from conftest import auth_header


class TestRegister:
    def test_register(self, client: TestClient):
        response = client.post(
            "/auth/register",
            json={
                "username": "alice",
                "email": "Alice@Example.com",
                "password": "secret123",
                "displayName": "Alice",
            },
        )
        assert response.status_code == 201
        data = response.json()
        assert data["token"]
        assert data["user"]["username"] == "alice"
        assert data["user"]["displayName"] == "Alice"
        assert data["user"]["email"] == "alice@example.com"
        assert "password" not in str(data["user"]).lower()

    def test_duplicate_username(self, client: TestClient, register):
        register("alice")
        response = client.post(
            "/auth/register",
            json={"username": "alice", "email": "other@example.com", "password": "secret123"},
        )
        assert response.status_code == 409
        assert response.json()["detail"]["error"] == "CONFLICT"

    def test_request_schema_errors_are_422(self, client: TestClient):
        response = client.post(
            "/auth/register",
            json={"username": "al", "email": "not-an-email", "password": "123"},
        )
        assert response.status_code == 422

    def test_password_over_bcrypt_limit(self, client: TestClient):
        response = client.post(
            "/auth/register",
            json={"username": "alice", "email": "alice@example.com", "password": "x" * 80},
        )
        assert response.status_code == 400
        assert response.json()["detail"]["error"] == "VALIDATION_ERROR"


class TestLogin:
    def test_login(self, client: TestClient, register):
        alice = register("alice")
        response = client.post(
            "/auth/login", json={"email": "alice@example.com", "password": "secret123"}
        )
        assert response.status_code == 200
        assert response.json()["user"]["id"] == alice["user"]["id"]

    def test_wrong_password(self, client: TestClient, register):
        register("alice")
        response = client.post(
            "/auth/login", json={"email": "alice@example.com", "password": "wrong-one"}
        )
        assert response.status_code == 401
        assert response.json() == {
            "detail": {"error": "UNAUTHENTICATED", "message": "Invalid email or password"}
        }


class TestAuthGate:
    def test_me(self, client: TestClient, register):
        alice = register("alice")
        response = client.get("/auth/me", headers=alice["headers"])
        assert response.status_code == 200
        assert response.json()["user"]["username"] == "alice"

    def test_missing_header(self, client: TestClient):
        response = client.get("/auth/me")
        assert response.status_code == 401
        assert response.json()["detail"]["error"] == "UNAUTHENTICATED"

    def test_bad_scheme(self, client: TestClient, register):
        alice = register("alice")
        response = client.get(
            "/auth/me", headers={"Authorization": f"Token {alice['token']}"}
        )
        assert response.status_code == 401

    def test_tampered_token(self, client: TestClient, register):
        alice = register("alice")
        response = client.get("/auth/me", headers=auth_header(alice["token"] + "x"))
        assert response.status_code == 401

    def test_token_of_deleted_user(self, client: TestClient, register):
        alice = register("alice")
        assert client.delete("/users/account", headers=alice["headers"]).status_code == 200
        response = client.get("/users/me", headers=alice["headers"])
        assert response.status_code == 401
