"""Tests for /users endpoints."""

from fastapi.testclient import TestClient

from conftest import make_image


def _upload(client: TestClient, headers, title: str) -> dict:
    response = client.post(
        "/artwork/upload",
        headers=headers,
        data={"title": title},
        files={"image": ("art.png", make_image(), "image/png")},
    )
    assert response.status_code == 201
    return response.json()


class TestProfile:
    def test_public_profile(self, client: TestClient, register):
        alice = register("alice")
        artwork = _upload(client, alice["headers"], "One")
        client.get(f"/artwork/{artwork['id']}")

        response = client.get("/users/profile/alice")
        assert response.status_code == 200
        data = response.json()
        assert data["user"]["username"] == "alice"
        assert "email" not in data["user"]
        assert [a["id"] for a in data["artworks"]] == [artwork["id"]]
        assert data["stats"]["artworks"] == 1
        assert data["stats"]["totalViews"] == 1
        assert data["stats"]["followers"] == 0

    def test_unknown_profile(self, client: TestClient):
        assert client.get("/users/profile/ghost").status_code == 404

    def test_update_profile(self, client: TestClient, register):
        alice = register("alice")
        response = client.put(
            "/users/profile",
            headers=alice["headers"],
            json={
                "bio": "Painter",
                "skills": "oil, ink",
                "socialLinks": {"artstation": "https://artstation.com/alice"},
            },
        )
        assert response.status_code == 200
        user = response.json()["user"]
        assert user["bio"] == "Painter"
        assert user["skills"] == ["oil", "ink"]
        assert user["socialLinks"] == {"artstation": "https://artstation.com/alice"}
        assert user["displayName"] == "alice"

    def test_update_profile_bio_too_long(self, client: TestClient, register):
        alice = register("alice")
        response = client.put(
            "/users/profile", headers=alice["headers"], json={"bio": "b" * 501}
        )
        assert response.status_code == 400

    def test_update_profile_requires_auth(self, client: TestClient):
        assert client.put("/users/profile", json={"bio": "x"}).status_code == 401


class TestProfileImages:
    def test_picture_upload_and_clear(self, client: TestClient, register, media_store):
        alice = register("alice")

        response = client.put(
            "/users/profile/picture",
            headers=alice["headers"],
            files={"profilePicture": ("me.png", make_image((800, 600)), "image/png")},
        )
        assert response.status_code == 200
        url = response.json()["user"]["profilePicture"]
        assert url.startswith("/media/profiles/")
        key = url[len("/media/"):]
        assert (media_store.root / key).is_file()

        cleared = client.delete("/users/profile/picture", headers=alice["headers"])
        assert cleared.json()["user"]["profilePicture"] == ""
        assert not (media_store.root / key).exists()

    def test_cover_upload(self, client: TestClient, register):
        alice = register("alice")
        response = client.put(
            "/users/profile/cover",
            headers=alice["headers"],
            files={"coverImage": ("cover.jpg", make_image(fmt="JPEG"), "image/jpeg")},
        )
        assert response.status_code == 200
        assert response.json()["user"]["coverImage"].endswith(".jpg")

    def test_invalid_picture(self, client: TestClient, register):
        alice = register("alice")
        response = client.put(
            "/users/profile/picture",
            headers=alice["headers"],
            files={"profilePicture": ("me.png", b"nope", "image/png")},
        )
        assert response.status_code == 400

    def test_put_without_file_keeps_current_image(
        self, client: TestClient, register, media_store
    ):
        alice = register("alice")
        url = client.put(
            "/users/profile/picture",
            headers=alice["headers"],
            files={"profilePicture": ("me.png", make_image(), "image/png")},
        ).json()["user"]["profilePicture"]

        misnamed = client.put(
            "/users/profile/picture",
            headers=alice["headers"],
            files={"image": ("me.png", make_image(), "image/png")},
        )
        empty = client.put("/users/profile/cover", headers=alice["headers"])

        for response in (misnamed, empty):
            assert response.status_code == 400
            assert response.json()["detail"] == {
                "error": "VALIDATION_ERROR",
                "message": "No image uploaded",
            }
        me = client.get("/users/me", headers=alice["headers"]).json()["user"]
        assert me["profilePicture"] == url
        assert (media_store.root / url[len("/media/"):]).is_file()


class TestAccount:
    def test_me_includes_email(self, client: TestClient, register):
        alice = register("alice")
        user = client.get("/users/me", headers=alice["headers"]).json()["user"]
        assert user["email"] == "alice@example.com"

    def test_wrong_current_password(self, client: TestClient, register):
        alice = register("alice")
        response = client.put(
            "/users/account",
            headers=alice["headers"],
            json={"currentPassword": "not-it", "newPassword": "changed1"},
        )
        assert response.status_code == 403
        assert response.json()["detail"]["error"] == "UNAUTHORIZED"

        login = client.post(
            "/auth/login", json={"email": "alice@example.com", "password": "secret123"}
        )
        assert login.status_code == 200

    def test_change_password(self, client: TestClient, register):
        alice = register("alice")
        response = client.put(
            "/users/account",
            headers=alice["headers"],
            json={
                "currentPassword": "secret123",
                "newPassword": "changed1",
                "confirmPassword": "changed1",
            },
        )
        assert response.status_code == 200
        assert "passwordHash" not in response.json()["user"]

        old = client.post(
            "/auth/login", json={"email": "alice@example.com", "password": "secret123"}
        )
        new = client.post(
            "/auth/login", json={"email": "alice@example.com", "password": "changed1"}
        )
        assert old.status_code == 401
        assert new.status_code == 200

    def test_email_conflict(self, client: TestClient, register):
        alice = register("alice")
        register("bob")
        response = client.put(
            "/users/account", headers=alice["headers"], json={"email": "bob@example.com"}
        )
        assert response.status_code == 409

    def test_new_password_over_bcrypt_limit(self, client: TestClient, register):
        alice = register("alice")
        response = client.put(
            "/users/account",
            headers=alice["headers"],
            json={"currentPassword": "secret123", "newPassword": "é" * 40},
        )
        assert response.status_code == 400

        login = client.post(
            "/auth/login", json={"email": "alice@example.com", "password": "secret123"}
        )
        assert login.status_code == 200

    def test_delete_account_removes_artworks(self, client: TestClient, register):
        alice = register("alice")
        artwork = _upload(client, alice["headers"], "Gone soon")

        response = client.delete("/users/account", headers=alice["headers"])
        assert response.status_code == 200
        assert client.get(f"/artwork/{artwork['id']}").status_code == 404
        assert client.get("/users/profile/alice").status_code == 404


class TestDiscovery:
    def test_search_users(self, client: TestClient, register):
        register("alice")
        register("bob")

        assert client.get("/users/search", params={"q": "a"}).status_code == 400
        names = [u["username"] for u in client.get("/users/search", params={"q": "al"}).json()]
        assert "alice" in names
        assert "bob" not in names

        [hit] = client.get("/users/search", params={"q": "bo"}).json()
        assert set(hit) == {"id", "username", "displayName", "profilePicture", "bio", "createdAt"}
        assert "email" not in hit

    def test_user_artworks_paged(self, client: TestClient, register):
        alice = register("alice")
        for i in range(3):
            _upload(client, alice["headers"], f"Piece {i}")

        response = client.get(
            f"/users/{alice['user']['id']}/artworks", params={"page": 1, "limit": 2}
        )
        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 3
        assert data["pages"] == 2
        assert data["currentPage"] == 1
        assert len(data["artworks"]) == 2

    def test_user_artworks_unknown_user(self, client: TestClient):
        assert client.get("/users/missing/artworks").status_code == 404
