"""Tests for password hashing, bearer tokens and header parsing."""

from datetime import timedelta

import jwt
import pytest

from creative_showcase.deps import bearer_token
from creative_showcase.errors import Unauthenticated, ValidationError
from creative_showcase.security import TokenIssuer, hash_password, verify_password


class TestPasswords:
    def test_hash_is_salted_and_verifies(self):
        first = hash_password("secret123", rounds=4)
        second = hash_password("secret123", rounds=4)

        assert first != second
        assert "secret123" not in first
        assert verify_password("secret123", first)
        assert verify_password("secret123", second)

    def test_wrong_password_fails(self):
        hashed = hash_password("secret123", rounds=4)
        assert not verify_password("secret124", hashed)

    def test_non_bcrypt_hash_fails_closed(self):
        assert not verify_password("secret123", "plaintext")

    def test_length_limit_counts_utf8_bytes(self):
        assert verify_password("é" * 36, hash_password("é" * 36, rounds=4))
        with pytest.raises(ValidationError):
            hash_password("é" * 37, rounds=4)
        with pytest.raises(ValidationError):
            hash_password("x" * 73, rounds=4)


class TestTokens:
    def test_round_trip(self):
        issuer = TokenIssuer(secret="s3cret")
        token = issuer.create_access_token("01HUSER")
        assert issuer.decode_access_token(token) == "01HUSER"

    def test_claims(self):
        issuer = TokenIssuer(secret="s3cret", expire_minutes=5)
        payload = jwt.decode(
            issuer.create_access_token("u1"), "s3cret", algorithms=["HS256"]
        )
        assert payload["sub"] == "u1"
        assert payload["exp"] - payload["iat"] == 300

    def test_expired_token_rejected(self):
        issuer = TokenIssuer(secret="s3cret")
        token = issuer.create_access_token("u1", expires_delta=timedelta(seconds=-10))
        assert issuer.decode_access_token(token) is None

    def test_wrong_secret_rejected(self):
        token = TokenIssuer(secret="one").create_access_token("u1")
        assert TokenIssuer(secret="two").decode_access_token(token) is None

    def test_garbage_rejected(self):
        assert TokenIssuer(secret="s3cret").decode_access_token("not-a-jwt") is None

    def test_token_without_subject_rejected(self):
        token = jwt.encode({"exp": 9999999999}, "s3cret", algorithm="HS256")
        assert TokenIssuer(secret="s3cret").decode_access_token(token) is None


class TestBearerHeader:
    def test_extracts_token(self):
        assert bearer_token("Bearer abc.def") == "abc.def"
        assert bearer_token("bearer abc") == "abc"

    @pytest.mark.parametrize("header", [None, "", "Bearer", "Bearer   ", "Basic abc", "abc"])
    def test_rejects_malformed(self, header):
        with pytest.raises(Unauthenticated):
            bearer_token(header)
