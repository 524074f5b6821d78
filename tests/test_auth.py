"""Tests for registration, login and token verification."""

import time
from datetime import timedelta
from unittest.mock import patch

import pytest
from jose import jwt

from taskboard.config import get_settings
from taskboard.errors import InvalidToken
from taskboard.models.user import User
from taskboard.services.auth import (
    create_access_token,
    get_password_hash,
    verify_password,
    verify_token,
)


def make_user(**overrides) -> User:
    fields = {
        "user_id": "user-1",
        "name": "Alice",
        "email": "alice@example.com",
        "password_hash": "unused",
        "role": "user",
    }
    fields.update(overrides)
    return User(**fields)


class TestPasswordHashing:
    def test_hash_is_not_plaintext(self):
        hashed = get_password_hash("s3cret-pass")
        assert hashed != "s3cret-pass"
        assert verify_password("s3cret-pass", hashed)

    def test_wrong_password_fails(self):
        hashed = get_password_hash("s3cret-pass")
        assert not verify_password("other-pass", hashed)

    def test_hashes_are_salted(self):
        assert get_password_hash("same-password") != get_password_hash("same-password")


class TestTokens:
    def test_token_round_trip_yields_identity_claim(self):
        token = create_access_token(make_user())
        claim = verify_token(token)
        assert claim.user_id == "user-1"
        assert claim.email == "alice@example.com"
        assert claim.display_name == "Alice"
        assert claim.role == "user"

    def test_default_expiry_is_24_hours(self):
        token = create_access_token(make_user())
        lifetime = jwt.get_unverified_claims(token)["exp"] - time.time()
        assert 24 * 3600 - 5 <= lifetime <= 24 * 3600

    def test_expired_token_rejected(self):
        token = create_access_token(make_user(), expires_delta=timedelta(seconds=-1))
        with pytest.raises(InvalidToken):
            verify_token(token)

    def test_token_signed_with_other_secret_rejected(self):
        settings = get_settings()
        forged = jwt.encode(
            {"sub": "user-1", "email": "a@example.com", "name": "A", "role": "user"},
            "not-the-server-secret",
            algorithm=settings.jwt_algorithm,
        )
        with pytest.raises(InvalidToken):
            verify_token(forged)

    def test_tampered_token_rejected(self):
        token = create_access_token(make_user())
        header, payload, signature = token.split(".")
        tampered = ".".join([header, payload, signature[::-1]])
        with pytest.raises(InvalidToken):
            verify_token(tampered)

    def test_garbage_rejected(self):
        with pytest.raises(InvalidToken):
            verify_token("not-a-token")

    def test_token_missing_claims_rejected(self):
        settings = get_settings()
        token = jwt.encode({"sub": "user-1"}, settings.jwt_secret, algorithm=settings.jwt_algorithm)
        with pytest.raises(InvalidToken):
            verify_token(token)


class TestRegisterEndpoint:
    def test_register_returns_token_and_user(self, client):
        response = client.post(
            "/api/auth/register",
            json={"name": "Alice", "email": "alice@example.com", "password": "password123"},
        )
        assert response.status_code == 201
        data = response.json()
        assert data["message"] == "Registration successful"
        assert data["user"]["email"] == "alice@example.com"
        assert data["user"]["role"] == "user"
        assert verify_token(data["token"]).user_id == data["user"]["user_id"]

    def test_password_is_stored_hashed(self, client, db):
        client.post(
            "/api/auth/register",
            json={"name": "Alice", "email": "alice@example.com", "password": "password123"},
        )
        user = db.query(User).filter(User.email == "alice@example.com").one()
        assert user.password_hash != "password123"
        assert verify_password("password123", user.password_hash)

    def test_duplicate_email_rejected_without_new_row(self, client, auth_headers, db):
        response = client.post(
            "/api/auth/register",
            json={"name": "Duplicate", "email": auth_headers.email, "password": "password123"},
        )
        assert response.status_code == 409
        assert response.json()["error"] == "duplicate_email"
        assert db.query(User).filter(User.email == auth_headers.email).count() == 1

    def test_concurrent_duplicate_registration(self, client, auth_headers, db):
        # Simulates a second request that passed the lookup before the first committed
        with patch("taskboard.services.auth.get_user_by_email", return_value=None):
            response = client.post(
                "/api/auth/register",
                json={"name": "Racer", "email": auth_headers.email, "password": "password123"},
            )

        assert response.status_code == 409
        assert response.json()["error"] == "duplicate_email"
        assert db.query(User).filter(User.email == auth_headers.email).count() == 1

    @pytest.mark.parametrize(
        "payload",
        [
            {"email": "a@example.com", "password": "password123"},
            {"name": "", "email": "a@example.com", "password": "password123"},
            {"name": "A", "password": "password123"},
            {"name": "A", "email": "not-an-email", "password": "password123"},
            {"name": "A", "email": "a@example.com"},
        ],
    )
    def test_invalid_input(self, client, payload):
        response = client.post("/api/auth/register", json=payload)
        assert response.status_code == 400
        assert response.json()["error"] == "invalid_input"


class TestLoginEndpoint:
    def test_login(self, client, auth_headers):
        response = client.post(
            "/api/auth/login", json={"email": auth_headers.email, "password": "testpass123"}
        )
        assert response.status_code == 200
        data = response.json()
        assert data["message"] == "Login successful"
        claim = verify_token(data["token"])
        assert claim.user_id == auth_headers.user_id == data["user"]["user_id"]
        assert claim.email == auth_headers.email
        assert claim.display_name == "Test User"

    def test_wrong_password_and_unknown_email_look_the_same(self, client, auth_headers):
        wrong_password = client.post(
            "/api/auth/login", json={"email": auth_headers.email, "password": "wrongpass"}
        )
        unknown_email = client.post(
            "/api/auth/login", json={"email": "nobody@example.com", "password": "testpass123"}
        )
        assert wrong_password.status_code == unknown_email.status_code == 401
        assert wrong_password.json() == unknown_email.json()
        assert wrong_password.json()["error"] == "invalid_credentials"


class TestBearerAuthentication:
    def test_missing_token(self, client):
        response = client.get("/api/tasks")
        assert response.status_code == 401
        assert response.json()["error"] == "unauthenticated"

    def test_non_bearer_scheme_counts_as_missing(self, client):
        response = client.get("/api/tasks", headers={"Authorization": "Basic abc"})
        assert response.status_code == 401

    def test_invalid_token(self, client):
        response = client.get("/api/tasks", headers={"Authorization": "Bearer invalid"})
        assert response.status_code == 403
        assert response.json()["error"] == "invalid_token"

    def test_expired_token(self, client, auth_headers, db):
        user = db.query(User).filter(User.user_id == auth_headers.user_id).one()
        token = create_access_token(user, expires_delta=timedelta(seconds=-5))
        response = client.get("/api/tasks", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 403
        assert response.json()["error"] == "invalid_token"
