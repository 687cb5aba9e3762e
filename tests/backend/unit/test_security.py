"""
Unit tests for core.security module.
Tests password hashing, JWT token creation/validation and credential resolution.
"""
import pytest
import datetime as dt
import jwt
from app.core.errors import AuthenticationError
from app.core.security import (
    hash_password,
    verify_password,
    create_access_token,
    decode_access_token,
    authenticate_token,
    JWT_SECRET,
    JWT_ALG,
    ACCESS_TOKEN_EXPIRE_MINUTES,
)


class TestPasswordHashing:
    """Tests for password hashing and verification."""

    def test_hash_password_returns_different_hash_each_time(self):
        password = "TestPassword123"
        assert hash_password(password) != hash_password(password)  # Salted

    def test_verify_password_correct_password(self):
        hashed = hash_password("TestPassword123")
        assert verify_password("TestPassword123", hashed) is True

    def test_verify_password_incorrect_password(self):
        hashed = hash_password("TestPassword123")
        assert verify_password("WrongPassword456", hashed) is False

    def test_verify_password_without_hash(self):
        """Accounts created without a password never verify."""
        assert verify_password("anything", None) is False
        assert verify_password("", "") is False


class TestJWTTokens:
    """Tests for JWT token creation and validation."""

    def test_create_access_token_contains_subject_and_role(self):
        token = create_access_token("test-user-456", "user")
        payload = decode_access_token(token)
        assert payload["sub"] == "test-user-456"
        assert payload["role"] == "user"

    def test_subject_is_always_a_string(self):
        payload = decode_access_token(create_access_token(42))
        assert payload["sub"] == "42"

    def test_token_expiration_time(self):
        payload = decode_access_token(create_access_token("test-user-time"))
        diff_minutes = (payload["exp"] - payload["iat"]) / 60
        assert abs(diff_minutes - ACCESS_TOKEN_EXPIRE_MINUTES) < 1

    def test_decode_access_token_wrong_secret(self):
        token = create_access_token("test-user-secret")
        with pytest.raises(jwt.InvalidSignatureError):
            jwt.decode(token, "wrong-secret", algorithms=["HS256"])


class TestAuthenticateToken:
    """Tests for resolving a credential to an identity."""

    def test_valid_token_returns_identity(self):
        token = create_access_token("7f0c2a4e-0000-4000-8000-000000000001")
        assert authenticate_token(token) == "7f0c2a4e-0000-4000-8000-000000000001"

    def test_missing_token(self):
        with pytest.raises(AuthenticationError) as exc:
            authenticate_token(None)
        assert exc.value.code == "AUTH_REQUIRED"
        assert exc.value.status_code == 401

    def test_malformed_token(self):
        with pytest.raises(AuthenticationError) as exc:
            authenticate_token("invalid.token.here")
        assert exc.value.code == "AUTH_INVALID_TOKEN"

    def test_expired_token(self):
        past = dt.datetime.now(dt.timezone.utc) - dt.timedelta(hours=2)
        token = jwt.encode(
            {"sub": "u1", "iat": past, "exp": past + dt.timedelta(minutes=5)},
            JWT_SECRET,
            algorithm=JWT_ALG,
        )
        with pytest.raises(AuthenticationError) as exc:
            authenticate_token(token)
        assert exc.value.code == "AUTH_TOKEN_EXPIRED"

    def test_token_signed_with_other_secret(self):
        token = jwt.encode({"sub": "u1"}, "someone-else", algorithm=JWT_ALG)
        with pytest.raises(AuthenticationError):
            authenticate_token(token)

    def test_token_without_subject(self):
        token = jwt.encode({"role": "user"}, JWT_SECRET, algorithm=JWT_ALG)
        with pytest.raises(AuthenticationError):
            authenticate_token(token)
