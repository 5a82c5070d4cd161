"""Tests for bearer tokens and password hashing."""
import uuid
from datetime import datetime, timedelta, timezone

import jwt
import pytest

from mindforge.core.config import settings
from mindforge.core.security import (
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)


def test_token_round_trip_carries_identity():
    user_id = uuid.uuid4()
    payload = decode_access_token(create_access_token(user_id, "a@test.com", "STUDENT"))

    assert payload["sub"] == str(user_id)
    assert payload["email"] == "a@test.com"
    assert payload["role"] == "STUDENT"
    assert payload["exp"] > payload["iat"]


def test_expired_token_is_rejected():
    now = datetime.now(timezone.utc)
    token = jwt.encode(
        {"sub": str(uuid.uuid4()), "iat": now - timedelta(hours=2), "exp": now - timedelta(hours=1)},
        settings.JWT_SECRET,
        algorithm="HS256",
    )
    with pytest.raises(jwt.InvalidTokenError):
        decode_access_token(token)


def test_token_signed_with_unknown_secret_is_rejected():
    token = jwt.encode(
        {"sub": str(uuid.uuid4()), "exp": datetime.now(timezone.utc) + timedelta(hours=1)},
        "some-other-secret-that-is-also-long-enough",
        algorithm="HS256",
    )
    with pytest.raises(jwt.InvalidTokenError):
        decode_access_token(token)


def test_previous_secret_still_verifies(monkeypatch):
    old_secret = "previous-secret-used-before-rotation-0000"
    token = jwt.encode(
        {"sub": str(uuid.uuid4()), "exp": datetime.now(timezone.utc) + timedelta(hours=1)},
        old_secret,
        algorithm="HS256",
    )
    monkeypatch.setattr(settings, "JWT_SECRET_PREVIOUS", old_secret)
    assert "sub" in decode_access_token(token)


def test_password_hash_verifies():
    hashed = hash_password("correct horse")
    assert hashed != "correct horse"
    assert verify_password("correct horse", hashed) is True
    assert verify_password("wrong horse", hashed) is False


def test_malformed_hash_does_not_verify():
    assert verify_password("anything", "not-a-bcrypt-hash") is False
