"""Tests for password hashing and session tokens."""

from datetime import datetime, timedelta, timezone

import pytest
from jose import jwt

from core.exceptions import AuthenticationError
from core.security import (
    create_access_token,
    decode_access_token,
    get_password_hash,
    verify_password,
)


def test_password_hash_is_salted_and_verifiable():
    first = get_password_hash("pw123")
    second = get_password_hash("pw123")

    assert first != second
    assert verify_password("pw123", first)
    assert not verify_password("pw124", first)


def test_token_round_trip():
    token = create_access_token(42)

    assert decode_access_token(token) == 42


def test_token_carries_only_user_id_and_timestamps():
    claims = jwt.get_unverified_claims(create_access_token(7))

    assert set(claims) == {"sub", "iat", "exp"}
    assert claims["exp"] - claims["iat"] == 3600


def test_token_valid_just_before_expiry():
    issued = datetime.now(timezone.utc) - timedelta(minutes=59)

    assert decode_access_token(create_access_token(1, issued_at=issued)) == 1


def test_token_rejected_after_expiry():
    issued = datetime.now(timezone.utc) - timedelta(hours=1, seconds=5)

    with pytest.raises(AuthenticationError):
        decode_access_token(create_access_token(1, issued_at=issued))


@pytest.mark.parametrize("token", [None, "", "garbage", "a.b.c"])
def test_malformed_tokens_rejected(token):
    with pytest.raises(AuthenticationError):
        decode_access_token(token)


def test_foreign_signature_rejected():
    token = jwt.encode({"sub": "1"}, "some-other-secret", algorithm="HS256")

    with pytest.raises(AuthenticationError):
        decode_access_token(token)
