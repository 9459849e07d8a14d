"""Password hashing and JWT helpers."""

from __future__ import annotations

from datetime import timedelta

import pytest
from jose import jwt

from connexa.config.settings import settings
from connexa.utils import (
    AuthenticationError,
    TokenExpiredError,
    create_access_token,
    decode_access_token,
    hash_password,
    refresh_access_token,
    verify_password,
)

from conftest import make_user


def test_password_hash_round_trip():
    hashed = hash_password("Segura@123")

    assert hashed != "Segura@123"
    assert verify_password("Segura@123", hashed) is True
    assert verify_password("segura@123", hashed) is False


def test_hashes_are_salted():
    assert hash_password("Segura@123") != hash_password("Segura@123")


@pytest.mark.parametrize("stored", ["", "not base64!", "c2hvcnQ="])
def test_verify_password_rejects_malformed_hashes(stored):
    assert verify_password("Segura@123", stored) is False


def test_access_token_carries_identity_claims():
    user = make_user(42, "Ana Souza", "ana.souza@univ.edu.br", course="Direito")

    token = create_access_token(subject=str(user.id), user=user)
    payload = decode_access_token(token)

    assert payload.user_id == 42
    assert payload.email == "ana.souza@univ.edu.br"
    assert payload.course_id == 42

    raw = jwt.get_unverified_claims(token)
    assert raw["iss"] == settings.security.jwt_issuer
    assert raw["aud"] == settings.security.jwt_audience


def test_expired_token_is_reported_as_expired():
    token = create_access_token(subject="42", expires_delta=timedelta(seconds=-5))

    with pytest.raises(TokenExpiredError):
        decode_access_token(token)


def test_foreign_audience_is_rejected():
    token = create_access_token(subject="42", claims={"aud": "someone-else"})

    with pytest.raises(AuthenticationError) as excinfo:
        decode_access_token(token)
    assert not isinstance(excinfo.value, TokenExpiredError)


def test_tampered_token_is_rejected():
    token = create_access_token(subject="42")
    header, payload, signature = token.split(".")

    with pytest.raises(AuthenticationError):
        decode_access_token(".".join([header, payload, signature[::-1]]))


def test_refresh_keeps_identity():
    user = make_user(7, "Bruno Lima", "bruno.lima@univ.edu.br")
    original = create_access_token(subject=str(user.id), user=user)

    refreshed = decode_access_token(refresh_access_token(original))

    assert refreshed.user_id == 7
    assert refreshed.email == "bruno.lima@univ.edu.br"


def test_refresh_rejects_expired_token():
    expired = create_access_token(subject="7", expires_delta=timedelta(seconds=-5))

    with pytest.raises(TokenExpiredError):
        refresh_access_token(expired)
