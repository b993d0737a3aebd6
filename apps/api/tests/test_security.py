"""Session token and rate-limit key tests."""

import uuid
from datetime import timedelta

import jwt
import pytest
from starlette.requests import Request

from app.core.config import settings
from app.core.deps import COOKIE_NAME
from app.core.rate_limit import rate_limit_key
from app.core.security import create_session_token, decode_session_token


def _request(cookie: str | None = None) -> Request:
    headers = [(b"cookie", f"{COOKIE_NAME}={cookie}".encode())] if cookie else []
    return Request({"type": "http", "headers": headers, "client": ("10.0.0.7", 1234)})


def test_token_round_trip_claims():
    user_id, org_id = uuid.uuid4(), uuid.uuid4()

    payload = decode_session_token(create_session_token(user_id, org_id, "staff", 3))

    assert payload["sub"] == str(user_id)
    assert payload["org_id"] == str(org_id)
    assert payload["role"] == "staff"
    assert payload["token_version"] == 3


def test_expired_token_is_rejected():
    token = create_session_token(
        uuid.uuid4(), uuid.uuid4(), "staff", 1, expires_in=timedelta(seconds=-5)
    )

    with pytest.raises(jwt.ExpiredSignatureError):
        decode_session_token(token)


def test_previous_secret_still_verifies(monkeypatch):
    token = create_session_token(uuid.uuid4(), uuid.uuid4(), "admin", 1)
    old_secret = settings.JWT_SECRET
    monkeypatch.setattr(settings, "JWT_SECRET", "rotated-secret")
    monkeypatch.setattr(settings, "JWT_SECRET_PREVIOUS", old_secret)

    assert decode_session_token(token)["role"] == "admin"


def test_unknown_secret_is_rejected():
    claims = {"sub": "x", "org_id": "y", "role": "owner", "iss": "church-connect", "exp": 9999999999}
    token = jwt.encode(claims, "some-other-church-secret", algorithm="HS256")

    with pytest.raises(jwt.InvalidSignatureError):
        decode_session_token(token)


def test_rate_limit_key_prefers_session():
    anonymous = rate_limit_key(_request())
    signed_in = rate_limit_key(_request("abc.def.ghi"))

    assert anonymous == "10.0.0.7"
    assert signed_in.startswith("session:")
    assert "abc" not in signed_in
