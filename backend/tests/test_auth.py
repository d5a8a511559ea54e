from __future__ import annotations

from uuid import uuid4

import httpx
import pytest

from growth_map.core import auth
from growth_map.core.auth import IdentityProvider, extract_bearer_token
from growth_map.core.errors import AuthenticationError


class _Response:
    def __init__(self, status_code: int, body: dict):
        self.status_code = status_code
        self._body = body

    def json(self) -> dict:
        return self._body


@pytest.mark.parametrize("header", [None, "", "Token abc", "Bearer ", "Bearer    "])
def test_bearer_token_is_required(header) -> None:
    with pytest.raises(AuthenticationError):
        extract_bearer_token(header)


def test_bearer_token_is_extracted() -> None:
    assert extract_bearer_token("Bearer abc.def") == "abc.def"


def test_provider_resolves_user_id(monkeypatch) -> None:
    user_id = uuid4()
    calls = []

    def fake_get(url, headers=None, timeout=None):
        calls.append((url, headers, timeout))
        return _Response(200, {"id": str(user_id), "email": "learner@example.com"})

    monkeypatch.setattr(auth.httpx, "get", fake_get)
    provider = IdentityProvider("https://auth.example.com/", "anon-key", timeout=2.5)

    assert provider.authenticate("tok") == user_id
    url, headers, timeout = calls[0]
    assert url == "https://auth.example.com/auth/v1/user"
    assert headers == {"Authorization": "Bearer tok", "apikey": "anon-key"}
    assert timeout == 2.5


def test_provider_rejects_unknown_sessions(monkeypatch) -> None:
    monkeypatch.setattr(auth.httpx, "get", lambda *args, **kwargs: _Response(401, {"msg": "expired"}))

    with pytest.raises(AuthenticationError):
        IdentityProvider("https://auth.example.com", None).authenticate("tok")


def test_provider_outage_is_an_authentication_failure(monkeypatch) -> None:
    def fake_get(*args, **kwargs):
        raise httpx.ConnectError("connection refused")

    monkeypatch.setattr(auth.httpx, "get", fake_get)

    with pytest.raises(AuthenticationError):
        IdentityProvider("https://auth.example.com", None).authenticate("tok")


class _NotJsonResponse:
    status_code = 200

    def json(self):
        raise ValueError("Expecting value: line 1 column 1 (char 0)")


@pytest.mark.parametrize("response", [_NotJsonResponse(), _Response(200, ["not", "an", "object"])])
def test_malformed_identity_payload_is_an_authentication_failure(monkeypatch, response) -> None:
    monkeypatch.setattr(auth.httpx, "get", lambda *args, **kwargs: response)

    with pytest.raises(AuthenticationError):
        IdentityProvider("https://auth.example.com", None).authenticate("tok")
