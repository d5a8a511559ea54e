"""Bearer-token authentication against the hosted identity provider."""
from __future__ import annotations

import logging
from functools import lru_cache
from uuid import UUID

import httpx
from fastapi import Depends, Header

from growth_map.core.config import settings
from growth_map.core.errors import AuthenticationError

logger = logging.getLogger(__name__)


class IdentityProvider:
    """Resolves an access token to the id of the user it was issued for."""

    def __init__(self, base_url: str, api_key: str | None, *, timeout: float = 10.0) -> None:
        self._user_endpoint = f"{base_url.rstrip('/')}/auth/v1/user"
        self._api_key = api_key
        self._timeout = timeout

    def authenticate(self, token: str) -> UUID:
        headers = {"Authorization": f"Bearer {token}"}
        if self._api_key:
            headers["apikey"] = self._api_key

        try:
            response = httpx.get(self._user_endpoint, headers=headers, timeout=self._timeout)
        except httpx.HTTPError as exc:
            logger.warning("Identity provider unreachable: %s", exc)
            raise AuthenticationError("Invalid or expired session") from exc

        if response.status_code != 200:
            raise AuthenticationError("Invalid or expired session")

        try:
            body = response.json()
            user = body.get("user") or body
            return UUID(str(user["id"]))
        except (AttributeError, KeyError, TypeError, ValueError) as exc:
            raise AuthenticationError("Identity provider returned no user id") from exc


@lru_cache
def get_identity_provider() -> IdentityProvider:
    """Return the process-wide identity provider built from settings."""
    return IdentityProvider(settings.auth_url, settings.auth_api_key, timeout=settings.auth_timeout_seconds)


def extract_bearer_token(authorization: str | None) -> str:
    if not authorization or not authorization.startswith("Bearer "):
        raise AuthenticationError("Authorization token required")
    token = authorization[len("Bearer "):].strip()
    if not token:
        raise AuthenticationError("Authorization token required")
    return token


def get_current_user_id(
    authorization: str | None = Header(default=None),
    provider: IdentityProvider = Depends(get_identity_provider),
) -> UUID:
    """FastAPI dependency yielding the authenticated caller's user id."""
    token = extract_bearer_token(authorization)
    return provider.authenticate(token)
