"""Error taxonomy shared by the planning services and the HTTP layer."""
from __future__ import annotations

from fastapi import status


class GrowthMapError(Exception):
    """Base error carrying the HTTP status code it maps to."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ValidationError(GrowthMapError):
    """Malformed or missing input, raised before any write."""

    status_code = status.HTTP_400_BAD_REQUEST


class AuthenticationError(GrowthMapError):
    status_code = status.HTTP_401_UNAUTHORIZED


class AuthorizationError(GrowthMapError):
    """Caller does not own the requested resource."""

    status_code = status.HTTP_403_FORBIDDEN


class NotFoundError(GrowthMapError):
    status_code = status.HTTP_404_NOT_FOUND


class UpstreamFailure(GrowthMapError):
    """A required store write returned nothing or the store failed."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
