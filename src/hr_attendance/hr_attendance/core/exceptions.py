from __future__ import annotations

from typing import Optional, Sequence


class DomainError(Exception):
    """Base exception for business rule violations."""

    status_code = 400

    def __init__(self, message: str, *, errors: Optional[Sequence[dict]] = None):
        super().__init__(message)
        self.message = message
        self.errors = list(errors) if errors else []


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthenticationError(DomainError):
    """Raised when credentials are missing or invalid."""

    status_code = 401


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""

    status_code = 403


class NotFoundError(DomainError):
    status_code = 404


class ConflictError(DomainError):
    """Raised when a concurrent request already changed the same record."""

    status_code = 409


class PolicyRejection(DomainError):
    """An attendance event refused by an attendance policy."""

    def __init__(self, message: str, *, reason: str):
        super().__init__(message)
        self.reason = reason


class GeofenceRejection(PolicyRejection):
    pass


class TemporalRejection(PolicyRejection):
    pass


class CredentialRejection(PolicyRejection):
    """Expired QR token or unrecognized face."""

    status_code = 401


class ExternalDependencyError(DomainError):
    """Raised when the store or another backing service is unavailable."""

    status_code = 500
