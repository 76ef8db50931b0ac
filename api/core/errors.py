"""
Error taxonomy shared by every feature package.

Services raise these; `main.py` turns them into `{"kind", "message"}` JSON.
"""

from __future__ import annotations


class RegistrationError(Exception):
    kind = "error"
    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict[str, str]:
        return {"kind": self.kind, "message": self.message}


class ValidationError(RegistrationError):
    """Malformed or constraint-violating input."""

    kind = "validation"
    status_code = 400


class ConflictError(RegistrationError):
    """Duplicate name/number, or a user already on a team."""

    kind = "conflict"
    status_code = 409


class NotFoundError(RegistrationError):
    kind = "not_found"
    status_code = 404


class AuthorizationError(RegistrationError):
    """Caller is known but may not act on the target."""

    kind = "forbidden"
    status_code = 403


class AuthenticationError(AuthorizationError):
    """Missing or invalid credential."""

    kind = "unauthenticated"
    status_code = 401


class DependencyError(RegistrationError):
    """An external provider (object storage) failed."""

    kind = "dependency"
    status_code = 502
