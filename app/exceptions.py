"""
Domain errors raised by the service layer.

Each error carries the HTTP status it maps to; the handlers registered in
main.py turn them into ``{"message": ..., **extra}`` responses.
"""

from typing import Any, Optional


class BloodConnectError(Exception):
    """Base class for errors surfaced to API callers"""

    status_code = 500

    def __init__(self, message: str, extra: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.extra = extra or {}

    def to_dict(self) -> dict[str, Any]:
        return {"message": self.message, **self.extra}


class ValidationError(BloodConnectError):
    """Missing or malformed input"""

    status_code = 400


class ConflictError(BloodConnectError):
    """Input collides with an existing record (e.g. duplicate email)"""

    status_code = 400


class CooldownError(BloodConnectError):
    """Donor is still inside the donation cooldown window"""

    status_code = 400

    def __init__(self, days_remaining: int):
        super().__init__(
            f"You must wait {days_remaining} more days before donating again",
            {"daysRemaining": days_remaining},
        )
        self.days_remaining = days_remaining


class StateError(BloodConnectError):
    """Operation is not allowed from the record's current status"""

    status_code = 400


class AuthenticationError(BloodConnectError):
    status_code = 401


class AuthorizationError(BloodConnectError):
    status_code = 403


class NotFoundError(BloodConnectError):
    status_code = 404
