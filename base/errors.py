from __future__ import annotations

from typing import Any, Mapping, Optional

CONNECTIVITY_MESSAGE = (
    "Unable to connect to server. Please check your internet connection and try again."
)


class DormError(Exception):
    """Base class for every error the client raises on purpose."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ApiConnectionError(DormError):
    """No usable HTTP response was received (refused, timeout, broken transfer, bad URL)."""

    def __init__(self, message: str = CONNECTIVITY_MESSAGE):
        super().__init__(message)


class ApiError(DormError):
    """The API answered with a non-2xx status."""

    def __init__(self, status_code: int, payload: Optional[Mapping[str, Any]] = None):
        self.status_code = status_code
        self.payload: dict[str, Any] = dict(payload or {})
        message = self.payload.get("message")
        if not isinstance(message, str) or not message:
            message = f"Request failed with status {status_code}"
        super().__init__(message)

    @property
    def errors(self) -> dict[str, Any]:
        errors = self.payload.get("errors")
        return dict(errors) if isinstance(errors, Mapping) else {}


class UnauthorizedError(ApiError):
    """401 from the API. The session has already been purged by the client."""

    def __init__(self, payload: Optional[Mapping[str, Any]] = None):
        super().__init__(401, payload)


class AuthError(DormError):
    """User-facing failure of login, registration or profile refresh."""


class ConnectivityError(AuthError):
    def __init__(self, message: str = CONNECTIVITY_MESSAGE):
        super().__init__(message)


class ValidationError(AuthError):
    def __init__(self, errors: Mapping[str, Any]):
        self.errors = dict(errors)
        super().__init__(format_validation_errors(self.errors))


class ConflictError(AuthError):
    pass


class ServerError(AuthError):
    pass


class PermissionDenied(DormError):
    """The current user's role may not open the requested page."""


def format_validation_errors(errors: Mapping[str, Any]) -> str:
    lines = []
    for field, messages in errors.items():
        if isinstance(messages, (list, tuple)):
            text = ", ".join(str(message) for message in messages)
        else:
            text = str(messages)
        lines.append(f"{field}: {text}")
    return "Validation failed:\n" + "\n".join(lines)
