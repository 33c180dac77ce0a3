from __future__ import annotations

import json
import threading
from dataclasses import dataclass
from typing import Any, Optional

from base import get_logger
from base.api.endpoints import AuthAPI
from base.errors import (
    ApiConnectionError,
    ApiError,
    AuthError,
    ConflictError,
    ConnectivityError,
    DormError,
    ServerError,
    UnauthorizedError,
    ValidationError,
)

from .models import Role, User
from .storage import TOKEN_KEY, USER_KEY, SessionStorage, StorageUnavailable

logger = get_logger(__name__)


@dataclass(frozen=True)
class RegistrationResult:
    user: Optional[User]
    token: Optional[str]
    requires_approval: bool = False


def _response_data(payload: Any) -> dict[str, Any]:
    return payload if isinstance(payload, dict) else {}


class SessionManager:
    """Single owner of the persisted token and user record.

    Writes of the token/user pair happen inside one critical section so that
    overlapping logins never leave the two keys from different responses. A
    response that arrives after a newer login, or after a logout, is not
    persisted.
    """

    def __init__(self, storage: SessionStorage, auth_api: Optional[AuthAPI] = None):
        self.storage = storage
        self._auth_api = auth_api
        self._lock = threading.RLock()
        self._issued = 0
        self._written = 0

    def attach_api(self, auth_api: AuthAPI) -> None:
        self._auth_api = auth_api

    @property
    def auth_api(self) -> AuthAPI:
        if self._auth_api is None:
            raise RuntimeError("SessionManager has no API attached")
        return self._auth_api

    def _next_ticket(self) -> int:
        with self._lock:
            self._issued += 1
            return self._issued

    def _save_session(self, ticket: int, token: str, user: User) -> bool:
        with self._lock:
            if ticket <= self._written:
                logger.info("Discarding a session response superseded by a newer one")
                return False
            try:
                self.storage.set_many(
                    {TOKEN_KEY: token, USER_KEY: json.dumps(user.to_dict())}
                )
            except StorageUnavailable as e:
                raise AuthError(f"Could not save the session: {e}") from e
            self._written = ticket
        logger.info(f"Session saved for user: {user.email}")
        return True

    def login(self, email: str, password: str) -> tuple[User, str]:
        ticket = self._next_ticket()
        try:
            response = self.auth_api.login(email, password)
        except ApiConnectionError as e:
            raise ConnectivityError() from e
        except ApiError as e:
            if e.status_code == 422 and e.errors:
                raise ValidationError(e.errors) from e
            raise AuthError(e.payload.get("message") or "Login failed") from e

        data = _response_data(response.data)
        try:
            user = User.from_dict(data.get("user") or {})
        except ValueError as e:
            raise AuthError("Login failed: the server returned an invalid user record") from e
        token = data.get("token")
        if not token:
            raise AuthError("Login failed: the server did not return a token")

        self._save_session(ticket, token, user)
        return user, token

    def register(self, user_data: dict[str, Any]) -> RegistrationResult:
        ticket = self._next_ticket()
        try:
            response = self.auth_api.register(user_data)
        except ApiConnectionError as e:
            raise ConnectivityError() from e
        except ApiError as e:
            message = e.payload.get("message")
            if e.status_code == 422 and e.errors:
                raise ValidationError(e.errors) from e
            if e.status_code == 409:
                raise ConflictError(
                    "Email already exists. Please use a different email address."
                ) from e
            if e.status_code >= 500:
                raise ServerError(f"Server error: {message or 'Server error'}") from e
            raise AuthError(message or f"Registration failed ({e.status_code})") from e

        data = _response_data(response.data)
        requires_approval = bool(data.get("requires_approval"))
        token = data.get("token") or None
        user = None
        if data.get("user"):
            try:
                user = User.from_dict(data["user"])
            except ValueError:
                logger.warning("Registration response carried an unreadable user record")

        if not requires_approval and token and user is not None:
            self._save_session(ticket, token, user)
        else:
            logger.info("Registration accepted without a session (approval required)")

        return RegistrationResult(user=user, token=token, requires_approval=requires_approval)

    def logout(self) -> None:
        try:
            if self._auth_api is not None and self.get_token():
                self._auth_api.logout()
        except DormError as e:
            logger.info(f"Logout request failed, clearing local session anyway: {e}")
        except Exception as e:
            logger.exception(f"Unexpected error during logout request: {e}")
        finally:
            with self._lock:
                self._written = self._issued
                self.purge()

    def purge(self) -> None:
        with self._lock:
            try:
                self.storage.remove(TOKEN_KEY)
                self.storage.remove(USER_KEY)
            except StorageUnavailable as e:
                logger.error(f"Could not clear the stored session: {e}")
                return
        logger.info("Session cleared")

    def handle_unauthorized(self, rejected_token: str) -> bool:
        """Purge the session if ``rejected_token`` is still the stored token.

        A 401 for a token that has since been replaced by a new login leaves
        the new session alone.
        """
        with self._lock:
            if self.get_token() != rejected_token:
                logger.info("Ignoring 401 for a token that is no longer current")
                return False
            self.purge()
            return True

    def get_token(self) -> Optional[str]:
        try:
            return self.storage.get(TOKEN_KEY) or None
        except StorageUnavailable as e:
            logger.warning(f"Session storage unavailable: {e}")
            return None

    def get_current_user(self) -> Optional[User]:
        try:
            raw = self.storage.get(USER_KEY)
        except StorageUnavailable as e:
            logger.warning(f"Session storage unavailable: {e}")
            return None
        if not raw:
            return None
        try:
            return User.from_dict(json.loads(raw))
        except (ValueError, TypeError, AttributeError) as e:
            logger.warning(f"Stored user record is unreadable: {e}")
            return None

    def is_authenticated(self) -> bool:
        return self.get_token() is not None and self.get_current_user() is not None

    def refresh_user(self) -> User:
        try:
            response = self.auth_api.me()
        except ApiConnectionError as e:
            raise ConnectivityError() from e
        except UnauthorizedError:
            raise
        except ApiError as e:
            raise AuthError(e.payload.get("message") or "Failed to refresh user data") from e

        return self._store_user(response.data, "Failed to refresh user data")

    def update_profile(self, data: dict[str, Any]) -> User:
        try:
            response = self.auth_api.update_profile(data)
        except ApiConnectionError as e:
            raise ConnectivityError() from e
        except UnauthorizedError:
            raise
        except ApiError as e:
            if e.status_code == 422 and e.errors:
                raise ValidationError(e.errors) from e
            raise AuthError(e.payload.get("message") or "Failed to update profile") from e

        return self._store_user(response.data, "Failed to update profile")

    def _store_user(self, payload: Any, failure: str) -> User:
        record = _response_data(payload)
        if "user" in record and isinstance(record["user"], dict):
            record = record["user"]
        try:
            user = User.from_dict(record)
        except ValueError as e:
            raise AuthError(f"{failure}: the server returned an invalid user record") from e

        with self._lock:
            if self.get_token() is None:
                raise AuthError(f"{failure}: you are no longer signed in")
            self.storage.set(USER_KEY, json.dumps(user.to_dict()))
        return user

    def has_role(self, role: Role | str) -> bool:
        user = self.get_current_user()
        expected = Role.parse(role)
        return user is not None and expected is not None and user.role == expected

    def is_student(self) -> bool:
        return self.has_role(Role.STUDENT)

    def is_supervisor(self) -> bool:
        return self.has_role(Role.SUPERVISOR)

    def is_admin(self) -> bool:
        return self.has_role(Role.ADMIN)
