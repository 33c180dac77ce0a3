from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Iterable, Optional

from base import get_logger
from base.errors import PermissionDenied

from .models import Role, User
from .storage import TOKEN_KEY, USER_KEY, StorageUnavailable

if TYPE_CHECKING:
    from .session_manager import SessionManager

logger = get_logger(__name__)


class AccessDecision(str, Enum):
    ALLOWED = "allowed"
    DENIED = "denied"
    LOGIN_REQUIRED = "login_required"


class ShellState(str, Enum):
    UNCHECKED = "unchecked"
    LOADING = "loading"
    REDIRECTING = "redirecting"
    AUTHORIZED = "authorized"


@dataclass(frozen=True)
class PageGuard:
    """Roles allowed to open a page. An empty set means any signed-in user."""

    roles: frozenset[Role] = field(default_factory=frozenset)
    message: str = "You do not have permission to view this page."

    @classmethod
    def for_roles(cls, roles: Iterable[Role | str], message: Optional[str] = None) -> "PageGuard":
        parsed = set()
        for value in roles:
            role = Role.parse(value)
            if role is None:
                raise ValueError(f"Unknown role: {value!r}")
            parsed.add(role)
        if message is None:
            return cls(frozenset(parsed))
        return cls(frozenset(parsed), message)

    def decide(self, user: Optional[User]) -> AccessDecision:
        if user is None:
            return AccessDecision.LOGIN_REQUIRED
        if self.roles and user.role not in self.roles:
            return AccessDecision.DENIED
        return AccessDecision.ALLOWED

    def require(self, user: Optional[User]) -> User:
        decision = self.decide(user)
        if decision is not AccessDecision.ALLOWED or user is None:
            raise PermissionDenied(self.message)
        return user


def require_roles(user: Optional[User], *roles: Role | str) -> User:
    return PageGuard.for_roles(roles).require(user)


class ShellGate:
    """Per-mount session check of the application shell.

    UNCHECKED -> LOADING when the session can not be read yet (the token is
    there but the user record is not, or storage is busy), REDIRECTING when
    there is no session at all, AUTHORIZED otherwise. The gate only
    guarantees that a session exists; role checks belong to each page's guard.
    """

    def __init__(self, session_manager: "SessionManager"):
        self.session_manager = session_manager
        self.state = ShellState.UNCHECKED
        self.user: Optional[User] = None

    def check(self) -> ShellState:
        storage = self.session_manager.storage
        try:
            token = storage.get(TOKEN_KEY)
            raw_user = storage.get(USER_KEY)
        except StorageUnavailable as e:
            logger.warning(f"Session storage busy, deferring the session check: {e}")
            self.state = ShellState.LOADING
            return self.state

        user = self.session_manager.get_current_user() if raw_user else None
        if token and user is not None:
            self.user = user
            self.state = ShellState.AUTHORIZED
        elif token and not raw_user and self.state is ShellState.UNCHECKED:
            # token written, user record not yet: give the writer one more pass
            self.user = None
            self.state = ShellState.LOADING
        else:
            self.user = None
            self.state = ShellState.REDIRECTING
        return self.state
