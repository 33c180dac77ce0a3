from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable, Optional

from base import get_logger
from base.auth.guard import AccessDecision, PageGuard

if TYPE_CHECKING:
    from base.auth.session_manager import SessionManager

logger = get_logger(__name__)

LOGIN_PATH = "/login"
HOME_PATH = "/dashboard"


@dataclass(frozen=True)
class PageDefinition:
    path: str
    title: str
    guard: PageGuard = field(default_factory=PageGuard)
    kind: str = "list"
    options: dict[str, Any] = field(default_factory=dict, compare=False)


@dataclass(frozen=True)
class NavigationEvent:
    path: str
    decision: AccessDecision
    page: Optional[PageDefinition] = None


Listener = Callable[[NavigationEvent], None]


class Router:
    """Registry of pages plus the current location.

    ``navigate`` resolves a path against the session (no session means a
    redirect to login) and then against the page's own guard. Listeners get
    every resulting event; the wx shell re-dispatches them onto the UI thread.
    """

    def __init__(self, session_manager: "SessionManager"):
        self.session_manager = session_manager
        self._pages: dict[str, PageDefinition] = {}
        self._listeners: list[Listener] = []
        self._lock = threading.Lock()
        self.current_path: Optional[str] = None

    def register(self, page: PageDefinition) -> None:
        if page.path in self._pages:
            raise ValueError(f"Page already registered: {page.path}")
        self._pages[page.path] = page

    def register_all(self, pages: list[PageDefinition]) -> None:
        for page in pages:
            self.register(page)

    def resolve(self, path: str) -> Optional[PageDefinition]:
        return self._pages.get(path)

    @property
    def pages(self) -> dict[str, PageDefinition]:
        return dict(self._pages)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def _emit(self, event: NavigationEvent) -> NavigationEvent:
        with self._lock:
            listeners = list(self._listeners)
        for listener in listeners:
            listener(event)
        return event

    def navigate(self, path: str) -> NavigationEvent:
        page = self.resolve(path)
        if page is None:
            raise KeyError(f"No page registered for {path}")

        user = self.session_manager.get_current_user()
        if user is None or self.session_manager.get_token() is None:
            return self.redirect_to_login()

        decision = page.guard.decide(user)
        if decision is AccessDecision.DENIED:
            logger.info(f"{user.role.value} may not open {path}")

        self.current_path = path
        return self._emit(NavigationEvent(path, decision, page))

    def redirect_to_login(self) -> NavigationEvent:
        logger.info("Redirecting to login")
        self.current_path = LOGIN_PATH
        return self._emit(NavigationEvent(LOGIN_PATH, AccessDecision.LOGIN_REQUIRED))
