from .guard import AccessDecision, PageGuard, ShellGate, ShellState, require_roles
from .models import AccountStatus, Role, User
from .session_manager import RegistrationResult, SessionManager
from .storage import FileSessionStorage, MemorySessionStorage, SessionStorage

__all__ = [
    "AccessDecision",
    "PageGuard",
    "ShellGate",
    "ShellState",
    "require_roles",
    "AccountStatus",
    "Role",
    "User",
    "RegistrationResult",
    "SessionManager",
    "FileSessionStorage",
    "MemorySessionStorage",
    "SessionStorage",
]
