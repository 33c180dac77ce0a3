from .menu import NavItem, build_navigation, iter_leaves, load_menu
from .router import LOGIN_PATH, NavigationEvent, PageDefinition, Router

__all__ = [
    "NavItem",
    "build_navigation",
    "iter_leaves",
    "load_menu",
    "LOGIN_PATH",
    "NavigationEvent",
    "PageDefinition",
    "Router",
]
