"""Role-scoped navigation built from the static table in menu.json.

Each role has its own hand-authored list of entries. Children of a group
inherit the group's roles unless they name their own, and are filtered
individually before rendering.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field, replace
from functools import lru_cache
from pathlib import Path
from typing import Any, Iterable, Iterator, Optional

from base import get_logger
from base.auth.models import Role

logger = get_logger(__name__)

MENU_FILE = Path(__file__).parent / "menu.json"


class MenuConfigError(ValueError):
    pass


@dataclass(frozen=True)
class NavItem:
    title: str
    path: Optional[str] = None
    icon: str = ""
    roles: frozenset[Role] = field(default_factory=frozenset)
    children: tuple["NavItem", ...] = ()

    @property
    def is_group(self) -> bool:
        return bool(self.children)

    def allows(self, role: Role) -> bool:
        return role in self.roles


def _parse_roles(raw: Iterable[str], where: str) -> frozenset[Role]:
    roles = set()
    for value in raw:
        role = Role.parse(value)
        if role is None:
            raise MenuConfigError(f"Unknown role {value!r} in {where}")
        roles.add(role)
    return frozenset(roles)


def _parse_item(raw: dict[str, Any], inherited: frozenset[Role], depth: int) -> NavItem:
    title = raw.get("title")
    if not title:
        raise MenuConfigError(f"Menu entry without a title: {raw!r}")

    roles = _parse_roles(raw["roles"], title) if "roles" in raw else inherited
    children_raw = raw.get("children") or []
    if children_raw and depth > 0:
        raise MenuConfigError(f"Menu entry {title!r} nests deeper than one level")

    children = tuple(_parse_item(child, roles, depth + 1) for child in children_raw)
    path = raw.get("path")
    if not children and not path:
        raise MenuConfigError(f"Menu entry {title!r} has neither a path nor children")
    if children and path:
        raise MenuConfigError(f"Group {title!r} must not have a path")

    return NavItem(
        title=title,
        path=path,
        icon=raw.get("icon", ""),
        roles=roles,
        children=children,
    )


def parse_menu(config: dict[str, Any]) -> dict[Optional[Role], tuple[NavItem, ...]]:
    """Parse the menu table. The ``None`` key holds the entries shared by every role."""
    try:
        base = tuple(_parse_item(item, frozenset(), 0) for item in config.get("base", []))
        table: dict[Optional[Role], tuple[NavItem, ...]] = {None: base}
        for role_name, items in config.get("roles", {}).items():
            role = Role.parse(role_name)
            if role is None:
                raise MenuConfigError(f"Unknown role section {role_name!r}")
            table[role] = base + tuple(
                _parse_item(item, frozenset({role}), 0) for item in items
            )
    except KeyError as e:
        raise MenuConfigError(f"Menu entry is missing {e}") from e
    return table


@lru_cache(maxsize=4)
def load_menu(path: Path = MENU_FILE) -> dict[Optional[Role], tuple[NavItem, ...]]:
    with open(path, "r", encoding="utf-8") as f:
        config = json.load(f)
    return parse_menu(config)


def build_navigation(
    role: Optional[Role],
    menu: Optional[dict[Optional[Role], tuple[NavItem, ...]]] = None,
) -> tuple[NavItem, ...]:
    """Entries the given role may see. Unknown or missing role gets no entries.

    Children of a group are filtered one by one; a group left without
    children is dropped.
    """
    if menu is None:
        menu = load_menu()
    if role is None:
        return ()

    visible = []
    for item in menu.get(role, menu.get(None, ())):
        if not item.allows(role):
            continue
        if item.is_group:
            children = tuple(child for child in item.children if child.allows(role))
            if not children:
                continue
            item = replace(item, children=children)
        visible.append(item)
    return tuple(visible)


def iter_leaves(items: Iterable[NavItem]) -> Iterator[tuple[Optional[NavItem], NavItem]]:
    """Yield ``(parent, item)`` for every navigable entry; parent is None at top level."""
    for item in items:
        if item.is_group:
            for child in item.children:
                yield item, child
        else:
            yield None, item


def navigation_paths(role: Optional[Role]) -> list[str]:
    return [leaf.path for _, leaf in iter_leaves(build_navigation(role)) if leaf.path]
