from __future__ import annotations

import datetime
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Optional

from base import get_logger
from base.auth.models import Role, User
from base.errors import ApiError
from features.common.resources import extract_items, extract_record, fetch_together

if TYPE_CHECKING:
    from base.api.endpoints import DormitoryAPI

logger = get_logger(__name__)


@dataclass(frozen=True)
class StatCard:
    name: str
    value: str
    path: str


@dataclass
class DashboardData:
    greeting: str
    cards: list[StatCard] = field(default_factory=list)
    recent: list[dict[str, Any]] = field(default_factory=list)
    room: Optional[dict[str, Any]] = None


def greeting_for(now: Optional[datetime.datetime] = None) -> str:
    hour = (now or datetime.datetime.now()).hour
    if hour < 12:
        return "Good morning"
    if hour < 18:
        return "Good afternoon"
    return "Good evening"


def _number(stats: dict[str, Any], key: str) -> Any:
    value = stats.get(key)
    return 0 if value is None else value


class DashboardService:
    def __init__(self, api: "DormitoryAPI"):
        self.api = api

    def load(self, user: User, now: Optional[datetime.datetime] = None) -> DashboardData:
        greeting = f"{greeting_for(now)}, {user.name}"
        if user.role is Role.STUDENT:
            return self._student(user, greeting)
        return self._staff(greeting)

    def _student(self, user: User, greeting: str) -> DashboardData:
        applications = extract_items(self.api.applications.get_all().payload)

        room = None
        try:
            room = extract_record(self.api.rooms.get_my_room().payload) or None
        except ApiError as e:
            # no allocation yet
            if e.status_code != 404:
                raise

        latest = applications[0].get("status", "") if applications else "none"
        cards = [
            StatCard("My Applications", str(len(applications)), "/applications"),
            StatCard("Latest Application", str(latest).title(), "/applications"),
            StatCard(
                "Room Status",
                "Assigned" if room or user.assigned_block else "Not Assigned",
                "/rooms/my-room",
            ),
        ]
        return DashboardData(greeting, cards, applications[:5], room)

    def _staff(self, greeting: str) -> DashboardData:
        results = fetch_together(
            {
                "applications": self.api.applications.get_stats,
                "rooms": self.api.rooms.get_stats,
            }
        )
        applications = extract_record(results["applications"].payload)
        rooms = extract_record(results["rooms"].payload)
        logger.debug(f"Dashboard stats: applications={applications}, rooms={rooms}")

        cards = [
            StatCard("Total Applications", str(_number(applications, "total")), "/applications"),
            StatCard(
                "Pending Applications",
                str(_number(applications, "pending")),
                "/applications/pending",
            ),
            StatCard("Total Rooms", str(_number(rooms, "total")), "/rooms"),
            StatCard("Occupancy Rate", f"{_number(rooms, 'occupancy_rate')}%", "/rooms"),
        ]
        return DashboardData(greeting, cards)
