"""Resource groups of the dormitory API, one class per group."""

from __future__ import annotations

from typing import Any, Optional

from .client import ApiClient, ApiResponse

Params = Optional[dict[str, Any]]


class _Group:
    def __init__(self, client: ApiClient):
        self.client = client


class AuthAPI(_Group):
    def login(self, email: str, password: str) -> ApiResponse:
        return self.client.post("/auth/login", {"email": email, "password": password})

    def register(self, user_data: dict[str, Any]) -> ApiResponse:
        return self.client.post("/auth/register", user_data)

    def logout(self) -> ApiResponse:
        return self.client.post("/auth/logout")

    def me(self) -> ApiResponse:
        return self.client.get("/auth/me")

    def update_profile(self, data: dict[str, Any]) -> ApiResponse:
        return self.client.put("/auth/profile", data)


class _Crud(_Group):
    resource = ""

    def get_all(self, params: Params = None) -> ApiResponse:
        return self.client.get(f"/{self.resource}", params)

    def get_by_id(self, item_id: int | str) -> ApiResponse:
        return self.client.get(f"/{self.resource}/{item_id}")

    def create(self, data: dict[str, Any]) -> ApiResponse:
        return self.client.post(f"/{self.resource}", data)

    def update(self, item_id: int | str, data: dict[str, Any]) -> ApiResponse:
        return self.client.put(f"/{self.resource}/{item_id}", data)

    def delete(self, item_id: int | str) -> ApiResponse:
        return self.client.delete(f"/{self.resource}/{item_id}")


class _Reviewable(_Crud):
    def approve(self, item_id: int | str, data: Optional[dict[str, Any]] = None) -> ApiResponse:
        return self.client.post(f"/{self.resource}/{item_id}/approve", data)

    def reject(self, item_id: int | str, data: dict[str, Any]) -> ApiResponse:
        return self.client.post(f"/{self.resource}/{item_id}/reject", data)


class ApplicationsAPI(_Reviewable):
    resource = "applications"

    def get_stats(self) -> ApiResponse:
        return self.client.get("/applications-stats")


class RoomsAPI(_Crud):
    resource = "rooms"

    def get_available(self, params: Params = None) -> ApiResponse:
        return self.client.get("/rooms-available", params)

    def get_stats(self) -> ApiResponse:
        return self.client.get("/rooms-stats")

    def get_my_room(self) -> ApiResponse:
        return self.client.get("/rooms/my-room")

    def assign(self, room_id: int | str, data: dict[str, Any]) -> ApiResponse:
        return self.client.post(f"/rooms/{room_id}/assign", data)

    def unassign(self, room_id: int | str, data: dict[str, Any]) -> ApiResponse:
        return self.client.post(f"/rooms/{room_id}/unassign", data)


class BlocksAPI(_Crud):
    resource = "blocks"

    def get_available(self) -> ApiResponse:
        return self.client.get("/blocks/available")

    def get_availability(self, gender: str) -> ApiResponse:
        return self.client.get("/blocks/availability", {"gender": gender})


class ChangeRequestsAPI(_Reviewable):
    resource = "change-requests"


class TemporaryLeaveAPI(_Reviewable):
    resource = "temporary-leave"

    def mark_returned(self, leave_id: int | str) -> ApiResponse:
        return self.client.post(f"/temporary-leave/{leave_id}/mark-returned")

    def get_stats(self) -> ApiResponse:
        return self.client.get("/temporary-leave-stats")


class ClearanceAPI(_Crud):
    resource = "clearance"


class IssuesAPI(_Crud):
    resource = "issues"

    def get_mine(self) -> ApiResponse:
        return self.client.get("/issues/my-issues")

    def get_stats(self) -> ApiResponse:
        return self.client.get("/issues-stats")


class RulesAPI(_Crud):
    resource = "rules"

    def get_categories(self) -> ApiResponse:
        return self.client.get("/rules/categories")

    def get_admin_view(self) -> ApiResponse:
        return self.client.get("/rules-admin")


class AdminAPI(_Group):
    def get_all_users(self) -> ApiResponse:
        return self.client.get("/users")

    def get_students(self) -> ApiResponse:
        return self.client.get("/users/students")

    def get_supervisors(self) -> ApiResponse:
        return self.client.get("/users/supervisors")

    def get_pending_users(self) -> ApiResponse:
        return self.client.get("/users/pending")

    def approve_user(self, user_id: int | str) -> ApiResponse:
        return self.client.post(f"/users/{user_id}/approve")

    def reject_user(self, user_id: int | str) -> ApiResponse:
        return self.client.post(f"/users/{user_id}/reject")

    def get_administrators(self) -> ApiResponse:
        return self.client.get("/administrators")

    def create_administrator(self, data: dict[str, Any]) -> ApiResponse:
        return self.client.post("/administrators", data)

    def update_administrator(self, admin_id: int | str, data: dict[str, Any]) -> ApiResponse:
        return self.client.put(f"/administrators/{admin_id}", data)

    def reset_admin_password(self, admin_id: int | str, data: dict[str, Any]) -> ApiResponse:
        return self.client.post(f"/administrators/{admin_id}/reset-password", data)

    def update_user_status(self, user_id: int | str, data: dict[str, Any]) -> ApiResponse:
        return self.client.put(f"/users/{user_id}/status", data)

    def delete_user(self, user_id: int | str) -> ApiResponse:
        return self.client.delete(f"/users/{user_id}")


class ReportsAPI(_Group):
    def get_occupancy_report(self) -> ApiResponse:
        return self.client.get("/reports/occupancy")

    def get_applications_report(self) -> ApiResponse:
        return self.client.get("/reports/applications")

    def get_students_report(self) -> ApiResponse:
        return self.client.get("/reports/students")

    def get_rooms_report(self) -> ApiResponse:
        return self.client.get("/reports/rooms")


class NotificationsAPI(_Group):
    def get_all(self, params: Params = None) -> ApiResponse:
        return self.client.get("/notifications", params)

    def get_unread_count(self) -> ApiResponse:
        return self.client.get("/notifications/unread-count")

    def mark_as_read(self, notification_id: int | str) -> ApiResponse:
        return self.client.post(f"/notifications/{notification_id}/read")

    def mark_all_as_read(self) -> ApiResponse:
        return self.client.post("/notifications/mark-all-read")


class AllocationsAPI(_Group):
    def get_stats(self) -> ApiResponse:
        return self.client.get("/allocations/stats")

    def get_all(self, params: Params = None) -> ApiResponse:
        return self.client.get("/allocations", params)

    def get_by_id(self, allocation_id: int | str) -> ApiResponse:
        return self.client.get(f"/allocations/{allocation_id}")

    def auto_allocate(self) -> ApiResponse:
        return self.client.post("/allocations/auto")

    def reallocate(self) -> ApiResponse:
        return self.client.post("/allocations/reallocate")

    def get_report(self) -> ApiResponse:
        return self.client.get("/allocation-reports")

    def export_report(self, format: str = "csv") -> ApiResponse:
        if format not in ("csv", "json"):
            raise ValueError(f"Unsupported export format: {format}")
        return self.client.get("/allocation-reports/export", {"format": format})


class DormitoryAPI:
    """All resource groups bound to one client."""

    def __init__(self, client: ApiClient):
        self.client = client
        self.auth = AuthAPI(client)
        self.applications = ApplicationsAPI(client)
        self.rooms = RoomsAPI(client)
        self.blocks = BlocksAPI(client)
        self.change_requests = ChangeRequestsAPI(client)
        self.temporary_leave = TemporaryLeaveAPI(client)
        self.clearance = ClearanceAPI(client)
        self.issues = IssuesAPI(client)
        self.rules = RulesAPI(client)
        self.admin = AdminAPI(client)
        self.reports = ReportsAPI(client)
        self.notifications = NotificationsAPI(client)
        self.allocations = AllocationsAPI(client)
