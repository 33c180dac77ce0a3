"""Every page of the client, with the roles that may open it.

Pages are declared once here; the shell renders them from their kind and
options, and the router applies their guard before anything is fetched.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Optional

from base.api.client import ApiResponse
from base.api.endpoints import DormitoryAPI
from base.auth.guard import PageGuard
from base.auth.models import Role, User
from base.messages.catalog import BANNER_MESSAGES
from base.nav.router import PageDefinition

Loader = Callable[[DormitoryAPI, User], ApiResponse]
RowCall = Callable[[DormitoryAPI, dict[str, Any]], ApiResponse]
Submit = Callable[[DormitoryAPI, dict[str, Any]], ApiResponse]

STUDENT = Role.STUDENT
SUPERVISOR = Role.SUPERVISOR
ADMIN = Role.ADMIN
STAFF = (SUPERVISOR, ADMIN)


@dataclass(frozen=True)
class Column:
    key: str
    title: str
    width: int = 140


@dataclass(frozen=True)
class RowAction:
    label: str
    call: RowCall
    roles: frozenset[Role] = frozenset()
    when_status: Optional[str] = None
    confirm: Optional[str] = None
    success: str = "Done"
    asks_reason: bool = False

    def available(self, user: User, row: dict[str, Any]) -> bool:
        if self.roles and user.role not in self.roles:
            return False
        if self.when_status is not None and row.get("status") != self.when_status:
            return False
        return True


@dataclass(frozen=True)
class FormField:
    name: str
    label: str
    kind: str = "text"
    required: bool = False
    choices: tuple[str, ...] = ()


@dataclass(frozen=True)
class ListOptions:
    loader: Loader
    columns: tuple[Column, ...]
    actions: tuple[RowAction, ...] = ()
    empty_message: str = "Nothing to show yet."


@dataclass(frozen=True)
class FormOptions:
    fields: tuple[FormField, ...]
    submit: Submit
    success_message: str = "Submitted successfully."
    success_banner: Optional[str] = None
    next_path: Optional[str] = None


@dataclass(frozen=True)
class ReportOptions:
    reports: dict[str, Loader] = field(default_factory=dict)


def _guard(*roles: Role, message: Optional[str] = None) -> PageGuard:
    return PageGuard.for_roles(roles, message)


def _reason(data: dict[str, Any]) -> dict[str, Any]:
    return {"reason": data.get("reason", "")}


def _list(path, title, roles, options: ListOptions, message=None) -> PageDefinition:
    return PageDefinition(path, title, _guard(*roles, message=message), "list", {"list": options})


def _form(path, title, roles, options: FormOptions, message=None) -> PageDefinition:
    return PageDefinition(path, title, _guard(*roles, message=message), "form", {"form": options})


def _issues_loader(api: DormitoryAPI, user: User) -> ApiResponse:
    if user.role is STUDENT:
        return api.issues.get_mine()
    return api.issues.get_all()


def _pending_applications(api: DormitoryAPI, user: User) -> ApiResponse:
    return api.applications.get_all({"status": "pending"})


APPLICATION_COLUMNS = (
    Column("id", "#", 60),
    Column("student.name", "Student", 180),
    Column("preferred_block", "Preferred Block", 140),
    Column("academic_year", "Academic Year", 120),
    Column("status", "Status", 100),
    Column("created_at", "Submitted", 160),
)

APPLICATION_ACTIONS = (
    RowAction(
        "Approve",
        lambda api, row: api.applications.approve(row["id"]),
        frozenset(STAFF),
        when_status="pending",
        success="Application approved",
    ),
    RowAction(
        "Reject",
        lambda api, row: api.applications.reject(row["id"], _reason(row)),
        frozenset(STAFF),
        when_status="pending",
        confirm="Reject this application?",
        asks_reason=True,
        success="Application rejected",
    ),
    RowAction(
        "Delete",
        lambda api, row: api.applications.delete(row["id"]),
        frozenset({STUDENT}),
        when_status="draft",
        confirm="Delete this draft application?",
        success="Draft deleted",
    ),
)

CHANGE_REQUEST_ACTIONS = (
    RowAction(
        "Approve",
        lambda api, row: api.change_requests.approve(row["id"]),
        frozenset(STAFF),
        when_status="pending",
        success="Change request approved",
    ),
    RowAction(
        "Reject",
        lambda api, row: api.change_requests.reject(row["id"], _reason(row)),
        frozenset(STAFF),
        when_status="pending",
        confirm="Reject this change request?",
        asks_reason=True,
        success="Change request rejected",
    ),
)

USER_COLUMNS = (
    Column("id", "#", 60),
    Column("name", "Name", 180),
    Column("email", "Email", 220),
    Column("status", "Status", 100),
)

USER_STATUS_ACTIONS = (
    RowAction(
        "Activate",
        lambda api, row: api.admin.update_user_status(row["id"], {"status": "active"}),
        frozenset({ADMIN}),
        success="Account activated",
    ),
    RowAction(
        "Suspend",
        lambda api, row: api.admin.update_user_status(row["id"], {"status": "suspended"}),
        frozenset({ADMIN}),
        when_status="active",
        confirm="Suspend this account?",
        success="Account suspended",
    ),
)


def build_pages() -> list[PageDefinition]:
    return [
        PageDefinition("/dashboard", "Dashboard", _guard(), "dashboard"),
        PageDefinition(
            "/supervisor-dashboard",
            "Supervisor Dashboard",
            _guard(SUPERVISOR, message="Only supervisors can view this dashboard."),
            "dashboard",
        ),
        PageDefinition("/user-profile", "Profile", _guard(), "profile"),
        _form(
            "/applications/new",
            "Apply for Dormitory",
            (STUDENT,),
            FormOptions(
                fields=(
                    FormField("academic_year", "Academic Year", required=True),
                    FormField("preferred_block", "Preferred Block"),
                    FormField("special_requirements", "Special Requirements", "multiline"),
                ),
                submit=lambda api, data: api.applications.create(data),
                success_message="Application submitted",
                success_banner=BANNER_MESSAGES["APPLICATION_SUBMITTED"],
                next_path="/applications",
            ),
            message="Only students can apply for dormitory accommodation.",
        ),
        _list(
            "/applications",
            "Applications",
            (STUDENT, SUPERVISOR, ADMIN),
            ListOptions(
                loader=lambda api, user: api.applications.get_all(),
                columns=APPLICATION_COLUMNS,
                actions=APPLICATION_ACTIONS,
                empty_message="No applications found.",
            ),
        ),
        _list(
            "/applications/pending",
            "Pending Applications",
            STAFF,
            ListOptions(
                loader=_pending_applications,
                columns=APPLICATION_COLUMNS,
                actions=APPLICATION_ACTIONS,
                empty_message="No applications are waiting for review.",
            ),
            message="Only supervisors and administrators can review applications.",
        ),
        PageDefinition(
            "/rooms/my-room",
            "My Room",
            _guard(STUDENT, message="Only students have a room assignment."),
            "record",
            {"loader": lambda api, user: api.rooms.get_my_room()},
        ),
        _list(
            "/rooms/available",
            "Available Rooms",
            (STUDENT, SUPERVISOR, ADMIN),
            ListOptions(
                loader=lambda api, user: api.rooms.get_available(
                    {"gender": user.gender} if user.gender else None
                ),
                columns=(
                    Column("room_number", "Room", 100),
                    Column("block.name", "Block", 140),
                    Column("capacity", "Capacity", 90),
                    Column("current_occupancy", "Occupied", 90),
                    Column("facilities", "Facilities", 260),
                ),
                empty_message="No rooms are available right now.",
            ),
        ),
        _list(
            "/rooms",
            "Rooms",
            STAFF,
            ListOptions(
                loader=lambda api, user: api.rooms.get_all(),
                columns=(
                    Column("room_number", "Room", 100),
                    Column("block.name", "Block", 140),
                    Column("floor", "Floor", 70),
                    Column("capacity", "Capacity", 90),
                    Column("current_occupancy", "Occupied", 90),
                    Column("status", "Status", 100),
                ),
                empty_message="No rooms found.",
            ),
            message="Only supervisors and administrators can manage rooms.",
        ),
        _list(
            "/rooms/room-occupancy",
            "Room Occupancy",
            STAFF,
            ListOptions(
                loader=lambda api, user: api.reports.get_occupancy_report(),
                columns=(
                    Column("block", "Block", 160),
                    Column("total_rooms", "Rooms", 80),
                    Column("total_capacity", "Capacity", 90),
                    Column("current_occupancy", "Occupied", 90),
                    Column("occupancy_rate", "Occupancy %", 110),
                ),
            ),
        ),
        _list(
            "/blocks",
            "Blocks",
            (ADMIN,),
            ListOptions(
                loader=lambda api, user: api.blocks.get_all(),
                columns=(
                    Column("name", "Name", 140),
                    Column("gender", "Gender", 90),
                    Column("floors", "Floors", 70),
                    Column("total_rooms", "Rooms", 80),
                    Column("total_capacity", "Capacity", 90),
                    Column("status", "Status", 90),
                ),
                empty_message="No blocks have been created.",
            ),
            message="Only administrators can manage blocks.",
        ),
        _form(
            "/change-requests/new",
            "Request Room Change",
            (STUDENT,),
            FormOptions(
                fields=(
                    FormField("requested_block", "Requested Block"),
                    FormField("requested_room", "Requested Room"),
                    FormField("reason", "Reason", "multiline", required=True),
                ),
                submit=lambda api, data: api.change_requests.create(data),
                success_message="Change request submitted",
                next_path="/change-requests",
            ),
            message="Only students can request a room change.",
        ),
        _list(
            "/change-requests",
            "Change Requests",
            (STUDENT, SUPERVISOR, ADMIN),
            ListOptions(
                loader=lambda api, user: api.change_requests.get_all(),
                columns=(
                    Column("id", "#", 60),
                    Column("student.name", "Student", 180),
                    Column("current_room.room_number", "Current Room", 110),
                    Column("requested_room", "Requested", 110),
                    Column("reason", "Reason", 240),
                    Column("status", "Status", 100),
                ),
                actions=CHANGE_REQUEST_ACTIONS,
                empty_message="No change requests found.",
            ),
        ),
        _list(
            "/temporary-leave",
            "Temporary Leave",
            (STUDENT,),
            ListOptions(
                loader=lambda api, user: api.temporary_leave.get_all(),
                columns=(
                    Column("start_date", "From", 110),
                    Column("end_date", "To", 110),
                    Column("destination", "Destination", 180),
                    Column("reason", "Reason", 220),
                    Column("status", "Status", 100),
                ),
                empty_message="You have no leave requests.",
            ),
            message="Only students can request temporary leave.",
        ),
        _list(
            "/clearance",
            "Clearance",
            (STUDENT, SUPERVISOR, ADMIN),
            ListOptions(
                loader=lambda api, user: api.clearance.get_all(),
                columns=(
                    Column("item", "Requirement", 220),
                    Column("status", "Status", 100),
                    Column("remarks", "Remarks", 260),
                ),
                empty_message="No clearance records found.",
            ),
        ),
        _form(
            "/issues/new",
            "Report Issue",
            (STUDENT,),
            FormOptions(
                fields=(
                    FormField("title", "Title", required=True),
                    FormField(
                        "category",
                        "Category",
                        "choice",
                        required=True,
                        choices=("plumbing", "electrical", "furniture", "cleaning", "other"),
                    ),
                    FormField(
                        "priority", "Priority", "choice", choices=("low", "medium", "high")
                    ),
                    FormField("description", "Description", "multiline", required=True),
                ),
                submit=lambda api, data: api.issues.create(data),
                success_message="Issue reported",
                next_path="/issues",
            ),
            message="Only students can report issues.",
        ),
        _list(
            "/issues",
            "Issues",
            (STUDENT, SUPERVISOR, ADMIN),
            ListOptions(
                loader=_issues_loader,
                columns=(
                    Column("id", "#", 60),
                    Column("title", "Title", 220),
                    Column("category", "Category", 110),
                    Column("priority", "Priority", 90),
                    Column("status", "Status", 100),
                ),
                empty_message="No issues reported.",
            ),
        ),
        _list(
            "/admin/issues",
            "Manage Issues",
            STAFF,
            ListOptions(
                loader=lambda api, user: api.issues.get_all(),
                columns=(
                    Column("id", "#", 60),
                    Column("title", "Title", 220),
                    Column("student.name", "Reported By", 160),
                    Column("priority", "Priority", 90),
                    Column("status", "Status", 100),
                ),
                actions=(
                    RowAction(
                        "Mark Resolved",
                        lambda api, row: api.issues.update(row["id"], {"status": "resolved"}),
                        frozenset(STAFF),
                        success="Issue marked as resolved",
                    ),
                ),
                empty_message="No issues reported.",
            ),
            message="Only supervisors and administrators can manage issues.",
        ),
        _list(
            "/rules",
            "Room Rules",
            (STUDENT, SUPERVISOR, ADMIN),
            ListOptions(
                loader=lambda api, user: api.rules.get_all(),
                columns=(
                    Column("category", "Category", 140),
                    Column("title", "Rule", 240),
                    Column("description", "Details", 360),
                ),
            ),
        ),
        _list(
            "/admin/rules",
            "Manage Room Rules",
            (ADMIN,),
            ListOptions(
                loader=lambda api, user: api.rules.get_admin_view(),
                columns=(
                    Column("id", "#", 60),
                    Column("category", "Category", 140),
                    Column("title", "Rule", 240),
                    Column("is_active", "Active", 80),
                ),
                actions=(
                    RowAction(
                        "Delete",
                        lambda api, row: api.rules.delete(row["id"]),
                        frozenset({ADMIN}),
                        confirm="Delete this rule?",
                        success="Rule deleted",
                    ),
                ),
            ),
            message="Only administrators can manage room rules.",
        ),
        _list(
            "/admin/approve-students",
            "Approve Registrations",
            (ADMIN,),
            ListOptions(
                loader=lambda api, user: api.admin.get_pending_users(),
                columns=USER_COLUMNS + (Column("user_type", "Type", 100),),
                actions=(
                    RowAction(
                        "Approve",
                        lambda api, row: api.admin.approve_user(row["id"]),
                        frozenset({ADMIN}),
                        success="Registration approved",
                    ),
                    RowAction(
                        "Reject",
                        lambda api, row: api.admin.reject_user(row["id"]),
                        frozenset({ADMIN}),
                        confirm="Reject this registration?",
                        success="Registration rejected",
                    ),
                ),
                empty_message="No registrations are waiting for approval.",
            ),
            message="Only administrators can approve registrations.",
        ),
        _list(
            "/users/students",
            "Students",
            (ADMIN,),
            ListOptions(
                loader=lambda api, user: api.admin.get_students(),
                columns=USER_COLUMNS + (Column("student_id", "Student ID", 110),),
                actions=USER_STATUS_ACTIONS,
            ),
            message="Only administrators can manage students.",
        ),
        _list(
            "/users/supervisors",
            "Supervisors",
            (ADMIN,),
            ListOptions(
                loader=lambda api, user: api.admin.get_supervisors(),
                columns=USER_COLUMNS + (Column("assigned_block", "Block", 110),),
                actions=USER_STATUS_ACTIONS,
            ),
            message="Only administrators can manage supervisors.",
        ),
        _list(
            "/admin/administrators",
            "Administrators",
            (ADMIN,),
            ListOptions(
                loader=lambda api, user: api.admin.get_administrators(),
                columns=USER_COLUMNS,
            ),
            message="Only administrators can manage administrators.",
        ),
        PageDefinition(
            "/allocations",
            "Room Allocation",
            _guard(ADMIN, message="Only administrators can run room allocation."),
            "allocations",
        ),
        PageDefinition(
            "/reports",
            "Reports",
            _guard(*STAFF, message="Only supervisors and administrators can view reports."),
            "reports",
            {
                "reports": ReportOptions(
                    reports={
                        "Occupancy": lambda api, user: api.reports.get_occupancy_report(),
                        "Applications": lambda api, user: api.reports.get_applications_report(),
                        "Students": lambda api, user: api.reports.get_students_report(),
                        "Rooms": lambda api, user: api.reports.get_rooms_report(),
                    }
                )
            },
        ),
    ]
