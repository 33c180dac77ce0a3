import datetime
import json

import pytest
import requests

from base.auth.models import User
from base.errors import ApiConnectionError, ApiError, PermissionDenied
from features.allocations.service import AllocationService
from features.catalog import build_pages
from features.common.service import FormIncomplete, ResourceService
from features.dashboard.service import DashboardService, greeting_for


@pytest.fixture
def pages():
    return {page.path: page for page in build_pages()}


@pytest.fixture
def as_user(user_record):
    def build(role="student", **overrides):
        return User.from_dict(user_record(role, **overrides))

    return build


@pytest.fixture
def resources(context):
    return ResourceService(context.api)


def test_load_rows_uses_page_loader(resources, http, pages, as_user):
    http.add("GET", "/issues/my-issues", 200, {"data": [{"id": 1, "title": "Leak"}]})

    rows = resources.load_rows(pages["/issues"], as_user("student"))

    assert rows == [{"id": 1, "title": "Leak"}]


def test_staff_see_every_issue(resources, http, pages, as_user):
    http.add("GET", "/issues", 200, {"data": {"data": [{"id": 1}, {"id": 2}]}})

    rows = resources.load_rows(pages["/issues"], as_user("supervisor"))

    assert len(rows) == 2


def test_pending_applications_filter(resources, http, pages, as_user):
    http.add("GET", "/applications", 200, {"data": []})

    resources.load_rows(pages["/applications/pending"], as_user("admin"))

    assert http.last()["params"] == {"status": "pending"}


def test_load_rows_checks_the_guard_before_fetching(resources, http, pages, as_user):
    with pytest.raises(PermissionDenied, match="Only administrators can manage blocks"):
        resources.load_rows(pages["/blocks"], as_user("supervisor"))

    assert http.calls == []


def test_load_record_404_means_nothing_assigned(resources, http, pages, as_user):
    http.add("GET", "/rooms/my-room", 404, {"message": "No room assigned"})

    assert resources.load_record(pages["/rooms/my-room"], as_user("student")) is None


def test_load_record_other_errors_propagate(resources, http, pages, as_user):
    http.add("GET", "/rooms/my-room", 500, {"message": "boom"})

    with pytest.raises(ApiError):
        resources.load_record(pages["/rooms/my-room"], as_user("student"))


def test_load_report(resources, http, pages, as_user):
    http.add("GET", "/reports/occupancy", 200, {"data": {"total_rooms": 40}})

    report = resources.load_report(pages["/reports"], as_user("admin"), "Occupancy")

    assert report == {"total_rooms": 40}


def test_submit_form_strips_and_drops_blanks(resources, http, pages, as_user):
    http.add("POST", "/applications", 201, {"success": True})

    resources.submit_form(
        pages["/applications/new"],
        as_user("student"),
        {"academic_year": " 2024/2025 ", "preferred_block": "", "special_requirements": "  "},
    )

    assert http.last()["json"] == {"academic_year": "2024/2025"}


def test_submit_form_reports_missing_fields(resources, http, pages, as_user):
    with pytest.raises(FormIncomplete) as exc_info:
        resources.submit_form(pages["/issues/new"], as_user("student"), {"title": "Door"})

    assert exc_info.value.missing == ["Category", "Description"]
    assert http.calls == []


def test_submit_form_rejects_unknown_choice(resources, pages, as_user):
    values = {"title": "Door", "category": "magic", "description": "stuck"}

    with pytest.raises(FormIncomplete, match="Category"):
        resources.submit_form(pages["/issues/new"], as_user("student"), values)


def test_staff_can_not_submit_student_forms(resources, pages, as_user):
    with pytest.raises(PermissionDenied):
        resources.submit_form(pages["/applications/new"], as_user("admin"), {"academic_year": "x"})


def _action(pages, path, label):
    return next(a for a in pages[path].options["list"].actions if a.label == label)


def test_row_action_runs_when_available(resources, http, pages, as_user):
    approve = _action(pages, "/applications", "Approve")
    http.add("POST", "/applications/7/approve", 200, {"success": True})

    resources.run_action(approve, as_user("supervisor"), {"id": 7, "status": "pending"})

    assert http.last()["path"] == "/applications/7/approve"


def test_reject_sends_reason(resources, http, pages, as_user):
    reject = _action(pages, "/change-requests", "Reject")
    http.add("POST", "/change-requests/3/reject", 200, {"success": True})

    resources.run_action(
        reject, as_user("admin"), {"id": 3, "status": "pending", "reason": "Room is full"}
    )

    assert reject.asks_reason
    assert http.last()["json"] == {"reason": "Room is full"}


@pytest.mark.parametrize(
    "role, status",
    [("student", "pending"), ("supervisor", "approved")],
)
def test_row_action_unavailable(resources, http, pages, as_user, role, status):
    approve = _action(pages, "/applications", "Approve")

    with pytest.raises(PermissionDenied):
        resources.run_action(approve, as_user(role), {"id": 1, "status": status})

    assert http.calls == []


@pytest.mark.parametrize(
    "hour, greeting",
    [(0, "Good morning"), (11, "Good morning"), (12, "Good afternoon"), (18, "Good evening")],
)
def test_greeting_for(hour, greeting):
    assert greeting_for(datetime.datetime(2024, 5, 1, hour, 30)) == greeting


def test_student_dashboard(context, http, as_user):
    student = as_user("student", name="Ann")
    applications = [{"id": n, "status": "pending"} for n in range(7)]
    http.add("GET", "/applications", 200, {"data": applications})
    http.add("GET", "/rooms/my-room", 404, {"message": "No room"})

    data = DashboardService(context.api).load(student, datetime.datetime(2024, 5, 1, 9))

    assert data.greeting == "Good morning, Ann"
    assert [(c.name, c.value) for c in data.cards] == [
        ("My Applications", "7"),
        ("Latest Application", "Pending"),
        ("Room Status", "Not Assigned"),
    ]
    assert len(data.recent) == 5
    assert data.room is None


def test_student_dashboard_with_room(context, http, as_user):
    http.add("GET", "/applications", 200, {"data": []})
    http.add("GET", "/rooms/my-room", 200, {"data": {"room_number": "A-101"}})

    data = DashboardService(context.api).load(as_user("student"))

    assert data.room == {"room_number": "A-101"}
    assert data.cards[1].value == "None"
    assert data.cards[2].value == "Assigned"


def test_staff_dashboard(context, http, as_user):
    http.add("GET", "/applications-stats", 200, {"data": {"total": 12, "pending": 4}})
    http.add("GET", "/rooms-stats", 200, {"data": {"total": 30, "occupancy_rate": 85.5}})

    data = DashboardService(context.api).load(as_user("admin"))

    cards = {c.name: c for c in data.cards}
    assert cards["Total Applications"].value == "12"
    assert cards["Pending Applications"].path == "/applications/pending"
    assert cards["Occupancy Rate"].value == "85.5%"
    assert data.recent == []


def test_staff_dashboard_fails_as_a_whole(context, http, as_user):
    http.add("GET", "/applications-stats", 200, {"data": {"total": 12}})
    http.fail("GET", "/rooms-stats", requests.Timeout("slow"))

    with pytest.raises(ApiConnectionError):
        DashboardService(context.api).load(as_user("supervisor"))


def test_auto_allocate_result(context, http):
    http.add(
        "POST",
        "/allocations/auto",
        200,
        {
            "success": True,
            "message": "Allocated 3 students",
            "data": {"allocated_count": 3, "failed_count": 1, "details": [{"student": "A"}]},
        },
    )

    result = AllocationService(context.api).auto_allocate()

    assert result.success
    assert result.message == "Allocated 3 students"
    assert (result.allocated, result.failed) == (3, 1)
    assert result.details == [{"student": "A"}]


@pytest.mark.parametrize(
    "data, counts",
    [
        ({"allocated": [{"student": "A"}, {"student": "B"}], "failed": "2"}, (2, 2)),
        ({"allocated_count": None, "allocated": 4, "failed": "n/a"}, (4, 0)),
        ({"allocated": {"total": 5}, "failed": True}, (0, 0)),
    ],
)
def test_allocation_counts_tolerate_odd_shapes(context, http, data, counts):
    http.add("POST", "/allocations/auto", 200, {"success": True, "data": data})

    result = AllocationService(context.api).auto_allocate()

    assert result.success
    assert (result.allocated, result.failed) == counts


def test_reallocate_rejection_becomes_failed_result(context, http):
    http.add("POST", "/allocations/reallocate", 409, {"message": "Allocation already running"})

    result = AllocationService(context.api).reallocate()

    assert not result.success
    assert result.message == "Re-allocation failed: Allocation already running"


def test_allocation_connectivity_error_propagates(context, http):
    http.fail("POST", "/allocations/auto", requests.ConnectionError("down"))

    with pytest.raises(ApiConnectionError):
        AllocationService(context.api).auto_allocate()


def test_export_csv_from_rows(context, http, tmp_path):
    http.add(
        "GET",
        "/allocation-reports/export",
        200,
        {"data": [{"student": "Ann", "room": "A1"}, {"student": "Bo", "block": {"name": "B"}}]},
    )

    path = AllocationService(context.api).export_report(tmp_path / "out" / "report.csv")

    assert path.read_text(encoding="utf-8").splitlines() == [
        "student,room,block",
        "Ann,A1,",
        'Bo,,"{""name"": ""B""}"',
    ]
    assert http.last()["params"] == {"format": "csv"}


def test_export_csv_plain_text_body(context, http, tmp_path):
    http.add("GET", "/allocation-reports/export", 200, text="student,room\nAnn,A1\n")

    path = AllocationService(context.api).export_report(tmp_path / "report.csv")

    assert path.read_text(encoding="utf-8") == "student,room\nAnn,A1"


def test_export_json(context, http, tmp_path):
    http.add("GET", "/allocation-reports/export", 200, {"data": [{"student": "Ann"}]})

    path = AllocationService(context.api).export_report(tmp_path / "report.json")

    assert json.loads(path.read_text(encoding="utf-8")) == [{"student": "Ann"}]
    assert http.last()["params"] == {"format": "json"}


def test_export_rejects_unknown_suffix(context, http, tmp_path):
    with pytest.raises(ValueError):
        AllocationService(context.api).export_report(tmp_path / "report.xlsx")

    assert http.calls == []
