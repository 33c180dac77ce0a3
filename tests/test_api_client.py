import json
from unittest.mock import MagicMock

import pytest
import requests

from base.api.client import ApiClient, decode_payload
from base.auth.guard import AccessDecision
from base.auth.storage import TOKEN_KEY, USER_KEY
from base.errors import CONNECTIVITY_MESSAGE, ApiConnectionError, ApiError, UnauthorizedError
from tests.conftest import API_URL, make_response


def _signed_in(storage, user_record, token="tok123"):
    storage.set_many({TOKEN_KEY: token, USER_KEY: json.dumps(user_record())})


def test_bearer_token_attached_when_signed_in(context, http, storage, user_record):
    _signed_in(storage, user_record)
    http.add("GET", "/rooms", 200, {"success": True, "data": []})

    context.api.rooms.get_all()

    headers = http.last()["headers"]
    assert headers["Authorization"] == "Bearer tok123"
    assert headers["Accept"] == "application/json"
    assert headers["Content-Type"] == "application/json"


def test_no_authorization_header_without_token(context, http):
    http.add("GET", "/rules", 200, {"success": True, "data": []})

    context.api.rules.get_all()

    assert "Authorization" not in http.last()["headers"]


def test_default_timeout_is_applied(context, http):
    http.add("GET", "/rules", 200, {"data": []})

    context.api.rules.get_all()

    assert http.last()["timeout"] == 30.0


def test_401_clears_session_and_redirects_to_login(context, http, storage, user_record):
    _signed_in(storage, user_record)
    http.add("GET", "/applications", 401, {"message": "Unauthenticated."})
    events = []
    context.router.subscribe(events.append)

    with pytest.raises(UnauthorizedError):
        context.api.applications.get_all()

    assert context.session.get_token() is None
    assert context.session.get_current_user() is None
    assert [e.path for e in events] == ["/login"]
    assert events[0].decision is AccessDecision.LOGIN_REQUIRED
    assert context.router.current_path == "/login"


def test_401_hands_rejected_token_to_handler(http):
    handler = MagicMock()
    client = ApiClient(API_URL, lambda: "old", session=http, on_unauthorized=handler)
    http.add("GET", "/issues", 401, {})

    with pytest.raises(UnauthorizedError):
        client.get("/issues")

    handler.assert_called_once_with("old")


def test_401_without_token_does_not_trigger_handler(http):
    handler = MagicMock()
    client = ApiClient(API_URL, lambda: None, session=http, on_unauthorized=handler)
    http.add("POST", "/auth/login", 401, {"message": "Invalid credentials"})

    with pytest.raises(UnauthorizedError) as exc_info:
        client.post("/auth/login", {"email": "a", "password": "b"})

    handler.assert_not_called()
    assert exc_info.value.message == "Invalid credentials"


def test_error_status_raises_api_error_with_payload(context, http):
    http.add("POST", "/applications", 422, {"message": "Invalid", "errors": {"academic_year": ["required"]}})

    with pytest.raises(ApiError) as exc_info:
        context.api.applications.create({})

    assert exc_info.value.status_code == 422
    assert exc_info.value.errors == {"academic_year": ["required"]}
    assert exc_info.value.message == "Invalid"


def test_error_without_message_gets_generic_text(context, http):
    http.add("GET", "/blocks", 503, text="")

    with pytest.raises(ApiError, match="status 503"):
        context.api.blocks.get_all()


@pytest.mark.parametrize(
    "error",
    [
        requests.ConnectionError("refused"),
        requests.Timeout("slow"),
        requests.exceptions.ChunkedEncodingError("Connection broken: IncompleteRead"),
        requests.exceptions.ContentDecodingError("bad gzip"),
        requests.exceptions.InvalidURL("no host"),
    ],
)
def test_transport_failures_become_connectivity_errors(context, http, error):
    http.fail("GET", "/rooms-stats", error)

    with pytest.raises(ApiConnectionError) as exc_info:
        context.api.rooms.get_stats()

    assert exc_info.value.message == CONNECTIVITY_MESSAGE


def test_no_retry_on_failure(context, http):
    http.add("GET", "/reports/rooms", 500, {"message": "boom"})

    with pytest.raises(ApiError):
        context.api.reports.get_rooms_report()

    assert len(http.calls) == 1


def test_decode_payload_shapes():
    assert decode_payload(make_response(204)) == {}
    assert decode_payload(make_response(200, [1, 2])) == {"data": [1, 2]}
    assert decode_payload(make_response(200, text="id,name\n1,A\n")) == {"message": "id,name\n1,A"}


def test_response_helpers(context, http):
    http.add("GET", "/rooms/my-room", 200, {"success": True, "message": "ok", "data": {"room_number": "A1"}})

    response = context.api.rooms.get_my_room()

    assert response.success
    assert response.message == "ok"
    assert response.data == {"room_number": "A1"}


def test_url_for_joins_without_double_slashes():
    client = ApiClient("http://dms.test/api/", lambda: None, session=MagicMock())

    assert client.url_for("/rooms") == "http://dms.test/api/rooms"
    assert client.url_for("rooms") == "http://dms.test/api/rooms"


@pytest.mark.parametrize(
    "call, method, path",
    [
        (lambda api: api.issues.get_mine(), "GET", "/issues/my-issues"),
        (lambda api: api.applications.get_stats(), "GET", "/applications-stats"),
        (lambda api: api.applications.approve(7), "POST", "/applications/7/approve"),
        (lambda api: api.change_requests.reject(3, {"reason": "x"}), "POST", "/change-requests/3/reject"),
        (lambda api: api.temporary_leave.mark_returned(4), "POST", "/temporary-leave/4/mark-returned"),
        (lambda api: api.rules.get_admin_view(), "GET", "/rules-admin"),
        (lambda api: api.admin.get_pending_users(), "GET", "/users/pending"),
        (lambda api: api.admin.update_user_status(9, {"status": "active"}), "PUT", "/users/9/status"),
        (lambda api: api.allocations.auto_allocate(), "POST", "/allocations/auto"),
        (lambda api: api.allocations.get_report(), "GET", "/allocation-reports"),
        (lambda api: api.notifications.mark_all_as_read(), "POST", "/notifications/mark-all-read"),
        (lambda api: api.blocks.get_availability("female"), "GET", "/blocks/availability"),
    ],
)
def test_endpoint_routes(context, http, call, method, path):
    http.add(method, path, 200, {"success": True})

    call(context.api)

    assert http.last()["method"] == method
    assert http.last()["path"] == path


def test_query_parameters_are_forwarded(context, http):
    http.add("GET", "/blocks/availability", 200, {"data": []})
    http.add("GET", "/allocation-reports/export", 200, text="a,b")

    context.api.blocks.get_availability("male")
    context.api.allocations.export_report("csv")

    assert http.last("/blocks/availability")["params"] == {"gender": "male"}
    assert http.last("/allocation-reports/export")["params"] == {"format": "csv"}


def test_export_rejects_unknown_format(context):
    with pytest.raises(ValueError, match="xlsx"):
        context.api.allocations.export_report("xlsx")
