import json
import threading
from unittest.mock import MagicMock

import pytest
import requests

from base.api.client import ApiResponse
from base.auth.models import Role, User
from base.auth.session_manager import SessionManager
from base.auth.storage import TOKEN_KEY, USER_KEY, MemorySessionStorage, StorageUnavailable
from base.errors import (
    AuthError,
    ConflictError,
    ConnectivityError,
    ServerError,
    UnauthorizedError,
    ValidationError,
)


def test_login_persists_token_and_user(context, http, storage):
    http.add(
        "POST",
        "/auth/login",
        200,
        {
            "success": True,
            "data": {
                "user": {"id": 1, "name": "A", "user_type": "student", "status": "active"},
                "token": "tok123",
            },
        },
    )

    user, token = context.session.login("a@b.com", "secret")

    assert token == "tok123"
    assert user.id == 1
    assert context.session.get_current_user().id == 1
    assert context.session.get_token() == "tok123"
    assert http.last()["json"] == {"email": "a@b.com", "password": "secret"}
    assert json.loads(storage.get(USER_KEY))["user_type"] == "student"


def test_login_validation_error_names_field(context, http, storage):
    http.add("POST", "/auth/login", 422, {"errors": {"email": ["is invalid"]}})

    with pytest.raises(ValidationError) as exc_info:
        context.session.login("bad", "secret")

    assert "email" in str(exc_info.value)
    assert "is invalid" in str(exc_info.value)
    assert exc_info.value.errors == {"email": ["is invalid"]}
    assert storage.snapshot() == {}


def test_login_rejected_credentials_use_server_message(context, http):
    http.add("POST", "/auth/login", 401, {"success": False, "message": "Invalid credentials"})

    with pytest.raises(AuthError, match="Invalid credentials"):
        context.session.login("a@b.com", "wrong")

    assert not context.session.is_authenticated()


@pytest.mark.parametrize(
    "error",
    [
        requests.ConnectionError("refused"),
        requests.exceptions.ChunkedEncodingError("Connection broken: IncompleteRead"),
    ],
)
def test_login_without_response_is_connectivity_error(context, http, error):
    http.fail("POST", "/auth/login", error)

    with pytest.raises(ConnectivityError, match="Unable to connect to server"):
        context.session.login("a@b.com", "secret")


def test_login_without_token_is_rejected(context, http, user_record, storage):
    http.add("POST", "/auth/login", 200, {"success": True, "data": {"user": user_record()}})

    with pytest.raises(AuthError, match="token"):
        context.session.login("a@b.com", "secret")

    assert storage.snapshot() == {}


def test_authenticated_between_login_and_logout(context, http, login_ok):
    login_ok()
    http.add("POST", "/auth/logout", 200, {"success": True})

    assert not context.session.is_authenticated()
    context.session.login("a@b.com", "secret")
    assert context.session.is_authenticated()
    context.session.logout()
    assert not context.session.is_authenticated()
    assert context.session.get_current_user() is None


def test_logout_clears_session_when_server_unreachable(context, http, login_ok):
    login_ok()
    http.fail("POST", "/auth/logout", requests.ConnectionError("down"))

    context.session.login("a@b.com", "secret")
    context.session.logout()

    assert context.session.get_token() is None
    assert context.session.get_current_user() is None


def test_registration_requiring_approval_persists_nothing(context, http, user_record, storage):
    http.add(
        "POST",
        "/auth/register",
        201,
        {
            "success": True,
            "data": {
                "user": user_record("supervisor", status="pending"),
                "token": "should-not-be-kept",
                "requires_approval": True,
            },
        },
    )

    result = context.session.register({"name": "S", "email": "s@x.com", "user_type": "supervisor"})

    assert result.requires_approval
    assert storage.snapshot() == {}
    assert context.session.get_token() is None


def test_registration_without_approval_signs_in(context, http, user_record):
    record = user_record("student")
    http.add(
        "POST",
        "/auth/register",
        201,
        {"success": True, "data": {"user": record, "token": "new-token"}},
    )

    result = context.session.register({"name": record["name"], "email": record["email"]})

    assert not result.requires_approval
    assert context.session.get_token() == "new-token"
    assert context.session.get_current_user().email == record["email"]


@pytest.mark.parametrize(
    "status, body, error",
    [
        (422, {"errors": {"email": ["has already been taken"]}}, ValidationError),
        (409, {"message": "exists"}, ConflictError),
        (500, {"message": "boom"}, ServerError),
        (400, {"message": "bad request"}, AuthError),
    ],
)
def test_registration_errors(context, http, status, body, error):
    http.add("POST", "/auth/register", status, body)

    with pytest.raises(error):
        context.session.register({"email": "x@y.com"})


def test_conflict_message_is_user_facing(context, http):
    http.add("POST", "/auth/register", 409, {"message": "duplicate key"})

    with pytest.raises(ConflictError, match="Email already exists"):
        context.session.register({"email": "x@y.com"})


def test_corrupt_user_record_reads_as_logged_out():
    storage = MemorySessionStorage({TOKEN_KEY: "tok", USER_KEY: "{not json"})
    session = SessionManager(storage)

    assert session.get_current_user() is None
    assert not session.is_authenticated()


def test_token_without_user_is_not_authenticated():
    session = SessionManager(MemorySessionStorage({TOKEN_KEY: "tok"}))

    assert session.get_token() == "tok"
    assert not session.is_authenticated()


def test_role_helpers(user_record):
    record = user_record("supervisor")
    storage = MemorySessionStorage(
        {TOKEN_KEY: "tok", USER_KEY: json.dumps(record)}
    )
    session = SessionManager(storage)

    assert session.is_supervisor()
    assert not session.is_student()
    assert not session.is_admin()
    assert session.has_role("SUPERVISOR")
    assert not session.has_role("janitor")


def test_refresh_user_updates_stored_record(context, http, login_ok):
    record, _ = login_ok("student")
    context.session.login("a@b.com", "secret")
    http.add("GET", "/auth/me", 200, {"success": True, "data": dict(record, name="Renamed")})

    user = context.session.refresh_user()

    assert user.name == "Renamed"
    assert context.session.get_current_user().name == "Renamed"
    assert http.last()["headers"]["Authorization"] == "Bearer tok123"


def test_update_profile_validation(context, http, login_ok):
    login_ok()
    context.session.login("a@b.com", "secret")
    http.add("PUT", "/auth/profile", 422, {"errors": {"phone": ["is too short"]}})

    with pytest.raises(ValidationError, match="phone: is too short"):
        context.session.update_profile({"phone": "1"})


def test_handle_unauthorized_ignores_replaced_token(user_record):
    storage = MemorySessionStorage({TOKEN_KEY: "new", USER_KEY: json.dumps(user_record())})
    session = SessionManager(storage)

    assert session.handle_unauthorized("old") is False
    assert session.get_token() == "new"

    assert session.handle_unauthorized("new") is True
    assert session.get_token() is None


def test_storage_failure_while_saving_is_auth_error(user_record):
    storage = MagicMock()
    storage.set_many.side_effect = StorageUnavailable("disk full")
    auth_api = MagicMock()
    auth_api.login.return_value = ApiResponse(
        200, {"data": {"user": user_record(), "token": "tok"}}
    )
    session = SessionManager(storage, auth_api)

    with pytest.raises(AuthError, match="Could not save the session"):
        session.login("a@b.com", "secret")


class _ControlledAuth:
    """Auth API whose login calls block until released, in the order chosen by the test."""

    def __init__(self, responses):
        self.responses = responses
        self.gates = {email: threading.Event() for email in responses}
        self.entered = {email: threading.Event() for email in responses}

    def login(self, email, password):
        self.entered[email].set()
        self.gates[email].wait(timeout=5)
        return self.responses[email]

    def logout(self):
        return ApiResponse(200, {"success": True})


def _login_response(user_id, role, token):
    user = {"id": user_id, "name": f"U{user_id}", "email": f"u{user_id}@x.com", "user_type": role}
    return ApiResponse(200, {"success": True, "data": {"user": user, "token": token}})


def test_overlapping_logins_keep_token_and_user_together():
    storage = MemorySessionStorage()
    auth = _ControlledAuth(
        {
            "first@x.com": _login_response(1, "student", "tok-first"),
            "second@x.com": _login_response(2, "admin", "tok-second"),
        }
    )
    session = SessionManager(storage, auth)

    first = threading.Thread(target=session.login, args=("first@x.com", "pw"))
    first.start()
    assert auth.entered["first@x.com"].wait(timeout=5)

    second = threading.Thread(target=session.login, args=("second@x.com", "pw"))
    second.start()
    assert auth.entered["second@x.com"].wait(timeout=5)

    # the newer login answers first, the stale one afterwards
    auth.gates["second@x.com"].set()
    second.join(timeout=5)
    auth.gates["first@x.com"].set()
    first.join(timeout=5)

    user = session.get_current_user()
    assert session.get_token() == "tok-second"
    assert user.id == 2
    assert user.role is Role.ADMIN


def test_logout_discards_login_still_in_flight():
    storage = MemorySessionStorage()
    auth = _ControlledAuth({"late@x.com": _login_response(5, "student", "tok-late")})
    session = SessionManager(storage, auth)

    worker = threading.Thread(target=session.login, args=("late@x.com", "pw"))
    worker.start()
    assert auth.entered["late@x.com"].wait(timeout=5)

    session.logout()
    auth.gates["late@x.com"].set()
    worker.join(timeout=5)

    assert storage.snapshot() == {}


def test_user_round_trips_through_storage(user_record):
    record = user_record("student", student_id="S-100", year_level="2", nickname="Bo")
    user = User.from_dict(record)

    restored = User.from_dict(json.loads(json.dumps(user.to_dict())))

    assert restored == user
    assert restored.year_level == 2
    assert restored.extra == {"nickname": "Bo"}


def test_api_error_passes_through_refresh_as_auth_error(context, http, login_ok):
    login_ok()
    context.session.login("a@b.com", "secret")
    http.add("GET", "/auth/me", 500, {"message": "db down"})

    with pytest.raises(AuthError, match="db down"):
        context.session.refresh_user()


def test_expired_session_during_refresh_is_not_rewrapped(context, http, login_ok):
    login_ok()
    context.session.login("a@b.com", "secret")
    http.add("GET", "/auth/me", 401, {"message": "Unauthenticated."})

    with pytest.raises(UnauthorizedError):
        context.session.refresh_user()

    assert context.session.get_token() is None
