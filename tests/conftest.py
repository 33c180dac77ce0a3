import json
from collections import defaultdict
from typing import Any, Optional

import pytest
import requests
from faker import Faker

from base.auth.storage import MemorySessionStorage
from base.config import AppConfig
from base.context import create_context

API_URL = "http://dms.test/api"


def make_response(status_code: int, body: Any = None, text: Optional[str] = None) -> requests.Response:
    response = requests.Response()
    response.status_code = status_code
    response.encoding = "utf-8"
    if body is not None:
        response._content = json.dumps(body).encode("utf-8")
        response.headers["Content-Type"] = "application/json"
    elif text is not None:
        response._content = text.encode("utf-8")
        response.headers["Content-Type"] = "text/plain"
    else:
        response._content = b""
    return response


class FakeHttp:
    """Stands in for requests.Session.

    Responses are queued per (method, path). The last queued entry for a
    route keeps answering once the others are used up. An exception instance
    in the queue is raised instead of answered.
    """

    def __init__(self):
        self.routes: dict[tuple[str, str], list[Any]] = defaultdict(list)
        self.calls: list[dict[str, Any]] = []

    def add(self, method: str, path: str, status: int = 200, body: Any = None, text: Optional[str] = None):
        self.routes[(method.upper(), path)].append(make_response(status, body, text))
        return self

    def fail(self, method: str, path: str, error: Exception):
        self.routes[(method.upper(), path)].append(error)
        return self

    def request(self, method, url, params=None, json=None, headers=None, timeout=None):
        path = url[len(API_URL):]
        self.calls.append(
            {
                "method": method,
                "path": path,
                "params": params,
                "json": json,
                "headers": dict(headers or {}),
                "timeout": timeout,
            }
        )
        queue = self.routes.get((method.upper(), path))
        if not queue:
            raise AssertionError(f"Unexpected request: {method} {path}")
        answer = queue.pop(0) if len(queue) > 1 else queue[0]
        if isinstance(answer, Exception):
            raise answer
        return answer

    def last(self, path: Optional[str] = None) -> dict[str, Any]:
        calls = [c for c in self.calls if path is None or c["path"] == path]
        return calls[-1]


class ManualScheduler:
    def __init__(self):
        self.pending: list[tuple[float, Any]] = []

    def __call__(self, delay, callback):
        self.pending.append((delay, callback))

    def run_all(self):
        pending, self.pending = self.pending, []
        for _delay, callback in pending:
            callback()


@pytest.fixture
def fake():
    return Faker()


@pytest.fixture
def http():
    return FakeHttp()


@pytest.fixture
def storage():
    return MemorySessionStorage()


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def config(tmp_path):
    return AppConfig(api_url=API_URL, session_dir=tmp_path / "session", log_dir=tmp_path / "logs")


@pytest.fixture
def context(config, storage, http, scheduler):
    return create_context(config, storage=storage, http=http, scheduler=scheduler)


@pytest.fixture
def user_record(fake):
    def build(role: str = "student", **overrides):
        record = {
            "id": fake.random_int(min=1, max=10_000),
            "name": fake.name(),
            "email": fake.email(),
            "user_type": role,
            "status": "active",
        }
        record.update(overrides)
        return record

    return build


@pytest.fixture
def login_ok(http, user_record):
    """Queue a successful login for a freshly generated user and return (record, token)."""

    def queue(role: str = "student", token: str = "tok123", **overrides):
        record = user_record(role, **overrides)
        http.add(
            "POST",
            "/auth/login",
            200,
            {"success": True, "data": {"user": record, "token": token}},
        )
        return record, token

    return queue
