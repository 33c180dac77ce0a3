import threading

import pytest

from features.common.resources import extract_items, extract_record, fetch_together, format_cell, lookup


@pytest.mark.parametrize(
    "payload, expected",
    [
        ([{"id": 1}, "junk"], [{"id": 1}]),
        ({"data": [{"id": 2}]}, [{"id": 2}]),
        ({"data": {"data": [{"id": 3}], "total": 1}}, [{"id": 3}]),
        ({"message": "nothing"}, []),
        (None, []),
    ],
)
def test_extract_items(payload, expected):
    assert extract_items(payload) == expected


def test_extract_record():
    assert extract_record({"data": {"id": 1}}) == {"id": 1}
    assert extract_record({"id": 2}) == {"id": 2}
    assert extract_record("text") == {}


def test_format_cell():
    assert format_cell(None) == ""
    assert format_cell(True) == "Yes"
    assert format_cell(["wifi", "desk"]) == "wifi, desk"
    assert format_cell({"name": "Block A"}) == "Block A"
    assert format_cell({"other": 1}) == ""
    assert format_cell(12) == "12"


def test_lookup_nested_keys():
    row = {"student": {"name": "Ann"}, "status": "pending"}

    assert lookup(row, "student.name") == "Ann"
    assert lookup(row, "status.name") is None
    assert lookup(row, "missing") is None


def test_fetch_together_keeps_keys():
    results = fetch_together({"a": lambda: 1, "b": lambda: 2})

    assert results == {"a": 1, "b": 2}


def test_fetch_together_runs_concurrently():
    barrier = threading.Barrier(2, timeout=5)

    def call():
        barrier.wait()
        return True

    assert fetch_together({"a": call, "b": call}) == {"a": True, "b": True}


def test_fetch_together_is_all_or_nothing():
    done = []

    def ok():
        done.append("ok")
        return "fine"

    def broken():
        raise RuntimeError("stats unavailable")

    with pytest.raises(RuntimeError, match="stats unavailable"):
        fetch_together({"ok": ok, "broken": broken})

    assert done == ["ok"]


def test_fetch_together_empty():
    assert fetch_together({}) == {}
