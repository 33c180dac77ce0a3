import json

import pytest

from base.auth.storage import (
    TOKEN_KEY,
    USER_KEY,
    FileSessionStorage,
    MemorySessionStorage,
    StorageUnavailable,
)


@pytest.fixture
def session_file(tmp_path):
    return tmp_path / "session" / "session.json"


def test_file_storage_persists_across_instances(session_file):
    FileSessionStorage(session_file).set_many({TOKEN_KEY: "tok", USER_KEY: "{}"})

    reopened = FileSessionStorage(session_file)

    assert reopened.get(TOKEN_KEY) == "tok"
    assert reopened.get(USER_KEY) == "{}"


def test_missing_file_reads_as_empty(session_file):
    assert FileSessionStorage(session_file).get(TOKEN_KEY) is None


def test_write_leaves_no_temp_files(session_file):
    storage = FileSessionStorage(session_file)
    storage.set(TOKEN_KEY, "a")
    storage.set(TOKEN_KEY, "b")

    assert sorted(p.name for p in session_file.parent.iterdir()) == ["session.json"]
    assert json.loads(session_file.read_text(encoding="utf-8")) == {TOKEN_KEY: "b"}


def test_removing_last_key_deletes_file(session_file):
    storage = FileSessionStorage(session_file)
    storage.set(TOKEN_KEY, "tok")

    storage.remove(TOKEN_KEY)

    assert not session_file.exists()
    assert storage.get(TOKEN_KEY) is None


def test_remove_missing_key_is_noop(session_file):
    storage = FileSessionStorage(session_file)
    storage.set(USER_KEY, "{}")

    storage.remove(TOKEN_KEY)

    assert storage.get(USER_KEY) == "{}"


def test_corrupt_file_reads_as_empty(session_file):
    session_file.parent.mkdir(parents=True)
    session_file.write_text("{not json", encoding="utf-8")

    storage = FileSessionStorage(session_file)

    assert storage.get(TOKEN_KEY) is None
    storage.set(TOKEN_KEY, "fresh")
    assert storage.get(TOKEN_KEY) == "fresh"


def test_non_string_values_are_ignored(session_file):
    session_file.parent.mkdir(parents=True)
    session_file.write_text(json.dumps({TOKEN_KEY: 5, USER_KEY: "{}"}), encoding="utf-8")

    storage = FileSessionStorage(session_file)

    assert storage.get(TOKEN_KEY) is None
    assert storage.get(USER_KEY) == "{}"


def test_unwritable_location_raises_storage_unavailable(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("", encoding="utf-8")
    storage = FileSessionStorage(blocker / "session.json")

    with pytest.raises(StorageUnavailable):
        storage.set(TOKEN_KEY, "tok")


def test_memory_storage_snapshot_is_a_copy():
    storage = MemorySessionStorage({TOKEN_KEY: "tok"})

    snapshot = storage.snapshot()
    snapshot[USER_KEY] = "{}"

    assert storage.get(USER_KEY) is None
