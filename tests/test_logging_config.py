import logging

import pytest

from base.logging_config import LazyFileHandler, RedactTokenFilter, prune_error_logs, redact


@pytest.mark.parametrize(
    "text, expected",
    [
        ("Authorization: Bearer abc.def-123", "Authorization: Bearer ***"),
        ('{"token": "tok123", "id": 1}', '{"token": "***", "id": 1}'),
        ("token=tok123&x=1", "token=***&x=1"),
        ("GET /rooms (authenticated=True)", "GET /rooms (authenticated=True)"),
    ],
)
def test_redact(text, expected):
    assert redact(text) == expected


def test_filter_rewrites_formatted_message():
    record = logging.LogRecord("t", logging.INFO, __file__, 1, "sent %s", ("Bearer secret",), None)

    assert RedactTokenFilter().filter(record)

    assert record.getMessage() == "sent Bearer ***"


def test_error_log_created_on_first_error_only(tmp_path):
    handler = LazyFileHandler(tmp_path / "logs")
    handler.setFormatter(logging.Formatter("%(message)s"))

    assert not (tmp_path / "logs").exists()

    handler.handle(logging.LogRecord("t", logging.ERROR, __file__, 1, "boom", None, None))
    handler.close()

    assert handler.log_file.read_text(encoding="utf-8").strip() == "boom"


def test_prune_keeps_newest(tmp_path):
    for stamp in ("20240101_000000", "20240102_000000", "20240103_000000"):
        (tmp_path / f"dms_errors_{stamp}.log").write_text("", encoding="utf-8")
    (tmp_path / "other.log").write_text("", encoding="utf-8")

    removed = prune_error_logs(tmp_path, keep=1)

    assert [p.name for p in removed] == [
        "dms_errors_20240101_000000.log",
        "dms_errors_20240102_000000.log",
    ]
    assert sorted(p.name for p in tmp_path.iterdir()) == [
        "dms_errors_20240103_000000.log",
        "other.log",
    ]
