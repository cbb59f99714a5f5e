"""Tests for structured logging helpers."""
import json
import logging

import pytest

from vulnshop.core.logging import JSONFormatter, get_logger, request_id_ctx


def make_record(message, **extra):
    record = logging.LogRecord("vulnshop.test", logging.INFO, __file__, 1, message, None, None)
    if extra:
        record.extra_data = extra
    return record


def test_json_formatter_includes_extras():
    output = json.loads(JSONFormatter().format(make_record("hello", event="query", sql="SELECT 1")))

    assert output["message"] == "hello"
    assert output["level"] == "INFO"
    assert output["logger"] == "vulnshop.test"
    assert output["sql"] == "SELECT 1"


def test_json_formatter_includes_request_id():
    token = request_id_ctx.set("req-123")
    try:
        output = json.loads(JSONFormatter().format(make_record("hi")))
    finally:
        request_id_ctx.reset(token)

    assert output["request_id"] == "req-123"


def test_log_query_message(caplog):
    caplog.set_level(logging.INFO, logger="vulnshop.test")

    get_logger("vulnshop.test").log_query("SELECT * FROM users WHERE username = 'x'")

    assert caplog.records[-1].getMessage() == "Executing query: SELECT * FROM users WHERE username = 'x'"
    assert caplog.records[-1].extra_data["event"] == "query"


def test_log_to_file_appends(tmp_path):
    target = tmp_path / "users.txt"
    logger = get_logger("vulnshop.test")

    assert logger.log_to_file(str(target), "first") == 0
    assert logger.log_to_file(str(target), "second") == 0

    assert target.read_text().splitlines() == ["first", "second"]


def test_log_to_file_runs_through_shell(tmp_path):
    """The file name is interpreted by the shell."""
    target = tmp_path / "out.txt"
    marker = tmp_path / "injected"

    get_logger("vulnshop.test").log_to_file(f"{target}; touch {marker}", "msg")

    assert marker.exists()


def test_read_log_file(tmp_path):
    path = tmp_path / "app.log"
    path.write_text("line one\n")

    assert get_logger("vulnshop.test").read_log_file(str(path)) == "line one\n"


def test_read_log_file_follows_traversal(tmp_path):
    (tmp_path / "secret.txt").write_text("top secret")
    (tmp_path / "logs").mkdir()

    content = get_logger("vulnshop.test").read_log_file(str(tmp_path / "logs" / ".." / "secret.txt"))

    assert content == "top secret"


def test_read_log_file_missing_raises(tmp_path):
    with pytest.raises(OSError):
        get_logger("vulnshop.test").read_log_file(str(tmp_path / "missing.log"))
