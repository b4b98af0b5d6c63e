import json
import logging

from src.api.logging_config import JSONFormatter


def _record(**extra):
    record = logging.LogRecord("src.api.test", logging.INFO, __file__, 1, "hello %s", ("world",), None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_json_line_with_extras():
    line = JSONFormatter().format(_record(ride_id="r1"))
    data = json.loads(line)

    assert data["message"] == "hello world"
    assert data["level"] == "INFO"
    assert data["logger"] == "src.api.test"
    assert data["ride_id"] == "r1"


def test_sensitive_extras_are_dropped():
    data = json.loads(JSONFormatter().format(_record(password="pw", token="t", username="alice")))

    assert "password" not in data
    assert "token" not in data
    assert data["username"] == "alice"
