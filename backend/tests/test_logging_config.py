"""
Unit tests for logging_config.py.
"""
import json
import logging
import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from leadbot.logging_config import (
    JSONFormatter,
    clear_context,
    current_context,
    language_var,
    request_id_var,
    session_id_var,
)


def make_record(message="hello", **attrs):
    record = logging.LogRecord("leadbot.test", logging.INFO, "", 0, message, (), None)
    for key, value in attrs.items():
        setattr(record, key, value)
    return record


class TestJSONFormatter:
    """Test JSONFormatter.format()."""

    def teardown_method(self):
        clear_context()

    def test_basic_fields(self):
        data = json.loads(JSONFormatter().format(make_record()))
        assert data["level"] == "INFO"
        assert data["logger"] == "leadbot.test"
        assert data["message"] == "hello"
        assert "request_id" not in data

    def test_context_injected(self):
        request_id_var.set("abcd1234")
        session_id_var.set("session-9")
        language_var.set("hi")
        data = json.loads(JSONFormatter().format(make_record()))
        assert data["request_id"] == "abcd1234"
        assert data["session_id"] == "session-9"
        assert data["language"] == "hi"

    def test_action_and_extra_data(self):
        record = make_record(action="chat_reply_sent", extra_data={"results": 3})
        data = json.loads(JSONFormatter().format(record))
        assert data["action"] == "chat_reply_sent"
        assert data["results"] == 3

    def test_indic_text_not_escaped(self):
        line = JSONFormatter().format(make_record("मुझे घर चाहिए"))
        assert "मुझे घर चाहिए" in line


class TestContext:
    """Test context helpers."""

    def test_clear_context(self):
        session_id_var.set("s1")
        clear_context()
        assert current_context() == {}
