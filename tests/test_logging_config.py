# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Tests for clipcat.logging_config."""

from __future__ import annotations

import json
import logging
import sys

import pytest
import structlog

from clipcat.classifier import explain
from clipcat.errors import ConfigError
from clipcat.logging_config import DEFAULT_LEVEL, HANDLER_NAME, LOG_LEVELS, configure, resolve_level


@pytest.fixture(autouse=True)
def _reset_logging():
    root = logging.getLogger()
    old_handlers = root.handlers[:]
    old_level = root.level
    yield
    root.handlers = old_handlers
    root.setLevel(old_level)
    structlog.reset_defaults()


def _ours() -> list[logging.Handler]:
    return [h for h in logging.getLogger().handlers if h.get_name() == HANDLER_NAME]


# ---------------------------------------------------------------------------
# Levels
# ---------------------------------------------------------------------------


class TestResolveLevel:
    @pytest.mark.parametrize("name", LOG_LEVELS)
    def test_known_names(self, name: str):
        assert resolve_level(name) == getattr(logging, name)

    @pytest.mark.parametrize("name,expected", [("debug", logging.DEBUG), (" Info ", logging.INFO)])
    def test_case_and_whitespace(self, name: str, expected: int):
        assert resolve_level(name) == expected

    @pytest.mark.parametrize("name", ["LOUD", "", "CRITICAL", "NOTSET"])
    def test_unknown_name_raises(self, name: str):
        with pytest.raises(ConfigError, match="unknown log level"):
            resolve_level(name)

    def test_default_is_a_known_level(self):
        assert DEFAULT_LEVEL in LOG_LEVELS


class TestConfigureLevel:
    def test_default_level_is_warning(self):
        configure()
        assert logging.getLogger().level == logging.WARNING

    def test_custom_level(self):
        configure(level="DEBUG")
        assert logging.getLogger().level == logging.DEBUG

    def test_invalid_level_leaves_logging_untouched(self):
        before = logging.getLogger().handlers[:]
        with pytest.raises(ConfigError):
            configure(level="NONEXISTENT")
        assert logging.getLogger().handlers == before


# ---------------------------------------------------------------------------
# Handler ownership
# ---------------------------------------------------------------------------


class TestHandler:
    def test_single_tagged_stderr_handler(self):
        configure()
        ours = _ours()
        assert len(ours) == 1
        assert ours[0].stream is sys.stderr

    def test_reconfigure_replaces_own_handler(self):
        configure(json_output=False)
        configure(json_output=True)
        configure(json_output=False)
        assert len(_ours()) == 1

    def test_host_handlers_are_kept(self):
        host = logging.NullHandler()
        logging.getLogger().addHandler(host)
        configure()
        configure()
        assert host in logging.getLogger().handlers
        assert len(_ours()) == 1


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------


class TestConsoleOutput:
    def test_human_readable(self, capsys):
        configure(json_output=False)
        logging.getLogger("clipcat.test").warning("hello world")
        err = capsys.readouterr().err
        assert "hello world" in err
        assert "warn" in err.lower()
        assert not err.strip().startswith("{")

    def test_no_ansi_colors(self, capsys):
        configure(json_output=False)
        logging.getLogger("clipcat.test").error("plain")
        assert "\x1b[" not in capsys.readouterr().err

    def test_info_suppressed_by_default(self, capsys):
        configure()
        logging.getLogger("clipcat.test").info("not shown")
        assert capsys.readouterr().err == ""


class TestJsonOutput:
    def test_record_fields(self, capsys):
        configure(json_output=True)
        logging.getLogger("clipcat.classifier").warning("json test")
        parsed = json.loads(capsys.readouterr().err.strip())
        assert parsed["event"] == "json test"
        assert parsed["level"] == "warning"
        assert parsed["logger"] == "clipcat.classifier"
        assert parsed["timestamp"].endswith("Z")

    def test_keys_sorted(self, capsys):
        configure(json_output=True)
        logging.getLogger("clipcat.test").warning("order")
        line = capsys.readouterr().err.strip()
        assert list(json.loads(line)) == sorted(json.loads(line))

    def test_sanitised_confidence_warning(self, capsys):
        """The classifier's own warning comes out as one JSON line with its arguments applied."""
        configure(json_output=True)
        explain(None, [("dog", float("nan"))])
        lines = [json.loads(line) for line in capsys.readouterr().err.splitlines()]
        assert len(lines) == 1
        assert lines[0]["logger"] == "clipcat.classifier"
        assert "'dog'" in lines[0]["event"]

    def test_debug_traces_decision(self, capsys):
        configure(json_output=True, level="DEBUG")
        explain(None, [("golden_retriever", 0.91)])
        events = [json.loads(line)["event"] for line in capsys.readouterr().err.splitlines()]
        assert any("short-circuited" in event for event in events)

    def test_contextvars_merged(self, capsys):
        configure(json_output=True)
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(item_id="item123")
        try:
            structlog.get_logger("clipcat.test").warning("ctx test")
            parsed = json.loads(capsys.readouterr().err.strip())
            assert parsed["item_id"] == "item123"
        finally:
            structlog.contextvars.clear_contextvars()
