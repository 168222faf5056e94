# tests/unit/logging/test_unit_logging.py — v1
"""Tests for logging/ — context, formatters, rotating handler."""

from __future__ import annotations

import json
import logging
import sys
from logging.handlers import RotatingFileHandler

import pytest

from isr_cache.logging.context import clear_context, entry_context, get_context
from isr_cache.logging.handlers import create_rotating_handler, parse_size
from isr_cache.logging.logger import (
    ROOT_LOGGER,
    JsonFormatter,
    TextFormatter,
    get_logger,
    setup_logging,
)


def _record(msg: str = "Cache hit: k.json", exc_info=None) -> logging.LogRecord:
    return logging.LogRecord(
        name="isr_cache.cache.entry", level=logging.INFO, pathname=__file__,
        lineno=1, msg=msg, args=(), exc_info=exc_info,
    )


@pytest.fixture(autouse=True)
def _reset_logging():
    clear_context()
    yield
    clear_context()
    root = logging.getLogger(ROOT_LOGGER)
    for handler in root.handlers:
        handler.close()
    root.handlers.clear()


class TestLogContext:
    def test_empty_by_default(self):
        ctx = get_context()
        assert ctx.cache_key is None and ctx.source is None
        assert ctx.as_dict() == {}

    def test_entry_context_scopes_values(self):
        with entry_context("ntkrnlmp.pdb-abc", "pdb"):
            assert get_context().as_dict() == {"cache_key": "ntkrnlmp.pdb-abc", "source": "pdb"}
        assert get_context().cache_key is None

    def test_nested_context_restores_outer(self):
        with entry_context("outer", "linux"):
            with entry_context("inner", "pdb"):
                assert get_context().cache_key == "inner"
            assert get_context().cache_key == "outer"
            assert get_context().source == "linux"

    def test_restored_on_error(self):
        with pytest.raises(RuntimeError):
            with entry_context("k", "pdb"):
                raise RuntimeError("boom")
        assert get_context().cache_key is None


class TestFormatters:
    def test_json_formatter(self):
        line = JsonFormatter().format(_record())
        data = json.loads(line)
        assert data["level"] == "INFO"
        assert data["logger"] == "isr_cache.cache.entry"
        assert data["message"] == "Cache hit: k.json"
        assert "context" not in data

    def test_json_formatter_includes_context(self):
        with entry_context("k", "linux"):
            data = json.loads(JsonFormatter().format(_record()))
        assert data["context"] == {"cache_key": "k", "source": "linux"}

    def test_json_formatter_exception(self):
        try:
            raise OSError("disk full")
        except OSError:
            record = _record("Could not cache", exc_info=sys.exc_info())
        data = json.loads(JsonFormatter().format(record))
        assert "OSError: disk full" in data["exception"]

    def test_text_formatter(self):
        with entry_context("k", "pdb"):
            line = TextFormatter().format(_record())
        assert "[INFO    ]" in line
        assert "[k]" in line
        assert line.endswith("- Cache hit: k.json")


class TestSetupLogging:
    def test_get_logger_namespace(self):
        assert get_logger("cli").name == "isr_cache.cli"

    def test_console_only(self):
        setup_logging(level="DEBUG")
        root = logging.getLogger(ROOT_LOGGER)
        assert root.level == logging.DEBUG
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, TextFormatter)

    def test_rerun_replaces_handlers(self):
        setup_logging()
        setup_logging(log_format="json")
        root = logging.getLogger(ROOT_LOGGER)
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, JsonFormatter)

    def test_log_file(self, tmp_path):
        log_file = tmp_path / "logs" / "isr.log"
        setup_logging(log_format="json", log_file=log_file, rotation="1KB", retention=2)
        get_logger("test").warning("Published artifact %s", "k.json")
        for handler in logging.getLogger(ROOT_LOGGER).handlers:
            handler.flush()
        record = json.loads(log_file.read_text().splitlines()[-1])
        assert record["message"] == "Published artifact k.json"


class TestRotatingHandler:
    @pytest.mark.parametrize(
        ("size", "expected"),
        [("10MB", 10 * 1024**2), ("512 KB", 512 * 1024), ("4096", 4096), ("1gb", 1024**3)],
    )
    def test_parse_size(self, size, expected):
        assert parse_size(size) == expected

    @pytest.mark.parametrize("size", ["", "MB", "10 TB", "-1MB", "often"])
    def test_parse_size_invalid(self, size):
        with pytest.raises(ValueError, match="Invalid size"):
            parse_size(size)

    def test_create_handler(self, tmp_path):
        handler = create_rotating_handler(tmp_path / "a" / "isr.log", rotation="2KB", retention=3)
        try:
            assert isinstance(handler, RotatingFileHandler)
            assert handler.maxBytes == 2048
            assert handler.backupCount == 3
            assert (tmp_path / "a").is_dir()
        finally:
            handler.close()
