"""Tests for settings, logging and trace-context helpers."""

from __future__ import annotations

import logging
from pathlib import Path

from pagehub.common.trace_context import TRACE_HEADER, TraceContext, new_trace_id
from pagehub.config import Settings
from pagehub.logger import configure_logging, get_logger


class TestSettings:
    def test_reads_environment(self, monkeypatch, tmp_path) -> None:
        monkeypatch.setenv("PAGEHUB_WORKSPACE", str(tmp_path))
        monkeypatch.setenv("HTTP_BASE_URL", "https://api.example.com")
        monkeypatch.setenv("HTTP_TIMEOUT_MS", "2500")
        monkeypatch.setenv("LOG_LEVEL", "DEBUG")

        s = Settings()

        assert s.workspace_dir == Path(tmp_path)
        assert s.db_path == Path(tmp_path) / "pages.db"
        assert s.http_base_url == "https://api.example.com"
        assert s.http_timeout_ms == 2500
        assert s.log_level == "DEBUG"

    def test_empty_timeout_means_transport_default(self, monkeypatch) -> None:
        monkeypatch.setenv("HTTP_TIMEOUT_MS", "")
        assert Settings().http_timeout_ms is None

    def test_schema_bundled_with_package(self) -> None:
        assert Settings().schema_path.is_file()

    def test_ensure_workspace_creates_directory(self, tmp_path) -> None:
        s = Settings(workspace_dir=tmp_path / "nested" / "ws")
        s.ensure_workspace()
        assert s.workspace_dir.is_dir()


class TestLogging:
    def test_get_logger_attaches_single_handler(self) -> None:
        logger = get_logger("pagehub.tests.handler")
        get_logger("pagehub.tests.handler")
        assert len(logger.handlers) == 1

    def test_configure_logging_sets_package_level(self) -> None:
        configure_logging("debug")
        assert logging.getLogger("pagehub").level == logging.DEBUG
        configure_logging("nonsense")
        assert logging.getLogger("pagehub").level == logging.INFO


class TestTraceContext:
    def test_new_trace_id_is_16_hex_chars(self) -> None:
        trace_id = new_trace_id()
        assert len(trace_id) == 16
        int(trace_id, 16)

    def test_from_headers_reuses_incoming_id(self) -> None:
        assert TraceContext.from_headers({TRACE_HEADER: "abc"}).trace_id == "abc"

    def test_from_headers_mints_when_missing(self) -> None:
        assert len(TraceContext.from_headers({}).trace_id) == 16

    def test_as_headers(self) -> None:
        assert TraceContext("xyz").as_headers() == {TRACE_HEADER: "xyz"}
