import json
import logging
from pathlib import Path

import pytest

from netsup.utils import create_supervisor_logger
from netsup.utils._logging import _append_files, _resolve_level


class TestResolveLevel:
    def test_defaults_to_info(self) -> None:
        assert _resolve_level(None) == logging.INFO

    def test_explicit_level(self) -> None:
        assert _resolve_level("warning") == logging.WARNING

    def test_unknown_level_falls_back_to_info(self) -> None:
        assert _resolve_level("chatty") == logging.INFO

    def test_log_level_env_applies_without_explicit_level(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("NETSUP_LOG_LEVEL", "error")

        assert _resolve_level(None) == logging.ERROR
        assert _resolve_level("warning") == logging.WARNING

    def test_debug_env_wins(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("NETSUP_DEBUG", "1")

        assert _resolve_level("error") == logging.DEBUG


class TestFileLogging:
    def test_creates_log_directory(self, tmp_path: Path) -> None:
        log_path = tmp_path / "logs" / "netsup.log"

        logger = create_supervisor_logger(log_file=str(log_path))
        logger.info("supervisor_started")

        assert log_path.exists()

    def test_json_lines(self, tmp_path: Path) -> None:
        log_path = tmp_path / "netsup.log"
        logger = create_supervisor_logger(log_format="json", log_file=str(log_path))

        logger.info("service_ready", service="frr")

        record = json.loads(log_path.read_text().splitlines()[-1])
        assert record["event"] == "service_ready"
        assert record["service"] == "frr"
        assert record["level"] == "info"
        assert "timestamp" in record

    def test_text_lines(self, tmp_path: Path) -> None:
        log_path = tmp_path / "netsup.log"
        logger = create_supervisor_logger(log_format="text", log_file=str(log_path))

        logger.info("service_ready", service="frr")

        content = log_path.read_text()
        assert "service_ready" in content
        assert "service=frr" in content

    def test_filters_below_level(self, tmp_path: Path) -> None:
        log_path = tmp_path / "netsup.log"
        logger = create_supervisor_logger(
            level="error", log_format="json", log_file=str(log_path)
        )

        logger.warning("hidden")
        logger.error("startup_failed", service="snmpd")

        lines = log_path.read_text().splitlines()
        assert len(lines) == 1
        assert json.loads(lines[0])["event"] == "startup_failed"

    def test_repeated_loggers_share_one_handle(self, tmp_path: Path) -> None:
        log_path = tmp_path / "netsup.log"

        first = create_supervisor_logger(log_format="json", log_file=str(log_path))
        handle = _append_files[log_path.resolve()]
        for _ in range(50):
            _ = create_supervisor_logger(log_format="json", log_file=str(log_path))
        second = create_supervisor_logger(
            log_format="json", log_file=str(tmp_path / "." / "netsup.log")
        )

        first.info("supervisor_started")
        second.info("service_ready", service="frr")

        assert _append_files[log_path.resolve()] is handle
        assert not handle.closed
        lines = log_path.read_text().splitlines()
        events = [json.loads(line)["event"] for line in lines]
        assert events == ["supervisor_started", "service_ready"]


class TestRotation:
    def test_rotates_when_size_exceeded(self, tmp_path: Path) -> None:
        log_path = tmp_path / "netsup.log"
        logger = create_supervisor_logger(
            log_file=str(log_path), max_bytes=200, backup_count=1
        )

        for n in range(20):
            logger.info("probe_attempt", attempt=n)

        assert (tmp_path / "netsup.log.1").exists()
        assert "probe_attempt" in log_path.read_text()

    def test_needs_both_settings(self, tmp_path: Path) -> None:
        log_path = tmp_path / "netsup.log"
        logger = create_supervisor_logger(log_file=str(log_path), max_bytes=200)

        for n in range(20):
            logger.info("probe_attempt", attempt=n)

        assert not (tmp_path / "netsup.log.1").exists()

    def test_repeated_loggers_do_not_duplicate_lines(self, tmp_path: Path) -> None:
        log_path = tmp_path / "netsup.log"
        for _ in range(2):
            logger = create_supervisor_logger(
                log_file=str(log_path), max_bytes=10_000, backup_count=1
            )

        logger.info("once")

        assert log_path.read_text().count("once") == 1


class TestStderr:
    def test_empty_log_file_means_stderr(
        self, capsys: pytest.CaptureFixture[str]
    ) -> None:
        logger = create_supervisor_logger(level="info")

        logger.info("shutdown_complete")

        captured = capsys.readouterr()
        assert "shutdown_complete" in captured.err
        assert captured.out == ""
