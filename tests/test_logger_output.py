"""Tests for the logger and rich output helpers."""

from __future__ import annotations

import io
from pathlib import Path

from rich.console import Console

from backitup.batch import BatchResult, PathResult
from backitup.utils.io import WriteResult
from backitup.utils.logger import BackupLogger, SilentLogger
from backitup.utils.output import print_batch_summary, print_write_result


def _recording() -> Console:
    return Console(record=True, width=200, file=io.StringIO())


# ===================================================================
# Logger
# ===================================================================


def test_logger_flush_to_file(tmp_path: Path):
    log = BackupLogger(quiet=True)
    log.info("test message 1")
    log.warn("warning message")
    log.error("error message")

    log_dir = tmp_path / "logs"
    log_file = log.flush_to_file(log_dir)

    assert log_file is not None
    assert list(log_dir.glob("backitup-*.log")) == [log_file]
    content = log_file.read_text()
    assert "[INFO] test message 1" in content
    assert "[WARN] warning message" in content
    assert "[ERROR] error message" in content


def test_logger_flush_appends_and_clears(tmp_path: Path):
    log = SilentLogger()
    log.info("first")
    log.flush_to_file(tmp_path)
    log.info("second")
    log_file = log.flush_to_file(tmp_path)

    content = log_file.read_text()
    assert content.count("first") == 1
    assert "second" in content
    assert log.messages == []


def test_logger_flush_empty_buffer(tmp_path: Path):
    """Flushing with no messages should not create a file."""
    log = SilentLogger()
    log_dir = tmp_path / "logs"
    assert log.flush_to_file(log_dir) is None
    assert not log_dir.exists()


def test_logger_section():
    log = SilentLogger()
    log.section("Backing up")
    assert any("=== Backing up ===" in line for line in log.messages)


def test_logger_dry_run_prefix():
    log = SilentLogger(dry_run=True)
    log.info("msg")
    assert any("[DRY-RUN] msg" in line for line in log.messages)


def test_logger_escapes_markup():
    log = BackupLogger()
    log._console = _recording()
    log.info("[bold]#data.txt-2023#[/bold]")
    assert "[bold]#data.txt-2023#[/bold]" in log._console.export_text()


# ===================================================================
# Output
# ===================================================================


def test_batch_summary_success():
    console = _recording()
    result = BatchResult(
        success=True,
        dry_run=False,
        path_results=[PathResult(source="data.txt", backup_path=Path("#data.txt-2023-06-27-21-01-13#"))],
    )

    print_batch_summary(result, console=console)

    text = console.export_text()
    assert "1/1 path backed up, 0 errors" in text
    assert "#data.txt-2023-06-27-21-01-13#" in text


def test_batch_summary_with_errors():
    console = _recording()
    result = BatchResult(
        success=False,
        dry_run=False,
        path_results=[
            PathResult(source="a", backup_path=Path("#a-2023-06-27-21-01-13#")),
            PathResult(source="/", error_kind="invalid_path", error="Path is root."),
            PathResult(source="gone", error_kind="not_found", error="Path does not exist."),
        ],
    )

    print_batch_summary(result, console=console)

    text = console.export_text()
    assert "1/3 paths backed up, 2 errors" in text
    assert "Path is root." in text
    assert "Path does not exist." in text


def test_batch_summary_dry_run_and_log_file():
    console = _recording()
    result = BatchResult(
        success=True,
        dry_run=True,
        path_results=[PathResult(source="x", backup_path=Path("#x-2023-06-27-21-01-13#"))],
        log_file=Path("logs/backitup-2023-06-27.log"),
    )

    print_batch_summary(result, console=console)

    text = console.export_text()
    assert "planned" in text
    assert "DRY RUN" in text
    assert "backitup-2023-06-27.log" in text


def test_write_result_with_backup():
    console = _recording()
    wr = WriteResult(
        path="out.txt",
        written=True,
        bytes_written=3,
        backup_path=Path("#out.txt-2023-06-27-21-01-13#"),
        message="Written: out.txt (3 bytes)",
    )

    print_write_result(wr, console=console)

    text = console.export_text()
    assert "Backup:  #out.txt-2023-06-27-21-01-13#" in text
    assert "Written: out.txt (3 bytes)" in text


def test_write_result_dry_run():
    console = _recording()
    wr = WriteResult(path="out.txt", written=False, message="out.txt: WOULD CREATE (3 bytes)")

    print_write_result(wr, console=console)

    assert "WOULD CREATE" in console.export_text()
