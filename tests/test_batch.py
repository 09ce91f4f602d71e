"""Tests for the batch runner."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

from backitup.batch import BatchRunner
from backitup.config import BackItUpConfig, BackupOptions
from backitup.utils.logger import SilentLogger


def _config(tmp_path: Path, log_dir: str = "") -> BackItUpConfig:
    return BackItUpConfig(backup=BackupOptions(log_dir=log_dir), config_dir=tmp_path)


def _clock() -> datetime:
    return datetime(2023, 6, 27, 21, 1, 13, 42)


def test_run_backs_up_every_path(tmp_path: Path):
    a = tmp_path / "a.txt"
    b = tmp_path / "b"
    a.write_text("a")
    b.mkdir()

    result = BatchRunner(_config(tmp_path), SilentLogger()).run([a, b])

    assert result.success
    assert [r.success for r in result.path_results] == [True, True]
    assert not a.exists() and not b.exists()
    assert result.path_results[0].backup_path.read_text() == "a"
    assert result.path_results[1].backup_path.is_dir()


def test_failure_does_not_stop_run(tmp_path: Path):
    good = tmp_path / "good.txt"
    good.write_text("g")

    result = BatchRunner(_config(tmp_path), SilentLogger()).run(
        [tmp_path / "missing", "..", good]
    )

    assert not result.success
    kinds = [r.error_kind for r in result.path_results]
    assert kinds == ["not_found", "invalid_path", None]
    assert result.path_results[0].error == "Path does not exist."
    assert result.path_results[1].error == "Path ends in '..'."
    assert len(result.failures) == 2
    assert not good.exists()


def test_same_path_twice_in_one_run(tmp_path: Path):
    source = tmp_path / "data.txt"
    source.write_text("once")

    result = BatchRunner(_config(tmp_path), SilentLogger()).run([source, source])

    assert result.path_results[0].success
    assert result.path_results[1].error_kind == "not_found"


def test_dry_run_renames_nothing(tmp_path: Path):
    source = tmp_path / "data.txt"
    source.write_text("keep")

    result = BatchRunner(_config(tmp_path, ".logs"), SilentLogger(), clock=_clock).run(
        [source], dry_run=True
    )

    assert result.success and result.dry_run
    assert result.path_results[0].backup_path == tmp_path / "#data.txt-2023-06-27-21-01-13#"
    assert source.read_text() == "keep"
    assert result.log_file is None
    assert not (tmp_path / ".logs").exists()


def test_log_flushed_to_log_dir(tmp_path: Path):
    source = tmp_path / "data.txt"
    source.write_text("x")

    result = BatchRunner(_config(tmp_path, "logs"), SilentLogger()).run([source])

    assert result.log_file is not None
    assert result.log_file.parent == tmp_path / "logs"
    content = result.log_file.read_text()
    assert "Backup:" in content
    assert "1/1 paths backed up" in content


def test_max_probes_from_config(tmp_path: Path):
    source = tmp_path / "data.txt"
    source.write_text("x")
    (tmp_path / "#data.txt-2023-06-27-21-01-13#").touch()
    (tmp_path / "#data.txt-2023-06-27-21-01-13-42#").touch()
    cfg = BackItUpConfig(backup=BackupOptions(max_probes=2, log_dir=""), config_dir=tmp_path)

    result = BatchRunner(cfg, SilentLogger(), clock=_clock).run([source])

    assert result.path_results[0].backup_path.name == "#data.txt-2023-06-27-21-01-13-42-1#"


def test_unwritable_log_dir_warns_and_keeps_results(tmp_path: Path):
    source = tmp_path / "data.txt"
    source.write_text("x")
    (tmp_path / "logs").write_text("not a directory")
    log = SilentLogger()

    result = BatchRunner(_config(tmp_path, "logs"), log).run([source])

    assert result.success
    assert result.log_file is None
    assert result.path_results[0].backup_path.read_text() == "x"
    assert any("[WARN]" in m and "Could not write log" in m for m in log.messages)
