"""File writing utilities that move existing content out of the way first."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from backitup.core import MAX_PROBES
from backitup.core import backup as backup_path

if TYPE_CHECKING:
    from backitup.core import Clock
    from backitup.utils.logger import BackupLogger


@dataclass
class WriteResult:
    """Result of a write operation."""

    path: str
    written: bool
    bytes_written: int = 0
    backup_path: Path | None = None
    message: str = ""


class WriteError(Exception):
    """Raised when writing fails, possibly after the old content was moved away."""

    def __init__(self, path: Path, error: OSError, backup_path: Path | None = None) -> None:
        msg = f"Could not write {path}: {error}"
        if backup_path is not None:
            msg += f" (previous content saved at {backup_path})"
        super().__init__(msg)
        self.path = path
        self.error = error
        self.backup_path = backup_path


def write_text(
    path: Path,
    content: str,
    log: BackupLogger,
    *,
    backup: bool = True,
    dry_run: bool = False,
    clock: Clock | None = None,
    max_probes: int = MAX_PROBES,
) -> WriteResult:
    """Write plain text to *path*, backing up whatever was there.

    Returns a :class:`WriteResult` describing the outcome.
    """
    return _write(
        path, content.encode(), log,
        backup=backup, dry_run=dry_run, clock=clock, max_probes=max_probes,
    )


def write_bytes(
    path: Path,
    data: bytes,
    log: BackupLogger,
    *,
    backup: bool = True,
    dry_run: bool = False,
    clock: Clock | None = None,
    max_probes: int = MAX_PROBES,
) -> WriteResult:
    """Write raw bytes to *path*, backing up whatever was there.

    Returns a :class:`WriteResult` describing the outcome.
    """
    return _write(
        path, data, log,
        backup=backup, dry_run=dry_run, clock=clock, max_probes=max_probes,
    )


# ------------------------------------------------------------------
# Internal helper
# ------------------------------------------------------------------

def _write(
    path: Path,
    data: bytes,
    log: BackupLogger,
    *,
    backup: bool,
    dry_run: bool,
    clock: Clock | None,
    max_probes: int,
) -> WriteResult:
    nbytes = len(data)

    if dry_run:
        if path.is_file():
            if path.read_bytes() == data:
                msg = f"{path}: no changes"
            else:
                msg = f"{path}: WOULD UPDATE ({nbytes} bytes)"
        elif path.exists():
            msg = f"{path}: WOULD REPLACE ({nbytes} bytes)"
        else:
            msg = f"{path}: WOULD CREATE ({nbytes} bytes)"
        log.info(msg)
        return WriteResult(path=str(path), written=False, bytes_written=0, message=msg)

    saved: Path | None = None
    if backup and path.exists():
        saved = backup_path(path, clock=clock, max_probes=max_probes, log=log)

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
    except OSError as e:
        err = WriteError(path, e, saved)
        log.error(str(err))
        raise err from e

    msg = f"Written: {path} ({nbytes} bytes)"
    log.info(msg)
    return WriteResult(
        path=str(path), written=True, bytes_written=nbytes, backup_path=saved, message=msg
    )
