"""Move a file or directory out of the way under a timestamped backup name."""

from __future__ import annotations

import os
from datetime import datetime
from pathlib import Path, PurePath
from typing import TYPE_CHECKING, Callable, Union

if TYPE_CHECKING:
    from backitup.utils.logger import BackupLogger

PathArg = Union[str, bytes, "os.PathLike[str]", "os.PathLike[bytes]"]
Clock = Callable[[], datetime]

TIMESTAMP_FORMAT = "%Y-%m-%d-%H-%M-%S"
DELIMITER = "#"
MAX_PROBES = 10_000


# === Errors ===


class BackupError(Exception):
    """Base class for every failure of the backup operation."""

    kind = "error"


class NotFoundError(BackupError):
    """Raised when the path to back up does not exist."""

    kind = "not_found"

    def __init__(self, path: str = "") -> None:
        super().__init__("Path does not exist.")
        self.path = path


class InvalidPathError(BackupError):
    """Raised when the path cannot be given a backup name."""

    kind = "invalid_path"

    ROOT = "Path is root."
    NOT_UTF8 = "Path is not a valid UTF-8."
    PARENT_DIR = "Path ends in '..'."

    def __init__(self, reason: str, path: str = "") -> None:
        super().__init__(reason)
        self.reason = reason
        self.path = path


class BackupIOError(BackupError):
    """Wraps an ``OSError`` raised while probing or renaming."""

    kind = "io"

    def __init__(self, error: OSError) -> None:
        super().__init__(str(error))
        self.error = error


# === Naming ===


def format_timestamp(moment: datetime) -> str:
    """Return *moment* as ``YYYY-MM-DD-HH-MM-SS``."""
    return moment.strftime(TIMESTAMP_FORMAT)


def compose_backup_name(
    name: str,
    moment: datetime,
    *,
    micros: bool = False,
    counter: int | None = None,
) -> str:
    """Build the delimited backup file name for *name* taken at *moment*.

    ``micros`` appends the sub-second part of *moment*; ``counter`` appends a
    further disambiguator after it and implies ``micros``.
    """
    parts = [name, format_timestamp(moment)]
    if micros or counter is not None:
        parts.append(str(moment.microsecond))
    if counter is not None:
        parts.append(str(counter))
    return f"{DELIMITER}{'-'.join(parts)}{DELIMITER}"


# === Validation ===


def _portable(text: str, source: str) -> str:
    # Undecodable bytes survive os.fsdecode as lone surrogates.
    try:
        text.encode("utf-8")
    except UnicodeEncodeError:
        raise InvalidPathError(InvalidPathError.NOT_UTF8, source) from None
    return text


def _split_target(path: PathArg) -> tuple[str, Path, str]:
    """Validate *path* and return ``(source, parent, name)``.

    Checks run in a fixed order and the first failure wins: existence, root,
    parent encoding, trailing ``..``, name encoding.
    """
    raw = os.fspath(path)
    source = os.fsdecode(raw)

    if not os.path.exists(raw):
        raise NotFoundError(source)

    target = PurePath(source)
    if target.anchor and str(target) == target.anchor:
        raise InvalidPathError(InvalidPathError.ROOT, source)

    parent = str(target.parent) or "."
    _portable(parent, source)

    if target.name in ("", ".."):
        raise InvalidPathError(InvalidPathError.PARENT_DIR, source)
    name = _portable(target.name, source)

    return source, Path(parent), name


# === Collision probe ===


def _probe(
    parent: Path,
    name: str,
    clock: Clock,
    max_probes: int,
) -> Path:
    moment = clock()
    candidate = parent / compose_backup_name(name, moment)

    try:
        probes = 0
        while candidate.exists():
            if probes >= max_probes:
                return _fallback(parent, name, moment)
            moment = clock()
            candidate = parent / compose_backup_name(name, moment, micros=True)
            probes += 1
    except OSError as e:
        raise BackupIOError(e) from e

    return candidate


def _fallback(parent: Path, name: str, moment: datetime) -> Path:
    counter = 1
    candidate = parent / compose_backup_name(name, moment, counter=counter)
    while candidate.exists():
        counter += 1
        candidate = parent / compose_backup_name(name, moment, counter=counter)
    return candidate


# === Public API ===


def backup_path_for(
    path: PathArg,
    *,
    clock: Clock | None = None,
    max_probes: int = MAX_PROBES,
) -> Path:
    """Return the name :func:`backup` would move *path* to, without moving it.

    Raises the same errors as :func:`backup` except those of the rename.
    """
    _, parent, name = _split_target(path)
    return _probe(parent, name, clock or datetime.now, max_probes)


def backup(
    path: PathArg,
    *,
    clock: Clock | None = None,
    max_probes: int = MAX_PROBES,
    log: BackupLogger | None = None,
) -> Path:
    """Rename *path* to a free timestamped name next to it.

    The backup is named ``#<name>-YYYY-MM-DD-HH-MM-SS#`` in the same
    directory. If that name is taken, the clock is sampled again and the
    microseconds are appended (``#<name>-...-SS-<micros>#``) until a free
    name is found. Content is never copied; files and whole directories are
    moved with a single rename.

    Args:
        path: Existing file or directory.
        clock: Zero-argument callable returning the current local time.
            Defaults to :meth:`datetime.datetime.now`.
        max_probes: Clock samples to try before falling back to a counter.
        log: Optional logger to record the rename.

    Returns:
        The backup path, relative if *path* was relative.

    Raises:
        NotFoundError: *path* does not exist.
        InvalidPathError: *path* is the root, ends in ``..`` or is not UTF-8.
        BackupIOError: The existence probe or the rename failed.
    """
    source, parent, name = _split_target(path)
    destination = _probe(parent, name, clock or datetime.now, max_probes)

    try:
        os.rename(source, destination)
    except OSError as e:
        raise BackupIOError(e) from e

    if log is not None:
        log.info(f"Backup: {source} -> {destination}")
    return destination
