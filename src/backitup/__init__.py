"""Move files and directories out of the way under timestamped backup names."""

from backitup.core import (
    BackupError,
    BackupIOError,
    InvalidPathError,
    NotFoundError,
    backup,
    backup_path_for,
)

__version__ = "0.1.0"

__all__ = [
    "BackupError",
    "BackupIOError",
    "InvalidPathError",
    "NotFoundError",
    "__version__",
    "backup",
    "backup_path_for",
]
