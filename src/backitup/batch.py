"""Batch runner: back up several paths and collect per-path outcomes."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Iterable

from backitup.core import BackupError, backup, backup_path_for

if TYPE_CHECKING:
    from backitup.config import BackItUpConfig
    from backitup.core import Clock, PathArg
    from backitup.utils.logger import BackupLogger


@dataclass
class PathResult:
    """Outcome of backing up a single path."""

    source: str
    backup_path: Path | None = None
    error_kind: str | None = None
    error: str | None = None

    @property
    def success(self) -> bool:
        return self.error is None


@dataclass
class BatchResult:
    """Aggregate outcome of a batch run."""

    success: bool
    dry_run: bool
    path_results: list[PathResult] = field(default_factory=list)
    log_file: Path | None = None

    @property
    def failures(self) -> list[PathResult]:
        return [r for r in self.path_results if not r.success]


class BatchRunner:
    """Backs up each path in turn; one failure does not stop the rest."""

    def __init__(
        self,
        config: BackItUpConfig,
        log: BackupLogger | None = None,
        clock: Clock | None = None,
    ) -> None:
        self._config = config
        self._log = log
        self._clock = clock

    # ------------------------------------------------------------------
    # Public
    # ------------------------------------------------------------------

    def run(self, paths: Iterable[PathArg], *, dry_run: bool = False) -> BatchResult:
        """Back up *paths* in order.

        Returns a :class:`BatchResult` summarising what happened.
        """
        from backitup.utils.logger import BackupLogger

        log = self._log or BackupLogger(dry_run=dry_run)
        result = BatchResult(success=True, dry_run=dry_run)
        max_probes = self._config.backup.max_probes

        log.section("Backing up" if not dry_run else "Planning backups")

        for path in paths:
            pr = self._run_one(path, log, dry_run=dry_run, max_probes=max_probes)
            result.path_results.append(pr)
            if not pr.success:
                result.success = False

        n_ok = sum(1 for r in result.path_results if r.success)
        log.info(f"{n_ok}/{len(result.path_results)} paths backed up")

        log_dir = self._config.log_dir
        if log_dir is not None and not dry_run:
            try:
                result.log_file = log.flush_to_file(log_dir)
            except OSError as exc:
                log.warn(f"Could not write log to {log_dir}: {exc}")

        return result

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _run_one(
        self,
        path: PathArg,
        log: BackupLogger,
        *,
        dry_run: bool,
        max_probes: int,
    ) -> PathResult:
        pr = PathResult(source=_display(path))

        try:
            if dry_run:
                pr.backup_path = backup_path_for(path, clock=self._clock, max_probes=max_probes)
                log.info(f"Would back up: {pr.source} -> {pr.backup_path}")
            else:
                pr.backup_path = backup(path, clock=self._clock, max_probes=max_probes, log=log)
        except BackupError as exc:
            pr.error_kind = exc.kind
            pr.error = str(exc)
            log.error(f"{pr.source}: {exc}")

        return pr


def _display(path: PathArg) -> str:
    return os.fsdecode(os.fspath(path))
