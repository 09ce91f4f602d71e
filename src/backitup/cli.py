"""CLI entry point for backitup."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import TYPE_CHECKING

import click

from backitup import __version__

if TYPE_CHECKING:
    from backitup.config import BackItUpConfig
    from backitup.utils.logger import BackupLogger

# Exit codes
EXIT_OK = 0
EXIT_RUNTIME_ERROR = 1
EXIT_CONFIG_ERROR = 2


# ===================================================================
# CLI group
# ===================================================================


@click.group()
@click.version_option(version=__version__, prog_name="backitup")
@click.option("--config", "-c", type=click.Path(), help="Path to backitup.yaml config file.")
@click.option("--quiet", "-q", is_flag=True, help="Minimal output.")
@click.pass_context
def main(ctx: click.Context, config: str | None, quiet: bool) -> None:
    """Move files and directories out of the way under timestamped names."""
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config
    ctx.obj["quiet"] = quiet


def _load_config(ctx: click.Context) -> BackItUpConfig:
    from backitup.config import ConfigError, load

    try:
        return load(ctx.obj["config_path"])
    except ConfigError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(EXIT_CONFIG_ERROR)


def _flush_log(log: BackupLogger, cfg: BackItUpConfig) -> None:
    if cfg.log_dir is None:
        return
    try:
        log.flush_to_file(cfg.log_dir)
    except OSError as e:
        log.warn(f"Could not write log to {cfg.log_dir}: {e}")


# ===================================================================
# backup
# ===================================================================


@main.command()
@click.argument("paths", nargs=-1, required=True, type=click.Path())
@click.option("--dry-run", is_flag=True, help="Show backup names without renaming anything.")
@click.pass_context
def backup(ctx: click.Context, paths: tuple[str, ...], dry_run: bool) -> None:
    """Rename each PATH to #<name>-<timestamp># next to it."""
    quiet: bool = ctx.obj["quiet"]
    cfg = _load_config(ctx)

    from backitup.batch import BatchRunner
    from backitup.utils.logger import BackupLogger

    log = BackupLogger(dry_run=dry_run, quiet=quiet)
    result = BatchRunner(cfg, log).run(paths, dry_run=dry_run)

    if not quiet:
        from backitup.utils.output import print_batch_summary

        print_batch_summary(result)

    sys.exit(EXIT_OK if result.success else EXIT_RUNTIME_ERROR)


# ===================================================================
# write
# ===================================================================


@main.command()
@click.argument("path", type=click.Path())
@click.option(
    "--input", "-i", "source", type=click.File("rb"), default="-",
    help="Read new content from this file (default: stdin).",
)
@click.option("--no-backup", is_flag=True, help="Overwrite PATH without backing it up.")
@click.option("--dry-run", is_flag=True, help="Show what would change without writing files.")
@click.pass_context
def write(ctx: click.Context, path: str, source, no_backup: bool, dry_run: bool) -> None:
    """Back up PATH if it exists, then write new content to it."""
    from backitup.core import BackupError
    from backitup.utils.io import WriteError, write_bytes
    from backitup.utils.logger import BackupLogger

    quiet: bool = ctx.obj["quiet"]
    cfg = _load_config(ctx)

    log = BackupLogger(dry_run=dry_run, quiet=quiet)
    try:
        wr = write_bytes(
            Path(path), source.read(), log,
            backup=not no_backup, dry_run=dry_run, max_probes=cfg.backup.max_probes,
        )
    except (BackupError, WriteError, OSError) as e:
        if not dry_run:
            _flush_log(log, cfg)
        click.echo(f"Error: {e}", err=True)
        sys.exit(EXIT_RUNTIME_ERROR)

    if not dry_run:
        _flush_log(log, cfg)

    if not quiet:
        from backitup.utils.output import print_write_result

        print_write_result(wr)


# ===================================================================
# init
# ===================================================================


@main.command()
@click.option("--force", is_flag=True, help="Overwrite existing backitup.yaml.")
def init(force: bool) -> None:
    """Create a backitup.yaml config file with sensible defaults."""
    from backitup.config import ConfigError, generate_default_config

    try:
        path = generate_default_config(Path.cwd(), force=force)
        click.echo(f"Created {path}")
    except ConfigError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(EXIT_CONFIG_ERROR)
