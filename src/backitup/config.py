"""Config file loading and validation for backitup.yaml."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from backitup.core import MAX_PROBES

CONFIG_FILENAME = "backitup.yaml"
SUPPORTED_VERSIONS = {1}


# === Config Dataclasses ===


@dataclass
class BackupOptions:
    """Backup behavior options."""

    max_probes: int = MAX_PROBES
    log_dir: str = ".backitup/logs"  # Empty string disables log files


@dataclass
class BackItUpConfig:
    """Top-level backitup configuration."""

    version: int = 1
    backup: BackupOptions = field(default_factory=BackupOptions)

    # Resolved at load time (not from YAML)
    config_dir: Path = field(default_factory=lambda: Path.cwd())

    @property
    def log_dir(self) -> Path | None:
        if not self.backup.log_dir:
            return None
        return resolve_path(self.backup.log_dir, self.config_dir)


# === Errors ===


class ConfigError(Exception):
    """Raised when config file is invalid or missing."""


# === Path Resolution ===


def resolve_path(path_str: str, base_dir: Path) -> Path:
    """Resolve a path string: expand ~ and make relative paths absolute."""
    p = Path(path_str).expanduser()
    if not p.is_absolute():
        p = base_dir / p
    return p


# === Config Discovery ===


def find_config(start_dir: Path | None = None) -> Path | None:
    """Find backitup.yaml by walking up from start_dir (or cwd)."""
    current = (start_dir or Path.cwd()).resolve()

    while True:
        candidate = current / CONFIG_FILENAME
        if candidate.is_file():
            return candidate

        parent = current.parent
        if parent == current:
            return None  # Reached filesystem root
        current = parent


# === Parsing ===


def _parse_backup_options(raw: Any) -> BackupOptions:
    if not isinstance(raw, dict):
        raise ConfigError(f"'backup' must be a mapping, got {type(raw).__name__}")

    max_probes = raw.get("max_probes", MAX_PROBES)
    # bool is an int subclass
    if not isinstance(max_probes, int) or isinstance(max_probes, bool) or max_probes < 1:
        raise ConfigError(f"backup.max_probes must be a positive integer, got {max_probes!r}")

    log_dir = raw.get("log_dir", BackupOptions.log_dir)
    if log_dir is None:
        log_dir = ""
    if not isinstance(log_dir, str):
        raise ConfigError(f"backup.log_dir must be a string, got {type(log_dir).__name__}")

    return BackupOptions(max_probes=max_probes, log_dir=log_dir)


# === Loading ===


def load_config(config_path: Path) -> BackItUpConfig:
    """Load and validate backitup.yaml from a specific path."""
    if not config_path.is_file():
        raise ConfigError(f"Config file not found: {config_path}")

    try:
        raw = yaml.safe_load(config_path.read_text())
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {config_path}: {e}") from e

    if not isinstance(raw, dict):
        raise ConfigError(f"Config file must be a YAML mapping, got {type(raw).__name__}")

    # Version check
    version = raw.get("version")
    if version is None:
        raise ConfigError("Missing required field 'version'")
    if not isinstance(version, int):
        raise ConfigError(f"'version' must be an integer, got {type(version).__name__}")
    if version not in SUPPORTED_VERSIONS:
        raise ConfigError(
            f"Unsupported config version {version}. Supported: {sorted(SUPPORTED_VERSIONS)}"
        )

    return BackItUpConfig(
        version=version,
        backup=_parse_backup_options(raw.get("backup") or {}),
        config_dir=config_path.parent.resolve(),
    )


def load(config_path: str | Path | None = None) -> BackItUpConfig:
    """Load config from explicit path or discover backitup.yaml.

    Unlike an explicit path, a missing discovered file is not an error:
    built-in defaults rooted at the current directory are returned.

    Args:
        config_path: Explicit path to config file, or None to auto-discover.

    Returns:
        Parsed BackItUpConfig.

    Raises:
        ConfigError: If an explicit config is not found, or any config is invalid.
    """
    if config_path is not None:
        return load_config(Path(config_path).resolve())

    found = find_config()
    if not found:
        return BackItUpConfig()
    return load_config(found)


# === Default Config Generation ===


DEFAULT_CONFIG = f"""\
# backitup.yaml - move files out of the way before they are overwritten

version: 1

backup:
  max_probes: {MAX_PROBES}        # Clock samples before a counter suffix is used
  log_dir: .backitup/logs   # Where run logs are appended ("" disables)
"""


def generate_default_config(target_dir: Path, force: bool = False) -> Path:
    """Write default backitup.yaml to target_dir.

    Returns:
        Path to the created config file.

    Raises:
        ConfigError: If file already exists and force=False.
    """
    target = target_dir / CONFIG_FILENAME
    if target.exists() and not force:
        raise ConfigError(f"{CONFIG_FILENAME} already exists. Use --force to overwrite.")

    target.write_text(DEFAULT_CONFIG)
    return target
