"""Persistent config loader/saver for retropanel."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from ..constants import (
    COPY_BUFFER_SIZE, DEFAULT_DRIVE, DEFAULT_MEMORY_TIER, FILES_PER_PANEL, MEMORY_TIERS,
)
from . import paths
from .errors import InvalidName

LOGGER = logging.getLogger(__name__)

CONFIG_FILENAME = "retropanel.ini"


def default_drives() -> dict:
    """Map the default drive letter to the host filesystem root."""
    return {DEFAULT_DRIVE: os.path.abspath(os.sep)}


@dataclass(frozen=True)
class AppConfig:
    """Panel state persisted between sessions plus engine sizing inputs."""

    left_drive: str = DEFAULT_DRIVE
    left_path: str = paths.ROOT
    right_drive: str = DEFAULT_DRIVE
    right_path: str = paths.ROOT
    active_panel: int = 0
    memory_tier: str = DEFAULT_MEMORY_TIER
    drives: dict = field(default_factory=default_drives)

    @property
    def capacity(self) -> int:
        """Soft cap on entries held by one panel snapshot."""
        return FILES_PER_PANEL[self.memory_tier]

    @property
    def copy_buffer_size(self) -> int:
        return COPY_BUFFER_SIZE[self.memory_tier]


def default_config_path() -> Path:
    """Return default config path (~/.config/retropanel/retropanel.ini)."""
    return Path.home() / ".config" / "retropanel" / CONFIG_FILENAME


def _coerce_drive(value, default=DEFAULT_DRIVE):
    try:
        return paths.drive_letter(value)
    except InvalidName:
        return default


def _coerce_panel(value, default=0):
    text = str(value).strip().lower()
    if text in ("1", "r", "right"):
        return 1
    if text in ("0", "l", "left"):
        return 0
    return default


def _coerce_tier(value, default=DEFAULT_MEMORY_TIER):
    text = str(value or "").strip().lower()
    return text if text in MEMORY_TIERS else default


def _parse_ini(text: str) -> dict:
    """Parse ``[Section]`` / ``key=value`` text into lower-cased nested dicts."""
    data = {}
    section = ""
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line[0] in ";#":
            continue
        if line.startswith("[") and line.endswith("]"):
            section = line[1:-1].strip().lower()
            data.setdefault(section, {})
            continue
        if "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip().lower()
        if key:
            data.setdefault(section, {})[key] = value.strip()
    return data


def _normalize_config(raw: dict) -> AppConfig:
    settings = raw.get("settings") or raw.get("") or {}
    defaults = AppConfig()

    drives = {}
    for letter, target in (raw.get("drives") or {}).items():
        try:
            drives[paths.drive_letter(letter)] = target
        except InvalidName:
            LOGGER.debug("Ignoring invalid drive mapping %r=%r", letter, target)
    if not drives:
        drives = default_drives()

    return AppConfig(
        left_drive=_coerce_drive(settings.get("leftdrive", defaults.left_drive)),
        left_path=paths.normalize(settings.get("leftpath", defaults.left_path)),
        right_drive=_coerce_drive(settings.get("rightdrive", defaults.right_drive)),
        right_path=paths.normalize(settings.get("rightpath", defaults.right_path)),
        active_panel=_coerce_panel(settings.get("activepanel", defaults.active_panel)),
        memory_tier=_coerce_tier(settings.get("memorytier")),
        drives=drives,
    )


def load_config(path: str | Path | None = None) -> AppConfig:
    """Load config from INI file; return defaults when missing/invalid."""
    cfg_path = Path(path) if path is not None else default_config_path()
    try:
        text = cfg_path.read_text(encoding="utf-8")
    except OSError:
        LOGGER.debug("No readable config at %s, using defaults", cfg_path)
        return AppConfig()
    return _normalize_config(_parse_ini(text))


def serialize_config(config: AppConfig) -> str:
    """Serialize AppConfig as INI text."""
    lines = [
        "; retropanel configuration",
        "[Settings]",
        f"LeftDrive={config.left_drive}",
        f"LeftPath={config.left_path}",
        f"RightDrive={config.right_drive}",
        f"RightPath={config.right_path}",
        f"ActivePanel={config.active_panel}",
        f"MemoryTier={config.memory_tier}",
        "[Drives]",
    ]
    for letter in sorted(config.drives):
        lines.append(f"{letter}={config.drives[letter]}")
    return "\n".join(lines) + "\n"


def save_config(config: AppConfig, path: str | Path | None = None) -> Path:
    """Persist config and return written path."""
    cfg_path = Path(path) if path is not None else default_config_path()
    cfg_path.parent.mkdir(parents=True, exist_ok=True)
    cfg_path.write_text(serialize_config(config), encoding="utf-8", newline="\n")
    return cfg_path
