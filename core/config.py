"""Application configuration backed by QSettings."""

import os
from dataclasses import dataclass, fields
from typing import Optional

from PyQt6.QtCore import QSettings
from loguru import logger


ORG_NAME = "ImagePDF"
APP_NAME = "ImagePDF"
CONFIG_GROUP = "config"
LOG_LEVEL_ENV = "IMAGEPDF_LOG_LEVEL"


def open_settings(path: Optional[str] = None) -> QSettings:
    """Return the application QSettings, or an INI-backed one at `path`."""
    if path:
        return QSettings(path, QSettings.Format.IniFormat)
    return QSettings(ORG_NAME, APP_NAME)


@dataclass
class AppConfig:
    progress_tick_ms: int = 200
    progress_step: int = 10
    progress_cap: int = 90
    settle_delay_ms: int = 500
    thumbnail_size: int = 96
    default_output_name: str = "images.pdf"
    max_file_size_bytes: int = 50 * 1024 * 1024
    jpeg_quality: int = 85
    generation_timeout_s: Optional[float] = None
    log_level: str = "INFO"

    @property
    def progress_tick_s(self) -> float:
        return self.progress_tick_ms / 1000.0

    @property
    def settle_delay_s(self) -> float:
        return self.settle_delay_ms / 1000.0

    @classmethod
    def load(cls, settings: QSettings) -> "AppConfig":
        """Read every known key from the `config` group, keeping defaults for the rest."""
        config = cls()
        settings.beginGroup(CONFIG_GROUP)
        try:
            for f in fields(cls):
                if not settings.contains(f.name):
                    continue
                raw = settings.value(f.name)
                default = getattr(config, f.name)
                try:
                    setattr(config, f.name, _coerce(f.name, raw, default))
                except (TypeError, ValueError):
                    logger.warning("Invalid config value {}={!r}, using {!r}", f.name, raw, default)
        finally:
            settings.endGroup()

        env_level = os.getenv(LOG_LEVEL_ENV) or ""
        if env_level.strip():
            try:
                config.log_level = _log_level(env_level)
            except ValueError:
                logger.warning("Invalid {}={!r}, using {!r}", LOG_LEVEL_ENV, env_level, config.log_level)
        return config


def _coerce(name: str, raw, default):
    # QSettings INI files hand every value back as a string
    if name == "generation_timeout_s":
        if raw in (None, "", "none", "None"):
            return None
        value = float(raw)
        if value <= 0:
            raise ValueError(name)
        return value
    if name == "log_level":
        return _log_level(raw)
    if isinstance(default, bool):
        return str(raw).lower() in ("1", "true", "yes")
    if isinstance(default, int):
        value = int(raw)
        if value < 0:
            raise ValueError(name)
        return value
    return str(raw)


def _log_level(raw) -> str:
    """Normalize a level name, raising ValueError if loguru does not know it."""
    level = str(raw).strip().upper()
    logger.level(level)
    return level
