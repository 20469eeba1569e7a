"""Persistence of PDF settings across sessions."""

import json

from PyQt6.QtCore import QSettings
from loguru import logger

from core.models import DEFAULT_PDF_SETTINGS, PdfSettings


STORAGE_KEY = "image-pdf-storage"


class SettingsRepository:
    """Stores PdfSettings as JSON under a fixed QSettings key."""

    def __init__(self, settings: QSettings, key: str = STORAGE_KEY):
        self._settings = settings
        self._key = key

    def load(self) -> PdfSettings:
        raw = self._settings.value(self._key)
        if not raw:
            return DEFAULT_PDF_SETTINGS
        try:
            data = json.loads(raw)
        except (TypeError, ValueError) as e:
            logger.warning("Stored settings are unreadable, using defaults: {}", e)
            return DEFAULT_PDF_SETTINGS
        if not isinstance(data, dict):
            logger.warning("Stored settings have unexpected type {}", type(data).__name__)
            return DEFAULT_PDF_SETTINGS
        settings = PdfSettings.from_dict(data)
        logger.debug("Settings loaded: {}", settings.to_dict())
        return settings

    def save(self, settings: PdfSettings):
        self._settings.setValue(self._key, json.dumps(settings.to_dict()))
        self._settings.sync()
        logger.debug("Settings saved: {}", settings.to_dict())
