"""Turns candidate file paths into validated, enriched store entries."""

from dataclasses import dataclass, field
from typing import List, Optional

from loguru import logger

from core.config import AppConfig
from core.interfaces import Backend, Dialogs, Notifier
from core.models import InvalidImage, extract_file_name
from core.notify import Notification, Severity
from core.store import AppStore


@dataclass
class IngestionReport:
    added: List[str] = field(default_factory=list)
    rejected: List[InvalidImage] = field(default_factory=list)
    enrichment_failures: List[str] = field(default_factory=list)


class IngestionPipeline:
    """Validate, add and enrich images; per-file failures never abort the batch."""

    def __init__(
        self,
        store: AppStore,
        backend: Backend,
        notifier: Notifier,
        dialogs: Optional[Dialogs] = None,
        config: Optional[AppConfig] = None,
    ):
        self._store = store
        self._backend = backend
        self._notifier = notifier
        self._dialogs = dialogs
        self._config = config or AppConfig()

    async def ingest_from_picker(self) -> Optional[IngestionReport]:
        if self._dialogs is None:
            raise RuntimeError("No dialog provider configured")
        try:
            paths = await self._dialogs.select_images()
        except Exception as e:
            logger.exception("File picker failed")
            self._notify(Severity.ERROR, "Failed to select files", str(e))
            return None
        if not paths:
            return None
        return await self.ingest(paths)

    async def ingest(self, paths: List[str]) -> IngestionReport:
        report = IngestionReport()
        if not paths:
            return report

        logger.info("Ingesting {} file(s)", len(paths))
        try:
            validation = await self._backend.validate_images(list(paths))
        except Exception as e:
            logger.exception("Image validation failed")
            self._notify(Severity.ERROR, "Failed to process images", str(e))
            return report

        for invalid in validation.invalid:
            logger.warning("Rejected {}: {}", invalid.path, invalid.error)
            self._notify(
                Severity.WARNING,
                "Invalid file",
                f"{extract_file_name(invalid.path)}: {invalid.error}",
            )
            report.rejected.append(invalid)

        if not validation.valid:
            return report

        self._store.add_images(validation.valid)
        report.added = list(validation.valid)

        for path in validation.valid:
            if not await self._enrich(path):
                report.enrichment_failures.append(path)

        self._notify(Severity.SUCCESS, "Images loaded", f"Added: {len(report.added)}")
        return report

    async def _enrich(self, path: str) -> bool:
        ok = True
        try:
            info = await self._backend.get_image_info(path)
        except Exception as e:
            logger.warning("Failed to get info for {}: {}", path, e)
            ok = False
        else:
            self._store.update_image_info(path, info)

        try:
            thumbnail = await self._backend.get_image_thumbnail(path, self._config.thumbnail_size)
        except Exception as e:
            logger.warning("Failed to get thumbnail for {}: {}", path, e)
            ok = False
        else:
            self._store.update_image_thumbnail(path, thumbnail)
        return ok

    def _notify(self, severity: Severity, message: str, description: Optional[str] = None):
        self._notifier.notify(Notification(severity, message, description))
