"""Export workflow: precondition checks, output path, generation and progress.

The backend reports no progress of its own, so a ticker task advances a
synthetic percentage up to a cap until the real result arrives.
"""

import asyncio
import contextlib
from enum import Enum
from typing import Optional

from loguru import logger

from core.config import AppConfig
from core.errors import UserError, UserErrorKind
from core.interfaces import Backend, Dialogs, Notifier
from core.models import GenerationResult
from core.notify import Notification, Severity
from core.store import AppStore


class ExportPhase(Enum):
    IDLE = "idle"
    VALIDATING = "validating"
    AWAITING_PATH = "awaiting_path"
    GENERATING = "generating"
    SETTLED = "settled"


class ExportOutcome(Enum):
    REJECTED = "rejected"
    CANCELLED = "cancelled"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


_USER_ERROR_MESSAGES = {
    UserErrorKind.NO_IMAGES_SELECTED: "No images to export",
    UserErrorKind.INVALID_CUSTOM_DIMENSIONS: "Enter a width and height for the custom page size",
}


class ExportOrchestrator:
    def __init__(
        self,
        store: AppStore,
        backend: Backend,
        dialogs: Dialogs,
        notifier: Notifier,
        config: Optional[AppConfig] = None,
    ):
        self._store = store
        self._backend = backend
        self._dialogs = dialogs
        self._notifier = notifier
        self._config = config or AppConfig()
        self._phase = ExportPhase.IDLE

    @property
    def phase(self) -> ExportPhase:
        return self._phase

    async def export(self) -> ExportOutcome:
        if self._store.state.is_generating or self._phase != ExportPhase.IDLE:
            logger.info("Export already in progress, ignoring request")
            return ExportOutcome.REJECTED

        try:
            self._set_phase(ExportPhase.VALIDATING)
            problem = self._check_preconditions()
            if problem is not None:
                logger.info("Export refused: {}", problem.kind.value)
                self._notify(Severity.ERROR, problem.message)
                return ExportOutcome.REJECTED

            self._set_phase(ExportPhase.AWAITING_PATH)
            try:
                output_path = await self._dialogs.select_output_path(self._config.default_output_name)
            except Exception as e:
                logger.exception("Save dialog failed")
                self._notify(Severity.ERROR, "Failed to create PDF", str(e))
                return ExportOutcome.FAILED
            if not output_path:
                logger.info("Export cancelled at save dialog")
                return ExportOutcome.CANCELLED

            return await self._generate(output_path)
        finally:
            self._set_phase(ExportPhase.IDLE)

    def _check_preconditions(self) -> Optional[UserError]:
        state = self._store.state
        kinds = [] if state.images else [UserErrorKind.NO_IMAGES_SELECTED]
        kinds.extend(state.settings.validate())
        if not kinds:
            return None
        return UserError(kinds[0], _USER_ERROR_MESSAGES[kinds[0]])

    async def _generate(self, output_path: str) -> ExportOutcome:
        state = self._store.state
        paths = state.image_paths()
        settings = state.settings

        self._set_phase(ExportPhase.GENERATING)
        self._store.set_is_generating(True)
        self._store.set_progress(0)
        logger.info("Generating PDF with {} image(s) -> {}", len(paths), output_path)

        ticker = asyncio.ensure_future(self._tick_progress())
        settled = False
        try:
            result = await self._request_generation(paths, output_path, settings)

            await self._stop_ticker(ticker)
            self._set_phase(ExportPhase.SETTLED)
            self._store.set_progress(100)

            if result.success:
                location = result.output_path or output_path
                logger.info("PDF created: {}", location)
                self._notify(Severity.SUCCESS, "PDF created", location)
                # Leave the 100% state visible briefly
                await asyncio.sleep(self._config.settle_delay_s)
                self._store.set_is_generating(False)
                settled = True
                return ExportOutcome.SUCCEEDED

            logger.error("PDF generation failed: {}", result.error)
            self._notify(Severity.ERROR, "Failed to create PDF", result.error or "Unknown error")
            self._store.set_is_generating(False)
            settled = True
            return ExportOutcome.FAILED
        finally:
            await self._stop_ticker(ticker)
            if not settled:
                self._store.set_is_generating(False)

    async def _request_generation(self, paths, output_path, settings) -> GenerationResult:
        timeout = self._config.generation_timeout_s
        try:
            request = self._backend.generate_pdf(paths, output_path, settings)
            if timeout:
                return await asyncio.wait_for(request, timeout)
            return await request
        except asyncio.TimeoutError:
            return GenerationResult(success=False, error=f"PDF generation timed out after {timeout:g}s")
        except Exception as e:
            logger.exception("PDF generation request raised")
            return GenerationResult(success=False, error=str(e))

    async def _tick_progress(self):
        config = self._config
        current = 0
        while True:
            await asyncio.sleep(config.progress_tick_s)
            current += config.progress_step
            if current >= config.progress_cap:
                self._store.set_progress(config.progress_cap)
                return
            self._store.set_progress(current)

    @staticmethod
    async def _stop_ticker(ticker: asyncio.Future):
        if not ticker.done():
            ticker.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await ticker

    def _set_phase(self, phase: ExportPhase):
        if phase != self._phase:
            logger.debug("Export phase {} -> {}", self._phase.value, phase.value)
            self._phase = phase

    def _notify(self, severity: Severity, message: str, description: Optional[str] = None):
        self._notifier.notify(Notification(severity, message, description))
