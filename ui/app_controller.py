"""Routes GUI actions onto the event-loop thread."""

from typing import Dict, List

from loguru import logger

from core.export import ExportOrchestrator
from core.ingestion import IngestionPipeline
from core.reorder import MoveIntent, ReorderEngine
from core.store import AppStore
from workers.event_loop_worker import EventLoopWorker


class AppController:
    """
    Thin facade used by widgets. Every call returns immediately; the work
    runs on the loop owned by `worker`, so the store is only ever touched
    from that thread.
    """

    def __init__(
        self,
        worker: EventLoopWorker,
        store: AppStore,
        pipeline: IngestionPipeline,
        engine: ReorderEngine,
        orchestrator: ExportOrchestrator,
    ):
        self._worker = worker
        self._store = store
        self._pipeline = pipeline
        self._engine = engine
        self._orchestrator = orchestrator

    def browse_images(self):
        self._worker.submit(self._pipeline.ingest_from_picker())

    def add_paths(self, paths: List[str]):
        if paths:
            self._worker.submit(self._pipeline.ingest(list(paths)))

    def remove_image(self, image_id: str):
        self._worker.call_soon(self._store.remove_image, image_id)

    def clear_images(self):
        self._worker.call_soon(self._store.clear_images)

    def move_image(self, intent: MoveIntent):
        self._worker.call_soon(self._engine.handle_move, intent)

    def update_settings(self, changes: Dict):
        if changes:
            self._worker.call_soon(lambda: self._store.update_settings(**changes))

    def reset_settings(self):
        self._worker.call_soon(self._store.reset_settings)

    def export_pdf(self):
        logger.debug("Export requested")
        self._worker.submit(self._orchestrator.export())
