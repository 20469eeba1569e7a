"""ImagePDF - combine local images into a single PDF."""

import sys
import os

from PyQt6.QtWidgets import QApplication
import fitz  # PyMuPDF
from loguru import logger

from core.backend import LocalBackend
from core.config import APP_NAME, ORG_NAME, AppConfig, open_settings
from core.export import ExportOrchestrator
from core.ingestion import IngestionPipeline
from core.log import init_logging
from core.reorder import ReorderEngine
from core.settings import SettingsRepository
from core.store import AppStore
from ui.app_controller import AppController
from ui.main_window import MainWindow
from ui.qt_dialogs import QtDialogs
from ui.qt_notifier import QtNotifier
from ui.store_bridge import StoreBridge
from workers.event_loop_worker import EventLoopWorker

__version__ = "1.0.0"


def main():
    # Suppress non-fatal MuPDF warnings
    fitz.TOOLS.mupdf_display_errors(False)

    # Ensure working directory for PyInstaller frozen apps
    if getattr(sys, "frozen", False):
        os.chdir(os.path.dirname(sys.executable))

    config = AppConfig.load(open_settings())
    init_logging(config.log_level)
    logger.info("Starting {} {}", APP_NAME, __version__)

    app = QApplication(sys.argv)
    app.setApplicationName(APP_NAME)
    app.setApplicationVersion(__version__)
    app.setOrganizationName(ORG_NAME)

    loop_worker = EventLoopWorker()
    loop_worker.start()
    if not loop_worker.wait_until_ready():
        logger.error("Event loop thread did not start")
        sys.exit(1)

    # The store persists from the loop thread, so it gets its own QSettings
    store = AppStore(repository=SettingsRepository(open_settings()))
    backend = LocalBackend(config)
    dialogs = QtDialogs()
    notifier = QtNotifier()

    controller = AppController(
        loop_worker,
        store,
        IngestionPipeline(store, backend, notifier, dialogs, config),
        ReorderEngine(store),
        ExportOrchestrator(store, backend, dialogs, notifier, config),
    )
    bridge = StoreBridge(store)

    window = MainWindow(controller, bridge, notifier, version=__version__)
    dialogs.set_parent_widget(window)
    loop_worker.task_failed.connect(window.show_task_failure)
    window.show()

    exit_code = app.exec()
    if not loop_worker.stop():
        logger.warning("Event loop thread did not stop in time")
    logger.info("Exiting with code {}", exit_code)
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
