"""Main application window."""

import os

from PyQt6.QtWidgets import QMainWindow
from PyQt6.QtCore import QUrl
from PyQt6.QtGui import QAction, QDesktopServices
from loguru import logger

from core.log import find_latest_log_file, get_log_directory
from ui.image_to_pdf_widget import ImageToPdfWidget


class MainWindow(QMainWindow):
    """Hosts the image-to-PDF panel, the menu bar and the status bar."""

    def __init__(self, controller, bridge, notifier=None, version: str = ""):
        super().__init__()
        self._controller = controller
        self._bridge = bridge
        self._version = version
        self._setup_ui()
        self._setup_menu_bar()
        if notifier is not None:
            notifier.status_message.connect(self.statusBar().showMessage)
        self._bridge.state_changed.connect(self._update_actions)
        self._update_actions(bridge.state)

    def _setup_ui(self):
        self.setWindowTitle(f"ImagePDF {self._version}".strip())
        self.setMinimumSize(720, 640)
        self.resize(820, 760)

        self._image_to_pdf_widget = ImageToPdfWidget(self._controller, self._bridge)
        self.setCentralWidget(self._image_to_pdf_widget)

        self.statusBar().showMessage("Ready")

    def _setup_menu_bar(self):
        menu_bar = self.menuBar()

        # File menu
        file_menu = menu_bar.addMenu("File")

        self._add_action = QAction("Add Images...", self)
        self._add_action.setShortcut("Ctrl+O")
        self._add_action.triggered.connect(self._controller.browse_images)
        file_menu.addAction(self._add_action)

        self._export_action = QAction("Create PDF...", self)
        self._export_action.setShortcut("Ctrl+E")
        self._export_action.triggered.connect(self._controller.export_pdf)
        file_menu.addAction(self._export_action)

        self._clear_action = QAction("Clear Images", self)
        self._clear_action.triggered.connect(self._controller.clear_images)
        file_menu.addAction(self._clear_action)

        file_menu.addSeparator()

        quit_action = QAction("Quit", self)
        quit_action.setShortcut("Ctrl+Q")
        quit_action.triggered.connect(self.close)
        file_menu.addAction(quit_action)

        # Help menu
        help_menu = menu_bar.addMenu("Help")
        logs_action = QAction("Open Log Folder", self)
        logs_action.triggered.connect(self._open_log_folder)
        help_menu.addAction(logs_action)

        latest_log_action = QAction("Open Latest Log", self)
        latest_log_action.triggered.connect(self._open_latest_log)
        help_menu.addAction(latest_log_action)

    def _update_actions(self, state):
        self._export_action.setEnabled(state.can_generate)
        self._clear_action.setEnabled(state.image_count > 0 and not state.is_generating)
        self._add_action.setEnabled(not state.is_generating)

    def show_task_failure(self, message: str):
        self.statusBar().showMessage(f"Background task failed: {message}", 5000)

    def _open_log_folder(self):
        log_dir = get_log_directory()
        os.makedirs(log_dir, exist_ok=True)
        if not QDesktopServices.openUrl(QUrl.fromLocalFile(log_dir)):
            logger.warning("Could not open log folder {}", log_dir)

    def _open_latest_log(self):
        log_file = find_latest_log_file()
        if log_file is None:
            self.statusBar().showMessage("No log file yet", 5000)
            return
        QDesktopServices.openUrl(QUrl.fromLocalFile(str(log_file)))

    def closeEvent(self, event):
        """Stop listening to the store before the loop thread shuts down."""
        self._bridge.detach()
        event.accept()
