"""Image to PDF main panel."""

from PyQt6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QLabel, QPushButton, QScrollArea,
)

from core.models import AppState
from ui.components.image_list_widget import ImageListWidget
from ui.components.multi_drop_zone import MultiDropZone
from ui.components.progress_widget import ProgressWidget
from ui.page_settings_widget import PageSettingsWidget


class ImageToPdfWidget(QWidget):
    """
    Image-to-PDF panel: drop zone, ordered image list, page settings, export.

    The panel holds no state of its own. It renders every AppState delivered
    by the store bridge and forwards user actions to the controller.
    """

    def __init__(self, controller, bridge, parent=None):
        super().__init__(parent)
        self._controller = controller
        self._bridge = bridge
        self._setup_ui()
        self._connect_signals()
        self.render_state(bridge.state)

    def _setup_ui(self):
        scroll = QScrollArea(self)
        scroll.setWidgetResizable(True)
        scroll.setFrameShape(QScrollArea.Shape.NoFrame)

        container = QWidget()
        layout = QVBoxLayout(container)
        layout.setContentsMargins(32, 24, 32, 24)
        layout.setSpacing(16)

        title = QLabel("Image to PDF")
        title.setProperty("class", "sectionTitle")
        layout.addWidget(title)

        subtitle = QLabel(
            "Combine images into a single PDF, one image per page. "
            "Drag rows to change the page order."
        )
        subtitle.setProperty("class", "sectionSubtitle")
        subtitle.setWordWrap(True)
        layout.addWidget(subtitle)

        self._drop_zone = MultiDropZone()
        layout.addWidget(self._drop_zone)

        list_header = QHBoxLayout()
        self._count_label = QLabel("")
        list_header.addWidget(self._count_label, 1)
        self._clear_btn = QPushButton("Clear All")
        self._clear_btn.setProperty("class", "secondaryButton")
        list_header.addWidget(self._clear_btn)
        layout.addLayout(list_header)

        self._image_list = ImageListWidget()
        layout.addWidget(self._image_list)

        self._settings_panel = PageSettingsWidget()
        layout.addWidget(self._settings_panel)

        self._export_btn = QPushButton("Create PDF")
        self._export_btn.setObjectName("primaryButton")
        self._export_btn.setEnabled(False)
        layout.addWidget(self._export_btn)

        self._progress = ProgressWidget()
        layout.addWidget(self._progress)

        layout.addStretch()

        scroll.setWidget(container)

        main_layout = QVBoxLayout(self)
        main_layout.setContentsMargins(0, 0, 0, 0)
        main_layout.addWidget(scroll)

    def _connect_signals(self):
        self._bridge.state_changed.connect(self.render_state)
        self._drop_zone.files_dropped.connect(self._controller.add_paths)
        self._drop_zone.browse_requested.connect(self._controller.browse_images)
        self._image_list.move_requested.connect(self._controller.move_image)
        self._image_list.remove_requested.connect(self._controller.remove_image)
        self._clear_btn.clicked.connect(self._controller.clear_images)
        self._settings_panel.settings_changed.connect(self._controller.update_settings)
        self._settings_panel.reset_requested.connect(self._controller.reset_settings)
        self._export_btn.clicked.connect(self._controller.export_pdf)

    def render_state(self, state: AppState):
        self._image_list.set_images(state.images)
        self._drop_zone.set_image_count(state.image_count)
        self._count_label.setText(_count_text(state.image_count))
        self._settings_panel.render_settings(state.settings)
        self._progress.render_state(state.is_generating, state.progress)

        busy = state.is_generating
        self._export_btn.setEnabled(state.can_generate)
        self._export_btn.setText("Creating PDF..." if busy else "Create PDF")
        self._clear_btn.setEnabled(state.image_count > 0 and not busy)
        self._drop_zone.setEnabled(not busy)
        self._image_list.setEnabled(not busy)
        self._settings_panel.setEnabled(not busy)


def _count_text(count: int) -> str:
    if count == 0:
        return "No images"
    return f"{count} image" if count == 1 else f"{count} images"
