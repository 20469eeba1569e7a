"""Ordered image list with thumbnails, drag reorder and per-row actions."""

from typing import List, Optional, Sequence

from PyQt6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QLabel, QPushButton,
    QScrollArea, QFrame, QSizePolicy,
)
from PyQt6.QtCore import Qt, pyqtSignal, QMimeData, QPoint
from PyQt6.QtGui import QDrag, QPixmap
from loguru import logger

from core.images import decode_thumbnail
from core.models import ImageItem
from core.reorder import MoveIntent
from core.utils import format_file_size

THUMB_PX = 48
DRAG_MIME = "application/x-imagepdf-image-id"


def describe_image(item: ImageItem) -> str:
    """Secondary row text: dimensions, size and format once known."""
    if item.info is None:
        return "Loading..."
    info = item.info
    return f"{info.width} × {info.height} • {format_file_size(info.size_bytes)} • {info.format}"


class _ImageRow(QFrame):
    """Single row in the image list."""

    remove_clicked = pyqtSignal(str)
    move_up_clicked = pyqtSignal(str)
    move_down_clicked = pyqtSignal(str)
    drag_started = pyqtSignal(str)

    def __init__(self, index: int, item: ImageItem, parent=None):
        super().__init__(parent)
        self._index = index
        self._item = item
        self._drag_start_pos: Optional[QPoint] = None
        self.setProperty("class", "fileRow")
        self.setCursor(Qt.CursorShape.OpenHandCursor)
        self._setup_ui()
        self.set_item(item)

    @property
    def image_id(self) -> str:
        return self._item.id

    def _setup_ui(self):
        layout = QHBoxLayout(self)
        layout.setContentsMargins(8, 4, 8, 4)
        layout.setSpacing(8)

        self._index_label = QLabel(f"{self._index + 1}.")
        self._index_label.setFixedWidth(28)
        layout.addWidget(self._index_label)

        self._thumb_label = QLabel()
        self._thumb_label.setFixedSize(THUMB_PX, THUMB_PX)
        self._thumb_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(self._thumb_label)

        text_col = QVBoxLayout()
        text_col.setSpacing(2)
        self._name_label = QLabel()
        self._name_label.setSizePolicy(QSizePolicy.Policy.Expanding, QSizePolicy.Policy.Preferred)
        self._name_label.setMinimumWidth(100)
        text_col.addWidget(self._name_label)
        self._info_label = QLabel()
        self._info_label.setProperty("class", "textCaption")
        text_col.addWidget(self._info_label)
        layout.addLayout(text_col, 1)

        up_btn = QPushButton("▲")
        up_btn.setFixedSize(28, 28)
        up_btn.setToolTip("Move up")
        up_btn.clicked.connect(lambda: self.move_up_clicked.emit(self.image_id))
        layout.addWidget(up_btn)

        down_btn = QPushButton("▼")
        down_btn.setFixedSize(28, 28)
        down_btn.setToolTip("Move down")
        down_btn.clicked.connect(lambda: self.move_down_clicked.emit(self.image_id))
        layout.addWidget(down_btn)

        self._remove_btn = QPushButton("✕")
        self._remove_btn.setFixedSize(28, 28)
        self._remove_btn.setToolTip("Remove")
        self._remove_btn.clicked.connect(lambda: self.remove_clicked.emit(self.image_id))
        layout.addWidget(self._remove_btn)

    def set_item(self, item: ImageItem):
        thumb_changed = item.thumbnail != self._item.thumbnail or self._thumb_label.pixmap().isNull()
        self._item = item
        self._name_label.setText(item.name)
        self._name_label.setToolTip(item.path)
        self._info_label.setText(describe_image(item))
        if thumb_changed:
            self._set_thumbnail(item.thumbnail)

    def info_text(self) -> str:
        return self._info_label.text()

    def _set_thumbnail(self, thumbnail: Optional[str]):
        if not thumbnail:
            self._thumb_label.clear()
            return
        pixmap = QPixmap()
        try:
            loaded = pixmap.loadFromData(decode_thumbnail(thumbnail))
        except ValueError:
            loaded = False
        if not loaded:
            logger.warning("Unreadable thumbnail for {}", self._item.path)
            self._thumb_label.clear()
            return
        self._thumb_label.setPixmap(pixmap.scaled(
            THUMB_PX, THUMB_PX,
            Qt.AspectRatioMode.KeepAspectRatio,
            Qt.TransformationMode.SmoothTransformation,
        ))

    def thumbnail_pixmap(self) -> QPixmap:
        return self._thumb_label.pixmap()

    def mousePressEvent(self, event):
        if event.button() == Qt.MouseButton.LeftButton:
            self._drag_start_pos = event.pos()
        super().mousePressEvent(event)

    def mouseMoveEvent(self, event):
        if self._drag_start_pos is not None and event.buttons() & Qt.MouseButton.LeftButton:
            distance = (event.pos() - self._drag_start_pos).manhattanLength()
            if distance > 20:
                self.drag_started.emit(self.image_id)
                self._drag_start_pos = None
        super().mouseMoveEvent(event)

    def mouseReleaseEvent(self, event):
        self._drag_start_pos = None
        super().mouseReleaseEvent(event)


class ImageListWidget(QWidget):
    """
    Renders the store's image order. The widget never reorders itself: drags
    and up/down clicks are reported as MoveIntent and the list follows the
    next state it is given.
    """

    move_requested = pyqtSignal(object)
    remove_requested = pyqtSignal(str)

    def __init__(self, parent=None):
        super().__init__(parent)
        self._items: List[ImageItem] = []
        self._rows: List[_ImageRow] = []
        self._drag_source: Optional[str] = None
        self.setAcceptDrops(True)
        self.setObjectName("imageListWidget")
        self._setup_ui()

    def _setup_ui(self):
        outer_layout = QVBoxLayout(self)
        outer_layout.setContentsMargins(0, 0, 0, 0)
        outer_layout.setSpacing(0)

        self._scroll = QScrollArea()
        self._scroll.setWidgetResizable(True)
        self._scroll.setFrameShape(QScrollArea.Shape.NoFrame)
        self._scroll.setMinimumHeight(160)

        self._container = QWidget()
        self._list_layout = QVBoxLayout(self._container)
        self._list_layout.setContentsMargins(0, 0, 0, 0)
        self._list_layout.setSpacing(0)
        self._list_layout.addStretch()

        self._scroll.setWidget(self._container)
        outer_layout.addWidget(self._scroll)

        self._empty_label = QLabel("No images added yet")
        self._empty_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self._empty_label.setMinimumHeight(40)
        outer_layout.addWidget(self._empty_label)

        self._update_visibility()

    def _update_visibility(self):
        has_items = len(self._items) > 0
        self._scroll.setVisible(has_items)
        self._empty_label.setVisible(not has_items)

    def set_images(self, images: Sequence[ImageItem]):
        """Show `images` in order, reusing rows when only their content changed."""
        images = list(images)
        if [i.id for i in images] == self.row_ids():
            for row, item in zip(self._rows, images):
                row.set_item(item)
            self._items = images
            return
        self._items = images
        self._rebuild_rows()

    def row_ids(self) -> List[str]:
        return [row.image_id for row in self._rows]

    def row(self, index: int) -> _ImageRow:
        return self._rows[index]

    def count(self) -> int:
        return len(self._items)

    def request_move(self, source_id: str, target_id: Optional[str]):
        self.move_requested.emit(MoveIntent(source_id, target_id))

    def _move_by(self, image_id: str, offset: int):
        ids = self.row_ids()
        if image_id not in ids:
            return
        target = ids.index(image_id) + offset
        if 0 <= target < len(ids):
            self.request_move(image_id, ids[target])

    def _rebuild_rows(self):
        for row in self._rows:
            self._list_layout.removeWidget(row)
            row.deleteLater()
        self._rows.clear()

        for i, item in enumerate(self._items):
            row = _ImageRow(i, item)
            row.remove_clicked.connect(self.remove_requested.emit)
            row.move_up_clicked.connect(lambda image_id: self._move_by(image_id, -1))
            row.move_down_clicked.connect(lambda image_id: self._move_by(image_id, 1))
            row.drag_started.connect(self._on_drag_started)
            self._list_layout.insertWidget(i, row)
            self._rows.append(row)

        self._update_visibility()

    # ------------------------------------------------------------------ Drag reorder

    def _on_drag_started(self, image_id: str):
        row = self._row_for(image_id)
        if row is None:
            return

        self._drag_source = image_id

        drag = QDrag(self)
        mime = QMimeData()
        mime.setData(DRAG_MIME, image_id.encode("utf-8"))
        drag.setMimeData(mime)

        pixmap = row.thumbnail_pixmap()
        if pixmap is not None and not pixmap.isNull():
            drag.setPixmap(pixmap)

        drag.exec(Qt.DropAction.MoveAction)
        self._drag_source = None

    def dragEnterEvent(self, event):
        if event.mimeData().hasFormat(DRAG_MIME) and self._drag_source is not None:
            event.acceptProposedAction()
        else:
            event.ignore()

    def dragMoveEvent(self, event):
        event.acceptProposedAction()

    def dropEvent(self, event):
        if self._drag_source is None:
            event.ignore()
            return

        target = self._find_drop_target(event.position().toPoint())
        # Dropping outside any row carries no target and is ignored downstream
        self.request_move(self._drag_source, target)
        self._drag_source = None
        event.acceptProposedAction()

    def _find_drop_target(self, pos: QPoint) -> Optional[str]:
        mapped = self._container.mapFrom(self, pos)
        for row in self._rows:
            if row.geometry().contains(mapped):
                return row.image_id
        return None

    def _row_for(self, image_id: str) -> Optional[_ImageRow]:
        for row in self._rows:
            if row.image_id == image_id:
                return row
        return None
