"""Drag-and-drop zone for adding images."""

import os
from typing import List

from PyQt6.QtWidgets import QWidget, QVBoxLayout, QLabel
from PyQt6.QtCore import Qt, pyqtSignal
from PyQt6.QtGui import QDragEnterEvent, QDropEvent, QPainter, QPen, QColor

from core.interfaces import SUPPORTED_EXTENSIONS


class MultiDropZone(QWidget):
    """
    A dashed-border zone that accepts dropped files and clicks.
    Emits files_dropped(list[str]) with absolute paths of every dropped local
    file; format checks are left to the ingestion pipeline so rejected files
    get reported. A click emits browse_requested.
    """

    files_dropped = pyqtSignal(list)
    browse_requested = pyqtSignal()

    def __init__(self, parent=None):
        super().__init__(parent)
        self._image_count = 0
        self._drag_over = False
        self.setAcceptDrops(True)
        self.setObjectName("multiDropZone")
        self.setMinimumHeight(120)
        self.setCursor(Qt.CursorShape.PointingHandCursor)
        self._setup_ui()

    def _setup_ui(self):
        self._layout = QVBoxLayout(self)
        self._layout.setAlignment(Qt.AlignmentFlag.AlignCenter)

        self._icon_label = QLabel("\U0001F5BC")
        self._icon_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self._layout.addWidget(self._icon_label)

        self._text_label = QLabel(self._placeholder())
        self._text_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self._text_label.setWordWrap(True)
        self._layout.addWidget(self._text_label)

    @staticmethod
    def _placeholder() -> str:
        exts = ", ".join(e.upper() for e in SUPPORTED_EXTENSIONS)
        return f"Drop images here or click to browse\n{exts}"

    def set_image_count(self, count: int):
        self._image_count = count
        if count > 0:
            noun = "image" if count == 1 else "images"
            self._text_label.setText(f"{count} {noun} added. Drop more or click to browse")
        else:
            self._text_label.setText(self._placeholder())
        self.update()

    def dragEnterEvent(self, event: QDragEnterEvent):
        if event.mimeData().hasUrls() and self._local_paths(event.mimeData().urls()):
            event.acceptProposedAction()
            self._drag_over = True
            self.update()
            return
        event.ignore()

    def dragLeaveEvent(self, event):
        self._drag_over = False
        self.update()

    def dropEvent(self, event: QDropEvent):
        self._drag_over = False
        self.update()
        paths = self._local_paths(event.mimeData().urls())
        if paths:
            self.files_dropped.emit(paths)
            event.acceptProposedAction()
        else:
            event.ignore()

    def mousePressEvent(self, event):
        if event.button() == Qt.MouseButton.LeftButton:
            self.browse_requested.emit()

    @staticmethod
    def _local_paths(urls) -> List[str]:
        paths = []
        for url in urls:
            if url.isLocalFile():
                paths.append(os.path.abspath(url.toLocalFile()))
        return paths

    def paintEvent(self, event):
        super().paintEvent(event)
        painter = QPainter(self)
        painter.setRenderHint(QPainter.RenderHint.Antialiasing)

        if self._drag_over:
            pen = QPen(QColor("#007AFF"), 2, Qt.PenStyle.CustomDashLine)
            pen.setDashPattern([8, 4])
        elif self._image_count > 0:
            pen = QPen(QColor("#34C759"), 2, Qt.PenStyle.SolidLine)
        else:
            pen = QPen(QColor("#C7C7CC"), 2, Qt.PenStyle.CustomDashLine)
            pen.setDashPattern([8, 6])

        painter.setPen(pen)
        painter.drawRoundedRect(self.rect().adjusted(1, 1, -1, -1), 16, 16)
        painter.end()
