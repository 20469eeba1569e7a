"""Progress bar shown while a PDF is being generated."""

from PyQt6.QtWidgets import QWidget, QHBoxLayout, QVBoxLayout, QProgressBar, QLabel


class ProgressWidget(QWidget):
    """Progress bar + percentage + status label. Hidden by default."""

    def __init__(self, parent=None):
        super().__init__(parent)
        self._setup_ui()
        self.hide()

    def _setup_ui(self):
        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 8, 0, 8)

        bar_row = QHBoxLayout()
        self._bar = QProgressBar()
        self._bar.setRange(0, 100)
        self._bar.setValue(0)
        self._bar.setTextVisible(False)
        bar_row.addWidget(self._bar, 1)

        self._pct_label = QLabel("0%")
        bar_row.addWidget(self._pct_label)
        layout.addLayout(bar_row)

        self._status_label = QLabel("Creating PDF...")
        layout.addWidget(self._status_label)

    @property
    def value(self) -> int:
        return self._bar.value()

    def render_state(self, is_generating: bool, progress: int):
        """Mirror the store's generation fields."""
        if not is_generating:
            self.reset()
            return
        pct = max(0, min(100, progress))
        self._bar.setValue(pct)
        self._pct_label.setText(f"{pct}%")
        self._status_label.setText("Finishing..." if pct >= 100 else "Creating PDF...")
        self.show()

    def reset(self):
        self._bar.setValue(0)
        self._pct_label.setText("0%")
        self.hide()
