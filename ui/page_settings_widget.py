"""Page layout panel: size, custom dimensions, orientation and fit mode."""

from PyQt6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QLabel, QPushButton, QGroupBox,
    QComboBox, QDoubleSpinBox, QRadioButton, QButtonGroup,
)
from PyQt6.QtCore import pyqtSignal

from core.errors import InvalidDimensionsError
from core.models import FitMode, Orientation, PageSize, PdfSettings

MAX_CUSTOM_MM = 5000.0

_FIT_MODE_HINTS = {
    FitMode.FIT: "Scale to fit the page, keeping the whole image visible",
    FitMode.FILL: "Scale to cover the page, cropping the overflow",
    FitMode.ORIGINAL: "Keep the original size, one pixel per point",
}


class PageSettingsWidget(QWidget):
    """
    Edits PdfSettings. Every user edit is reported as a partial change via
    settings_changed(dict); the panel itself only shows what render_settings
    is given.
    """

    settings_changed = pyqtSignal(dict)
    reset_requested = pyqtSignal()

    def __init__(self, parent=None):
        super().__init__(parent)
        self._setup_ui()

    def _setup_ui(self):
        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)

        group = QGroupBox("Page Settings")
        group_layout = QVBoxLayout(group)

        # Page size
        size_row = QHBoxLayout()
        size_row.addWidget(QLabel("Page size:"))
        self._size_combo = QComboBox()
        for size in PageSize:
            self._size_combo.addItem(size.value, size.value)
        self._size_combo.currentIndexChanged.connect(self._on_size_changed)
        size_row.addWidget(self._size_combo)
        self._dims_label = QLabel("")
        self._dims_label.setProperty("class", "textCaption")
        size_row.addWidget(self._dims_label)
        size_row.addStretch()
        group_layout.addLayout(size_row)

        # Custom size (mm)
        self._custom_row = QWidget()
        custom_layout = QHBoxLayout(self._custom_row)
        custom_layout.setContentsMargins(0, 0, 0, 0)
        custom_layout.addWidget(QLabel("Width:"))
        self._width_spin = self._make_mm_spin()
        self._width_spin.valueChanged.connect(
            lambda v: self.settings_changed.emit({"custom_width": _mm_or_none(v)})
        )
        custom_layout.addWidget(self._width_spin)
        custom_layout.addWidget(QLabel("Height:"))
        self._height_spin = self._make_mm_spin()
        self._height_spin.valueChanged.connect(
            lambda v: self.settings_changed.emit({"custom_height": _mm_or_none(v)})
        )
        custom_layout.addWidget(self._height_spin)
        custom_layout.addStretch()
        group_layout.addWidget(self._custom_row)

        # Orientation
        orient_row = QHBoxLayout()
        orient_row.addWidget(QLabel("Orientation:"))
        self._orientation_group = QButtonGroup(self)
        self._orientation_buttons = {}
        for orientation in Orientation:
            btn = QRadioButton(orientation.value)
            self._orientation_group.addButton(btn)
            self._orientation_buttons[orientation] = btn
            btn.toggled.connect(
                lambda checked, o=orientation: self._on_orientation_toggled(o, checked)
            )
            orient_row.addWidget(btn)
        orient_row.addStretch()
        group_layout.addLayout(orient_row)

        # Fit mode
        fit_row = QHBoxLayout()
        fit_row.addWidget(QLabel("Image fit:"))
        self._fit_combo = QComboBox()
        for mode in FitMode:
            self._fit_combo.addItem(mode.value, mode.value)
        self._fit_combo.currentIndexChanged.connect(self._on_fit_changed)
        fit_row.addWidget(self._fit_combo)
        fit_row.addStretch()
        group_layout.addLayout(fit_row)

        self._fit_hint = QLabel("")
        self._fit_hint.setProperty("class", "helperText")
        self._fit_hint.setWordWrap(True)
        group_layout.addWidget(self._fit_hint)

        reset_btn = QPushButton("Reset to defaults")
        reset_btn.setProperty("class", "secondaryButton")
        reset_btn.clicked.connect(self.reset_requested.emit)
        reset_row = QHBoxLayout()
        reset_row.addStretch()
        reset_row.addWidget(reset_btn)
        group_layout.addLayout(reset_row)

        layout.addWidget(group)
        self.render_settings(PdfSettings())

    @staticmethod
    def _make_mm_spin() -> QDoubleSpinBox:
        spin = QDoubleSpinBox()
        spin.setRange(0.0, MAX_CUSTOM_MM)
        spin.setDecimals(1)
        spin.setSuffix(" mm")
        # 0 is shown as empty and means "not entered"
        spin.setSpecialValueText(" ")
        return spin

    def _on_size_changed(self, index: int):
        value = self._size_combo.itemData(index)
        if value is not None:
            self.settings_changed.emit({"page_size": PageSize(value)})

    def _on_orientation_toggled(self, orientation: Orientation, checked: bool):
        if checked:
            self.settings_changed.emit({"orientation": orientation})

    def _on_fit_changed(self, index: int):
        value = self._fit_combo.itemData(index)
        if value is not None:
            self.settings_changed.emit({"fit_mode": FitMode(value)})

    def render_settings(self, settings: PdfSettings):
        """Show `settings` without echoing the values back as edits."""
        widgets = [self._size_combo, self._width_spin, self._height_spin, self._fit_combo]
        widgets.extend(self._orientation_buttons.values())
        for w in widgets:
            w.blockSignals(True)
        try:
            self._size_combo.setCurrentIndex(self._size_combo.findData(settings.page_size.value))
            self._width_spin.setValue(settings.custom_width or 0.0)
            self._height_spin.setValue(settings.custom_height or 0.0)
            self._orientation_buttons[settings.orientation].setChecked(True)
            self._fit_combo.setCurrentIndex(self._fit_combo.findData(settings.fit_mode.value))
        finally:
            for w in widgets:
                w.blockSignals(False)

        self._custom_row.setVisible(settings.page_size == PageSize.CUSTOM)
        self._fit_hint.setText(_FIT_MODE_HINTS[settings.fit_mode])
        self._dims_label.setText(_describe_dimensions(settings))

    def dimensions_text(self) -> str:
        return self._dims_label.text()


def _mm_or_none(value: float):
    return value if value > 0 else None


def _describe_dimensions(settings: PdfSettings) -> str:
    try:
        width, height = settings.page_dimensions()
    except InvalidDimensionsError:
        return "Enter width and height"
    return f"{width:.0f} × {height:.0f} pt"
