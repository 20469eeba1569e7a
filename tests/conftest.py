"""Pytest configuration.

Widget tests need a QApplication. One is created for the whole session as
early as possible, on the offscreen platform so no display is required.
"""

import os
from typing import Any, Optional

import pytest
from PIL import Image

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

_APP: Optional[Any] = None


def pytest_configure(config):
    """Ensure a QApplication exists before collecting/running tests."""
    from PyQt6.QtWidgets import QApplication

    global _APP
    app = QApplication.instance()
    # Keep a strong ref so it isn't GC'd mid-session.
    _APP = app if app is not None else QApplication([])


def pytest_sessionfinish(session, exitstatus):
    from PyQt6.QtWidgets import QApplication

    app = QApplication.instance()
    if app is None:
        return
    app.quit()
    app.processEvents()


@pytest.fixture
def qapp():
    from PyQt6.QtWidgets import QApplication
    return QApplication.instance()


@pytest.fixture
def make_image(tmp_path):
    """Write a solid-colour image and return its path as a string."""

    def _make(name: str = "img.png", size=(40, 20), mode: str = "RGB", color="red") -> str:
        path = tmp_path / name
        Image.new(mode, size, color).save(path)
        return str(path)

    return _make
