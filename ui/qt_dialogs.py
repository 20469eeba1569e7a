"""Native file pickers exposed as coroutines for the event-loop thread."""

import asyncio
import os
from typing import List, Optional

from PyQt6.QtCore import QObject, pyqtSignal
from PyQt6.QtWidgets import QFileDialog
from loguru import logger

from core.interfaces import SUPPORTED_EXTENSIONS

IMAGE_FILTER = "Images ({})".format(" ".join(f"*.{ext}" for ext in SUPPORTED_EXTENSIONS))
PDF_FILTER = "PDF Document (*.pdf)"


class QtDialogs(QObject):
    """Dialogs implementation backed by QFileDialog.

    Must be created on the GUI thread. Requests issued from the event loop
    are queued to the GUI thread; the answer comes back through an asyncio
    future on the requesting loop.
    """

    _request = pyqtSignal(object)

    def __init__(self, parent_widget=None, start_dir: str = ""):
        super().__init__()
        self._parent_widget = parent_widget
        self._last_dir = start_dir
        self._request.connect(self._run_request)

    def set_parent_widget(self, widget):
        self._parent_widget = widget

    async def select_images(self) -> Optional[List[str]]:
        paths = await self._ask(self._open_images)
        return paths or None

    async def select_output_path(self, default_name: str) -> Optional[str]:
        return await self._ask(self._save_pdf, default_name)

    async def _ask(self, fn, *args):
        loop = asyncio.get_running_loop()
        future = loop.create_future()
        self._request.emit((fn, args, loop, future))
        return await future

    def _run_request(self, request):
        fn, args, loop, future = request
        try:
            result = fn(*args)
        except Exception as e:
            logger.exception("File dialog failed")
            loop.call_soon_threadsafe(_settle, future, None, e)
            return
        loop.call_soon_threadsafe(_settle, future, result, None)

    def _open_images(self) -> List[str]:
        paths, _ = QFileDialog.getOpenFileNames(
            self._parent_widget, "Select Images", self._last_dir, IMAGE_FILTER
        )
        if paths:
            self._last_dir = os.path.dirname(paths[0])
        return [os.path.abspath(p) for p in paths]

    def _save_pdf(self, default_name: str) -> Optional[str]:
        start = os.path.join(self._last_dir, default_name) if self._last_dir else default_name
        path, _ = QFileDialog.getSaveFileName(
            self._parent_widget, "Save PDF", start, PDF_FILTER
        )
        if not path:
            return None
        if not path.lower().endswith(".pdf"):
            path += ".pdf"
        self._last_dir = os.path.dirname(path)
        return path


def _settle(future: asyncio.Future, result, error: Optional[BaseException]):
    if future.done():
        return
    if error is not None:
        future.set_exception(error)
    else:
        future.set_result(result)
