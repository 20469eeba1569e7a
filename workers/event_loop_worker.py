"""QThread hosting the asyncio event loop that runs the core workflows."""

import asyncio
import concurrent.futures
import threading
from typing import Awaitable, Callable

from PyQt6.QtCore import QThread, pyqtSignal
from loguru import logger


class EventLoopWorker(QThread):
    """Runs one asyncio loop for the store, ingestion and export.

    The GUI thread hands work over with `submit` (coroutines) and `call_soon`
    (plain callables, e.g. store mutations) so that all state changes happen
    on this single loop.
    """

    task_failed = pyqtSignal(str)

    def __init__(self, parent=None):
        super().__init__(parent)
        self._loop = asyncio.new_event_loop()
        self._ready = threading.Event()

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        return self._loop

    def run(self):
        asyncio.set_event_loop(self._loop)
        self._loop.call_soon(self._ready.set)
        try:
            self._loop.run_forever()
        finally:
            self._shutdown()

    def wait_until_ready(self, timeout: float = 5.0) -> bool:
        return self._ready.wait(timeout)

    def submit(self, coro: Awaitable) -> concurrent.futures.Future:
        future = asyncio.run_coroutine_threadsafe(coro, self._loop)
        future.add_done_callback(self._on_done)
        return future

    def call_soon(self, fn: Callable, *args):
        self._loop.call_soon_threadsafe(self._guarded, fn, args)

    def stop(self, timeout_ms: int = 5000) -> bool:
        if not self._loop.is_closed():
            self._loop.call_soon_threadsafe(self._loop.stop)
        return self.wait(timeout_ms)

    def _guarded(self, fn: Callable, args):
        try:
            fn(*args)
        except Exception as e:
            logger.exception("Loop callback {!r} failed", fn)
            self.task_failed.emit(str(e))

    def _on_done(self, future: concurrent.futures.Future):
        if future.cancelled():
            return
        exc = future.exception()
        if exc is not None:
            logger.opt(exception=exc).error("Background task failed")
            self.task_failed.emit(str(exc))

    def _shutdown(self):
        pending = asyncio.all_tasks(self._loop)
        for task in pending:
            task.cancel()
        if pending:
            self._loop.run_until_complete(asyncio.gather(*pending, return_exceptions=True))
        self._loop.run_until_complete(self._loop.shutdown_asyncgens())
        self._loop.close()
        logger.debug("Event loop closed")
