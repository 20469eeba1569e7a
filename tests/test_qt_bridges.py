import asyncio
import threading

import pytest

from core.notify import Notification, Severity
from ui import qt_dialogs, qt_notifier
from ui.qt_dialogs import QtDialogs
from ui.qt_notifier import QtNotifier
from workers.event_loop_worker import EventLoopWorker


def test_event_loop_worker_runs_coroutines_off_the_gui_thread(qapp):
    worker = EventLoopWorker()
    worker.start()
    assert worker.wait_until_ready()

    async def where():
        await asyncio.sleep(0)
        return threading.get_ident()

    try:
        loop_thread = worker.submit(where()).result(timeout=5)
        assert loop_thread != threading.get_ident()

        done = threading.Event()
        worker.call_soon(done.set)
        assert done.wait(5)
    finally:
        assert worker.stop()
    assert worker.loop.is_closed()


def test_event_loop_worker_reports_failures(qapp):
    worker = EventLoopWorker()
    failures = []
    worker.task_failed.connect(failures.append)
    worker.start()
    worker.wait_until_ready()

    async def boom():
        raise ValueError("bad")

    try:
        with pytest.raises(ValueError):
            worker.submit(boom()).result(timeout=5)
    finally:
        worker.stop()
    qapp.processEvents()
    assert failures == ["bad"]


def test_save_dialog_appends_pdf_extension(qapp, monkeypatch):
    requests = []

    def fake_save(parent, caption, start, file_filter):
        requests.append((start, file_filter))
        return "/tmp/album", file_filter

    monkeypatch.setattr(qt_dialogs.QFileDialog, "getSaveFileName", staticmethod(fake_save))
    path = asyncio.run(QtDialogs().select_output_path("images.pdf"))

    assert path == "/tmp/album.pdf"
    assert requests == [("images.pdf", "PDF Document (*.pdf)")]


def test_save_dialog_cancel(qapp, monkeypatch):
    monkeypatch.setattr(
        qt_dialogs.QFileDialog, "getSaveFileName", staticmethod(lambda *args: ("", ""))
    )
    assert asyncio.run(QtDialogs().select_output_path("images.pdf")) is None


def test_open_dialog_filters_images(qapp, monkeypatch):
    seen_filters = []

    def fake_open(parent, caption, start, file_filter):
        seen_filters.append(file_filter)
        return ["/pics/a.png", "/pics/b.webp"], file_filter

    monkeypatch.setattr(qt_dialogs.QFileDialog, "getOpenFileNames", staticmethod(fake_open))
    dialogs = QtDialogs()

    assert asyncio.run(dialogs.select_images()) == ["/pics/a.png", "/pics/b.webp"]
    assert "*.tif" in seen_filters[0] and "*.png" in seen_filters[0]


def test_open_dialog_cancel_and_failure(qapp, monkeypatch):
    monkeypatch.setattr(
        qt_dialogs.QFileDialog, "getOpenFileNames", staticmethod(lambda *args: ([], ""))
    )
    assert asyncio.run(QtDialogs().select_images()) is None

    def broken(*args):
        raise OSError("no portal")

    monkeypatch.setattr(qt_dialogs.QFileDialog, "getOpenFileNames", staticmethod(broken))
    with pytest.raises(OSError):
        asyncio.run(QtDialogs().select_images())


def test_notifier_routes_by_severity(qapp, monkeypatch):
    boxes = []
    monkeypatch.setattr(
        qt_notifier.QMessageBox, "critical",
        staticmethod(lambda parent, title, text: boxes.append(("critical", title, text))),
    )
    monkeypatch.setattr(
        qt_notifier.QMessageBox, "warning",
        staticmethod(lambda parent, title, text: boxes.append(("warning", title, text))),
    )
    notifier = QtNotifier()
    status = []
    notifier.status_message.connect(lambda text, timeout: status.append(text))

    notifier.notify(Notification(Severity.ERROR, "Failed to create PDF", "Disk full"))
    notifier.notify(Notification(Severity.WARNING, "Invalid file", "b.txt: unsupported"))
    notifier.notify(Notification(Severity.SUCCESS, "Images loaded", "Added: 2"))
    notifier.notify(Notification(Severity.INFO, "Ready"))

    assert boxes == [
        ("critical", "Failed to create PDF", "Disk full"),
        ("warning", "Invalid file", "b.txt: unsupported"),
    ]
    assert status == ["Images loaded: Added: 2", "Ready"]
