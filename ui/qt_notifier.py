"""Notifier that surfaces messages in the Qt window."""

from PyQt6.QtCore import QObject, pyqtSignal
from PyQt6.QtWidgets import QApplication, QMessageBox

from core.notify import Notification, Severity, log_notification

STATUS_TIMEOUT_MS = 5000


class QtNotifier(QObject):
    """Errors and warnings open a message box; the rest go to the status bar.

    `notify` may be called from any thread. Presentation is queued to the
    thread this object lives on.
    """

    status_message = pyqtSignal(str, int)
    _show = pyqtSignal(object)

    def __init__(self, parent=None):
        super().__init__(parent)
        self._show.connect(self._present)

    def notify(self, notification: Notification) -> None:
        log_notification(notification)
        self._show.emit(notification)

    def _present(self, notification: Notification):
        if notification.severity == Severity.ERROR:
            QMessageBox.critical(
                QApplication.activeWindow(), notification.message, notification.description or ""
            )
        elif notification.severity == Severity.WARNING:
            QMessageBox.warning(
                QApplication.activeWindow(), notification.message, notification.description or ""
            )
        else:
            self.status_message.emit(notification.text(), STATUS_TIMEOUT_MS)
