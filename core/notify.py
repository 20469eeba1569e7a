"""User notification capability: severity, message and optional description."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from loguru import logger


class Severity(Enum):
    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True)
class Notification:
    severity: Severity
    message: str
    description: Optional[str] = None

    def text(self) -> str:
        if self.description:
            return f"{self.message}: {self.description}"
        return self.message


_LOG_LEVELS = {
    Severity.INFO: "INFO",
    Severity.SUCCESS: "SUCCESS",
    Severity.WARNING: "WARNING",
    Severity.ERROR: "ERROR",
}


def log_notification(notification: Notification):
    logger.log(_LOG_LEVELS[notification.severity], "notify: {}", notification.text())


class LogNotifier:
    """Notifier that only writes to the log. Used headless and as a fallback."""

    def notify(self, notification: Notification) -> None:
        log_notification(notification)
