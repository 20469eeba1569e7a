import os

from loguru import logger

from core.log import find_latest_log_file, init_logging
from core.notify import LogNotifier, Notification, Severity


def test_notification_text():
    assert Notification(Severity.INFO, "Ready").text() == "Ready"
    assert Notification(Severity.ERROR, "Failed", "disk full").text() == "Failed: disk full"


def test_log_notifier_writes_at_matching_level():
    records = []
    sink_id = logger.add(lambda message: records.append(message.record), level="DEBUG")
    try:
        LogNotifier().notify(Notification(Severity.WARNING, "Invalid file", "b.txt: bad"))
        LogNotifier().notify(Notification(Severity.SUCCESS, "PDF created"))
    finally:
        logger.remove(sink_id)

    assert [(r["level"].name, r["message"]) for r in records] == [
        ("WARNING", "notify: Invalid file: b.txt: bad"),
        ("SUCCESS", "notify: PDF created"),
    ]


def test_init_logging_writes_daily_file(tmp_path):
    log_dir = tmp_path / "logs"
    assert find_latest_log_file(str(log_dir)) is None

    init_logging("DEBUG", log_dir=str(log_dir))
    try:
        logger.info("hello from the test")
        logger.complete()
    finally:
        init_logging("INFO", to_file=False)

    latest = find_latest_log_file(str(log_dir))
    assert latest is not None
    assert latest.name.startswith("app_")
    assert "hello from the test" in latest.read_text()
    assert os.path.dirname(str(latest)) == str(log_dir)
