"""Logging initialization using loguru."""

import sys
from pathlib import Path
from typing import Optional

from loguru import logger


def get_log_directory() -> str:
    return str(Path.home() / ".imagepdf" / "logs")


def init_logging(level: str = "INFO", log_dir: Optional[str] = None, to_file: bool = True) -> None:
    """Route loguru output to stderr and, optionally, a rotating daily file."""
    logger.remove()
    logger.add(
        sys.stderr,
        level=level,
        format="[{time:HH:mm:ss}] {level}: {message}",
        backtrace=False,
        diagnose=False,
    )
    if not to_file:
        return

    log_path = Path(log_dir or get_log_directory())
    try:
        log_path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        logger.warning("Cannot create log directory {}: {}", log_path, e)
        return

    logger.add(
        str(log_path / "app_{time:YYYYMMDD}.log"),
        rotation="10 MB",
        retention="10 days",
        compression="zip",
        enqueue=True,
        backtrace=False,
        diagnose=False,
        level=level,
    )


def find_latest_log_file(log_dir: Optional[str] = None) -> Optional[Path]:
    """Return the most recently modified app log, if any."""
    try:
        log_path = Path(log_dir or get_log_directory())
        if not log_path.exists():
            return None
        log_files = list(log_path.glob("app_*.log"))
        if not log_files:
            return None
        return max(log_files, key=lambda p: p.stat().st_mtime)
    except (OSError, ValueError):
        return None
