"""Disk space and formatting utilities."""

import os
import shutil
from typing import Iterable, Tuple


def format_file_size(size_bytes: int) -> str:
    """Format bytes to human-readable string."""
    if size_bytes < 0:
        return "0 B"
    if size_bytes < 1024:
        return f"{size_bytes} B"
    if size_bytes < 1024 * 1024:
        return f"{size_bytes / 1024:.1f} KB"
    if size_bytes < 1024 * 1024 * 1024:
        return f"{size_bytes / (1024 * 1024):.1f} MB"
    return f"{size_bytes / (1024 * 1024 * 1024):.2f} GB"


def total_file_size(paths: Iterable[str]) -> int:
    total = 0
    for path in paths:
        try:
            total += os.path.getsize(path)
        except OSError:
            continue
    return total


def check_disk_space(output_dir: str, required_bytes: int) -> Tuple[bool, str]:
    """Check if output directory has enough free disk space."""
    try:
        stat = shutil.disk_usage(output_dir or ".")
    except OSError:
        return (True, "")  # If we can't check, proceed anyway

    # Require 2x safety margin
    needed = required_bytes * 2
    if stat.free < needed:
        return (
            False,
            f"Not enough disk space: {format_file_size(needed)} needed, "
            f"{format_file_size(stat.free)} available",
        )
    return (True, "")
