"""Boundaries the orchestration layer depends on.

The backend performs image decoding, thumbnailing and PDF encoding. Dialogs
are the platform file pickers. The notifier presents messages to the user.
All backend and dialog calls are coroutines and may fail independently.
"""

from typing import List, Optional, Protocol

from core.models import GenerationResult, ImageInfo, PdfSettings, ValidationResult
from core.notify import Notification


SUPPORTED_EXTENSIONS = ("png", "jpg", "jpeg", "webp", "bmp", "gif", "tiff", "tif")


class Backend(Protocol):
    async def validate_images(self, paths: List[str]) -> ValidationResult:
        ...

    async def get_image_info(self, path: str) -> ImageInfo:
        """Raises BackendError if the file cannot be read."""
        ...

    async def get_image_thumbnail(self, path: str, size: int) -> str:
        ...

    async def generate_pdf(
        self, image_paths: List[str], output_path: str, settings: PdfSettings
    ) -> GenerationResult:
        ...


class Dialogs(Protocol):
    async def select_images(self) -> Optional[List[str]]:
        """Multi-select open dialog. None when cancelled."""
        ...

    async def select_output_path(self, default_name: str) -> Optional[str]:
        """Save dialog filtered to .pdf. None when cancelled."""
        ...


class Notifier(Protocol):
    def notify(self, notification: Notification) -> None:
        ...
