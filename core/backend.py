"""Local implementation of the backend boundary.

Blocking Pillow and PyMuPDF work runs in worker threads via
`asyncio.to_thread` so the event loop stays responsive.
"""

import asyncio
import os
from typing import List, Optional

from loguru import logger

from core import images
from core.config import AppConfig
from core.image_to_pdf import ImageToPdfConverter
from core.models import GenerationResult, ImageInfo, PdfSettings, ValidationResult
from core.utils import check_disk_space, total_file_size


class LocalBackend:
    def __init__(self, config: Optional[AppConfig] = None):
        self._config = config or AppConfig()

    async def validate_images(self, paths: List[str]) -> ValidationResult:
        result = await asyncio.to_thread(
            images.validate_images, list(paths), self._config.max_file_size_bytes
        )
        logger.debug("Validated {} path(s): {} valid, {} invalid",
                     len(paths), len(result.valid), len(result.invalid))
        return result

    async def get_image_info(self, path: str) -> ImageInfo:
        return await asyncio.to_thread(
            images.read_image_info, path, self._config.max_file_size_bytes
        )

    async def get_image_thumbnail(self, path: str, size: int) -> str:
        return await asyncio.to_thread(images.render_thumbnail, path, size)

    async def generate_pdf(
        self, image_paths: List[str], output_path: str, settings: PdfSettings
    ) -> GenerationResult:
        return await asyncio.to_thread(self._generate, list(image_paths), output_path, settings)

    def _generate(self, image_paths: List[str], output_path: str, settings: PdfSettings) -> GenerationResult:
        output_dir = os.path.dirname(os.path.abspath(output_path))
        has_space, space_msg = check_disk_space(output_dir, total_file_size(image_paths))
        if not has_space:
            return GenerationResult(success=False, error=space_msg)

        converter = ImageToPdfConverter(
            jpeg_quality=self._config.jpeg_quality,
            max_file_size=self._config.max_file_size_bytes,
        )
        result = converter.convert(image_paths, output_path, settings, on_progress=_log_progress)
        if not result.success:
            return GenerationResult(success=False, error=result.error_message)

        logger.info("Wrote {} page(s), {} bytes to {}", result.page_count, result.output_size, output_path)
        return GenerationResult(success=True, output_path=result.output_path)


def _log_progress(step: int, total: int, message: str):
    logger.debug("generate [{}/{}] {}", step, total, message)
