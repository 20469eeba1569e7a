"""Image to PDF Converter Engine."""

import io
import os
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple

import fitz
from PIL import Image

from core.errors import BackendError, InvalidDimensionsError
from core.images import MAX_FILE_SIZE, validate_image
from core.models import FitMode, PdfSettings


@dataclass
class ImageToPdfResult:
    success: bool
    output_path: str = ""
    page_count: int = 0
    output_size: int = 0
    error_message: str = ""


@dataclass(frozen=True)
class ImagePlacement:
    x: float
    y: float
    width: float
    height: float


ProgressCallback = Callable[[int, int, str], None]
CancelCheck = Callable[[], bool]


def calculate_image_placement(
    img_w: int, img_h: int, page_w: float, page_h: float, fit_mode: FitMode
) -> ImagePlacement:
    """Position of an image on the page; may extend past the page edges."""
    if fit_mode == FitMode.ORIGINAL:
        # One pixel per point, centred
        width, height = float(img_w), float(img_h)
    else:
        scale_w = page_w / img_w
        scale_h = page_h / img_h
        scale = min(scale_w, scale_h) if fit_mode == FitMode.FIT else max(scale_w, scale_h)
        width, height = img_w * scale, img_h * scale

    x = (page_w - width) / 2
    y = (page_h - height) / 2
    return ImagePlacement(x, y, width, height)


class ImageToPdfConverter:
    """Converts a list of images into a single PDF, one image per page."""

    def __init__(self, jpeg_quality: int = 85, max_file_size: int = MAX_FILE_SIZE):
        self._jpeg_quality = max(1, min(100, jpeg_quality))
        self._max_file_size = max_file_size

    def convert(
        self,
        image_paths: List[str],
        output_path: str,
        settings: PdfSettings,
        on_progress: Optional[ProgressCallback] = None,
        is_cancelled: Optional[CancelCheck] = None,
    ) -> ImageToPdfResult:
        if not image_paths:
            return ImageToPdfResult(success=False, error_message="No images provided")

        try:
            page_w, page_h = settings.page_dimensions()
        except InvalidDimensionsError as e:
            return ImageToPdfResult(success=False, error_message=str(e))

        total = len(image_paths)
        self._report(on_progress, 0, total, "Creating PDF...")

        doc = fitz.open()
        try:
            for i, img_path in enumerate(image_paths):
                if is_cancelled and is_cancelled():
                    return ImageToPdfResult(success=False, error_message="Cancelled.")

                name = os.path.basename(img_path)
                self._report(on_progress, i, total, f"Adding {name} ({i + 1}/{total})...")

                try:
                    self._add_page(doc, img_path, page_w, page_h, settings.fit_mode)
                except BackendError as e:
                    return ImageToPdfResult(success=False, error_message=e.message)
                except Exception as e:
                    return ImageToPdfResult(
                        success=False,
                        error_message=f"Cannot read image '{name}': {e}",
                    )

            self._report(on_progress, total, total, "Saving PDF...")
            doc.save(output_path, garbage=4, deflate=True)
        except Exception as e:
            return ImageToPdfResult(success=False, error_message=f"Failed to generate PDF: {e}")
        finally:
            doc.close()

        return ImageToPdfResult(
            success=True,
            output_path=output_path,
            page_count=total,
            output_size=os.path.getsize(output_path),
        )

    def _add_page(self, doc, img_path: str, page_w: float, page_h: float, fit_mode: FitMode):
        validate_image(img_path, self._max_file_size)

        with Image.open(img_path) as src:
            src.seek(0)
            source_format = src.format
            img = src.convert("RGB")

        placement = calculate_image_placement(img.width, img.height, page_w, page_h, fit_mode)
        img, rect = self._clip_to_page(img, placement, page_w, page_h)

        page = doc.new_page(width=page_w, height=page_h)
        page.insert_image(rect, stream=self._encode(img, source_format))

    @staticmethod
    def _clip_to_page(
        img: Image.Image, placement: ImagePlacement, page_w: float, page_h: float
    ) -> Tuple[Image.Image, fitz.Rect]:
        """Crop away the parts of the image that would fall outside the page."""
        x0 = max(placement.x, 0.0)
        y0 = max(placement.y, 0.0)
        x1 = min(placement.x + placement.width, page_w)
        y1 = min(placement.y + placement.height, page_h)
        rect = fitz.Rect(x0, y0, x1, y1)
        if (x0, y0, x1, y1) == (placement.x, placement.y,
                                placement.x + placement.width, placement.y + placement.height):
            return img, rect

        sx = img.width / placement.width
        sy = img.height / placement.height
        box = (
            int(round((x0 - placement.x) * sx)),
            int(round((y0 - placement.y) * sy)),
            int(round((x1 - placement.x) * sx)),
            int(round((y1 - placement.y) * sy)),
        )
        box = (box[0], box[1], max(box[2], box[0] + 1), max(box[3], box[1] + 1))
        return img.crop(box), rect

    def _encode(self, img: Image.Image, source_format: Optional[str]) -> bytes:
        buf = io.BytesIO()
        if source_format == "JPEG":
            img.save(buf, format="JPEG", quality=self._jpeg_quality, optimize=True)
        else:
            img.save(buf, format="PNG", optimize=True)
        return buf.getvalue()

    @staticmethod
    def _report(cb: Optional[ProgressCallback], step: int, total: int, msg: str):
        if cb:
            cb(step, total, msg)
