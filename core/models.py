"""Domain models: image items, PDF settings and application state."""

import re
import uuid
from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from loguru import logger

from core.errors import InvalidDimensionsError, UserErrorKind


MM_TO_POINTS = 2.83465


class PageSize(Enum):
    A4 = "A4"
    A3 = "A3"
    A5 = "A5"
    LETTER = "Letter"
    LEGAL = "Legal"
    CUSTOM = "Custom"


class Orientation(Enum):
    PORTRAIT = "Portrait"
    LANDSCAPE = "Landscape"


class FitMode(Enum):
    FIT = "Fit"
    FILL = "Fill"
    ORIGINAL = "Original"


# Portrait dimensions in points (1 pt = 1/72 inch)
PAGE_DIMENSIONS: Dict[PageSize, Tuple[float, float]] = {
    PageSize.A4: (595.0, 842.0),       # 210 x 297 mm
    PageSize.A3: (842.0, 1191.0),      # 297 x 420 mm
    PageSize.A5: (420.0, 595.0),       # 148 x 210 mm
    PageSize.LETTER: (612.0, 792.0),   # 8.5 x 11 in
    PageSize.LEGAL: (612.0, 1008.0),   # 8.5 x 14 in
}


def extract_file_name(path: str) -> str:
    """Return the last component of `path`, accepting both separator styles."""
    parts = [p for p in re.split(r"[\\/]", path) if p]
    return parts[-1] if parts else path


def generate_image_id() -> str:
    return f"img-{uuid.uuid4().hex}"


@dataclass(frozen=True)
class ImageInfo:
    width: int
    height: int
    format: str
    size_bytes: int


@dataclass(frozen=True)
class ImageItem:
    """One entry in the ordered image collection."""

    id: str
    path: str
    name: str
    info: Optional[ImageInfo] = None
    thumbnail: Optional[str] = None

    @classmethod
    def from_path(cls, path: str, image_id: Optional[str] = None) -> "ImageItem":
        return cls(
            id=image_id or generate_image_id(),
            path=path,
            name=extract_file_name(path),
        )


@dataclass(frozen=True)
class PdfSettings:
    """Page geometry used for export. Custom dimensions are in millimetres."""

    page_size: PageSize = PageSize.A4
    custom_width: Optional[float] = None
    custom_height: Optional[float] = None
    orientation: Orientation = Orientation.PORTRAIT
    fit_mode: FitMode = FitMode.FIT

    def __post_init__(self):
        # Accept plain strings for the enum fields ("Landscape", "Custom", ...)
        object.__setattr__(self, "page_size", PageSize(self.page_size))
        object.__setattr__(self, "orientation", Orientation(self.orientation))
        object.__setattr__(self, "fit_mode", FitMode(self.fit_mode))

    def validate(self) -> List[UserErrorKind]:
        problems = []
        if self.page_size == PageSize.CUSTOM:
            if not _positive(self.custom_width) or not _positive(self.custom_height):
                problems.append(UserErrorKind.INVALID_CUSTOM_DIMENSIONS)
        return problems

    def is_valid(self) -> bool:
        return not self.validate()

    def page_dimensions(self) -> Tuple[float, float]:
        """Return (width, height) of a page in points, orientation applied."""
        if self.page_size == PageSize.CUSTOM:
            if not _positive(self.custom_width) or not _positive(self.custom_height):
                raise InvalidDimensionsError()
            width = self.custom_width * MM_TO_POINTS
            height = self.custom_height * MM_TO_POINTS
        else:
            width, height = PAGE_DIMENSIONS[self.page_size]

        if self.orientation == Orientation.LANDSCAPE:
            width, height = height, width
        return (width, height)

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "pageSize": self.page_size.value,
            "orientation": self.orientation.value,
            "fitMode": self.fit_mode.value,
        }
        if self.custom_width is not None:
            data["customWidth"] = self.custom_width
        if self.custom_height is not None:
            data["customHeight"] = self.custom_height
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PdfSettings":
        """Build settings from the persisted shape, tolerating bad values."""
        defaults = cls()
        return cls(
            page_size=_enum_or_default(PageSize, data.get("pageSize"), defaults.page_size),
            custom_width=_float_or_none(data.get("customWidth")),
            custom_height=_float_or_none(data.get("customHeight")),
            orientation=_enum_or_default(Orientation, data.get("orientation"), defaults.orientation),
            fit_mode=_enum_or_default(FitMode, data.get("fitMode"), defaults.fit_mode),
        )

    @classmethod
    def field_names(cls) -> List[str]:
        return [f.name for f in fields(cls)]


DEFAULT_PDF_SETTINGS = PdfSettings()


@dataclass(frozen=True)
class AppState:
    images: Tuple[ImageItem, ...] = ()
    settings: PdfSettings = DEFAULT_PDF_SETTINGS
    is_generating: bool = False
    progress: int = 0

    @property
    def image_count(self) -> int:
        return len(self.images)

    @property
    def can_generate(self) -> bool:
        return len(self.images) > 0 and not self.is_generating

    def image_paths(self) -> List[str]:
        return [img.path for img in self.images]

    def index_of(self, image_id: str) -> Optional[int]:
        for i, img in enumerate(self.images):
            if img.id == image_id:
                return i
        return None


@dataclass
class InvalidImage:
    path: str
    error: str


@dataclass
class ValidationResult:
    valid: List[str] = field(default_factory=list)
    invalid: List[InvalidImage] = field(default_factory=list)


@dataclass
class GenerationResult:
    success: bool
    output_path: Optional[str] = None
    error: Optional[str] = None


def _positive(value: Optional[float]) -> bool:
    return value is not None and value > 0


def _float_or_none(value: Any) -> Optional[float]:
    if value is None:
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        logger.warning("Ignoring non-numeric custom dimension: {!r}", value)
        return None


def _enum_or_default(enum_cls, value: Any, default):
    if value is None:
        return default
    try:
        return enum_cls(value)
    except ValueError:
        logger.warning("Unknown {} value {!r}, using {}", enum_cls.__name__, value, default.value)
        return default
