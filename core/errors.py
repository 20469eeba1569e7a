"""Error types shared by the backend, the pipeline and the export workflow."""

from enum import Enum
from typing import Optional


class ErrorKind(Enum):
    # Validation errors (per file)
    UNSUPPORTED_FORMAT = "UnsupportedFormat"
    IMAGE_NOT_FOUND = "ImageNotFound"
    IMAGE_TOO_LARGE = "ImageTooLarge"
    IMAGE_READ_ERROR = "ImageReadError"
    # System errors
    PDF_GENERATION_ERROR = "PdfGenerationError"
    INSUFFICIENT_DISK_SPACE = "InsufficientDiskSpace"
    IO_ERROR = "IoError"


class UserErrorKind(Enum):
    NO_IMAGES_SELECTED = "NoImagesSelected"
    INVALID_CUSTOM_DIMENSIONS = "InvalidCustomDimensions"


class ImagePdfError(Exception):
    """Base class for all application errors."""


class BackendError(ImagePdfError):
    """Raised by the local backend when an image or PDF operation fails."""

    def __init__(self, kind: ErrorKind, message: str, path: Optional[str] = None):
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.path = path


class UserError(ImagePdfError):
    """A precondition the user must fix before the action can run."""

    def __init__(self, kind: UserErrorKind, message: str):
        super().__init__(message)
        self.kind = kind
        self.message = message


class InvalidDimensionsError(ImagePdfError):
    def __init__(self, message: str = "Invalid custom page dimensions"):
        super().__init__(message)
