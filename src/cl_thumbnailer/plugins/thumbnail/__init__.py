"""Image thumbnail plugin."""

from .algo import generate_thumbnail
from .errors import (
    DecodeError,
    EncodeError,
    ResampleError,
    ResizeError,
    SourceTooLargeError,
    SourceTooTallError,
    SourceTooWideError,
    ThumbnailError,
    ThumbnailErrorKind,
)
from .schema import (
    OutputFormat,
    ThumbnailOptions,
    ThumbnailOutput,
    ThumbnailParams,
    ThumbnailPlan,
    ThumbnailPreset,
    ThumbnailResult,
)
from .task import ThumbnailTask

__all__ = [
    "generate_thumbnail",
    "ThumbnailTask",
    "ThumbnailOptions",
    "ThumbnailPreset",
    "ThumbnailPlan",
    "ThumbnailResult",
    "ThumbnailParams",
    "ThumbnailOutput",
    "OutputFormat",
    "ThumbnailError",
    "ThumbnailErrorKind",
    "DecodeError",
    "SourceTooLargeError",
    "SourceTooWideError",
    "SourceTooTallError",
    "ResampleError",
    "ResizeError",
    "EncodeError",
]
