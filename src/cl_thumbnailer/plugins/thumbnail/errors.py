"""Thumbnail error kinds.

Every failure of the thumbnail pipeline is terminal and surfaces as one
specific ``ThumbnailError`` subclass, so callers can tell bad input,
oversized input and internal processing failures apart.
"""

from enum import StrEnum
from typing import override


class ThumbnailErrorKind(StrEnum):
    DECODE_ERROR = "decode_error"
    SOURCE_TOO_WIDE = "source_too_wide"
    SOURCE_TOO_TALL = "source_too_tall"
    RESAMPLE_ERROR = "resample_error"
    RESIZE_ERROR = "resize_error"
    ENCODE_ERROR = "encode_error"


class ThumbnailError(Exception):
    """Base class for all thumbnail pipeline failures."""

    kind: ThumbnailErrorKind

    def __init__(self, message: str):
        self.message: str = message
        super().__init__(self.message)

    @override
    def __str__(self):
        return f"{self.kind}: {self.message}"


class DecodeError(ThumbnailError):
    """Input bytes are not a decodable image (corrupt, unsupported, truncated)."""

    kind = ThumbnailErrorKind.DECODE_ERROR


class SourceTooLargeError(ThumbnailError):
    """Source exceeds a configured bitmap size limit."""

    axis: str

    def __init__(self, actual: int, limit: int):
        self.actual: int = actual
        self.limit: int = limit
        super().__init__(f"source {self.axis} {actual}px exceeds limit of {limit}px")


class SourceTooWideError(SourceTooLargeError):
    kind = ThumbnailErrorKind.SOURCE_TOO_WIDE
    axis = "width"


class SourceTooTallError(SourceTooLargeError):
    kind = ThumbnailErrorKind.SOURCE_TOO_TALL
    axis = "height"


class ResampleError(ThumbnailError):
    """Coarse sampling could not produce the intermediate pixel grid."""

    kind = ThumbnailErrorKind.RESAMPLE_ERROR


class ResizeError(ThumbnailError):
    """Filtered resize could not produce the final pixel grid."""

    kind = ThumbnailErrorKind.RESIZE_ERROR


class EncodeError(ThumbnailError):
    """The final pixel grid could not be serialized to the output format."""

    kind = ThumbnailErrorKind.ENCODE_ERROR
