"""Decoder adapter around Pillow's codec registry."""

from io import BytesIO
from types import TracebackType

from loguru import logger
from PIL import Image, UnidentifiedImageError

from ..errors import DecodeError

# Source size is bounded only by ThumbnailOptions.max_source_*, which is
# checked after the header read and before any pixel data is decoded.
Image.MAX_IMAGE_PIXELS = None

# Vector/print formats rasterized at read time. Not subject to bitmap size limits.
_PAGE_DESCRIPTION_FORMATS: set[str] = {"PDF", "EPS", "PS"}


def register_page_description_format(format_tag: str) -> None:
    """Exempt ``format_tag`` from source-size limits."""
    _PAGE_DESCRIPTION_FORMATS.add(format_tag.upper())


def is_page_description_format(format_tag: str | None) -> bool:
    return format_tag is not None and format_tag.upper() in _PAGE_DESCRIPTION_FORMATS


class DecodedImage:
    """A source image whose header has been read.

    Pixel data is decoded by ``load()``, so size limits can be enforced
    before the full bitmap is allocated. Use as a context manager; the
    underlying Pillow image is closed on exit.
    """

    def __init__(self, image: Image.Image, format: str):
        self.image: Image.Image = image
        self.format: str = format

    @property
    def width(self) -> int:
        return self.image.width

    @property
    def height(self) -> int:
        return self.image.height

    @property
    def is_page_description(self) -> bool:
        return is_page_description_format(self.format)

    def load(self) -> Image.Image:
        """Decode pixel data. Raises DecodeError on truncated or corrupt data."""
        try:
            _ = self.image.load()
        except (OSError, ValueError, SyntaxError) as exc:
            raise DecodeError(f"failed to decode {self.format} pixel data: {exc}") from exc
        return self.image

    def close(self) -> None:
        self.image.close()

    def __enter__(self) -> "DecodedImage":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"DecodedImage(format={self.format!r}, size={self.width}x{self.height})"


def decode(data: bytes) -> DecodedImage:
    """
    Identify an encoded image and read its header.

    Args:
        data: Encoded image bytes

    Returns:
        DecodedImage with width, height and format tag

    Raises:
        DecodeError: If the bytes are empty or not a recognized image format
    """
    if not data:
        raise DecodeError("empty input")

    try:
        image = Image.open(BytesIO(data))
    except UnidentifiedImageError as exc:
        raise DecodeError("unrecognized image format") from exc
    except (OSError, ValueError, SyntaxError) as exc:
        raise DecodeError(f"unreadable image header: {exc}") from exc

    if image.format is None or image.width < 1 or image.height < 1:
        image.close()
        raise DecodeError(f"invalid image dimensions {image.width}x{image.height}")

    decoded = DecodedImage(image, image.format)
    logger.debug(f"Decoded header: {decoded!r}")
    return decoded
