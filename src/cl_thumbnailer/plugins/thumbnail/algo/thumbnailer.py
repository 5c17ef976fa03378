"""Thumbnail generation entry point: decode, plan, resample, encode."""

from contextlib import ExitStack

from loguru import logger

from ....utils.profiling import stage, timed
from ..errors import ThumbnailError
from ..schema import ThumbnailOptions, ThumbnailResult
from .decoder import decode
from .pipeline import produce
from .planner import plan


@timed
def generate_thumbnail(source: bytes, options: ThumbnailOptions) -> ThumbnailResult:
    """
    Turn encoded image bytes into an encoded thumbnail.

    Framework-agnostic, single-image operation. Blocking; run it in a
    worker thread from async code.

    Args:
        source: Encoded source image
        options: Thumbnail configuration

    Returns:
        ThumbnailResult with the encoded thumbnail and its dimensions

    Raises:
        DecodeError: Source bytes are not a decodable image
        SourceTooWideError: Raster source wider than the configured limit
        SourceTooTallError: Raster source taller than the configured limit
        ResampleError: Coarse sampling failed
        ResizeError: Filtered resize failed
        EncodeError: Encoding failed
    """
    try:
        with ExitStack() as stack:
            with stage("decoding"):
                decoded = stack.enter_context(decode(source))

            with stage("validating"):
                thumbnail_plan = plan(
                    decoded.width,
                    decoded.height,
                    decoded.format,
                    options,
                    page_description=decoded.is_page_description,
                )

            with stage("loading"):
                _ = decoded.load()

            result = produce(decoded, thumbnail_plan, options)
    except ThumbnailError as exc:
        logger.error(f"Thumbnail failed ({exc.kind}): {exc.message}")
        raise

    logger.debug(
        f"Thumbnail {result.source_width}x{result.source_height} {result.source_format}"
        + f" -> {result.width}x{result.height} {result.format} ({result.byte_count} bytes)"
    )
    return result
