"""Pure thumbnail geometry: size validation, pass-through and target size."""

from ..errors import SourceTooTallError, SourceTooWideError
from ..schema import SUBSAMPLE_FACTOR, ThumbnailOptions, ThumbnailPlan
from .decoder import is_page_description_format


def validate_source_size(
    source_width: int,
    source_height: int,
    options: ThumbnailOptions,
) -> None:
    """Reject raster sources over the configured limits. Width is checked first."""
    if options.max_source_width and source_width > options.max_source_width:
        raise SourceTooWideError(source_width, options.max_source_width)
    if options.max_source_height and source_height > options.max_source_height:
        raise SourceTooTallError(source_height, options.max_source_height)


def plan(
    source_width: int,
    source_height: int,
    source_format: str | None,
    options: ThumbnailOptions,
    *,
    page_description: bool | None = None,
) -> ThumbnailPlan:
    """
    Compute the thumbnail geometry for a source image.

    The dominant (longer) source axis is scaled to its bounding box
    dimension and the other axis is scaled by the same factor, so the
    output keeps the source aspect ratio. Only the dominant axis is
    guaranteed to fit the box.

    Rounding policy: floor. The minor axis is computed as
    ``minor * bound // dominant``, which is ``floor(minor / scale)`` in
    exact integer arithmetic, and is clamped to at least 1 pixel.

    Args:
        source_width: Source width in pixels (>= 1)
        source_height: Source height in pixels (>= 1)
        source_format: Decoded format tag, used for the page-description exemption
        options: Thumbnail configuration
        page_description: Overrides the format-tag lookup when not None

    Returns:
        ThumbnailPlan

    Raises:
        SourceTooWideError: Raster source wider than ``max_source_width``
        SourceTooTallError: Raster source taller than ``max_source_height``
    """
    if page_description is None:
        page_description = is_page_description_format(source_format)

    if not page_description:
        validate_source_size(source_width, source_height, options)

    if source_width <= options.target_width and source_height <= options.target_height:
        return ThumbnailPlan(
            target_width=source_width,
            target_height=source_height,
            pass_through=True,
        )

    if source_width >= source_height:
        scale = source_width / options.target_width
        target_width = options.target_width
        target_height = source_height * options.target_width // source_width
    else:
        scale = source_height / options.target_height
        target_height = options.target_height
        target_width = source_width * options.target_height // source_height

    # Extreme aspect ratios in a tiny box would otherwise floor to 0
    target_width = max(1, target_width)
    target_height = max(1, target_height)

    return ThumbnailPlan(
        target_width=target_width,
        target_height=target_height,
        pass_through=False,
        scale=scale,
        intermediate_width=SUBSAMPLE_FACTOR * target_width,
        intermediate_height=SUBSAMPLE_FACTOR * target_height,
    )
