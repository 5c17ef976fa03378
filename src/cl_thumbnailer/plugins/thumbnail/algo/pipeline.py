"""Two-stage resample (coarse sample, then box-filter resize) and encoding."""

from contextlib import ExitStack
from io import BytesIO

from loguru import logger
from PIL import Image

from ....utils.profiling import stage
from ..errors import EncodeError, ResampleError, ResizeError
from ..schema import OutputFormat, ThumbnailOptions, ThumbnailPlan, ThumbnailResult
from .decoder import DecodedImage

_RESAMPLE_MODES = ("L", "LA", "RGB", "RGBA")
_PNG_MODES = ("1", "L", "LA", "I", "I;16", "P", "RGB", "RGBA")
_JPEG_BACKGROUND = (255, 255, 255)
# Integer greyscale sources carry 16-bit samples
_INT16_TO_8BIT = 1 / 256


def _has_alpha(image: Image.Image) -> bool:
    return image.mode in ("RGBA", "LA", "PA") or (
        image.mode == "P" and "transparency" in image.info
    )


def _is_integer_grey(image: Image.Image) -> bool:
    return image.mode == "I" or image.mode.startswith("I;16")


def _integer_grey_to_l(image: Image.Image) -> Image.Image:
    """Rescale 16-bit greyscale samples to 8 bits. ``convert("L")`` would clip them."""
    widened = image if image.mode == "I" else image.convert("I")
    try:
        scaled = widened.point(lambda v: v * _INT16_TO_8BIT)
    finally:
        if widened is not image:
            widened.close()
    try:
        return scaled.convert("L")
    finally:
        scaled.close()


def normalize_mode(image: Image.Image) -> Image.Image:
    """Convert to a mode Pillow's filtered resize handles.

    Palette and bilevel images are otherwise resized with nearest-neighbour
    sampling regardless of the requested filter. 16-bit greyscale is
    rescaled to 8 bits rather than clipped. Returns ``image`` itself
    when no conversion is needed.
    """
    if image.mode in _RESAMPLE_MODES:
        return image
    if _is_integer_grey(image):
        try:
            return _integer_grey_to_l(image)
        except (OSError, ValueError, MemoryError) as exc:
            raise ResampleError(f"cannot rescale {image.mode} image to L: {exc}") from exc
    if image.mode in ("1", "F"):
        target_mode = "L"
    elif _has_alpha(image):
        target_mode = "RGBA"
    else:
        target_mode = "RGB"
    try:
        return image.convert(target_mode)
    except (OSError, ValueError, MemoryError) as exc:
        raise ResampleError(f"cannot convert {image.mode} image to {target_mode}: {exc}") from exc


def coarse_sample(image: Image.Image, plan: ThumbnailPlan) -> Image.Image:
    size = (plan.intermediate_width, plan.intermediate_height)
    try:
        return image.resize(size, Image.Resampling.NEAREST)
    except (OSError, ValueError, MemoryError) as exc:
        raise ResampleError(f"coarse sample to {size[0]}x{size[1]} failed: {exc}") from exc


def box_resize(image: Image.Image, plan: ThumbnailPlan) -> Image.Image:
    size = (plan.target_width, plan.target_height)
    try:
        return image.resize(size, Image.Resampling.BOX)
    except (OSError, ValueError, MemoryError) as exc:
        raise ResizeError(f"resize to {size[0]}x{size[1]} failed: {exc}") from exc


def _prepare_for_jpeg(image: Image.Image) -> Image.Image:
    # JPEG has no alpha: composite onto white, like a flattened mosaic
    if _has_alpha(image):
        rgba = image.convert("RGBA")
        flattened = Image.new("RGB", rgba.size, _JPEG_BACKGROUND)
        flattened.paste(rgba, mask=rgba.getchannel("A"))
        rgba.close()
        return flattened
    if image.mode in ("RGB", "L"):
        return image
    if _is_integer_grey(image):
        return _integer_grey_to_l(image)
    return image.convert("RGB")


def _prepare_for_png(image: Image.Image) -> Image.Image:
    if image.mode in _PNG_MODES:
        return image
    return image.convert("RGBA" if _has_alpha(image) else "RGB")


def encode(image: Image.Image, options: ThumbnailOptions) -> bytes:
    """
    Serialize ``image`` in the output format selected by ``options``.

    JPEG output uses ``options.lossy_quality``. PNG output is written with
    no compression effort, since it is expected to be palette-quantized
    downstream anyway. No metadata is carried over.

    Raises:
        EncodeError: If Pillow cannot write the image
    """
    output_format = options.output_format
    buffer = BytesIO()

    with ExitStack() as stack:
        try:
            if output_format == OutputFormat.JPEG:
                prepared = _prepare_for_jpeg(image)
                save_kwargs: dict[str, object] = {"quality": options.lossy_quality}
            else:
                prepared = _prepare_for_png(image)
                save_kwargs = {"compress_level": 0, "optimize": False}

            if prepared is not image:
                stack.callback(prepared.close)

            prepared.save(buffer, format=output_format.value, **save_kwargs)
        except (OSError, ValueError, KeyError, MemoryError) as exc:
            raise EncodeError(f"{output_format} encoding of {image.mode} image failed: {exc}") from exc

    return buffer.getvalue()


def produce(
    decoded: DecodedImage,
    plan: ThumbnailPlan,
    options: ThumbnailOptions,
) -> ThumbnailResult:
    """
    Resample ``decoded`` according to ``plan`` and encode it.

    Pass-through plans encode the source as-is. Otherwise the source is
    coarse-sampled to the plan's intermediate size, converted to a mode
    the box filter supports, and box-filtered to the exact target size.
    Every intermediate image is closed before returning, on success and
    on failure.

    Raises:
        ResampleError: Coarse sampling failed
        ResizeError: Filtered resize failed
        EncodeError: Encoding failed
    """
    source = decoded.image

    with ExitStack() as stack:
        if plan.pass_through:
            logger.debug(f"Pass-through for {decoded!r}")
            final = source
        else:
            with stage("sampling"):
                sampled = coarse_sample(source, plan)
                stack.callback(sampled.close)
                working = normalize_mode(sampled)
                if working is not sampled:
                    stack.callback(working.close)

            with stage("resizing"):
                final = box_resize(working, plan)
                stack.callback(final.close)

        with stage("encoding"):
            encoded = encode(final, options)

    return ThumbnailResult(
        width=plan.target_width,
        height=plan.target_height,
        format=options.output_format,
        encoded_bytes=encoded,
        pass_through=plan.pass_through,
        source_width=decoded.width,
        source_height=decoded.height,
        source_format=decoded.format,
    )
