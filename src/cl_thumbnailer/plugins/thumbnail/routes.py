"""Thumbnail route factory."""

from typing import Annotated

from fastapi import APIRouter, File, Form, UploadFile
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse, Response
from pydantic import ValidationError

from .algo.thumbnailer import generate_thumbnail
from .errors import ThumbnailError, ThumbnailErrorKind
from .schema import ThumbnailOptions, ThumbnailPreset

ERROR_STATUS: dict[ThumbnailErrorKind, int] = {
    ThumbnailErrorKind.DECODE_ERROR: 415,
    ThumbnailErrorKind.SOURCE_TOO_WIDE: 413,
    ThumbnailErrorKind.SOURCE_TOO_TALL: 413,
    ThumbnailErrorKind.RESAMPLE_ERROR: 500,
    ThumbnailErrorKind.RESIZE_ERROR: 500,
    ThumbnailErrorKind.ENCODE_ERROR: 500,
}


def create_router() -> APIRouter:
    """Create router serving thumbnails synchronously from uploads."""
    router = APIRouter()

    @router.post(
        "/thumbnail",
        response_class=Response,
        responses={
            200: {"content": {"image/jpeg": {}, "image/png": {}}},
            413: {"description": "Source image exceeds size limits"},
            415: {"description": "Upload is not a decodable image"},
        },
    )
    async def create_thumbnail(
        file: Annotated[UploadFile, File(description="Source image")],
        preset: Annotated[
            ThumbnailPreset, Form(description="Named thumbnail size")
        ] = ThumbnailPreset.THUMB,
        width: Annotated[
            int | None, Form(gt=0, description="Bounding box width in pixels")
        ] = None,
        height: Annotated[
            int | None, Form(gt=0, description="Bounding box height in pixels")
        ] = None,
        max_source_width: Annotated[
            int | None, Form(ge=0, description="Reject wider sources (0 = unbounded)")
        ] = None,
        max_source_height: Annotated[
            int | None, Form(ge=0, description="Reject taller sources (0 = unbounded)")
        ] = None,
        lossy: Annotated[
            bool | None, Form(description="JPEG output if true, PNG otherwise")
        ] = None,
        quality: Annotated[
            int | None, Form(ge=1, le=100, description="JPEG quality (1-100)")
        ] = None,
    ) -> Response:
        try:
            options = ThumbnailOptions.from_preset(
                preset,
                target_width=width,
                target_height=height,
                max_source_width=max_source_width,
                max_source_height=max_source_height,
                output_is_lossy=lossy,
                lossy_quality=quality,
            )
        except ValidationError as exc:
            return JSONResponse(status_code=422, content={"detail": str(exc)})

        source = await file.read()

        try:
            result = await run_in_threadpool(generate_thumbnail, source, options)
        except ThumbnailError as exc:
            return JSONResponse(
                status_code=ERROR_STATUS[exc.kind],
                content={"detail": exc.message, "kind": exc.kind.value},
            )

        return Response(
            content=result.encoded_bytes,
            media_type=result.format.mime_type,
            headers={
                "X-Thumbnail-Width": str(result.width),
                "X-Thumbnail-Height": str(result.height),
            },
        )

    _ = create_thumbnail
    return router
