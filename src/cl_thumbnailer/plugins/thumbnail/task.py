"""Thumbnail task implementation."""

import asyncio
import hashlib
from typing import Callable, override

from ...common.compute_module import ComputeModule
from ...common.job_storage import JobStorage
from .algo.thumbnailer import generate_thumbnail
from .errors import ThumbnailError
from .schema import ThumbnailOutput, ThumbnailParams


class ThumbnailTask(ComputeModule[ThumbnailParams, ThumbnailOutput]):
    """Compute module for generating an image thumbnail."""

    schema: type[ThumbnailParams] = ThumbnailParams

    @property
    @override
    def task_type(self) -> str:
        return "thumbnail"

    @override
    def describe_error(self, exc: Exception) -> str:
        # ThumbnailError renders as "<kind>: <message>"
        if isinstance(exc, ThumbnailError):
            return str(exc)
        return super().describe_error(exc)

    @override
    async def run(
        self,
        job_id: str,
        params: ThumbnailParams,
        storage: JobStorage,
        progress_callback: Callable[[int], None] | None = None,
    ) -> ThumbnailOutput:
        input_path = storage.resolve_path(job_id, params.input_path)
        if not input_path.exists():
            raise FileNotFoundError("Input file not found: " + str(input_path))

        source = input_path.read_bytes()
        source_md5 = hashlib.md5(source).hexdigest()

        result = await asyncio.to_thread(generate_thumbnail, source, params.options)

        output_path = storage.allocate_path(
            job_id=job_id,
            relative_path=params.output_path,
        )
        _ = output_path.write_bytes(result.encoded_bytes)

        if progress_callback:
            progress_callback(100)

        return ThumbnailOutput(
            source_width=result.source_width,
            source_height=result.source_height,
            source_format=result.source_format,
            source_md5=source_md5,
            width=result.width,
            height=result.height,
            format=result.format,
            byte_count=result.byte_count,
            pass_through=result.pass_through,
        )
