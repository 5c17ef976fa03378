"""cl_thumbnailer - Size-constrained image thumbnails."""

from .common.compute_module import ComputeModule
from .common.file_storage_impl import LocalFileStorage
from .common.job_storage import JobStorage, SavedJobFile
from .common.schema_job import BaseJobParams, TaskOutput
from .common.schema_job_record import JobRecord, JobRecordUpdate, JobStatus
from .plugins.thumbnail import (
    DecodeError,
    EncodeError,
    OutputFormat,
    ResampleError,
    ResizeError,
    SourceTooTallError,
    SourceTooWideError,
    ThumbnailError,
    ThumbnailErrorKind,
    ThumbnailOptions,
    ThumbnailPlan,
    ThumbnailPreset,
    ThumbnailResult,
    ThumbnailTask,
    generate_thumbnail,
)
from .plugins.thumbnail.routes import create_router

__version__ = "0.1.0"

__all__ = [
    "generate_thumbnail",
    "create_router",
    "ThumbnailTask",
    "ThumbnailOptions",
    "ThumbnailPreset",
    "ThumbnailPlan",
    "ThumbnailResult",
    "OutputFormat",
    "ThumbnailError",
    "ThumbnailErrorKind",
    "DecodeError",
    "SourceTooWideError",
    "SourceTooTallError",
    "ResampleError",
    "ResizeError",
    "EncodeError",
    "BaseJobParams",
    "TaskOutput",
    "ComputeModule",
    "JobStorage",
    "LocalFileStorage",
    "SavedJobFile",
    "JobRecord",
    "JobRecordUpdate",
    "JobStatus",
    "__version__",
]
