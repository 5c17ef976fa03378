"""Common module - protocols, schemas, and base classes."""

from .compute_module import ComputeModule
from .file_storage_impl import LocalFileStorage
from .job_storage import JobStorage
from .schema_job import BaseJobParams, TaskOutput
from .schema_job_record import JobRecord, JobRecordUpdate, JobStatus

__all__ = [
    "BaseJobParams",
    "TaskOutput",
    "ComputeModule",
    "JobStorage",
    "LocalFileStorage",
    "JobRecord",
    "JobRecordUpdate",
    "JobStatus",
]
