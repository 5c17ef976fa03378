"""
JobStorage Protocol - job-scoped file storage used by thumbnail tasks.

Storage is the single authority over paths: tasks see job ids and
relative paths, and ask for concrete filesystem paths only when Pillow
needs one.
"""

from __future__ import annotations

from os import PathLike
from pathlib import Path
from typing import ClassVar, Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field


class JobStorageError(Exception):
    """Base class for storage-related errors."""


class JobDirectoryCreationError(JobStorageError):
    def __init__(self, job_id: str):
        self.job_id: str = job_id
        super().__init__(f"Failed to create storage directory for job '{job_id}'")


class PathTraversalError(JobStorageError, ValueError):
    def __init__(self, job_id: str, relative_path: str):
        self.job_id: str = job_id
        self.relative_path: str = relative_path
        super().__init__(
            f"Invalid relative path '{relative_path}' for job '{job_id}' (path traversal detected)"
        )


class SavedJobFile(BaseModel):
    """Metadata of a saved job file."""

    relative_path: str = Field(
        ...,
        description="Relative path of the saved file within the job storage",
    )
    size: int = Field(..., ge=0, description="File size in bytes")
    md5: str | None = Field(None, description="MD5 of the stored content")

    model_config: ClassVar[ConfigDict] = ConfigDict(extra="forbid")


FileLike = bytes | str | PathLike[str]


@runtime_checkable
class JobStorage(Protocol):
    """
    Protocol for job-scoped file storage.

    Implementations own the storage root, directory layout and lifecycle.
    """

    def create_directory(self, job_id: str) -> None: ...

    def remove(self, job_id: str) -> bool:
        """Remove all files of a job. Returns False if nothing was removed."""
        ...

    async def save(
        self,
        job_id: str,
        relative_path: str,
        file: FileLike,
        *,
        mkdirs: bool = True,
    ) -> SavedJobFile:
        """
        Save ``file`` (raw bytes, or an existing filename to copy) into job
        storage.
        """
        ...

    def allocate_path(
        self,
        job_id: str,
        relative_path: str,
        *,
        mkdirs: bool = True,
    ) -> Path:
        """Allocate a filesystem path the caller will write to."""
        ...

    def resolve_path(
        self,
        job_id: str,
        relative_path: str | None = None,
    ) -> Path:
        """Resolve a job-relative path to an absolute filesystem path."""
        ...
