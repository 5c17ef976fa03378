"""Thumbnail configuration, plan and result schemas."""

from enum import StrEnum
from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field

from ...common.schema_job import BaseJobParams, TaskOutput

# Intermediate subsample size as a multiple of the final thumbnail size.
SUBSAMPLE_FACTOR = 4


class ThumbnailPreset(StrEnum):
    """Named thumbnail sizes: the regular thumbnail and a smaller one."""

    THUMB = "thumb"
    SMALL = "small"


class OutputFormat(StrEnum):
    JPEG = "JPEG"
    PNG = "PNG"

    @property
    def mime_type(self) -> str:
        return f"image/{self.value.lower()}"


class ThumbnailOptions(BaseModel):
    """Per-request thumbnail configuration.

    Attributes:
        max_source_width: Reject raster sources wider than this (0 = unbounded)
        max_source_height: Reject raster sources taller than this (0 = unbounded)
        target_width: Bounding box width for the thumbnail's dominant axis
        target_height: Bounding box height for the thumbnail's dominant axis
        output_is_lossy: JPEG output if True, PNG otherwise
        lossy_quality: JPEG quality, ignored for PNG output
    """

    max_source_width: int = Field(default=0, ge=0, description="0 = unbounded")
    max_source_height: int = Field(default=0, ge=0, description="0 = unbounded")
    target_width: int = Field(default=125, gt=0, description="Bounding box width in pixels")
    target_height: int = Field(default=125, gt=0, description="Bounding box height in pixels")
    output_is_lossy: bool = Field(default=True, description="Encode as JPEG instead of PNG")
    lossy_quality: int = Field(default=75, ge=1, le=100, description="JPEG quality (1-100)")

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True)

    @property
    def output_format(self) -> OutputFormat:
        return OutputFormat.JPEG if self.output_is_lossy else OutputFormat.PNG

    @classmethod
    def from_preset(cls, preset: ThumbnailPreset | str, **overrides: object) -> "ThumbnailOptions":
        """Build options from a named preset, with explicit fields taking precedence."""
        values: dict[str, object] = dict(PRESETS[ThumbnailPreset(preset)])
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls.model_validate(values)


PRESETS: dict[ThumbnailPreset, dict[str, object]] = {
    ThumbnailPreset.THUMB: {"target_width": 125, "target_height": 125, "lossy_quality": 75},
    ThumbnailPreset.SMALL: {"target_width": 50, "target_height": 50, "lossy_quality": 60},
}


class ThumbnailPlan(BaseModel):
    """Resolved output geometry for one source image.

    ``intermediate_width``/``intermediate_height`` are only meaningful when
    ``pass_through`` is False; they are 0 otherwise.
    """

    target_width: int = Field(ge=1)
    target_height: int = Field(ge=1)
    pass_through: bool
    scale: float = 1.0
    intermediate_width: int = Field(default=0, ge=0)
    intermediate_height: int = Field(default=0, ge=0)

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True)


class ThumbnailResult(BaseModel):
    """Encoded thumbnail plus the dimensions it was produced at."""

    width: int
    height: int
    format: OutputFormat
    encoded_bytes: bytes = Field(repr=False)
    pass_through: bool = False
    source_width: int
    source_height: int
    source_format: str

    @property
    def byte_count(self) -> int:
        return len(self.encoded_bytes)


class ThumbnailParams(BaseJobParams):
    """Parameters for the thumbnail task.

    Attributes:
        input_path: Job-relative path of the source image
        output_path: Job-relative path for the encoded thumbnail
        options: Thumbnail configuration
    """

    options: ThumbnailOptions = Field(default_factory=ThumbnailOptions)


class ThumbnailOutput(TaskOutput):
    source_width: int = Field(description="Source image width in pixels")
    source_height: int = Field(description="Source image height in pixels")
    source_format: str = Field(description="Decoded source format tag")
    source_md5: str = Field(description="MD5 of the source bytes")
    width: int = Field(description="Thumbnail width in pixels")
    height: int = Field(description="Thumbnail height in pixels")
    format: OutputFormat = Field(description="Thumbnail encoding")
    byte_count: int = Field(ge=0, description="Encoded thumbnail size in bytes")
    pass_through: bool = Field(description="Source already fit, no resampling was done")
