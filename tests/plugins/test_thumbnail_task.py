"""Unit tests for the thumbnail compute task and its schemas."""

import hashlib

import pytest
from PIL import Image
from pydantic import ValidationError

from cl_thumbnailer.common.file_storage_impl import LocalFileStorage
from cl_thumbnailer.common.schema_job_record import JobRecord, JobStatus
from cl_thumbnailer.plugins.thumbnail.schema import (
    OutputFormat,
    ThumbnailOptions,
    ThumbnailOutput,
    ThumbnailParams,
    ThumbnailPreset,
)
from cl_thumbnailer.plugins.thumbnail.task import ThumbnailTask

# ============================================================================
# SCHEMA TESTS
# ============================================================================


def test_thumbnail_options_defaults():
    options = ThumbnailOptions()

    assert options.max_source_width == 0
    assert options.max_source_height == 0
    assert (options.target_width, options.target_height) == (125, 125)
    assert options.output_is_lossy is True
    assert options.lossy_quality == 75
    assert options.output_format == OutputFormat.JPEG


@pytest.mark.parametrize(
    "field,value",
    [
        ("target_width", 0),
        ("target_height", -1),
        ("max_source_width", -1),
        ("lossy_quality", 0),
        ("lossy_quality", 101),
    ],
)
def test_thumbnail_options_rejects_invalid(field: str, value: int):
    with pytest.raises(ValidationError):
        _ = ThumbnailOptions.model_validate({field: value})


def test_thumbnail_options_frozen():
    options = ThumbnailOptions()

    with pytest.raises(ValidationError):
        options.target_width = 10  # pyright: ignore[reportAttributeAccessIssue]


def test_thumbnail_options_from_preset():
    small = ThumbnailOptions.from_preset(ThumbnailPreset.SMALL)
    assert (small.target_width, small.target_height) == (50, 50)
    assert small.lossy_quality == 60

    custom = ThumbnailOptions.from_preset("thumb", target_width=300, lossy_quality=None)
    assert (custom.target_width, custom.target_height) == (300, 125)
    assert custom.lossy_quality == 75


def test_thumbnail_options_unknown_preset():
    with pytest.raises(ValueError):
        _ = ThumbnailOptions.from_preset("huge")


def test_output_format_mime_type():
    assert OutputFormat.JPEG.mime_type == "image/jpeg"
    assert OutputFormat.PNG.mime_type == "image/png"


def test_thumbnail_params_schema_validation():
    params = ThumbnailParams.model_validate(
        {
            "input_path": "input/source.jpg",
            "output_path": "output/thumb.png",
            "options": {"target_width": 64, "target_height": 32, "output_is_lossy": False},
        }
    )

    assert params.options.target_width == 64
    assert params.options.output_format == OutputFormat.PNG


# ============================================================================
# TASK TESTS
# ============================================================================


async def _store_source(storage: LocalFileStorage, job_id: str, data: bytes) -> str:
    saved = await storage.save(job_id, "input/source.jpg", data)
    return saved.relative_path


async def test_thumbnail_task_run_success(file_storage: LocalFileStorage, make_image):
    source = make_image(4000, 2000, format="JPEG")
    job_id = "job-success"
    input_path = await _store_source(file_storage, job_id, source)

    params = ThumbnailParams(
        input_path=input_path,
        output_path="output/thumb.jpg",
        options=ThumbnailOptions(target_width=200, target_height=200),
    )

    output = await ThumbnailTask().run(job_id, params, file_storage)

    assert isinstance(output, ThumbnailOutput)
    assert (output.width, output.height) == (200, 100)
    assert (output.source_width, output.source_height) == (4000, 2000)
    assert output.source_format == "JPEG"
    assert output.source_md5 == hashlib.md5(source).hexdigest()
    assert output.format == OutputFormat.JPEG
    assert output.pass_through is False

    written = file_storage.resolve_path(job_id, "output/thumb.jpg")
    assert written.stat().st_size == output.byte_count
    with Image.open(written) as img:
        assert img.size == (200, 100)


async def test_thumbnail_task_run_file_not_found(file_storage: LocalFileStorage):
    params = ThumbnailParams(input_path="missing.jpg", output_path="output/thumb.jpg")

    with pytest.raises(FileNotFoundError):
        await ThumbnailTask().run("job-missing", params, file_storage)


async def test_thumbnail_task_progress_callback(file_storage: LocalFileStorage, sample_jpeg: bytes):
    job_id = "job-progress"
    input_path = await _store_source(file_storage, job_id, sample_jpeg)
    params = ThumbnailParams(input_path=input_path, output_path="output/thumb.jpg")

    progress_values: list[int] = []
    await ThumbnailTask().run(job_id, params, file_storage, progress_values.append)

    assert progress_values == [100]


async def test_thumbnail_task_execute_completed(file_storage: LocalFileStorage, make_image):
    job_id = "job-execute"
    input_path = await _store_source(file_storage, job_id, make_image(100, 80))
    record = JobRecord(
        job_id=job_id,
        task_type="thumbnail",
        params={
            "input_path": input_path,
            "output_path": "output/thumb.png",
            "options": {"output_is_lossy": False},
        },
    )

    update = await ThumbnailTask().execute(record, file_storage)

    assert update.status == JobStatus.completed
    assert update.progress == 100
    assert update.output is not None
    output = ThumbnailOutput.model_validate(update.output)
    assert output.pass_through is True
    assert (output.width, output.height) == (100, 80)
    assert output.format == OutputFormat.PNG


async def test_thumbnail_task_execute_reports_error_kind(file_storage: LocalFileStorage, make_image):
    job_id = "job-too-wide"
    input_path = await _store_source(file_storage, job_id, make_image(300, 100))
    record = JobRecord(
        job_id=job_id,
        task_type="thumbnail",
        params={
            "input_path": input_path,
            "output_path": "output/thumb.jpg",
            "options": {"max_source_width": 200},
        },
    )

    update = await ThumbnailTask().execute(record, file_storage)

    assert update.status == JobStatus.error
    assert update.error_message is not None
    assert update.error_message.startswith("source_too_wide: ")
    assert not file_storage.resolve_path(job_id, "output/thumb.jpg").exists()


async def test_thumbnail_task_execute_decode_error(file_storage: LocalFileStorage):
    job_id = "job-garbage"
    input_path = await _store_source(file_storage, job_id, b"not an image at all")
    record = JobRecord(
        job_id=job_id,
        task_type="thumbnail",
        params={"input_path": input_path, "output_path": "output/thumb.jpg"},
    )

    update = await ThumbnailTask().execute(record, file_storage)

    assert update.status == JobStatus.error
    assert update.error_message is not None
    assert update.error_message.startswith("decode_error: ")


async def test_thumbnail_task_execute_invalid_params(file_storage: LocalFileStorage):
    record = JobRecord(
        job_id="job-invalid",
        task_type="thumbnail",
        params={
            "input_path": "a.jpg",
            "output_path": "b.jpg",
            "options": {"target_width": 0},
        },
    )

    update = await ThumbnailTask().execute(record, file_storage)

    assert update.status == JobStatus.error
    assert update.error_message is not None
    assert "target_width" in update.error_message


def test_thumbnail_task_type():
    assert ThumbnailTask().task_type == "thumbnail"

