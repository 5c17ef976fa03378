"""Unit tests for profiling utilities."""

import pytest

from cl_thumbnailer.utils.profiling import stage, timed


def test_timed_logs_elapsed(log_messages: list[str]):
    @timed
    def add(a: int, b: int) -> int:
        return a + b

    assert add(2, 3) == 5
    assert any(m.startswith("[PROFILE] ") and "add took" in m for m in log_messages)


def test_timed_logs_on_failure(log_messages: list[str]):
    @timed
    def boom() -> None:
        raise RuntimeError("boom")

    with pytest.raises(RuntimeError):
        boom()

    assert any("boom took" in m for m in log_messages)


async def test_timed_async(log_messages: list[str]):
    @timed
    async def double(x: int) -> int:
        return x * 2

    assert await double(4) == 8
    assert any("double took" in m for m in log_messages)


def test_stage_logs_entry_and_exit(log_messages: list[str]):
    with stage("encoding"):
        pass

    assert log_messages[0] == "[STAGE] encoding"
    assert log_messages[1].startswith("[STAGE] encoding done in ")
