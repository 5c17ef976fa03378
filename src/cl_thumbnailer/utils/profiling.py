"""Performance profiling utilities for cl_thumbnailer algorithms."""

import inspect
import time
from collections.abc import Awaitable, Callable, Iterator
from contextlib import contextmanager
from functools import wraps
from typing import ParamSpec, TypeVar, cast

from loguru import logger

P = ParamSpec("P")
R = TypeVar("R")


def timed(func: Callable[P, R]) -> Callable[P, R]:
    """Decorator to measure and log execution time of algorithm functions.

    Logs the function name and execution time at INFO level, on success
    and on failure alike.

    Usage:
        @timed
        def generate_thumbnail(source, options):
            ...
    """

    @wraps(func)
    def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
        start_time = time.perf_counter()

        def log_elapsed():
            elapsed_time = time.perf_counter() - start_time
            logger.info(f"[PROFILE] {func.__qualname__} took {elapsed_time:.3f}s")

        if inspect.iscoroutinefunction(func):

            async def async_wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
                try:
                    result: R = await cast(Callable[P, Awaitable[R]], func)(*args, **kwargs)
                    return result
                finally:
                    log_elapsed()

            return cast(R, async_wrapper(*args, **kwargs))

        try:
            result = func(*args, **kwargs)
            return result
        finally:
            log_elapsed()

    return wrapper


@contextmanager
def stage(name: str) -> Iterator[None]:
    """Log entry into a pipeline stage and how long it ran, at DEBUG level."""
    logger.debug(f"[STAGE] {name}")
    start_time = time.perf_counter()
    try:
        yield
    finally:
        logger.debug(f"[STAGE] {name} done in {time.perf_counter() - start_time:.3f}s")
