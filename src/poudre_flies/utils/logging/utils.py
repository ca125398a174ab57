# ABOUTME: structlog logger access plus decorators that time upstream calls and pipeline steps
# ABOUTME: RunContext binds a run id to every event emitted during one CLI command

import functools
import inspect
import time
import uuid
from collections.abc import Callable
from typing import Any, TypeVar

import structlog

F = TypeVar("F", bound=Callable[..., Any])


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Return a structlog logger named after ``name`` or, by default, the calling module."""
    if name is None:
        caller = inspect.currentframe()
        if caller is not None and caller.f_back is not None:
            name = caller.f_back.f_globals.get("__name__")
    return structlog.get_logger(name or "poudre_flies")


def generate_operation_id() -> str:
    """Short random id used to correlate the events of one call or run."""
    return uuid.uuid4().hex[:8]


def _url_argument(args: tuple, kwargs: dict) -> str | None:
    if isinstance(kwargs.get("url"), str):
        return kwargs["url"]
    return next((arg for arg in args if isinstance(arg, str) and arg.startswith(("http://", "https://"))), None)


def _result_size(result: Any) -> dict[str, int]:
    return {"result_count": len(result)} if isinstance(result, list | tuple | dict) else {}


def log_api_call(api_name: str, **context) -> Callable[[F], F]:
    """Decorator for async upstream calls.

    Successes are logged at debug level with their duration; failures are
    logged as warnings and re-raised. The first ``http(s)://`` argument is
    bound as ``url``.
    """

    def decorator(func: F) -> F:
        @functools.wraps(func)
        async def wrapper(*args, **kwargs):
            log = get_logger(func.__module__).bind(
                api_name=api_name,
                call_id=generate_operation_id(),
                url=_url_argument(args, kwargs),
                **context,
            )
            started = time.perf_counter()
            try:
                result = await func(*args, **kwargs)
            except Exception as e:
                log.warning(
                    f"{api_name} call failed",
                    duration_seconds=round(time.perf_counter() - started, 3),
                    error=str(e),
                    error_type=type(e).__name__,
                )
                raise
            log.debug(f"{api_name} call succeeded", duration_seconds=round(time.perf_counter() - started, 3))
            return result

        return wrapper  # type: ignore[return-value]

    return decorator


def log_pipeline_step(step_name: str) -> Callable[[F], F]:
    """Decorator for async pipeline stages: logs start, duration, result size and failures."""

    def decorator(func: F) -> F:
        @functools.wraps(func)
        async def wrapper(*args, **kwargs):
            log = get_logger(func.__module__).bind(step=step_name)
            log.info("Pipeline step started")
            started = time.perf_counter()
            try:
                result = await func(*args, **kwargs)
            except Exception as e:
                log.error(
                    "Pipeline step failed",
                    duration_seconds=round(time.perf_counter() - started, 3),
                    error=str(e),
                    error_type=type(e).__name__,
                )
                raise
            log.info(
                "Pipeline step finished",
                duration_seconds=round(time.perf_counter() - started, 3),
                **_result_size(result),
            )
            return result

        return wrapper  # type: ignore[return-value]

    return decorator


class RunContext:
    """Binds run-level fields to a logger for the duration of a ``with`` block.

    Leaving the block logs the run's duration; leaving it through an
    exception logs the exception type as well.
    """

    def __init__(self, logger: structlog.stdlib.BoundLogger, **fields):
        self.logger = logger.bind(**fields)
        self._started = 0.0

    def __enter__(self) -> structlog.stdlib.BoundLogger:
        self._started = time.perf_counter()
        return self.logger

    def __exit__(self, exc_type, exc_val, exc_tb):
        duration = round(time.perf_counter() - self._started, 3)
        if exc_type is None:
            self.logger.info("Run finished", duration_seconds=duration)
        else:
            self.logger.warning(
                "Run ended early", duration_seconds=duration, error=str(exc_val), error_type=exc_type.__name__
            )


def with_pipeline_context(pipeline_name: str, **fields) -> RunContext:
    """Open a :class:`RunContext` tagged with ``pipeline_name`` and a fresh ``run_id``."""
    return RunContext(get_logger("poudre_flies.run"), pipeline=pipeline_name, run_id=generate_operation_id(), **fields)
