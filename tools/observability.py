"""Structured timing logs around provider calls."""

from __future__ import annotations

import inspect
import logging
import time
from datetime import date
from functools import wraps
from typing import Any, Callable, Dict, ParamSpec, TypeVar

from stylist_app.logging_config import ensure_correlation_id, get_logger, log_event

LOGGER = get_logger(__name__)
P = ParamSpec("P")
R = TypeVar("R")

MAX_LOGGED_ARGUMENTS = 6


def _loggable(value: Any) -> Any:
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    if isinstance(value, date):
        return value.isoformat()
    return type(value).__name__


def describe_arguments(func: Callable[..., Any], args: tuple, kwargs: dict) -> Dict[str, Any]:
    """Name the call arguments (``self`` excluded) as log-safe scalars."""

    try:
        bound = inspect.signature(func).bind_partial(*args, **kwargs)
    except TypeError:
        return {"arguments": len(args) + len(kwargs)}
    described: Dict[str, Any] = {}
    for name, value in bound.arguments.items():
        if name == "self":
            continue
        if len(described) >= MAX_LOGGED_ARGUMENTS:
            described["truncated"] = True
            break
        described[name] = _loggable(value)
    return described


def instrument_call(call_name: str) -> Callable[[Callable[P, R]], Callable[P, R]]:
    """Log ``call_started`` / ``call_completed`` / ``call_failed`` with timings.

    Completed calls returning a list or tuple also log ``result_count``.
    Failures are logged and re-raised unchanged.
    """

    def decorator(func: Callable[P, R]) -> Callable[P, R]:
        @wraps(func)
        def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            correlation_id = ensure_correlation_id()
            start = time.perf_counter()
            log_event(
                LOGGER,
                logging.INFO,
                "call_started",
                call=call_name,
                correlation_id=correlation_id,
                arguments=describe_arguments(func, args, kwargs),
            )
            try:
                result = func(*args, **kwargs)
            except Exception as exc:
                log_event(
                    LOGGER,
                    logging.ERROR,
                    "call_failed",
                    call=call_name,
                    correlation_id=correlation_id,
                    duration_ms=round((time.perf_counter() - start) * 1000, 2),
                    error=type(exc).__name__,
                    exc_info=True,
                )
                raise
            fields: Dict[str, Any] = {"duration_ms": round((time.perf_counter() - start) * 1000, 2)}
            if isinstance(result, (list, tuple)):
                fields["result_count"] = len(result)
            log_event(LOGGER, logging.INFO, "call_completed", call=call_name, correlation_id=correlation_id, **fields)
            return result

        return wrapper

    return decorator


__all__ = ["instrument_call", "describe_arguments", "MAX_LOGGED_ARGUMENTS"]
