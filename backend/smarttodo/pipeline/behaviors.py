"""
SmartTodo Backend - Pipeline Behaviors
=======================================

What:  Cross-cutting stages that wrap every handler invocation.
How:   Each behavior is `handle(request, context, next_step)`, where
       next_step() runs the remainder of the chain. A behavior may return
       without calling next_step() to short-circuit.

Fixed order for every request type:
    Validation → Logging → Handler

    Validation runs first so rejected requests never count as handler
    latency; Logging sits right next to the handler so its elapsed time is
    the unit of work itself.

Behaviors are shared by all concurrent calls. They keep no per-call state
on `self`; everything about the call comes in through `request` and
`context`.
"""

import asyncio
import logging
import time
from abc import ABC, abstractmethod
from typing import Any, Awaitable, Callable, List

from smarttodo.exceptions import ValidationError
from smarttodo.pipeline.context import DispatchContext
from smarttodo.pipeline.registry import HandlerRegistry
from smarttodo.pipeline.validation import ValidationFailure, group_failures

NextStep = Callable[[], Awaitable[Any]]


class Behavior(ABC):
    """One stage of the dispatch chain."""

    @abstractmethod
    async def handle(self, request: Any, context: DispatchContext, next_step: NextStep) -> Any:
        ...


class ValidationBehavior(Behavior):
    """
    Runs every validator registered for the request type.

    No validators → pure pass-through.
    Any failure → ValidationError with all failures grouped by field;
    next_step() is not called, so the handler has no side effects.
    """

    def __init__(self, registry: HandlerRegistry):
        self._registry = registry

    async def handle(self, request: Any, context: DispatchContext, next_step: NextStep) -> Any:
        validators = self._registry.validators_for(type(request))
        if not validators:
            return await next_step()

        failures: List[ValidationFailure] = []
        for validator in validators:
            failures.extend(validator.validate(request))

        errors = group_failures(failures)
        if errors:
            raise ValidationError(
                errors,
                context={
                    "request_type": type(request).__name__,
                    "correlation_id": context.correlation_id,
                },
            )
        return await next_step()


class LoggingBehavior(Behavior):
    """
    Records start, success or failure of the handler with elapsed time.

    Never swallows: every exception is logged with elapsed time and
    re-raised unchanged. Cancellation (asyncio.CancelledError from the
    dispatcher's deadline) is logged too before propagating.
    """

    def __init__(self, logger: logging.Logger | None = None):
        self._logger = logger or logging.getLogger("smarttodo.pipeline")

    async def handle(self, request: Any, context: DispatchContext, next_step: NextStep) -> Any:
        request_name = type(request).__name__
        extra = {
            "request_type": request_name,
            "correlation_id": context.correlation_id,
            "trace_id": context.trace_id,
        }
        self._logger.info("Handling %s", request_name, extra=extra)

        start_time = time.perf_counter()
        try:
            result = await next_step()
        except asyncio.CancelledError:
            elapsed_ms = (time.perf_counter() - start_time) * 1000
            self._logger.warning(
                "Cancelled %s after %.1fms",
                request_name,
                elapsed_ms,
                extra={**extra, "elapsed_ms": round(elapsed_ms, 2)},
            )
            raise
        except Exception as exc:
            elapsed_ms = (time.perf_counter() - start_time) * 1000
            self._logger.error(
                "Error handling %s after %.1fms: %s",
                request_name,
                elapsed_ms,
                exc,
                exc_info=exc,
                extra={**extra, "elapsed_ms": round(elapsed_ms, 2)},
            )
            raise

        elapsed_ms = (time.perf_counter() - start_time) * 1000
        self._logger.info(
            "Handled %s successfully in %.1fms",
            request_name,
            elapsed_ms,
            extra={**extra, "elapsed_ms": round(elapsed_ms, 2)},
        )
        return result
