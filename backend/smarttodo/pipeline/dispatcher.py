"""
SmartTodo Backend - Dispatcher (Mediator)
==========================================

What:  Routes a typed request to exactly one handler through the fixed
       behavior chain.
How:   1. Resolve the registration for type(request) from the frozen registry
          (ConfigurationError before any behavior runs if it is missing)
       2. Compose Validation → Logging → Handler around this call
       3. Run the chain, bounded by the context's deadline if it has one

Dispatch Flow:
    dispatch(request, context)
        │
        ├── registry.resolve(type(request))    → ConfigurationError
        ├── context.cancellation.raise_if_cancelled()
        └── ValidationBehavior
                └── LoggingBehavior
                        └── handler(request, context)
"""

import asyncio
import logging
from functools import partial
from typing import Any, Optional, Sequence

from smarttodo.exceptions import ConfigurationError, OperationCancelledError
from smarttodo.pipeline.behaviors import Behavior, LoggingBehavior, NextStep, ValidationBehavior
from smarttodo.pipeline.context import DispatchContext
from smarttodo.pipeline.registry import HandlerRegistration, HandlerRegistry

logger = logging.getLogger(__name__)


class Dispatcher:
    """
    Single entry point for running requests.

    Thread Safety:
        Holds only the frozen registry and stateless behaviors, so one
        instance serves every concurrent call.
    """

    def __init__(self, registry: HandlerRegistry, logger: Optional[logging.Logger] = None):
        if not registry.is_frozen:
            raise ConfigurationError("Dispatcher requires a frozen handler registry")
        self._registry = registry
        self._behaviors: Sequence[Behavior] = (
            ValidationBehavior(registry),
            LoggingBehavior(logger),
        )

    @property
    def registry(self) -> HandlerRegistry:
        return self._registry

    @property
    def behaviors(self) -> Sequence[Behavior]:
        return tuple(self._behaviors)

    async def dispatch(self, request: Any, context: Optional[DispatchContext] = None) -> Any:
        """
        Run `request` through the behavior chain and return the handler result.

        Args:
            request: An instance of a registered request type
            context: Per-call context; a fresh one is created when omitted

        Raises:
            ConfigurationError:      No handler for type(request)
            ValidationError:         A validator rejected the request
            OperationCancelledError: Cancelled or deadline exceeded
            Anything the handler raises, unchanged
        """
        registration = self._registry.resolve(type(request))
        if context is None:
            context = DispatchContext()
        cancellation = context.cancellation
        cancellation.raise_if_cancelled()

        chain = self._build_chain(registration, request, context)

        remaining = cancellation.remaining()
        if remaining is None:
            return await chain()
        try:
            return await asyncio.wait_for(chain(), timeout=remaining)
        except asyncio.TimeoutError as exc:
            # Only the deadline becomes OperationCancelledError; a TimeoutError
            # the handler raised on its own propagates unchanged
            if not cancellation.cancelled:
                raise
            raise OperationCancelledError(
                f"{registration.request_name} exceeded its deadline",
                context={
                    "request_type": registration.request_name,
                    "correlation_id": context.correlation_id,
                },
            ) from exc

    def _build_chain(
        self,
        registration: HandlerRegistration,
        request: Any,
        context: DispatchContext,
    ) -> NextStep:
        """Compose behaviors outermost-first around the handler call."""

        async def invoke_handler() -> Any:
            return await registration.handler(request, context)

        step: NextStep = invoke_handler
        for behavior in reversed(self._behaviors):
            step = partial(behavior.handle, request, context, step)
        return step
