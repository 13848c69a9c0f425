"""
SmartTodo Backend - Request Dispatch Pipeline
==============================================

What:  Mediator that routes a typed request to exactly one handler through
       a fixed chain of behaviors (Validation → Logging → Handler).

Module Inventory:
    - context.py:    DispatchContext, CancellationToken
    - validation.py: Validator, ValidationFailure, group_failures
    - registry.py:   HandlerRegistry (build once, freeze, read concurrently)
    - behaviors.py:  ValidationBehavior, LoggingBehavior
    - dispatcher.py: Dispatcher.dispatch(request, context)
"""

from smarttodo.pipeline.behaviors import Behavior, LoggingBehavior, ValidationBehavior
from smarttodo.pipeline.context import (
    CancellationToken,
    DispatchContext,
    new_correlation_id,
    new_trace_id,
)
from smarttodo.pipeline.dispatcher import Dispatcher
from smarttodo.pipeline.registry import Handler, HandlerRegistration, HandlerRegistry
from smarttodo.pipeline.validation import (
    FunctionValidator,
    ValidationFailure,
    Validator,
    group_failures,
)

__all__ = [
    "Behavior",
    "CancellationToken",
    "DispatchContext",
    "Dispatcher",
    "FunctionValidator",
    "Handler",
    "HandlerRegistration",
    "HandlerRegistry",
    "LoggingBehavior",
    "ValidationBehavior",
    "ValidationFailure",
    "Validator",
    "group_failures",
    "new_correlation_id",
    "new_trace_id",
]
