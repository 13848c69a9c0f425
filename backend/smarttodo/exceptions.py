"""
SmartTodo Backend - Custom Exception Hierarchy
===============================================

What:  Application-specific exceptions for the dispatch pipeline and handlers.
How:   Each exception carries a message and an optional context dict.
       The exception translator (middleware/exception_translator.py) is the
       single place where an escaping exception becomes an HTTP response.
Who:   Raised by the pipeline, handlers, the store and the domain entity.

Exception Hierarchy:
    SmartTodoError (base)
    ├── ValidationError          → 400 Validation problem
    ├── NotFoundError            → 404 NotFound problem
    ├── ConfigurationError       → 500 (missing/duplicate handler registration)
    ├── OperationCancelledError  → 500 (cancelled or deadline exceeded)
    ├── DomainRuleError          → 500 (entity invariant violated)
    └── DatabaseError            → 500 (persistence failure)

    Anything not listed as 400/404 is classified Unclassified by
    smarttodo.problem_details.
"""

from typing import Any, Dict, List, Optional


# Field name → ordered messages, grouped by first-seen field order
ValidationErrorMap = Dict[str, List[str]]


class SmartTodoError(Exception):
    """
    Base exception for all SmartTodo application errors.

    Attributes:
        message:  Human-readable error description
        context:  Additional debug info (logged but NOT returned to client)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(SmartTodoError):
    """
    Raised by the validation stage when one or more validators fail.

    HTTP:    400 Bad Request, with the error map in the `errors` member.

    Example response:
        {
            "type": "https://tools.ietf.org/html/rfc7231#section-6.5.1",
            "title": "One or more validation errors occurred.",
            "status": 400,
            "errors": {"Title": ["Title is required"]},
            "traceId": "...",
            "correlationId": "..."
        }
    """

    def __init__(
        self,
        errors: ValidationErrorMap,
        message: str = "Validation failed",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
        self.errors: ValidationErrorMap = {field: list(msgs) for field, msgs in errors.items()}


class NotFoundError(SmartTodoError):
    """
    Raised when a requested resource does not exist.

    When:    Store returned None for the requested id.
    HTTP:    404 Not Found, `detail` is this exception's message.
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[Any] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id is not None:
            message = f"{resource} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id is not None:
            ctx["resource_id"] = str(resource_id)
        super().__init__(message=message, context=ctx)
        self.resource = resource
        self.resource_id = resource_id


class ConfigurationError(SmartTodoError):
    """
    Raised when the handler registry is misconfigured.

    When:    Duplicate registration, registration after freeze, a request
             variant with no handler at startup, or dispatch of an unknown
             request type.
    HTTP:    500 if it ever escapes to a live request. The startup self-check
             (HandlerRegistry.freeze) is meant to catch it first.
    """

    def __init__(
        self,
        message: str = "Request pipeline is misconfigured",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class OperationCancelledError(SmartTodoError):
    """
    Raised when a dispatch call is cancelled or runs past its deadline.

    Handlers raise it through CancellationToken.raise_if_cancelled() before
    doing I/O; the dispatcher raises it when the deadline elapses mid-chain.
    """

    def __init__(
        self,
        message: str = "The operation was cancelled",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class DomainRuleError(SmartTodoError):
    """
    Raised by the TodoItem entity when one of its invariants would break.

    Examples: completing an item twice, a blank or over-long title reaching
    the entity without passing through a validator.
    """

    def __init__(
        self,
        message: str = "Domain rule violated",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class DatabaseError(SmartTodoError):
    """
    Raised when database operations fail unexpectedly.

    The message is always generic; the driver error is logged server-side
    and kept in `context`.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
