"""
SmartTodo Backend - Handler Registry
=====================================

What:  Build-once map from request type to its single handler and its
       validators.
How:   Register every request type at startup, then freeze(). freeze()
       runs the self-check (every required request variant has a handler)
       and makes the registry read-only. After that it is shared by all
       concurrent calls without locking.

Lifecycle:
    registry = HandlerRegistry()
    registry.register(CreateTodoItem, create_todo_item, CreateTodoItemValidator())
    ...
    registry.freeze(required=TODO_REQUEST_TYPES)   # raises ConfigurationError

Failure modes (all ConfigurationError):
    - register() twice for one type
    - register() after freeze()
    - freeze() with a required type missing
    - resolve() before freeze() or for an unknown type
"""

import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Awaitable, Callable, Dict, Iterable, Mapping, Tuple, Type

from smarttodo.exceptions import ConfigurationError
from smarttodo.pipeline.validation import Validator

logger = logging.getLogger(__name__)

# (request, context) -> result
Handler = Callable[[Any, Any], Awaitable[Any]]


@dataclass(frozen=True)
class HandlerRegistration:
    """Everything the pipeline needs to run one request type."""

    request_type: Type[Any]
    handler: Handler
    validators: Tuple[Validator, ...] = ()

    @property
    def request_name(self) -> str:
        return self.request_type.__name__


class HandlerRegistry:
    """Request type → HandlerRegistration, frozen after startup."""

    def __init__(self) -> None:
        self._registrations: Dict[Type[Any], HandlerRegistration] = {}
        self._frozen = False

    # ── Build phase ───────────────────────────────────────────────────────

    def register(self, request_type: Type[Any], handler: Handler, *validators: Validator) -> None:
        """Bind `handler` (and zero or more validators) to `request_type`."""
        if self._frozen:
            raise ConfigurationError(
                f"Cannot register {request_type.__name__}: the handler registry is frozen",
                context={"request_type": request_type.__name__},
            )
        if not isinstance(request_type, type):
            raise ConfigurationError(f"Request type must be a class, got {request_type!r}")
        if request_type in self._registrations:
            raise ConfigurationError(
                f"Duplicate handler registration for {request_type.__name__}",
                context={"request_type": request_type.__name__},
            )
        for validator in validators:
            if not isinstance(validator, Validator):
                raise ConfigurationError(
                    f"{validator!r} registered for {request_type.__name__} is not a Validator"
                )
        self._registrations[request_type] = HandlerRegistration(
            request_type=request_type,
            handler=handler,
            validators=tuple(validators),
        )

    def freeze(self, required: Iterable[Type[Any]] = ()) -> "HandlerRegistry":
        """
        Run the startup self-check and make the registry read-only.

        Args:
            required: Request types that must have a handler. Usually every
                      variant of the closed request union.

        Raises:
            ConfigurationError: One or more required types are unregistered.
        """
        if self._frozen:
            return self
        missing = [t.__name__ for t in required if t not in self._registrations]
        if missing:
            raise ConfigurationError(
                "No handler registered for: " + ", ".join(sorted(missing)),
                context={"missing": sorted(missing)},
            )
        self._registrations = MappingProxyType(dict(self._registrations))  # type: ignore[assignment]
        self._frozen = True
        logger.info(
            "Handler registry frozen with %d request types: %s",
            len(self._registrations),
            ", ".join(sorted(r.request_name for r in self._registrations.values())),
        )
        return self

    # ── Read phase ────────────────────────────────────────────────────────

    @property
    def is_frozen(self) -> bool:
        return self._frozen

    @property
    def registrations(self) -> Mapping[Type[Any], HandlerRegistration]:
        return MappingProxyType(dict(self._registrations))

    def resolve(self, request_type: Type[Any]) -> HandlerRegistration:
        """Return the registration for `request_type` or raise ConfigurationError."""
        if not self._frozen:
            raise ConfigurationError("Handler registry used before freeze()")
        try:
            return self._registrations[request_type]
        except KeyError:
            raise ConfigurationError(
                f"No handler registered for {request_type.__name__}",
                context={"request_type": request_type.__name__},
            ) from None

    def validators_for(self, request_type: Type[Any]) -> Tuple[Validator, ...]:
        return self.resolve(request_type).validators

    def __contains__(self, request_type: object) -> bool:
        return request_type in self._registrations

    def __len__(self) -> int:
        return len(self._registrations)
