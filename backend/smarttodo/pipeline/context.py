"""
SmartTodo Backend - Dispatch Context
=====================================

What:  The explicit per-call argument threaded through dispatch, every
       behavior and the handler.
How:   DispatchContext is an immutable value built once per inbound call by
       the route dependency; CancellationToken carries the deadline/cancel
       signal.

Nothing in the pipeline reads a "current correlation id" from ambient
storage. Whatever a stage needs about the call arrives in this object.
"""

import time
import uuid
from dataclasses import dataclass, field
from typing import Any, Optional

from smarttodo.exceptions import OperationCancelledError


def new_correlation_id() -> str:
    """Fresh UUID-shaped correlation id."""
    return str(uuid.uuid4())


def new_trace_id() -> str:
    """Fresh 32-hex-digit trace id (W3C trace-id shape)."""
    return uuid.uuid4().hex


class CancellationToken:
    """
    Cooperative cancellation signal with an optional deadline.

    Handlers call raise_if_cancelled() before I/O. The dispatcher also
    bounds the whole chain by remaining(), so a handler stuck in an await
    is interrupted when the deadline passes.
    """

    def __init__(self, timeout: Optional[float] = None):
        self._deadline: Optional[float] = None
        if timeout is not None and timeout > 0:
            self._deadline = time.monotonic() + timeout
        self._cancelled = False
        self._reason = ""

    @classmethod
    def none(cls) -> "CancellationToken":
        """A token that is never cancelled and has no deadline."""
        return cls()

    def cancel(self, reason: str = "cancelled by caller") -> None:
        self._cancelled = True
        self._reason = reason

    @property
    def cancelled(self) -> bool:
        if self._cancelled:
            return True
        return self._deadline is not None and time.monotonic() >= self._deadline

    def remaining(self) -> Optional[float]:
        """Seconds left before the deadline, None when there is no deadline."""
        if self._deadline is None:
            return None
        return max(0.0, self._deadline - time.monotonic())

    def raise_if_cancelled(self) -> None:
        if not self.cancelled:
            return
        reason = self._reason or "deadline exceeded"
        raise OperationCancelledError(
            message=f"The operation was cancelled ({reason})",
            context={"reason": reason},
        )


@dataclass(frozen=True)
class DispatchContext:
    """
    Per-call data shared by every pipeline stage.

    Attributes:
        correlation_id: Resolved correlation id for this inbound call
        trace_id:       Internal per-call span identifier
        cancellation:   Deadline / cancel signal for this call
        store:          Persistence collaborator for this call (TodoStore)
    """

    correlation_id: str = field(default_factory=new_correlation_id)
    trace_id: str = field(default_factory=new_trace_id)
    cancellation: CancellationToken = field(default_factory=CancellationToken.none)
    store: Any = None
