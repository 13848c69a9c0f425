"""
SmartTodo Backend - Route Dependencies
=======================================

FastAPI dependencies that connect HTTP to the dispatch pipeline:

    get_dispatcher        → the app's frozen Dispatcher (built at startup)
    get_todo_store        → SqlAlchemyTodoStore over the request's session
    get_dispatch_context  → DispatchContext for this call, built from the ids
                            CorrelationIdMiddleware left in request.state

Tests override get_todo_store to run the real pipeline against an
in-memory store.
"""

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from smarttodo.config import Settings, settings
from smarttodo.database import get_db_session
from smarttodo.middleware.correlation import resolve_correlation_id
from smarttodo.pipeline.context import CancellationToken, DispatchContext, new_trace_id
from smarttodo.pipeline.dispatcher import Dispatcher
from smarttodo.services.todo_store import SqlAlchemyTodoStore, TodoStore


def get_dispatcher(request: Request) -> Dispatcher:
    return request.app.state.dispatcher


def _app_settings(request: Request) -> Settings:
    return getattr(request.app.state, "settings", settings)


async def get_todo_store(session: AsyncSession = Depends(get_db_session)) -> TodoStore:
    return SqlAlchemyTodoStore(session)


async def get_dispatch_context(
    request: Request,
    store: TodoStore = Depends(get_todo_store),
) -> DispatchContext:
    """
    One DispatchContext per inbound call.

    Falls back to resolving the ids here when the correlation middleware
    is not installed (e.g. a bare router mounted in a test app).
    """
    app_settings = _app_settings(request)
    correlation_id = getattr(request.state, "correlation_id", None)
    if not correlation_id:
        correlation_id = resolve_correlation_id(
            request.headers.get(app_settings.correlation_header)
        )
    trace_id = getattr(request.state, "trace_id", None) or new_trace_id()
    return DispatchContext(
        correlation_id=correlation_id,
        trace_id=trace_id,
        cancellation=CancellationToken(app_settings.dispatch_timeout_seconds),
        store=store,
    )
