"""
SmartTodo Backend - Pydantic Request/Response Schemas
======================================================

What:  Pydantic models defining the JSON contract between frontend and backend.
How:   FastAPI parses request bodies into these models and serializes
       responses from them; OpenAPI docs are generated from them too.
Who:   Used by routes/todo_items.py and routes/health.py.

Design Decision:
    Body models are deliberately loose (every field optional, no length
    rules). Business validation happens in the dispatch pipeline so every
    caller, HTTP or not, gets the same rules and the same error map.
    Only malformed JSON and wrong types are rejected here.

Wire casing:
    camelCase on the wire (dueDate, createdAt), snake_case in Python.
"""

import uuid
from datetime import date, datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base for wire models: camelCase aliases, accepts either casing."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class TodoItemDto(CamelModel):
    """
    What:  Read model for a todo item.
    Who:   Returned by GET /api/todoitems and GET /api/todoitems/{id}.
    """

    id: uuid.UUID = Field(description="Unique todo item identifier (UUID)")
    title: str = Field(description="Trimmed title, 1-200 characters")
    description: Optional[str] = Field(default=None, description="Optional details")
    status: int = Field(description="0 = Pending, 1 = Completed")
    due_date: Optional[date] = Field(default=None, description="Optional due date (YYYY-MM-DD)")
    created_at: datetime = Field(description="When the item was created (UTC ISO 8601)")
    updated_at: datetime = Field(description="When the item last changed (UTC ISO 8601)")


class ProblemDetailsResponse(BaseModel):
    """
    RFC 7807 error body, documented for OpenAPI.

    The translator writes this shape directly; this model only feeds the docs.
    """

    type: str = Field(description="Problem type URI")
    title: str = Field(description="Short summary of the problem kind")
    status: int = Field(description="HTTP status code")
    detail: Optional[str] = Field(default=None, description="Occurrence-specific detail")
    traceId: str = Field(description="Per-call trace identifier")
    correlationId: Optional[str] = Field(default=None, description="Resolved correlation id")
    errors: Optional[Dict[str, List[str]]] = Field(
        default=None,
        description="Field → messages (validation problems only)",
    )


class HealthResponse(BaseModel):
    """
    What:  Health check response.
    Who:   Returned by GET /health for load balancers and container probes.
    """

    status: str = Field(description="Overall status: healthy or degraded")
    database: str = Field(description="Database connectivity: connected or disconnected")
    version: str = Field(description="Application version")


# ══════════════════════════════════════════════════════════════════════════
# Request Bodies
# ══════════════════════════════════════════════════════════════════════════


class CreateTodoBody(CamelModel):
    """Body of POST /api/todoitems."""

    title: Optional[str] = None
    description: Optional[str] = None
    due_date: Optional[date] = None


class UpdateTodoBody(CamelModel):
    """Body of PUT /api/todoitems/{id}. `status` = 1 completes the item."""

    title: Optional[str] = None
    description: Optional[str] = None
    due_date: Optional[date] = None
    status: Optional[int] = None
