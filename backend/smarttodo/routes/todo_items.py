"""
SmartTodo Backend - Todo Item Route Handlers
=============================================

What:  CRUD endpoints under /api/todoitems.
How:   Each route turns path/query/body into one todo request and sends it
       through the dispatcher. No business rules live here; validation,
       logging and error translation all happen downstream.

Endpoints:
    POST   /api/todoitems                 → CreateTodoItem        201 + Location
    GET    /api/todoitems?status=         → GetTodoItems          200
    GET    /api/todoitems/{id}            → GetTodoItemById       200
    PUT    /api/todoitems/{id}            → UpdateTodoItem        200
    PATCH  /api/todoitems/{id}/complete   → MarkTodoItemComplete  200
    DELETE /api/todoitems/{id}            → DeleteTodoItem        204
"""

import uuid
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response, status

from smarttodo.pipeline.context import DispatchContext
from smarttodo.pipeline.dispatcher import Dispatcher
from smarttodo.routes.dependencies import get_dispatch_context, get_dispatcher
from smarttodo.schemas.todo_item import (
    CreateTodoBody,
    ProblemDetailsResponse,
    TodoItemDto,
    UpdateTodoBody,
)
from smarttodo.services.todo_requests import (
    CreateTodoItem,
    DeleteTodoItem,
    GetTodoItemById,
    GetTodoItems,
    MarkTodoItemComplete,
    UpdateTodoItem,
)

router = APIRouter(prefix="/api/todoitems", tags=["TodoItems"])

_VALIDATION = {400: {"description": "Validation failed", "model": ProblemDetailsResponse}}
_NOT_FOUND = {404: {"description": "Todo item not found", "model": ProblemDetailsResponse}}


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=uuid.UUID,
    responses={**_VALIDATION},
    summary="Create a todo item",
)
async def create_todo_item(
    body: CreateTodoBody,
    response: Response,
    dispatcher: Dispatcher = Depends(get_dispatcher),
    context: DispatchContext = Depends(get_dispatch_context),
) -> uuid.UUID:
    """Returns the new item's id; Location points at GET /api/todoitems/{id}."""
    item_id = await dispatcher.dispatch(
        CreateTodoItem(title=body.title, description=body.description, due_date=body.due_date),
        context,
    )
    response.headers["Location"] = f"{router.prefix}/{item_id}"
    return item_id


@router.get(
    "",
    response_model=List[TodoItemDto],
    responses={**_VALIDATION},
    summary="List todo items, newest first",
)
async def list_todo_items(
    status_filter: Optional[int] = Query(
        default=None,
        alias="status",
        description="Optional filter: 0 = Pending, 1 = Completed",
    ),
    dispatcher: Dispatcher = Depends(get_dispatcher),
    context: DispatchContext = Depends(get_dispatch_context),
) -> List[TodoItemDto]:
    return await dispatcher.dispatch(GetTodoItems(status=status_filter), context)


@router.get(
    "/{item_id}",
    response_model=TodoItemDto,
    responses={**_VALIDATION, **_NOT_FOUND},
    summary="Get a todo item by ID",
)
async def get_todo_item(
    item_id: uuid.UUID,
    dispatcher: Dispatcher = Depends(get_dispatcher),
    context: DispatchContext = Depends(get_dispatch_context),
) -> TodoItemDto:
    return await dispatcher.dispatch(GetTodoItemById(id=item_id), context)


@router.put(
    "/{item_id}",
    status_code=status.HTTP_200_OK,
    responses={**_VALIDATION, **_NOT_FOUND},
    summary="Update a todo item",
)
async def update_todo_item(
    item_id: uuid.UUID,
    body: UpdateTodoBody,
    dispatcher: Dispatcher = Depends(get_dispatcher),
    context: DispatchContext = Depends(get_dispatch_context),
) -> None:
    """Replaces title, description and due date; `status: 1` also completes it."""
    await dispatcher.dispatch(
        UpdateTodoItem(
            id=item_id,
            title=body.title,
            description=body.description,
            status=body.status,
            due_date=body.due_date,
        ),
        context,
    )


@router.patch(
    "/{item_id}/complete",
    status_code=status.HTTP_200_OK,
    responses={**_VALIDATION, **_NOT_FOUND},
    summary="Mark a todo item as complete",
)
async def complete_todo_item(
    item_id: uuid.UUID,
    dispatcher: Dispatcher = Depends(get_dispatcher),
    context: DispatchContext = Depends(get_dispatch_context),
) -> None:
    await dispatcher.dispatch(MarkTodoItemComplete(id=item_id), context)


@router.delete(
    "/{item_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses={**_NOT_FOUND},
    summary="Delete a todo item",
)
async def delete_todo_item(
    item_id: uuid.UUID,
    dispatcher: Dispatcher = Depends(get_dispatcher),
    context: DispatchContext = Depends(get_dispatch_context),
) -> Response:
    await dispatcher.dispatch(DeleteTodoItem(id=item_id), context)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
