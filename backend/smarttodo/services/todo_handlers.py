"""
SmartTodo Backend - Todo Handlers
==================================

What:  One async handler per todo request type.
How:   Each handler is `handler(request, context)`. The store comes from
       context.store; cancellation is checked before any write.
Who:   Registered with the HandlerRegistry in services/registration.py and
       only ever invoked through the dispatcher, after validation.

Handlers never catch exceptions: NotFoundError, DomainRuleError and
DatabaseError propagate to the exception translator unchanged.
"""

import logging
import uuid
from typing import List

from smarttodo.exceptions import ConfigurationError, NotFoundError
from smarttodo.models.todo_item import TodoItem, TodoStatus
from smarttodo.pipeline.context import DispatchContext
from smarttodo.schemas.todo_item import TodoItemDto
from smarttodo.services.todo_requests import (
    CreateTodoItem,
    DeleteTodoItem,
    GetTodoItemById,
    GetTodoItems,
    MarkTodoItemComplete,
    UpdateTodoItem,
)
from smarttodo.services.todo_store import TodoStore

logger = logging.getLogger(__name__)

RESOURCE_NAME = "TodoItem"


def _store(context: DispatchContext) -> TodoStore:
    store = context.store
    if store is None:
        raise ConfigurationError("No TodoStore on the dispatch context")
    return store


async def _require_item(store: TodoStore, item_id: uuid.UUID, context: DispatchContext) -> TodoItem:
    item = await store.find_by_id(item_id)
    if item is None:
        logger.warning(
            "Todo item not found with ID: %s",
            item_id,
            extra={"correlation_id": context.correlation_id},
        )
        raise NotFoundError(RESOURCE_NAME, item_id)
    return item


async def create_todo_item(request: CreateTodoItem, context: DispatchContext) -> uuid.UUID:
    store = _store(context)
    extra = {"correlation_id": context.correlation_id}
    logger.info("Creating todo item with title: %s", request.title, extra=extra)

    item = TodoItem.create(request.title, request.description, request.due_date)
    store.add(item)
    context.cancellation.raise_if_cancelled()
    await store.save_changes()

    logger.info("Todo item created successfully with ID: %s", item.id, extra=extra)
    return item.id


async def update_todo_item(request: UpdateTodoItem, context: DispatchContext) -> None:
    store = _store(context)
    extra = {"correlation_id": context.correlation_id}
    logger.info("Updating todo item with ID: %s", request.id, extra=extra)

    item = await _require_item(store, request.id, context)
    item.update_details(request.title, request.description, request.due_date)
    if request.status == TodoStatus.COMPLETED and not item.is_completed:
        item.mark_complete()

    context.cancellation.raise_if_cancelled()
    await store.save_changes()
    logger.info("Todo item updated successfully with ID: %s", request.id, extra=extra)


async def mark_todo_item_complete(request: MarkTodoItemComplete, context: DispatchContext) -> None:
    store = _store(context)
    extra = {"correlation_id": context.correlation_id}
    logger.info("Marking todo item as complete with ID: %s", request.id, extra=extra)

    item = await _require_item(store, request.id, context)
    item.mark_complete()

    context.cancellation.raise_if_cancelled()
    await store.save_changes()
    logger.info("Todo item marked as complete successfully with ID: %s", request.id, extra=extra)


async def delete_todo_item(request: DeleteTodoItem, context: DispatchContext) -> None:
    store = _store(context)
    extra = {"correlation_id": context.correlation_id}
    logger.info("Deleting todo item with ID: %s", request.id, extra=extra)

    item = await _require_item(store, request.id, context)
    await store.remove(item)

    context.cancellation.raise_if_cancelled()
    await store.save_changes()
    logger.info("Todo item deleted successfully with ID: %s", request.id, extra=extra)


async def get_todo_item_by_id(request: GetTodoItemById, context: DispatchContext) -> TodoItemDto:
    store = _store(context)
    logger.info(
        "Fetching todo item with ID: %s",
        request.id,
        extra={"correlation_id": context.correlation_id},
    )
    item = await _require_item(store, request.id, context)
    return TodoItemDto.model_validate(item)


async def get_todo_items(request: GetTodoItems, context: DispatchContext) -> List[TodoItemDto]:
    store = _store(context)
    extra = {"correlation_id": context.correlation_id}
    logger.info("Fetching todo items with filter Status: %s", request.status, extra=extra)

    items = await store.list_items(request.status)
    logger.info("Fetched %d todo items", len(items), extra=extra)
    return [TodoItemDto.model_validate(item) for item in items]
