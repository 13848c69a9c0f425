"""
SmartTodo Backend - Handler Registration
=========================================

Builds the frozen registry and the dispatcher once at app startup.
freeze(required=TODO_REQUEST_TYPES) is the startup self-check: a request
variant without a handler stops the app from starting.
"""

from smarttodo.pipeline.dispatcher import Dispatcher
from smarttodo.pipeline.registry import HandlerRegistry
from smarttodo.services.todo_handlers import (
    create_todo_item,
    delete_todo_item,
    get_todo_item_by_id,
    get_todo_items,
    mark_todo_item_complete,
    update_todo_item,
)
from smarttodo.services.todo_requests import (
    TODO_REQUEST_TYPES,
    CreateTodoItem,
    DeleteTodoItem,
    GetTodoItemById,
    GetTodoItems,
    MarkTodoItemComplete,
    UpdateTodoItem,
)
from smarttodo.services.todo_validators import (
    CreateTodoItemValidator,
    GetTodoItemByIdValidator,
    GetTodoItemsValidator,
    MarkTodoItemCompleteValidator,
    UpdateTodoItemValidator,
)


def build_registry() -> HandlerRegistry:
    registry = HandlerRegistry()
    registry.register(CreateTodoItem, create_todo_item, CreateTodoItemValidator())
    registry.register(UpdateTodoItem, update_todo_item, UpdateTodoItemValidator())
    registry.register(MarkTodoItemComplete, mark_todo_item_complete, MarkTodoItemCompleteValidator())
    registry.register(DeleteTodoItem, delete_todo_item)
    registry.register(GetTodoItemById, get_todo_item_by_id, GetTodoItemByIdValidator())
    registry.register(GetTodoItems, get_todo_items, GetTodoItemsValidator())
    return registry.freeze(required=TODO_REQUEST_TYPES)


def build_dispatcher() -> Dispatcher:
    return Dispatcher(build_registry())
