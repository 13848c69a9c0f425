"""
SmartTodo Backend - Todo Requests
==================================

The closed set of request types the dispatcher accepts. Each is an
immutable value; fields are loosely typed because the validators, not the
constructors, decide what is acceptable.

    Request                  Result
    ─────────────────────    ──────────────────
    CreateTodoItem           uuid.UUID (new id)
    UpdateTodoItem           None
    MarkTodoItemComplete     None
    DeleteTodoItem           None
    GetTodoItemById          TodoItemDto
    GetTodoItems             List[TodoItemDto]
"""

import uuid
from dataclasses import dataclass
from datetime import date
from typing import Optional, Tuple, Type, Union, get_args


@dataclass(frozen=True)
class CreateTodoItem:
    title: Optional[str]
    description: Optional[str] = None
    due_date: Optional[date] = None


@dataclass(frozen=True)
class UpdateTodoItem:
    id: Optional[uuid.UUID]
    title: Optional[str]
    description: Optional[str] = None
    status: Optional[int] = None
    due_date: Optional[date] = None


@dataclass(frozen=True)
class MarkTodoItemComplete:
    id: Optional[uuid.UUID]


@dataclass(frozen=True)
class DeleteTodoItem:
    id: Optional[uuid.UUID]


@dataclass(frozen=True)
class GetTodoItemById:
    id: Optional[uuid.UUID]


@dataclass(frozen=True)
class GetTodoItems:
    status: Optional[int] = None


TodoRequest = Union[
    CreateTodoItem,
    UpdateTodoItem,
    MarkTodoItemComplete,
    DeleteTodoItem,
    GetTodoItemById,
    GetTodoItems,
]

# Every variant must have a handler before the dispatcher is built
TODO_REQUEST_TYPES: Tuple[Type, ...] = get_args(TodoRequest)
