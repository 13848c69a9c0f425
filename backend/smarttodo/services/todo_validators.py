"""
SmartTodo Backend - Todo Request Validators
============================================

What:  One Validator per todo request type (DeleteTodoItem has none).
How:   Each validate() returns every failure it finds; field names are the
       PascalCase names existing clients read from the `errors` map
       (Title, Description, DueDate, Id, Status).

Title rules differ on purpose between create and update:
    Create: every title rule runs, so "" reports both "required" and
            "at least 3 characters".
    Update: rules stop at the first failure, a blank or whitespace-only
            title reports "required", and lengths are measured
            after trimming.
"""

import uuid
from datetime import date, datetime, timezone
from typing import Any, Callable, List, Optional

from smarttodo.models.todo_item import DESCRIPTION_MAX_LENGTH, TITLE_MAX_LENGTH, TodoStatus
from smarttodo.pipeline.validation import ValidationFailure, Validator
from smarttodo.services.todo_requests import (
    CreateTodoItem,
    GetTodoItemById,
    GetTodoItems,
    MarkTodoItemComplete,
    UpdateTodoItem,
)

TITLE_MIN_LENGTH = 3

TITLE_REQUIRED = "Title is required"
TITLE_WHITESPACE = "Title cannot be empty or whitespace"
TITLE_TOO_SHORT = f"Title must be at least {TITLE_MIN_LENGTH} characters"
TITLE_TOO_LONG = f"Title must not exceed {TITLE_MAX_LENGTH} characters"
DESCRIPTION_TOO_LONG = f"Description must not exceed {DESCRIPTION_MAX_LENGTH} characters"
DUE_DATE_IN_PAST = "Due date must be today or in the future"
ID_REQUIRED = "ID is required"
ID_REQUIRED_NOT_EMPTY = "Id is required and must not be empty"
STATUS_INVALID = "Status must be a valid TodoStatus value (0 = Pending, 1 = Completed)"


def utc_today() -> date:
    return datetime.now(timezone.utc).date()


def _is_empty_id(value: Optional[uuid.UUID]) -> bool:
    # The all-zero UUID counts as missing
    return value is None or value.int == 0


class _TodoValidator(Validator):
    """Shared description and due-date rules."""

    def __init__(self, today: Callable[[], date] = utc_today):
        self._today = today

    def _check_description(self, failures: List[ValidationFailure], description: Optional[str]) -> None:
        if description is not None:
            self.rule(failures, "Description", len(description) <= DESCRIPTION_MAX_LENGTH, DESCRIPTION_TOO_LONG)

    def _check_due_date(self, failures: List[ValidationFailure], due_date: Optional[date]) -> None:
        if due_date is not None:
            self.rule(failures, "DueDate", due_date >= self._today(), DUE_DATE_IN_PAST)


class CreateTodoItemValidator(_TodoValidator):
    def validate(self, request: CreateTodoItem) -> List[ValidationFailure]:
        failures: List[ValidationFailure] = []
        title = request.title
        self.rule(failures, "Title", bool(title and title.strip()), TITLE_REQUIRED)
        if title is not None:
            self.rule(failures, "Title", len(title) >= TITLE_MIN_LENGTH, TITLE_TOO_SHORT)
            self.rule(failures, "Title", len(title) <= TITLE_MAX_LENGTH, TITLE_TOO_LONG)
        self._check_description(failures, request.description)
        self._check_due_date(failures, request.due_date)
        return failures


class UpdateTodoItemValidator(_TodoValidator):
    def validate(self, request: UpdateTodoItem) -> List[ValidationFailure]:
        failures: List[ValidationFailure] = []
        self.rule(failures, "Id", not _is_empty_id(request.id), ID_REQUIRED)

        title = request.title
        self.first_failure(
            failures,
            "Title",
            [
                (lambda: bool(title and title.strip()), TITLE_REQUIRED),
                (lambda: bool(title.strip()), TITLE_WHITESPACE),
                (lambda: len(title.strip()) >= TITLE_MIN_LENGTH, TITLE_TOO_SHORT),
                (lambda: len(title.strip()) <= TITLE_MAX_LENGTH, TITLE_TOO_LONG),
            ],
        )
        self._check_description(failures, request.description)
        self._check_due_date(failures, request.due_date)
        return failures


class MarkTodoItemCompleteValidator(Validator):
    def validate(self, request: MarkTodoItemComplete) -> List[ValidationFailure]:
        failures: List[ValidationFailure] = []
        self.rule(failures, "Id", not _is_empty_id(request.id), ID_REQUIRED)
        return failures


class GetTodoItemByIdValidator(Validator):
    def validate(self, request: GetTodoItemById) -> List[ValidationFailure]:
        failures: List[ValidationFailure] = []
        self.rule(failures, "Id", not _is_empty_id(request.id), ID_REQUIRED_NOT_EMPTY)
        return failures


class GetTodoItemsValidator(Validator):
    """Status filter, when given, must be a defined TodoStatus value."""

    _valid = frozenset(int(s) for s in TodoStatus)

    def validate(self, request: GetTodoItems) -> List[ValidationFailure]:
        failures: List[ValidationFailure] = []
        status: Any = request.status
        if status is not None:
            self.rule(failures, "Status", status in self._valid, STATUS_INVALID)
        return failures
