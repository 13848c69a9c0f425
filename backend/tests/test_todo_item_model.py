"""
SmartTodo Backend - TodoItem Entity Tests
==========================================

What we test:
    ✅ create() trims the title and starts Pending
    ✅ Blank and over-long titles rejected by the entity itself
    ✅ mark_complete() only once
    ✅ update_details() replaces fields and bumps updated_at
"""

from datetime import date, timedelta

import pytest

from smarttodo.exceptions import DomainRuleError
from smarttodo.models.todo_item import TodoItem, TodoStatus


class TestCreate:
    def test_create_sets_defaults(self):
        item = TodoItem.create("  Write report  ", "quarterly", date(2030, 1, 1))

        assert item.id is not None
        assert item.title == "Write report"
        assert item.description == "quarterly"
        assert item.status == TodoStatus.PENDING
        assert item.due_date == date(2030, 1, 1)
        assert item.created_at == item.updated_at
        assert item.created_at.tzinfo is not None

    def test_ids_are_unique(self):
        assert TodoItem.create("one").id != TodoItem.create("two").id

    @pytest.mark.parametrize("title", [None, "", "   "])
    def test_blank_title_rejected(self, title):
        with pytest.raises(DomainRuleError, match="empty"):
            TodoItem.create(title)

    def test_long_title_rejected_after_trim(self):
        TodoItem.create(" " + "x" * 200 + " ")
        with pytest.raises(DomainRuleError, match="200"):
            TodoItem.create("x" * 201)


class TestMarkComplete:
    def test_mark_complete(self):
        item = TodoItem.create("Task")
        before = item.updated_at

        item.mark_complete()

        assert item.status == TodoStatus.COMPLETED
        assert item.is_completed
        assert item.updated_at >= before

    def test_mark_complete_twice_fails(self):
        item = TodoItem.create("Task")
        item.mark_complete()
        with pytest.raises(DomainRuleError, match="already completed"):
            item.mark_complete()


class TestUpdateDetails:
    def test_update_details(self):
        item = TodoItem.create("Old", "old description", date(2030, 1, 1))
        created_at = item.created_at

        item.update_details("  New title ", None, date(2030, 1, 1) + timedelta(days=7))

        assert item.title == "New title"
        assert item.description is None
        assert item.due_date == date(2030, 1, 8)
        assert item.created_at == created_at
        assert item.updated_at >= created_at

    def test_update_keeps_status(self):
        item = TodoItem.create("Task")
        item.mark_complete()
        item.update_details("Task renamed")
        assert item.is_completed

    def test_update_rejects_blank_title(self):
        item = TodoItem.create("Task")
        with pytest.raises(DomainRuleError):
            item.update_details("  ")
        assert item.title == "Task"
