"""
SmartTodo Backend - Problem Details Tests
==========================================

What we test:
    ✅ Classification table (status, type URI, title) for all three kinds
    ✅ Exception → kind mapping
    ✅ Validation bodies carry errors and no detail
    ✅ 500 detail differs between development and other environments
"""

import uuid

import pytest

from smarttodo.exceptions import (
    ConfigurationError,
    DatabaseError,
    DomainRuleError,
    NotFoundError,
    OperationCancelledError,
    ValidationError,
)
from smarttodo.problem_details import (
    GENERIC_ERROR_DETAIL,
    PROBLEM_TABLE,
    NotFoundProblem,
    UnclassifiedProblem,
    ValidationProblem,
    build_problem_details,
    classify,
    is_expected,
)


def render(exc, **kwargs):
    return build_problem_details(classify(exc), **kwargs)


class TestTable:
    def test_rows(self):
        rows = {
            variant.__name__: (kind.status, kind.type_uri, kind.title)
            for variant, kind in PROBLEM_TABLE.items()
        }
        assert rows == {
            "ValidationProblem": (
                400,
                "https://tools.ietf.org/html/rfc7231#section-6.5.1",
                "One or more validation errors occurred.",
            ),
            "NotFoundProblem": (
                404,
                "https://tools.ietf.org/html/rfc7231#section-6.5.4",
                "The specified resource was not found.",
            ),
            "UnclassifiedProblem": (
                500,
                "https://tools.ietf.org/html/rfc7231#section-6.6.1",
                "An error occurred while processing your request.",
            ),
        }


class TestClassify:
    def test_validation(self):
        problem = classify(ValidationError({"Title": ["Title is required"]}))
        assert problem == ValidationProblem(errors={"Title": ["Title is required"]})
        assert is_expected(problem)

    def test_not_found(self):
        problem = classify(NotFoundError("TodoItem", "42"))
        assert isinstance(problem, NotFoundProblem)
        assert is_expected(problem)

    @pytest.mark.parametrize(
        "exc",
        [
            RuntimeError("boom"),
            KeyError("k"),
            DomainRuleError("Todo item is already completed."),
            DatabaseError(),
            ConfigurationError(),
            OperationCancelledError(),
        ],
    )
    def test_everything_else_is_unclassified(self, exc):
        problem = classify(exc)
        assert isinstance(problem, UnclassifiedProblem)
        assert problem.exception_type == type(exc).__name__
        assert not is_expected(problem)


class TestBuild:
    def test_validation_body(self):
        body = render(
            ValidationError({"Title": ["a", "b"], "DueDate": ["c"]}),
            trace_id="t-1",
            correlation_id="c-1",
        ).to_dict()

        assert body["status"] == 400
        assert "detail" not in body
        assert body["errors"] == {"Title": ["a", "b"], "DueDate": ["c"]}
        assert body["traceId"] == "t-1"
        assert body["correlationId"] == "c-1"

    def test_not_found_detail_names_resource(self):
        item_id = uuid.uuid4()
        body = render(NotFoundError("Widget", item_id), trace_id="t").to_dict()

        assert body["status"] == 404
        assert body["title"] == "The specified resource was not found."
        assert "Widget" in body["detail"]
        assert str(item_id) in body["detail"]
        assert "errors" not in body
        assert "correlationId" not in body

    def test_unclassified_hides_message_outside_development(self):
        body = render(RuntimeError("secret sql"), trace_id="t").to_dict()
        assert body["status"] == 500
        assert body["detail"] == GENERIC_ERROR_DETAIL

    def test_unclassified_shows_message_in_development(self):
        body = render(
            RuntimeError("secret sql"), trace_id="t", development=True
        ).to_dict()
        assert body["detail"] == "secret sql"

    def test_member_set(self):
        body = render(
            NotFoundError("TodoItem", 1), trace_id="t", correlation_id="c"
        ).to_dict()
        assert set(body) == {"type", "title", "status", "detail", "traceId", "correlationId"}


class TestTransportFieldNames:
    @pytest.mark.parametrize(
        "loc, expected",
        [
            (("body", "dueDate"), "DueDate"),
            (("body", "title"), "Title"),
            (("path", "item_id"), "Id"),
            (("query", "status"), "Status"),
            (("body", 12), "Request"),
        ],
    )
    def test_wire_field_name(self, loc, expected):
        from smarttodo.main import _wire_field_name

        assert _wire_field_name(loc) == expected
