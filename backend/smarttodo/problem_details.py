"""
SmartTodo Backend - Problem Details Classification
===================================================

What:  Turns any exception into exactly one RFC 7807 Problem Details body.
How:   classify() maps an exception onto a closed set of problem variants;
       build_problem_details() looks the variant up in PROBLEM_TABLE and
       adds traceId / correlationId (and errors for validation).

Classification Table (wire contract, must not drift):
    ┌────────────────────┬────────┬───────────────────────────────┬──────────────────────────────────────────────────┐
    │ Variant            │ Status │ Type URI (rfc7231 section)    │ Title                                            │
    ├────────────────────┼────────┼───────────────────────────────┼──────────────────────────────────────────────────┤
    │ ValidationProblem  │ 400    │ #section-6.5.1                │ One or more validation errors occurred.          │
    │ NotFoundProblem    │ 404    │ #section-6.5.4                │ The specified resource was not found.            │
    │ UnclassifiedProblem│ 500    │ #section-6.6.1                │ An error occurred while processing your request. │
    └────────────────────┴────────┴───────────────────────────────┴──────────────────────────────────────────────────┘

Adding a kind means adding a variant class, a PROBLEM_TABLE row and a
classify() branch; the module refuses to import if the table and the
Problem union disagree.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional, Union, get_args

from smarttodo.exceptions import NotFoundError, ValidationError, ValidationErrorMap

PROBLEM_CONTENT_TYPE = "application/problem+json"

# Detail for 500 responses outside development
GENERIC_ERROR_DETAIL = "An unexpected error occurred. Please try again later."


# ══════════════════════════════════════════════════════════════════════════
# Problem Variants
# ══════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class ValidationProblem:
    errors: ValidationErrorMap


@dataclass(frozen=True)
class NotFoundProblem:
    detail: str


@dataclass(frozen=True)
class UnclassifiedProblem:
    message: str
    exception_type: str = "Exception"


Problem = Union[ValidationProblem, NotFoundProblem, UnclassifiedProblem]


@dataclass(frozen=True)
class ProblemKind:
    status: int
    type_uri: str
    title: str


PROBLEM_TABLE: Dict[type, ProblemKind] = {
    ValidationProblem: ProblemKind(
        status=400,
        type_uri="https://tools.ietf.org/html/rfc7231#section-6.5.1",
        title="One or more validation errors occurred.",
    ),
    NotFoundProblem: ProblemKind(
        status=404,
        type_uri="https://tools.ietf.org/html/rfc7231#section-6.5.4",
        title="The specified resource was not found.",
    ),
    UnclassifiedProblem: ProblemKind(
        status=500,
        type_uri="https://tools.ietf.org/html/rfc7231#section-6.6.1",
        title="An error occurred while processing your request.",
    ),
}

if set(PROBLEM_TABLE) != set(get_args(Problem)):
    raise RuntimeError("PROBLEM_TABLE must have exactly one row per Problem variant")


# ══════════════════════════════════════════════════════════════════════════
# Classification
# ══════════════════════════════════════════════════════════════════════════

def classify(exc: BaseException) -> Problem:
    """Map any exception onto exactly one problem variant."""
    if isinstance(exc, ValidationError):
        return ValidationProblem(errors=exc.errors)
    if isinstance(exc, NotFoundError):
        return NotFoundProblem(detail=exc.message)
    return UnclassifiedProblem(message=str(exc), exception_type=type(exc).__name__)


def is_expected(problem: Problem) -> bool:
    """Validation and NotFound are client-side outcomes, not server faults."""
    return not isinstance(problem, UnclassifiedProblem)


@dataclass(frozen=True)
class ProblemDetails:
    """
    RFC 7807 body.

    `extensions` always holds traceId, plus correlationId when known and
    errors for validation problems. They are written as top-level JSON
    members, the way RFC 7807 extension members are.
    """

    type: str
    title: str
    status: int
    detail: Optional[str]
    extensions: Dict[str, Any]

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {
            "type": self.type,
            "title": self.title,
            "status": self.status,
        }
        if self.detail is not None:
            body["detail"] = self.detail
        body.update(self.extensions)
        return body


def build_problem_details(
    problem: Problem,
    *,
    trace_id: str,
    correlation_id: Optional[str] = None,
    development: bool = False,
) -> ProblemDetails:
    """
    Render a classified problem as a ProblemDetails body.

    Args:
        problem:        Result of classify()
        trace_id:       Per-call internal trace identifier (always included)
        correlation_id: Resolved correlation id for this call, when known
        development:    Expose the raw exception message on 500 responses
    """
    kind = PROBLEM_TABLE[type(problem)]
    extensions: Dict[str, Any] = {"traceId": trace_id}
    if correlation_id:
        extensions["correlationId"] = correlation_id

    detail: Optional[str]
    if isinstance(problem, ValidationProblem):
        detail = None
        extensions["errors"] = {field: list(msgs) for field, msgs in problem.errors.items()}
    elif isinstance(problem, NotFoundProblem):
        detail = problem.detail
    else:
        detail = problem.message if development else GENERIC_ERROR_DETAIL

    return ProblemDetails(
        type=kind.type_uri,
        title=kind.title,
        status=kind.status,
        detail=detail,
        extensions=extensions,
    )
