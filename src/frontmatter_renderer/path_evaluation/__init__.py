"""Path evaluation exports."""

from .path_evaluator import (
    EvaluationResult,
    assign_path,
    canonical_form,
    deduplicate,
    evaluate,
    evaluate_path,
    evaluate_unique,
)
from .path_models import (
    ARRAY_MARKER,
    PathExpression,
    PathSegment,
    navigate,
    parse_path_expression,
    split_dotted_path,
)

__all__ = [
    "ARRAY_MARKER",
    "EvaluationResult",
    "assign_path",
    "PathExpression",
    "PathSegment",
    "canonical_form",
    "deduplicate",
    "evaluate",
    "evaluate_path",
    "evaluate_unique",
    "navigate",
    "parse_path_expression",
    "split_dotted_path",
]
