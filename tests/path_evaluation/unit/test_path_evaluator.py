"""Path evaluator tests."""

from __future__ import annotations

from frontmatter_renderer.document_ingestion import Document
from frontmatter_renderer.engine_outcomes import EngineErrorKind
from frontmatter_renderer.path_evaluation import (
    assign_path,
    deduplicate,
    evaluate,
    evaluate_path,
    evaluate_unique,
    parse_path_expression,
)


def _commands_documents() -> list[dict]:
    return [
        {"commands": [{"c1": "git"}, {"c1": "build"}]},
        {"commands": [{"c1": "git"}]},
    ]


def test_evaluate_collects_values_in_document_then_element_order() -> None:
    expression = parse_path_expression("commands[].c1").unwrap()

    result = evaluate(_commands_documents(), expression)

    assert list(result.values) == ["git", "build", "git"]
    assert result.has_errors is False


def test_evaluate_unique_drops_duplicates_keeping_first_occurrence() -> None:
    expression = parse_path_expression("commands[].c1").unwrap()

    result = evaluate_unique(_commands_documents(), expression)

    assert list(result.values) == ["git", "build"]


def test_evaluate_unique_equals_deduplicated_evaluate() -> None:
    documents = [
        {"rows": [{"v": {"a": 1, "b": 2}}, {"v": [1, 2]}, {"v": "x"}]},
        {"rows": [{"v": {"b": 2, "a": 1}}, {"v": "x"}, {"v": [2, 1]}]},
    ]
    expression = parse_path_expression("rows[].v").unwrap()

    assert evaluate_unique(documents, expression).values == deduplicate(
        evaluate(documents, expression).values
    )
    assert list(evaluate_unique(documents, expression).values) == [
        {"a": 1, "b": 2},
        [1, 2],
        "x",
        [2, 1],
    ]


def test_structural_equality_keeps_numbers_and_booleans_distinct() -> None:
    assert deduplicate([1, 1.0, True, "1", 1]) == (1, 1.0, True, "1")


def test_evaluate_unique_handles_mixed_key_types() -> None:
    documents = [{"items": [{1: "x", "b": "y"}, {"b": "y", 1: "x"}, {"1": "x", "b": "y"}]}]
    expression = parse_path_expression("items[]").unwrap()

    result = evaluate_unique(documents, expression)

    assert result.errors == ()
    assert result.values == ({1: "x", "b": "y"}, {"1": "x", "b": "y"})


def test_missing_property_is_skipped_silently() -> None:
    documents = [{"commands": [{"c1": "git"}, {"c2": "other"}, {"c1": "lint"}]}]
    expression = parse_path_expression("commands[].c1").unwrap()

    result = evaluate(documents, expression)

    assert list(result.values) == ["git", "lint"]
    assert result.errors == ()


def test_non_array_base_records_error_and_continues_with_next_document() -> None:
    documents = [
        Document(source="docs/a.md", data={"commands": "not-a-list"}),
        Document(source="docs/b.md", data={"commands": [{"c1": "build"}]}),
        Document(source="docs/c.md", data={"title": "no commands"}),
    ]
    expression = parse_path_expression("commands[].c1").unwrap()

    result = evaluate(documents, expression)

    assert list(result.values) == ["build"]
    assert [error.kind for error in result.errors] == [
        EngineErrorKind.EXPECTED_ARRAY,
        EngineErrorKind.EXPECTED_ARRAY,
    ]
    assert [error.details["source"] for error in result.errors] == ["docs/a.md", "docs/c.md"]
    assert result.errors[0].details["base_path"] == "commands"


def test_marker_without_property_yields_elements_themselves() -> None:
    documents = [{"tags": ["a", "b"]}, {"tags": [{"k": 1}]}]
    expression = parse_path_expression("tags[]").unwrap()

    assert list(evaluate(documents, expression).values) == ["a", "b", {"k": 1}]


def test_nested_base_and_property_paths() -> None:
    documents = [{"tool": {"commands": [{"opt": {"name": "x"}}, {"opt": {}}]}}]
    expression = parse_path_expression("tool.commands[].opt.name").unwrap()

    assert list(evaluate(documents, expression).values) == ["x"]


def test_empty_document_collection_yields_nothing() -> None:
    expression = parse_path_expression("commands[].c1").unwrap()

    result = evaluate([], expression)

    assert result.values == ()
    assert result.errors == ()


def test_evaluate_path_with_empty_path_returns_input() -> None:
    value = {"a": 1}

    assert evaluate_path(value, "").unwrap() is value


def test_evaluate_path_navigates_mappings_and_list_indexes() -> None:
    value = {"id": {"full": "X1"}, "tags": ["a", "b"]}

    assert evaluate_path(value, "id.full").unwrap() == "X1"
    assert evaluate_path(value, "tags.1").unwrap() == "b"


def test_evaluate_path_reports_first_failing_segment() -> None:
    outcome = evaluate_path({"id": {"short": "X"}}, "id.full.value")

    assert outcome.ok is False
    assert outcome.error is not None
    assert outcome.error.kind == EngineErrorKind.PATH_NOT_FOUND
    assert outcome.error.details["failed_at"] == "id.full"


def test_evaluate_path_through_scalar_is_path_not_found() -> None:
    outcome = evaluate_path({"id": "X1"}, "id.full")

    assert outcome.error is not None
    assert outcome.error.kind == EngineErrorKind.PATH_NOT_FOUND


def test_assign_path_creates_nested_objects_without_mutating_input() -> None:
    original = {"meta": {"title": "T"}}

    updated = assign_path(original, "meta.stats.count", 3).unwrap()

    assert updated == {"meta": {"title": "T", "stats": {"count": 3}}}
    assert original == {"meta": {"title": "T"}}


def test_assign_path_through_scalar_fails() -> None:
    outcome = assign_path({"meta": "flat"}, "meta.count", 1)

    assert outcome.error is not None
    assert outcome.error.kind == EngineErrorKind.PATH_NOT_FOUND
