"""Builds the aggregated value set from many documents."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from frontmatter_renderer.array_merging import MergeResult, merge
from frontmatter_renderer.document_ingestion.document_models import Document
from frontmatter_renderer.engine_outcomes import EngineError, EngineErrorKind, Outcome
from frontmatter_renderer.path_evaluation import (
    assign_path,
    evaluate,
    evaluate_unique,
    navigate,
)
from frontmatter_renderer.schema_management import (
    DerivationRule,
    HierarchyRoot,
    SchemaAnnotations,
)

from .value_directives import (
    apply_value_filter,
    apply_value_filters,
    as_items,
    flatten_document_arrays,
)

AGGREGATED_SOURCE = "<aggregated>"


@dataclass(frozen=True)
class AggregationOutcome:
    """Aggregated data plus the per-document errors met while deriving it.

    `items` holds the hierarchy items after any filter on the hierarchy root.
    """

    data: dict[str, Any]
    merge_result: MergeResult | None
    errors: tuple[EngineError, ...]
    items: list[Any] | None = None


def aggregate_documents(
    documents: Sequence[Document], annotations: SchemaAnnotations
) -> Outcome[AggregationOutcome]:
    """Merge hierarchy items and compute every derived field.

    Arrays named by `x-flatten-arrays` are flattened in every document first.
    Each document contributes the array found at the hierarchy root path, or
    itself as a single item when that path holds no array. Derivation rules
    whose base path is the hierarchy root read the merged items; the others
    read the documents directly. JMESPath filters run last on the value
    stored at their property, the hierarchy root's filters before derivation.
    """
    documents = [flatten_document_arrays(doc, annotations.flatten_paths) for doc in documents]
    data: dict[str, Any] = {}
    merge_result: MergeResult | None = None
    items: list[Any] | None = None
    root = annotations.hierarchy_root
    root_path = root.path if root is not None else None
    root_filters = [f for f in annotations.value_filters if f.target_path == root_path]
    other_filters = [f for f in annotations.value_filters if f.target_path != root_path]

    if root is not None:
        merge_result = merge([_hierarchy_items(doc, root) for doc in documents], root.merge_config)
        items = merge_result.data
        for value_filter in root_filters:
            filtered = apply_value_filter(items, value_filter)
            if not filtered.ok:
                return filtered
            items = as_items(filtered.value)
        placed = _place(data, root.path, items)
        if not placed.ok:
            return placed
        data = placed.unwrap()

    errors: list[EngineError] = []
    for rule in annotations.derivation_rules:
        sources = _derivation_sources(rule, root, documents, data)
        evaluated = (evaluate_unique if rule.unique else evaluate)(sources, rule.expression)
        errors.extend(evaluated.errors)
        placed = _place(data, rule.target_path, list(evaluated.values))
        if not placed.ok:
            return placed
        data = placed.unwrap()

    filtered_data = apply_value_filters(data, other_filters)
    if not filtered_data.ok:
        return filtered_data

    return Outcome.success(
        AggregationOutcome(
            data=dict(filtered_data.unwrap()),
            merge_result=merge_result,
            errors=tuple(errors),
            items=items,
        )
    )


def _hierarchy_items(document: Document, root: HierarchyRoot) -> list[Any]:
    found = navigate(document.data, root.expression.segments)
    if found.ok and isinstance(found.value, list):
        return found.value
    return [dict(document.data)]


def _derivation_sources(
    rule: DerivationRule,
    root: HierarchyRoot | None,
    documents: Sequence[Document],
    data: dict[str, Any],
) -> Sequence[Document]:
    if root is not None and rule.expression.base_text == root.path:
        return [Document(source=AGGREGATED_SOURCE, data=data)]
    return documents


def _place(data: dict[str, Any], path: str, value: Any) -> Outcome[Any]:
    placed = assign_path(data, path, value)
    if placed.ok:
        return placed
    assert placed.error is not None
    return Outcome.fail(
        EngineErrorKind.DATA_COMPOSITION_FAILED,
        f"Cannot store aggregated value at '{path}': {placed.error.message}",
        path=path,
    )
