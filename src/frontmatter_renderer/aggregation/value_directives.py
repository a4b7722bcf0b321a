"""Array flattening and JMESPath filtering of document and aggregated values."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

import jmespath
from jmespath.exceptions import JMESPathError

from frontmatter_renderer.array_merging import flatten_nested
from frontmatter_renderer.document_ingestion.document_models import Document
from frontmatter_renderer.engine_outcomes import EngineErrorKind, Outcome
from frontmatter_renderer.path_evaluation import assign_path, evaluate_path
from frontmatter_renderer.schema_management import ValueFilter


def flatten_document_arrays(document: Document, paths: Sequence[str]) -> Document:
    """Deep-flatten the arrays found at `paths`; other values stay as they are."""
    data: Mapping[str, Any] = document.data
    for path in paths:
        found = evaluate_path(data, path)
        if not found.ok or not isinstance(found.value, list):
            continue
        placed = assign_path(data, path, flatten_nested(found.value))
        if placed.ok:
            data = placed.unwrap()
    if data is document.data:
        return document
    return Document(source=document.source, data=data)


def apply_value_filter(value: Any, value_filter: ValueFilter) -> Outcome[Any]:
    try:
        return Outcome.success(jmespath.search(value_filter.expression, value))
    except JMESPathError as exc:
        return Outcome.fail(
            EngineErrorKind.DATA_COMPOSITION_FAILED,
            f"Filter '{value_filter.expression}' on '{value_filter.target_path}' failed: {exc}",
            path=value_filter.target_path,
            expression=value_filter.expression,
        )


def apply_value_filters(
    data: Mapping[str, Any], filters: Sequence[ValueFilter]
) -> Outcome[Mapping[str, Any]]:
    """Replace each filtered value in `data` by its filter result.

    Filters whose target path is absent from `data` are skipped.
    """
    for value_filter in filters:
        found = evaluate_path(data, value_filter.target_path)
        if not found.ok:
            continue
        filtered = apply_value_filter(found.value, value_filter)
        if not filtered.ok:
            return filtered
        placed = assign_path(data, value_filter.target_path, filtered.value)
        if not placed.ok:
            assert placed.error is not None
            return Outcome.fail(
                EngineErrorKind.DATA_COMPOSITION_FAILED,
                f"Cannot store filtered value at '{value_filter.target_path}': "
                f"{placed.error.message}",
                path=value_filter.target_path,
            )
        data = placed.unwrap()
    return Outcome.success(data)


def as_items(value: Any) -> list[Any]:
    """Coerce a filter result back into an item array."""
    if value is None:
        return []
    if isinstance(value, list):
        return value
    return [value]
