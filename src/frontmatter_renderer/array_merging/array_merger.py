"""Array merge service for values collected across documents."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from frontmatter_renderer.document_ingestion.document_models import Document
from frontmatter_renderer.engine_outcomes import EngineErrorKind, Outcome
from frontmatter_renderer.path_evaluation import evaluate_path

from .merge_models import MergeConfig, MergeResult, MergeStrategy


def merge(sources: Sequence[Any], config: MergeConfig) -> MergeResult:
    """Combine source arrays according to `config`.

    Non-array sources are always dropped; empty arrays are dropped too when
    `filter_empty` is set. Sources keep their input order for both strategies.
    """
    surviving = [source for source in sources if _keep_source(source, config.filter_empty)]

    if config.strategy == MergeStrategy.FLATTEN:
        flattened = [item for source in surviving for item in source]
        return MergeResult(
            data=flattened,
            source_count=len(surviving),
            item_count=len(flattened),
            strategy=config.strategy,
        )

    preserved = [list(source) for source in surviving]
    return MergeResult(
        data=preserved,
        source_count=len(surviving),
        item_count=sum(len(source) for source in preserved),
        strategy=config.strategy,
    )


def merge_from_sources(
    documents: Sequence[Document | Mapping[str, Any]],
    property_path: str,
    config: MergeConfig,
) -> MergeResult:
    """Read `property_path` from every document and merge what was found.

    Documents without the property are skipped; a scalar found at the path is
    treated as a one-element array.
    """
    collected: list[Any] = []
    for document in documents:
        data = document.data if isinstance(document, Document) else document
        found = evaluate_path(data, property_path)
        if not found.ok:
            continue
        value = found.value
        if isinstance(value, Sequence) and not isinstance(value, str | bytes):
            collected.append(value)
        else:
            collected.append([value])
    return merge(collected, config)


def flatten_nested(values: Sequence[Any]) -> list[Any]:
    """Deep-flatten nested arrays, keeping element order."""
    flattened: list[Any] = []
    for value in values:
        if isinstance(value, list | tuple):
            flattened.extend(flatten_nested(value))
        else:
            flattened.append(value)
    return flattened


def merge_config_from_annotation(value: Any) -> Outcome[MergeConfig]:
    """Map an `x-merge-arrays` annotation value onto a MergeConfig."""
    if value is None or value is True:
        return Outcome.success(MergeConfig.flattening())
    if value is False:
        return Outcome.success(MergeConfig.preserving())
    if isinstance(value, str):
        normalized = value.strip().lower()
        if normalized == MergeStrategy.FLATTEN.value:
            return Outcome.success(MergeConfig.flattening())
        if normalized == MergeStrategy.PRESERVE.value:
            return Outcome.success(MergeConfig.preserving())
    return Outcome.fail(
        EngineErrorKind.INVALID_ANNOTATION,
        f"x-merge-arrays must be a boolean, 'flatten' or 'preserve', got {value!r}.",
        annotation="x-merge-arrays",
        value=value,
    )


def _keep_source(source: Any, filter_empty: bool) -> bool:
    if not isinstance(source, Sequence) or isinstance(source, str | bytes):
        return False
    if filter_empty and len(source) == 0:
        return False
    return True
