"""Path evaluation over collections of documents."""

from __future__ import annotations

import json
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from frontmatter_renderer.document_ingestion.document_models import Document
from frontmatter_renderer.engine_outcomes import EngineError, EngineErrorKind, Outcome

from .path_models import PathExpression, navigate, split_dotted_path

DocumentLike = Document | Mapping[str, Any]


@dataclass(frozen=True)
class EvaluationResult:
    """Values matched across all documents plus per-document failures."""

    values: tuple[Any, ...]
    errors: tuple[EngineError, ...]

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)


def evaluate(documents: Sequence[DocumentLike], expression: PathExpression) -> EvaluationResult:
    """Collect `base[].property` values in document order, then element order.

    A document whose base path does not resolve to an array contributes an
    EXPECTED_ARRAY error and evaluation continues with the next document.
    Elements missing the property are skipped silently.
    """
    values: list[Any] = []
    errors: list[EngineError] = []
    for index, document in enumerate(documents):
        source, data = _document_parts(document, index)
        resolved = navigate(data, expression.base_path)
        if not resolved.ok or not _is_list(resolved.value):
            errors.append(_expected_array_error(source, expression, resolved))
            continue
        for element in resolved.value:
            if not expression.property_path:
                values.append(element)
                continue
            extracted = navigate(element, expression.property_path)
            if extracted.ok:
                values.append(extracted.value)
    return EvaluationResult(values=tuple(values), errors=tuple(errors))


def evaluate_unique(
    documents: Sequence[DocumentLike], expression: PathExpression
) -> EvaluationResult:
    """Evaluate, then drop structural duplicates keeping first occurrences."""
    result = evaluate(documents, expression)
    return EvaluationResult(values=deduplicate(result.values), errors=result.errors)


def evaluate_path(value: Any, path: str) -> Outcome[Any]:
    """Plain dot-path lookup without array semantics; '' returns `value` itself."""
    segments = split_dotted_path(path)
    if not segments.ok:
        assert segments.error is not None
        return Outcome.failure(segments.error)
    return navigate(value, segments.unwrap())


def assign_path(data: Mapping[str, Any], path: str, value: Any) -> Outcome[dict[str, Any]]:
    """Return a copy of `data` with `value` stored at the dotted `path`.

    Missing intermediate objects are created; `data` itself is never mutated.
    """
    segments = split_dotted_path(path)
    if not segments.ok:
        assert segments.error is not None
        return Outcome.failure(segments.error)
    names = [segment.name for segment in segments.unwrap()]
    if not names:
        return Outcome.fail(
            EngineErrorKind.INVALID_EXPRESSION, "Cannot assign to an empty path.", path=path
        )
    return _assign(data, names, value, path)


def _assign(
    data: Mapping[str, Any], names: Sequence[str], value: Any, path: str
) -> Outcome[dict[str, Any]]:
    head, rest = names[0], names[1:]
    updated = dict(data)
    if not rest:
        updated[head] = value
        return Outcome.success(updated)
    current = updated.get(head, {})
    if not isinstance(current, Mapping):
        return Outcome.fail(
            EngineErrorKind.PATH_NOT_FOUND,
            f"Cannot create '{path}': '{head}' holds a non-object value.",
            path=path,
            failed_at=head,
        )
    nested = _assign(current, rest, value, path)
    if not nested.ok:
        return nested
    updated[head] = nested.unwrap()
    return Outcome.success(updated)


def deduplicate(values: Sequence[Any]) -> tuple[Any, ...]:
    seen: set[str] = set()
    unique: list[Any] = []
    for value in values:
        key = canonical_form(value)
        if key in seen:
            continue
        seen.add(key)
        unique.append(value)
    return tuple(unique)


def canonical_form(value: Any) -> str:
    """Serialized form used for structural equality.

    Mapping keys are encoded by their own JSON form, so keys of mixed types
    sort together and `1` stays distinct from `"1"`.
    """
    return json.dumps(_keyed_by_text(value), ensure_ascii=False, sort_keys=True, default=str)


def _keyed_by_text(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {
            json.dumps(key, ensure_ascii=False, default=str): _keyed_by_text(item)
            for key, item in value.items()
        }
    if isinstance(value, list | tuple):
        return [_keyed_by_text(item) for item in value]
    return value


def _document_parts(document: DocumentLike, index: int) -> tuple[str, Any]:
    if isinstance(document, Document):
        return document.source, document.data
    return f"document[{index}]", document


def _expected_array_error(
    source: str, expression: PathExpression, resolved: Outcome[Any]
) -> EngineError:
    base = expression.base_text or "<document root>"
    if resolved.ok:
        reason = "resolved to a non-array value"
    else:
        assert resolved.error is not None
        reason = resolved.error.message
    return EngineError(
        kind=EngineErrorKind.EXPECTED_ARRAY,
        message=f"{source}: base path '{base}' of '{expression}' is not an array ({reason}).",
        details={"source": source, "expression": expression.text, "base_path": base},
    )


def _is_list(value: object) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, str | bytes)
