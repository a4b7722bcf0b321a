"""Variable resolution within a data scope."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from frontmatter_renderer.engine_outcomes import EngineErrorKind, Outcome
from frontmatter_renderer.path_evaluation import (
    PathExpression,
    assign_path,
    evaluate_path,
    navigate,
)

from .context_models import (
    ARRAY_MARKER_PREFIX,
    ITEMS_MARKER,
    ArrayDataAvailable,
    ArrayExpansionScope,
    ComposedScope,
    Scope,
    SingleScope,
)


@dataclass(frozen=True)
class VariableContext:
    """Immutable view answering variable lookups for one scope.

    When `hierarchy_root` is set, `@items` of a Single or Composed scope is read
    from the base data at that path and nowhere else. An ArrayExpansion scope
    always answers with its own items.
    """

    scope: Scope
    hierarchy_root: PathExpression | None = None

    @property
    def base_data(self) -> Mapping[str, Any]:
        match self.scope:
            case SingleScope(data=data):
                return data
            case ComposedScope(data=data):
                return data
            case ArrayExpansionScope():
                return {}

    def get_value(self, path: str) -> Outcome[Any]:
        """Resolve a dotted path or the `@items` marker."""
        if path.startswith(ARRAY_MARKER_PREFIX):
            if path != ITEMS_MARKER:
                return Outcome.fail(
                    EngineErrorKind.VARIABLE_RESOLUTION_FAILED,
                    f"Unknown array-expansion marker '{path}'; only {ITEMS_MARKER} is reserved.",
                    variable=path,
                )
            return self.array_items()
        return evaluate_path(self.base_data, path)

    def array_items(self) -> Outcome[list[Any]]:
        """Return the live array-expansion items for this scope."""
        if isinstance(self.scope, ArrayExpansionScope):
            return Outcome.success(list(self.scope.items))
        if self.hierarchy_root is not None:
            return self._items_from_hierarchy_root(self.hierarchy_root)
        match self.scope:
            case ComposedScope(array_data=array_data):
                if isinstance(array_data, ArrayDataAvailable):
                    return Outcome.success(list(array_data.items))
                return _no_items("composed scope carries no array data")
            case SingleScope():
                return _no_items("single-document scope has no array data")

    @property
    def has_array_data(self) -> bool:
        return self.array_items().ok

    def _items_from_hierarchy_root(self, root: PathExpression) -> Outcome[list[Any]]:
        found = navigate(self.base_data, root.segments)
        if not found.ok:
            return _no_items(f"hierarchy root '{root}' is not present in the data")
        if not isinstance(found.value, list):
            return _no_items(f"hierarchy root '{root}' does not hold an array")
        return Outcome.success(list(found.value))


def single_context(
    data: Any, hierarchy_root: PathExpression | None = None
) -> Outcome[VariableContext]:
    if not isinstance(data, Mapping):
        return _composition_failed("Document data must be an object.", data)
    return Outcome.success(VariableContext(SingleScope(data=data), hierarchy_root))


def compose_context(
    main_data: Any,
    array_data: Any = None,
    *,
    expansion_keys: Sequence[str] = (),
    hierarchy_root: PathExpression | None = None,
) -> Outcome[VariableContext]:
    """Build a Composed context from aggregated main data and array items.

    Each of `expansion_keys` receives a copy of the array items inside the
    main data, so templates may also reach them by name.
    """
    if not isinstance(main_data, Mapping):
        return _composition_failed("Main data must be an object.", main_data)
    if array_data is None:
        if expansion_keys:
            return _composition_failed("Expansion keys require array data.", array_data)
        return Outcome.success(
            VariableContext(ComposedScope(data=main_data), hierarchy_root)
        )
    if not isinstance(array_data, list | tuple):
        return _composition_failed("Array data must be an array.", array_data)

    composed: Mapping[str, Any] = main_data
    for key in expansion_keys:
        assigned = assign_path(composed, key, list(array_data))
        if not assigned.ok:
            assert assigned.error is not None
            return Outcome.fail(
                EngineErrorKind.DATA_COMPOSITION_FAILED,
                f"Cannot place array data under '{key}': {assigned.error.message}",
                key=key,
            )
        composed = assigned.unwrap()

    scope = ComposedScope(data=composed, array_data=ArrayDataAvailable(items=tuple(array_data)))
    return Outcome.success(VariableContext(scope, hierarchy_root))


def array_expansion_context(
    items: Any, hierarchy_root: PathExpression | None = None
) -> Outcome[VariableContext]:
    if not isinstance(items, list | tuple):
        return _composition_failed("Array expansion requires an array of items.", items)
    return Outcome.success(
        VariableContext(ArrayExpansionScope(items=tuple(items)), hierarchy_root)
    )


def _no_items(reason: str) -> Outcome[Any]:
    return Outcome.fail(
        EngineErrorKind.VARIABLE_RESOLUTION_FAILED,
        f"{ITEMS_MARKER} is not available: {reason}.",
        variable=ITEMS_MARKER,
    )


def _composition_failed(message: str, value: Any) -> Outcome[Any]:
    return Outcome.fail(
        EngineErrorKind.DATA_COMPOSITION_FAILED,
        message,
        actual_type=type(value).__name__,
    )
