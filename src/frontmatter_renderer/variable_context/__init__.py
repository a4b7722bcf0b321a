"""Variable context exports."""

from .context_models import (
    ITEMS_MARKER,
    ArrayData,
    ArrayDataAvailable,
    ArrayDataNotAvailable,
    ArrayExpansionScope,
    ComposedScope,
    Scope,
    SingleScope,
)
from .variable_context import (
    VariableContext,
    array_expansion_context,
    compose_context,
    single_context,
)

__all__ = [
    "ITEMS_MARKER",
    "ArrayData",
    "ArrayDataAvailable",
    "ArrayDataNotAvailable",
    "ArrayExpansionScope",
    "ComposedScope",
    "Scope",
    "SingleScope",
    "VariableContext",
    "array_expansion_context",
    "compose_context",
    "single_context",
]
