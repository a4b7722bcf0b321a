"""Aggregation exports."""

from .document_aggregation import AGGREGATED_SOURCE, AggregationOutcome, aggregate_documents
from .value_directives import (
    apply_value_filter,
    apply_value_filters,
    as_items,
    flatten_document_arrays,
)

__all__ = [
    "AGGREGATED_SOURCE",
    "AggregationOutcome",
    "aggregate_documents",
    "apply_value_filter",
    "apply_value_filters",
    "as_items",
    "flatten_document_arrays",
]
