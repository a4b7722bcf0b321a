"""Variable scope entities."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

ITEMS_MARKER = "@items"
ARRAY_MARKER_PREFIX = "@"


@dataclass(frozen=True)
class ArrayDataAvailable:
    """Array-expansion data is present."""

    items: tuple[Any, ...]


@dataclass(frozen=True)
class ArrayDataNotAvailable:
    """No array-expansion data was supplied."""


ArrayData = ArrayDataAvailable | ArrayDataNotAvailable


@dataclass(frozen=True)
class SingleScope:
    """Plain per-document data; no array expansion."""

    data: Mapping[str, Any]


@dataclass(frozen=True)
class ComposedScope:
    """Main data plus optional array data from multi-document aggregation."""

    data: Mapping[str, Any]
    array_data: ArrayData = field(default_factory=ArrayDataNotAvailable)


@dataclass(frozen=True)
class ArrayExpansionScope:
    """Per-item data used when rendering repeated template fragments."""

    items: tuple[Any, ...]


Scope = SingleScope | ComposedScope | ArrayExpansionScope
