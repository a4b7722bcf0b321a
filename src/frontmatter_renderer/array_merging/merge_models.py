"""Array merge entities."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class MergeStrategy(str, Enum):
    """How arrays collected from several documents are combined."""

    FLATTEN = "flatten"
    PRESERVE = "preserve"


@dataclass(frozen=True)
class MergeConfig:
    """Strategy plus two orthogonal flags; every combination is valid."""

    strategy: MergeStrategy
    preserve_order: bool = True
    filter_empty: bool = True

    @staticmethod
    def flattening(*, preserve_order: bool = True, filter_empty: bool = True) -> MergeConfig:
        return MergeConfig(
            strategy=MergeStrategy.FLATTEN,
            preserve_order=preserve_order,
            filter_empty=filter_empty,
        )

    @staticmethod
    def preserving(*, preserve_order: bool = True, filter_empty: bool = True) -> MergeConfig:
        return MergeConfig(
            strategy=MergeStrategy.PRESERVE,
            preserve_order=preserve_order,
            filter_empty=filter_empty,
        )

    def __str__(self) -> str:
        return (
            f"MergeConfig({self.strategy.value}, order={str(self.preserve_order).lower()}, "
            f"filter={str(self.filter_empty).lower()})"
        )


@dataclass(frozen=True)
class MergeResult:
    """Merged data with bookkeeping.

    `data` is a flat list for FLATTEN and a list of independent lists for
    PRESERVE. `source_count` counts sources kept after pre-filtering.
    """

    data: list[Any]
    source_count: int
    item_count: int
    strategy: MergeStrategy

    def __str__(self) -> str:
        return (
            f"MergeResult({self.item_count} items from {self.source_count} sources, "
            f"{self.strategy.value})"
        )
