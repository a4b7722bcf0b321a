"""Array merging exports."""

from .array_merger import (
    flatten_nested,
    merge,
    merge_config_from_annotation,
    merge_from_sources,
)
from .merge_models import MergeConfig, MergeResult, MergeStrategy

__all__ = [
    "MergeConfig",
    "MergeResult",
    "MergeStrategy",
    "flatten_nested",
    "merge",
    "merge_config_from_annotation",
    "merge_from_sources",
]
