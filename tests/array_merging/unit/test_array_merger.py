"""Array merge engine tests."""

from __future__ import annotations

import pytest
from frontmatter_renderer.array_merging import (
    MergeConfig,
    MergeStrategy,
    flatten_nested,
    merge,
    merge_config_from_annotation,
    merge_from_sources,
)
from frontmatter_renderer.document_ingestion import Document
from frontmatter_renderer.engine_outcomes import EngineErrorKind


def test_factories_default_to_preserve_order_and_filter_empty() -> None:
    for config in (MergeConfig.flattening(), MergeConfig.preserving()):
        assert config.preserve_order is True
        assert config.filter_empty is True


def test_flatten_concatenates_in_source_order() -> None:
    result = merge([[1, 2], [3], [4, 5]], MergeConfig.flattening())

    assert result.data == [1, 2, 3, 4, 5]
    assert result.item_count == 5
    assert result.source_count == 3
    assert result.strategy == MergeStrategy.FLATTEN


def test_flatten_item_count_matches_filtered_input_lengths() -> None:
    sources = [[1, 2], [], "scalar", None, [3], {"a": 1}]

    result = merge(sources, MergeConfig.flattening())

    assert result.item_count == 3
    assert result.data == [1, 2, 3]
    assert result.source_count == 2


def test_filter_empty_disabled_keeps_empty_arrays_but_drops_non_arrays() -> None:
    result = merge([[1], [], "x", None], MergeConfig.preserving(filter_empty=False))

    assert result.data == [[1], []]
    assert result.source_count == 2
    assert result.item_count == 1


def test_preserve_returns_one_sub_array_per_surviving_source() -> None:
    sources = [["a", "b"], [], ["c"]]

    result = merge(sources, MergeConfig.preserving())

    assert result.data == [["a", "b"], ["c"]]
    assert result.source_count == 2
    assert result.item_count == 3
    assert result.strategy == MergeStrategy.PRESERVE


def test_preserve_returns_independent_copies() -> None:
    first = ["a"]
    second = ["b", "c"]

    result = merge([first, second], MergeConfig.preserving())
    result.data[0].append("mutated")

    assert result.data[0] is not first
    assert result.data[1] is not second
    assert first == ["a"]


def test_preserve_order_false_has_no_distinguishable_effect() -> None:
    sources = [[3, 1], [2]]

    for strategy in (MergeConfig.flattening, MergeConfig.preserving):
        assert merge(sources, strategy(preserve_order=False)).data == merge(
            sources, strategy(preserve_order=True)
        ).data


def test_merge_of_no_sources_is_empty() -> None:
    result = merge([], MergeConfig.flattening())

    assert result.data == []
    assert result.source_count == 0
    assert result.item_count == 0


def test_merge_from_sources_wraps_scalars_and_skips_missing_properties() -> None:
    documents = [
        Document(source="a.md", data={"tags": ["x", "y"]}),
        Document(source="b.md", data={"title": "no tags"}),
        {"tags": "z"},
    ]

    result = merge_from_sources(documents, "tags", MergeConfig.flattening())

    assert result.data == ["x", "y", "z"]
    assert result.source_count == 2


def test_merge_from_sources_reads_nested_properties() -> None:
    documents = [{"meta": {"tags": ["a"]}}, {"meta": {"tags": ["b", "c"]}}]

    result = merge_from_sources(documents, "meta.tags", MergeConfig.preserving())

    assert result.data == [["a"], ["b", "c"]]


@pytest.mark.parametrize(
    ("value", "strategy"),
    [
        (None, MergeStrategy.FLATTEN),
        (True, MergeStrategy.FLATTEN),
        ("flatten", MergeStrategy.FLATTEN),
        (False, MergeStrategy.PRESERVE),
        ("Preserve", MergeStrategy.PRESERVE),
    ],
)
def test_merge_config_from_annotation_maps_supported_values(
    value: object, strategy: MergeStrategy
) -> None:
    assert merge_config_from_annotation(value).unwrap().strategy == strategy


@pytest.mark.parametrize("value", ["zip", 1, ["flatten"]])
def test_merge_config_from_annotation_rejects_other_values(value: object) -> None:
    outcome = merge_config_from_annotation(value)

    assert outcome.error is not None
    assert outcome.error.kind == EngineErrorKind.INVALID_ANNOTATION


def test_flatten_nested_flattens_every_level_in_order() -> None:
    assert flatten_nested([["a", ["b", ["c"]]], "d", [], ("e",)]) == ["a", "b", "c", "d", "e"]
    assert flatten_nested([{"k": ["v"]}]) == [{"k": ["v"]}]
