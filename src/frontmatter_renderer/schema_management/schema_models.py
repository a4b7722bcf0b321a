"""Schema management entities."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from frontmatter_renderer.array_merging import MergeConfig
from frontmatter_renderer.path_evaluation import PathExpression


@dataclass(frozen=True)
class ResolvedSchema:
    """Schema tree after `$ref` expansion plus every ref met on the way."""

    content: Any
    resolved_refs: tuple[str, ...]


@dataclass(frozen=True)
class DerivationRule:
    """Field whose value is computed from all documents via a path expression."""

    target_path: str
    expression: PathExpression
    unique: bool = False


@dataclass(frozen=True)
class HierarchyRoot:
    """Schema location whose array supplies `@items` data."""

    expression: PathExpression
    merge_config: MergeConfig

    @property
    def path(self) -> str:
        return self.expression.text


@dataclass(frozen=True)
class ValueFilter:
    """JMESPath expression applied to the aggregated value at `target_path`."""

    target_path: str
    expression: str


@dataclass(frozen=True)
class TemplateBinding:
    """Template files declared by the schema itself."""

    template: str | None = None
    items_template: str | None = None
    format: str | None = None


@dataclass(frozen=True)
class SchemaAnnotations:
    """Aggregation and templating directives collected from a resolved schema."""

    derivation_rules: tuple[DerivationRule, ...] = ()
    hierarchy_root: HierarchyRoot | None = None
    template_binding: TemplateBinding = TemplateBinding()
    flatten_paths: tuple[str, ...] = ()
    value_filters: tuple[ValueFilter, ...] = ()

    @property
    def requires_aggregation(self) -> bool:
        return bool(self.derivation_rules) or self.hierarchy_root is not None
