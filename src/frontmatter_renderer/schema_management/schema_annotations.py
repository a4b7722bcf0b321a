"""Extraction of `x-` aggregation and templating directives."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, NoReturn

import jmespath
from jmespath.exceptions import JMESPathError

from frontmatter_renderer.array_merging import merge_config_from_annotation
from frontmatter_renderer.engine_outcomes import EngineError, EngineErrorKind, Outcome
from frontmatter_renderer.path_evaluation import parse_path_expression

from .schema_models import (
    DerivationRule,
    HierarchyRoot,
    SchemaAnnotations,
    TemplateBinding,
    ValueFilter,
)

DERIVED_FROM = "x-derived-from"
DERIVED_UNIQUE = "x-derived-unique"
FRONTMATTER_PART = "x-frontmatter-part"
MERGE_ARRAYS = "x-merge-arrays"
FLATTEN_ARRAYS = "x-flatten-arrays"
JMESPATH_FILTER = "x-jmespath-filter"
TEMPLATE = "x-template"
TEMPLATE_ITEMS = "x-template-items"
TEMPLATE_FORMAT = "x-template-format"


class _AnnotationFailure(Exception):
    def __init__(self, error: EngineError) -> None:
        super().__init__(str(error))
        self.error = error


@dataclass
class _Directives:
    rules: list[DerivationRule] = field(default_factory=list)
    roots: list[HierarchyRoot] = field(default_factory=list)
    flatten_paths: list[str] = field(default_factory=list)
    filters: list[ValueFilter] = field(default_factory=list)


def extract_annotations(schema: Any) -> Outcome[SchemaAnnotations]:
    """Collect directives from the `properties` tree of a resolved schema."""
    if not isinstance(schema, Mapping):
        return _invalid("Schema root must be an object to carry annotations.")

    found = _Directives()
    try:
        _walk_properties(schema, prefix="", found=found)
        binding = _template_binding(schema)
    except _AnnotationFailure as failure:
        return Outcome.failure(failure.error)

    roots = found.roots
    if len(roots) > 1:
        paths = ", ".join(root.path for root in roots)
        return _invalid(
            f"Only one property may be marked {FRONTMATTER_PART}, found: {paths}.",
            paths=tuple(root.path for root in roots),
        )

    return Outcome.success(
        SchemaAnnotations(
            derivation_rules=tuple(found.rules),
            hierarchy_root=roots[0] if roots else None,
            template_binding=binding,
            flatten_paths=tuple(dict.fromkeys(found.flatten_paths)),
            value_filters=tuple(found.filters),
        )
    )


def _walk_properties(node: Mapping[str, Any], *, prefix: str, found: _Directives) -> None:
    properties = node.get("properties")
    if not isinstance(properties, Mapping):
        return
    for key, child in properties.items():
        if not isinstance(child, Mapping):
            continue
        child_path = key if not prefix else f"{prefix}.{key}"
        rule = _derivation_rule(child, child_path)
        if rule is not None:
            found.rules.append(rule)
        root = _hierarchy_root(child, child_path)
        if root is not None:
            found.roots.append(root)
        flatten_path = _flatten_path(child, child_path)
        if flatten_path is not None:
            found.flatten_paths.append(flatten_path)
        value_filter = _value_filter(child, child_path)
        if value_filter is not None:
            found.filters.append(value_filter)
        _walk_properties(child, prefix=child_path, found=found)


def _derivation_rule(node: Mapping[str, Any], path: str) -> DerivationRule | None:
    if DERIVED_FROM not in node:
        if DERIVED_UNIQUE in node:
            _raise_invalid(f"{path}: {DERIVED_UNIQUE} requires {DERIVED_FROM}.", path=path)
        return None
    source = node[DERIVED_FROM]
    if not isinstance(source, str):
        _raise_invalid(f"{path}: {DERIVED_FROM} must be a string.", path=path)
    parsed = parse_path_expression(source)
    if not parsed.ok:
        assert parsed.error is not None
        raise _AnnotationFailure(parsed.error)
    unique = node.get(DERIVED_UNIQUE, False)
    if not isinstance(unique, bool):
        _raise_invalid(f"{path}: {DERIVED_UNIQUE} must be a boolean.", path=path)
    return DerivationRule(target_path=path, expression=parsed.unwrap(), unique=unique)


def _hierarchy_root(node: Mapping[str, Any], path: str) -> HierarchyRoot | None:
    marker = node.get(FRONTMATTER_PART)
    if marker is None or marker is False:
        return None
    if marker is not True:
        _raise_invalid(f"{path}: {FRONTMATTER_PART} must be a boolean.", path=path)
    expression = parse_path_expression(path, require_array=False)
    if not expression.ok:
        assert expression.error is not None
        raise _AnnotationFailure(expression.error)
    merge_config = merge_config_from_annotation(node.get(MERGE_ARRAYS))
    if not merge_config.ok:
        assert merge_config.error is not None
        raise _AnnotationFailure(merge_config.error)
    return HierarchyRoot(expression=expression.unwrap(), merge_config=merge_config.unwrap())


def _flatten_path(node: Mapping[str, Any], path: str) -> str | None:
    target = node.get(FLATTEN_ARRAYS)
    if target is None:
        return None
    if not isinstance(target, str):
        _raise_invalid(f"{path}: {FLATTEN_ARRAYS} must be a dotted path string.", path=path)
    parsed = parse_path_expression(target, require_array=False)
    if not parsed.ok:
        assert parsed.error is not None
        _raise_invalid(
            f"{path}: {FLATTEN_ARRAYS} target '{target}' is not a dotted path: "
            f"{parsed.error.message}",
            path=path,
        )
    return target


def _value_filter(node: Mapping[str, Any], path: str) -> ValueFilter | None:
    expression = node.get(JMESPATH_FILTER)
    if expression is None:
        return None
    if not isinstance(expression, str) or not expression.strip():
        _raise_invalid(f"{path}: {JMESPATH_FILTER} must be a non-empty string.", path=path)
    try:
        jmespath.compile(expression)
    except JMESPathError as exc:
        raise _AnnotationFailure(
            EngineError(
                kind=EngineErrorKind.INVALID_ANNOTATION,
                message=f"{path}: invalid {JMESPATH_FILTER} expression '{expression}': {exc}",
                details={"path": path, "expression": expression},
            )
        ) from exc
    return ValueFilter(target_path=path, expression=expression)


def _template_binding(schema: Mapping[str, Any]) -> TemplateBinding:
    values: dict[str, str | None] = {}
    for key in (TEMPLATE, TEMPLATE_ITEMS, TEMPLATE_FORMAT):
        value = schema.get(key)
        if value is not None and (not isinstance(value, str) or not value.strip()):
            _raise_invalid(f"{key} must be a non-empty string.", annotation=key)
        values[key] = value.strip() if isinstance(value, str) else None
    return TemplateBinding(
        template=values[TEMPLATE],
        items_template=values[TEMPLATE_ITEMS],
        format=values[TEMPLATE_FORMAT],
    )


def _raise_invalid(message: str, **details: Any) -> NoReturn:
    raise _AnnotationFailure(
        EngineError(kind=EngineErrorKind.INVALID_ANNOTATION, message=message, details=details)
    )


def _invalid(message: str, **details: Any) -> Outcome[Any]:
    return Outcome.fail(EngineErrorKind.INVALID_ANNOTATION, message, **details)
