"""`$ref` expansion with cycle detection and a depth bound."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from frontmatter_renderer.engine_outcomes import EngineErrorKind, Outcome

from .schema_loaders import SchemaLoader
from .schema_models import ResolvedSchema

REF_KEY = "$ref"
DEFAULT_MAX_DEPTH = 10


@dataclass(frozen=True)
class _Resolution:
    content: Any
    refs: tuple[str, ...]


def resolve(
    schema: Any,
    loader: SchemaLoader | None = None,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> Outcome[ResolvedSchema]:
    """Walk `schema` and expand every `$ref`.

    Without a loader each `$ref` stays in place as an opaque pointer and is
    only recorded. With a loader the target body replaces the node; sibling
    keys next to `$ref` are kept and win over the target's own keys.

    Depth counts followed references: the root schema sits at depth 0 and
    each loaded target one level below the node that referenced it. Nested
    mappings and array elements share the depth of their owner.
    """
    resolved = _resolve_node(schema, loader, max_depth, visited=(), depth=0)
    if not resolved.ok:
        assert resolved.error is not None
        return Outcome.failure(resolved.error)
    resolution = resolved.unwrap()
    return Outcome.success(
        ResolvedSchema(content=resolution.content, resolved_refs=_unique(resolution.refs))
    )


def _resolve_node(
    node: Any,
    loader: SchemaLoader | None,
    max_depth: int,
    *,
    visited: tuple[str, ...],
    depth: int,
) -> Outcome[_Resolution]:
    if isinstance(node, Mapping):
        return _resolve_mapping(node, loader, max_depth, visited=visited, depth=depth)
    if isinstance(node, list):
        items: list[Any] = []
        refs: tuple[str, ...] = ()
        for element in node:
            resolved = _resolve_node(element, loader, max_depth, visited=visited, depth=depth)
            if not resolved.ok:
                return resolved
            items.append(resolved.unwrap().content)
            refs += resolved.unwrap().refs
        return Outcome.success(_Resolution(content=items, refs=refs))
    return Outcome.success(_Resolution(content=node, refs=()))


def _resolve_mapping(
    node: Mapping[str, Any],
    loader: SchemaLoader | None,
    max_depth: int,
    *,
    visited: tuple[str, ...],
    depth: int,
) -> Outcome[_Resolution]:
    if depth > max_depth:
        return Outcome.fail(
            EngineErrorKind.TOO_DEEP,
            f"Schema nesting depth {depth} exceeds the maximum of {max_depth}.",
            current_depth=depth,
            max_depth=max_depth,
        )

    ref = node.get(REF_KEY)
    refs: tuple[str, ...] = ()
    if isinstance(ref, str):
        if ref in visited:
            chain = visited + (ref,)
            return Outcome.fail(
                EngineErrorKind.CIRCULAR_REFERENCE,
                f"Circular $ref detected: {' -> '.join(chain)}",
                chain=chain,
            )
        refs = (ref,)

    content: dict[str, Any] = {}
    for key, value in node.items():
        if key == REF_KEY:
            content[key] = value
            continue
        child = value
        if isinstance(ref, str) and loader is not None:
            # Siblings of a followed ref see the chain including that ref.
            child_visited = visited + (ref,)
        else:
            child_visited = visited
        resolved = _resolve_node(child, loader, max_depth, visited=child_visited, depth=depth)
        if not resolved.ok:
            return resolved
        content[key] = resolved.unwrap().content
        refs += resolved.unwrap().refs

    if not isinstance(ref, str) or loader is None:
        return Outcome.success(_Resolution(content=content, refs=refs))

    loaded = loader.load(ref)
    if not loaded.ok:
        assert loaded.error is not None
        return Outcome.failure(loaded.error)
    target = _resolve_node(
        loaded.unwrap(), loader, max_depth, visited=visited + (ref,), depth=depth + 1
    )
    if not target.ok:
        return target
    target_content = target.unwrap().content
    refs += target.unwrap().refs

    siblings = {key: value for key, value in content.items() if key != REF_KEY}
    if isinstance(target_content, dict):
        return Outcome.success(_Resolution(content={**target_content, **siblings}, refs=refs))
    return Outcome.success(_Resolution(content=target_content, refs=refs))


def _unique(refs: tuple[str, ...]) -> tuple[str, ...]:
    return tuple(dict.fromkeys(refs))
