"""Placeholder substitution over strings, arrays and object trees."""

from __future__ import annotations

import json
import re
from collections.abc import Mapping, Sequence
from datetime import date, time
from typing import Any

from frontmatter_renderer.engine_outcomes import EngineError, EngineErrorKind, Outcome
from frontmatter_renderer.variable_context import (
    ITEMS_MARKER,
    VariableContext,
    single_context,
)

from .substitution_models import Verbosity

_IDENTIFIER = r"[A-Za-z0-9_.@-]+"
PLACEHOLDER_PATTERN = re.compile(rf"\{{\{{({_IDENTIFIER})\}}\}}|\{{({_IDENTIFIER})\}}")
ITEMS_SENTINELS = (f"{{{ITEMS_MARKER}}}", f"{{{{{ITEMS_MARKER}}}}}")


class _RenderFailure(Exception):
    def __init__(self, error: EngineError) -> None:
        super().__init__(str(error))
        self.error = error


def substitute(
    content: Any,
    context: VariableContext,
    verbosity: Verbosity = Verbosity.NORMAL,
) -> Outcome[Any]:
    """Replace `{name}` and `{{name}}` placeholders throughout `content`.

    Strings get the text form of each value. Inside objects, a value that is
    exactly one placeholder receives the typed value instead. An array element
    equal to the `{@items}` sentinel is replaced in place by the live items.
    Content without placeholders comes back equal to the input.
    """
    try:
        return Outcome.success(_substitute_node(content, context, verbosity))
    except _RenderFailure as failure:
        return Outcome.failure(failure.error)


def render_items(
    item_template: Any,
    items: Sequence[Any],
    verbosity: Verbosity = Verbosity.NORMAL,
) -> Outcome[list[Any]]:
    """Render `item_template` once per item, each in its own Single context."""
    rendered: list[Any] = []
    for index, item in enumerate(items):
        context = single_context(item)
        if not context.ok:
            return Outcome.fail(
                EngineErrorKind.RENDER_FAILED,
                f"Item {index} is a {type(item).__name__}; an item template renders objects only.",
                index=index,
                actual_type=type(item).__name__,
            )
        result = substitute(item_template, context.unwrap(), verbosity)
        if not result.ok:
            return result
        rendered.append(result.value)
    return Outcome.success(rendered)


def collect_variables(content: Any) -> tuple[str, ...]:
    """Placeholder names referenced anywhere in `content`, first-seen order."""
    names: dict[str, None] = {}
    _collect(content, names)
    return tuple(names)


def format_value(value: Any) -> str:
    """Text form of a resolved value."""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    if isinstance(value, int | float):
        return str(value)
    if isinstance(value, date | time):
        return value.isoformat()
    return json.dumps(value, ensure_ascii=False, separators=(",", ":"), default=str)


def _substitute_node(node: Any, context: VariableContext, verbosity: Verbosity) -> Any:
    if isinstance(node, str):
        return _substitute_text(node, context, verbosity)
    if node is None or isinstance(node, bool | int | float | date | time):
        return node
    if isinstance(node, list | tuple):
        expanded = _substitute_array(node, context, verbosity)
        return tuple(expanded) if isinstance(node, tuple) else expanded
    if isinstance(node, Mapping):
        return _substitute_object(node, context, verbosity)
    raise _RenderFailure(
        EngineError(
            kind=EngineErrorKind.RENDER_FAILED,
            message=f"Template content of type {type(node).__name__} cannot be rendered.",
            details={"actual_type": type(node).__name__},
        )
    )


def _substitute_text(text: str, context: VariableContext, verbosity: Verbosity) -> str:
    def replace(match: re.Match[str]) -> str:
        name = match.group(1) or match.group(2)
        resolved = context.get_value(name)
        if resolved.ok:
            return format_value(resolved.value)
        return match.group(0) if verbosity == Verbosity.VERBOSE else ""

    return PLACEHOLDER_PATTERN.sub(replace, text)


def _substitute_array(
    elements: Sequence[Any], context: VariableContext, verbosity: Verbosity
) -> list[Any]:
    result: list[Any] = []
    for element in elements:
        if isinstance(element, str) and element in ITEMS_SENTINELS:
            items = context.array_items()
            if items.ok:
                result.extend(items.unwrap())
            elif verbosity == Verbosity.VERBOSE:
                result.append(element)
            continue
        result.append(_substitute_node(element, context, verbosity))
    return result


def _substitute_object(
    node: Mapping[Any, Any], context: VariableContext, verbosity: Verbosity
) -> dict[str, Any]:
    result: dict[str, Any] = {}
    for key, value in node.items():
        if not isinstance(key, str):
            raise _RenderFailure(
                EngineError(
                    kind=EngineErrorKind.RENDER_FAILED,
                    message=f"Object keys must be strings, got {type(key).__name__}.",
                    details={"key": repr(key)},
                )
            )
        rendered_key = _substitute_text(key, context, verbosity)
        pure = PLACEHOLDER_PATTERN.fullmatch(value) if isinstance(value, str) else None
        if pure is None:
            result[rendered_key] = _substitute_node(value, context, verbosity)
            continue
        resolved = context.get_value(pure.group(1) or pure.group(2))
        if resolved.ok:
            result[rendered_key] = resolved.value
        else:
            result[rendered_key] = value if verbosity == Verbosity.VERBOSE else ""
    return result


def _collect(node: Any, names: dict[str, None]) -> None:
    if isinstance(node, str):
        for match in PLACEHOLDER_PATTERN.finditer(node):
            names.setdefault(match.group(1) or match.group(2))
    elif isinstance(node, Mapping):
        for key, value in node.items():
            _collect(key, names)
            _collect(value, names)
    elif isinstance(node, list | tuple):
        for element in node:
            _collect(element, names)
