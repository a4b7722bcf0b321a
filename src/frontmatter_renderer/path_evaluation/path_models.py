"""Path expression entities and total navigation over nested values."""

from __future__ import annotations

import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from frontmatter_renderer.engine_outcomes import EngineErrorKind, Outcome

ARRAY_MARKER = "[]"

_SEGMENT_PATTERN = re.compile(r"^[\w$@-]+$")
_MARKED_SEGMENT_PATTERN = re.compile(r"^([\w$@-]*)\[\]$")


@dataclass(frozen=True)
class PathSegment:
    """One identifier, or the array marker."""

    name: str
    is_array_marker: bool = False

    @staticmethod
    def array_marker() -> PathSegment:
        return PathSegment(name=ARRAY_MARKER, is_array_marker=True)

    def step(self, value: Any) -> Outcome[Any]:
        """Move one level into `value`; type mismatches become failures."""
        if self.is_array_marker:
            if _is_list(value):
                return Outcome.success(value)
            return Outcome.fail(
                EngineErrorKind.EXPECTED_ARRAY,
                f"Expected an array but found {_type_name(value)}.",
                actual_type=_type_name(value),
            )
        if isinstance(value, Mapping):
            if self.name in value:
                return Outcome.success(value[self.name])
            return Outcome.fail(
                EngineErrorKind.PATH_NOT_FOUND,
                f"Key '{self.name}' not found.",
                segment=self.name,
            )
        if _is_list(value) and self.name.isdigit():
            index = int(self.name)
            if index < len(value):
                return Outcome.success(value[index])
            return Outcome.fail(
                EngineErrorKind.PATH_NOT_FOUND,
                f"Index {index} is out of range for an array of length {len(value)}.",
                segment=self.name,
            )
        return Outcome.fail(
            EngineErrorKind.PATH_NOT_FOUND,
            f"Cannot read '{self.name}' from {_type_name(value)}.",
            segment=self.name,
        )

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class PathExpression:
    """Dotted path split around at most one array marker."""

    text: str
    base_path: tuple[PathSegment, ...]
    property_path: tuple[PathSegment, ...]
    has_array_marker: bool

    @property
    def segments(self) -> tuple[PathSegment, ...]:
        if not self.has_array_marker:
            return self.base_path
        return self.base_path + (PathSegment.array_marker(),) + self.property_path

    @property
    def base_text(self) -> str:
        return join_segments(self.base_path)

    @property
    def property_text(self) -> str:
        return join_segments(self.property_path)

    def __str__(self) -> str:
        return self.text


def parse_path_expression(text: str, *, require_array: bool = True) -> Outcome[PathExpression]:
    """Parse `base[].property` (or a plain dotted path when `require_array` is False)."""
    if not isinstance(text, str) or not text.strip():
        return _invalid(text, "Path expression must be a non-empty string.")
    stripped = text.strip()
    marker_count = stripped.count(ARRAY_MARKER)
    if marker_count > 1:
        return _invalid(
            stripped,
            "Path expression may contain at most one array marker; "
            "nested array flattening is not supported.",
        )
    if marker_count == 0 and require_array:
        return _invalid(stripped, "Path expression requires an array marker '[]'.")

    if marker_count == 0:
        segments = _parse_plain_segments(stripped)
        if segments is None:
            return _invalid(stripped, "Path expression has an empty or malformed segment.")
        return Outcome.success(
            PathExpression(
                text=stripped, base_path=segments, property_path=(), has_array_marker=False
            )
        )

    marker_index = stripped.index(ARRAY_MARKER)
    head = stripped[: marker_index + len(ARRAY_MARKER)]
    tail = stripped[marker_index + len(ARRAY_MARKER) :]
    if tail and not tail.startswith("."):
        return _invalid(stripped, "Array marker must be followed by '.' or end the expression.")

    head_parts = head.split(".")
    marked = _MARKED_SEGMENT_PATTERN.fullmatch(head_parts[-1])
    if marked is None:
        return _invalid(stripped, f"Invalid array notation '{head_parts[-1]}'.")
    base_parts = head_parts[:-1] + ([marked.group(1)] if marked.group(1) else [])
    if len(head_parts) > 1 and not marked.group(1):
        return _invalid(stripped, "Array marker must be attached to a segment name.")

    base_path = _parse_plain_segments(".".join(base_parts)) if base_parts else ()
    property_path = _parse_plain_segments(tail[1:]) if tail else ()
    if base_path is None or property_path is None:
        return _invalid(stripped, "Path expression has an empty or malformed segment.")
    return Outcome.success(
        PathExpression(
            text=stripped,
            base_path=base_path,
            property_path=property_path,
            has_array_marker=True,
        )
    )


def split_dotted_path(path: str) -> Outcome[tuple[PathSegment, ...]]:
    """Split a plain dotted path; the empty string yields no segments."""
    if path == "":
        return Outcome.success(())
    segments = _parse_plain_segments(path)
    if segments is None:
        return _invalid(path, "Path has an empty or malformed segment.")
    return Outcome.success(segments)


def navigate(value: Any, segments: Sequence[PathSegment]) -> Outcome[Any]:
    """Walk `segments` from `value`, stopping at the first failing segment."""
    current = value
    for position, segment in enumerate(segments):
        stepped = segment.step(current)
        if not stepped.ok:
            assert stepped.error is not None
            walked = join_segments(segments[: position + 1])
            return Outcome.fail(
                stepped.error.kind,
                f"{stepped.error.message} (at '{walked}')",
                path=join_segments(segments),
                failed_at=walked,
            )
        current = stepped.value
    return Outcome.success(current)


def join_segments(segments: Sequence[PathSegment]) -> str:
    return ".".join(segment.name for segment in segments)


def _parse_plain_segments(text: str) -> tuple[PathSegment, ...] | None:
    parts = text.split(".")
    if any(not _SEGMENT_PATTERN.fullmatch(part) for part in parts):
        return None
    return tuple(PathSegment(name=part) for part in parts)


def _invalid(text: object, reason: str) -> Outcome[Any]:
    return Outcome.fail(
        EngineErrorKind.INVALID_EXPRESSION,
        f"Invalid path expression {text!r}: {reason}",
        expression=text,
    )


def _is_list(value: object) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, str | bytes)


def _type_name(value: object) -> str:
    if value is None:
        return "null"
    if isinstance(value, Mapping):
        return "object"
    if _is_list(value):
        return "array"
    return type(value).__name__
