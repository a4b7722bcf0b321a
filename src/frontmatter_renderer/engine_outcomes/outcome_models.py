"""Tagged outcomes shared by the aggregation and templating engine."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Generic, TypeVar

T = TypeVar("T")


class EngineErrorKind(str, Enum):
    """Failure kinds returned by engine operations."""

    INVALID_EXPRESSION = "InvalidExpression"
    PATH_NOT_FOUND = "PathNotFound"
    EXPECTED_ARRAY = "ExpectedArray"
    CIRCULAR_REFERENCE = "CircularReference"
    TOO_DEEP = "TooDeep"
    REFERENCE_NOT_FOUND = "ReferenceNotFound"
    INVALID_ANNOTATION = "InvalidAnnotation"
    DATA_COMPOSITION_FAILED = "DataCompositionFailed"
    VARIABLE_RESOLUTION_FAILED = "VariableResolutionFailed"
    RENDER_FAILED = "RenderFailed"


@dataclass(frozen=True)
class EngineError:
    """Typed failure with diagnostic details."""

    kind: EngineErrorKind
    message: str
    details: Mapping[str, Any] = field(default_factory=dict)

    def __str__(self) -> str:
        return f"{self.kind.value}: {self.message}"


@dataclass(frozen=True)
class Outcome(Generic[T]):
    """Either a successful value or an EngineError, never both."""

    value: T | None = None
    error: EngineError | None = None

    @property
    def ok(self) -> bool:
        """Return True when the outcome carries a value."""
        return self.error is None

    @staticmethod
    def success(value: T) -> Outcome[T]:
        return Outcome(value=value, error=None)

    @staticmethod
    def failure(error: EngineError) -> Outcome[Any]:
        return Outcome(value=None, error=error)

    @staticmethod
    def fail(kind: EngineErrorKind, message: str, **details: Any) -> Outcome[Any]:
        return Outcome(value=None, error=EngineError(kind=kind, message=message, details=details))

    def unwrap(self) -> T:
        """Return the value; callers must check `ok` first."""
        if self.error is not None:
            raise ValueError(f"Cannot unwrap a failed outcome: {self.error}")
        return self.value  # type: ignore[return-value]
