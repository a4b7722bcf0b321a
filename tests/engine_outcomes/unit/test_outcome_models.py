"""Tagged outcome tests."""

from __future__ import annotations

import pytest
from frontmatter_renderer.engine_outcomes import EngineError, EngineErrorKind, Outcome


def test_success_outcome_carries_value_without_error() -> None:
    outcome = Outcome.success([1, 2])

    assert outcome.ok is True
    assert outcome.error is None
    assert outcome.unwrap() == [1, 2]


def test_success_outcome_may_carry_none() -> None:
    outcome = Outcome.success(None)

    assert outcome.ok is True
    assert outcome.unwrap() is None


def test_fail_builds_error_with_details() -> None:
    outcome = Outcome.fail(EngineErrorKind.TOO_DEEP, "too deep", current_depth=11, max_depth=10)

    assert outcome.ok is False
    assert outcome.error is not None
    assert outcome.error.kind == EngineErrorKind.TOO_DEEP
    assert outcome.error.details == {"current_depth": 11, "max_depth": 10}
    assert str(outcome.error) == "TooDeep: too deep"


def test_unwrap_on_failure_raises_value_error() -> None:
    outcome = Outcome.failure(EngineError(kind=EngineErrorKind.RENDER_FAILED, message="boom"))

    with pytest.raises(ValueError, match="RenderFailed: boom"):
        outcome.unwrap()
