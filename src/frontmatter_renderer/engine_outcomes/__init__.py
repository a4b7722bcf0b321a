"""Engine outcome exports."""

from .outcome_models import EngineError, EngineErrorKind, Outcome

__all__ = [
    "EngineError",
    "EngineErrorKind",
    "Outcome",
]
