"""Run execution domain exports."""

from .render_contracts import RenderArtifacts, RenderOutcome, RenderRequest
from .render_run_use_case import RenderRunError, execute_render_run

__all__ = [
    "RenderRequest",
    "RenderOutcome",
    "RenderArtifacts",
    "RenderRunError",
    "execute_render_run",
]
