"""Render a whole template into a RenderedOutput."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from frontmatter_renderer.engine_outcomes import Outcome
from frontmatter_renderer.variable_context import VariableContext

from .substitution_engine import collect_variables, substitute
from .substitution_models import RenderedOutput, TemplateFormat, Verbosity


def render_template(
    template: Any,
    context: VariableContext,
    verbosity: Verbosity = Verbosity.NORMAL,
    template_format: TemplateFormat = TemplateFormat.JSON,
) -> Outcome[RenderedOutput]:
    rendered = substitute(template, context, verbosity)
    if not rendered.ok:
        assert rendered.error is not None
        return Outcome.failure(rendered.error)
    return Outcome.success(
        RenderedOutput(
            content=rendered.value,
            format=template_format,
            rendered_at=datetime.now(UTC),
            variables=collect_variables(template),
        )
    )
