"""Template substitution exports."""

from .substitution_engine import (
    ITEMS_SENTINELS,
    PLACEHOLDER_PATTERN,
    collect_variables,
    format_value,
    render_items,
    substitute,
)
from .substitution_models import RenderedOutput, TemplateFormat, Verbosity
from .template_renderer import render_template

__all__ = [
    "ITEMS_SENTINELS",
    "PLACEHOLDER_PATTERN",
    "RenderedOutput",
    "TemplateFormat",
    "Verbosity",
    "collect_variables",
    "format_value",
    "render_items",
    "render_template",
    "substitute",
]
