"""Template ingestion exports."""

from .template_models import TemplateSource
from .template_reader import TemplateReadError, detect_template_format, read_template

__all__ = [
    "TemplateReadError",
    "TemplateSource",
    "detect_template_format",
    "read_template",
]
