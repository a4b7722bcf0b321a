"""Configuration domain exports."""

from .config_scaffold_builder import (
    DEFAULT_CONFIG_FILENAME,
    build_placeholder_configuration,
    write_placeholder_configuration,
)
from .loader import ConfigurationError, load_configuration, parse_template_format
from .runtime_settings import (
    DocumentSettings,
    OutputSettings,
    RenderConfiguration,
    SchemaSettings,
    TemplateSettings,
)

__all__ = [
    "DocumentSettings",
    "OutputSettings",
    "RenderConfiguration",
    "SchemaSettings",
    "TemplateSettings",
    "ConfigurationError",
    "load_configuration",
    "parse_template_format",
    "DEFAULT_CONFIG_FILENAME",
    "build_placeholder_configuration",
    "write_placeholder_configuration",
]
