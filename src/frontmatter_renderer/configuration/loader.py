"""Configuration loader service."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

import yaml

from frontmatter_renderer.schema_management import DEFAULT_MAX_DEPTH
from frontmatter_renderer.template_substitution import TemplateFormat, Verbosity

from .runtime_settings import (
    DocumentSettings,
    OutputSettings,
    RenderConfiguration,
    SchemaSettings,
    TemplateSettings,
)

DEFAULT_PARALLELISM = 4


class ConfigurationError(Exception):
    """Raised when the configuration file is invalid."""


def load_configuration(config_path: Path | str) -> RenderConfiguration:
    """Load and validate the configuration file."""
    path = Path(config_path)
    if not path.exists():
        raise ConfigurationError(f"Configuration file not found: {path}")

    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigurationError(f"Configuration file cannot be read: {path}: {exc}") from exc

    try:
        parsed = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Failed to parse configuration file: {exc}") from exc

    if parsed is None:
        parsed = {}

    if not isinstance(parsed, Mapping):
        raise ConfigurationError("Configuration root must be a mapping.")

    base_path = path.resolve().parent
    return RenderConfiguration(
        path=path,
        schema=_parse_schema_section(parsed.get("schema"), base_path),
        template=_parse_template_section(parsed.get("template"), base_path),
        documents=_parse_documents_section(parsed.get("documents"), base_path),
        output=_parse_output_section(parsed.get("output"), base_path),
    )


def _parse_schema_section(value: Any, base_path: Path) -> SchemaSettings:
    section = _require_mapping(value, "schema")
    raw_path = _require_non_empty_string(section.get("path"), "schema.path")
    schema_path = _resolve_path(base_path, raw_path)
    if not schema_path.is_file():
        raise ConfigurationError(f"Schema file not found: {schema_path}")
    max_ref_depth = _require_positive_int(
        section.get("max_ref_depth", DEFAULT_MAX_DEPTH), "schema.max_ref_depth"
    )
    return SchemaSettings(path=schema_path, max_ref_depth=max_ref_depth)


def _parse_template_section(value: Any, base_path: Path) -> TemplateSettings:
    if value is None:
        return TemplateSettings(path=None, items_path=None, format=None)
    section = _require_mapping(value, "template")
    template_path = _optional_string(section.get("path"), "template.path")
    items_path = _optional_string(section.get("items_path"), "template.items_path")
    format_value = _optional_string(section.get("format"), "template.format")
    return TemplateSettings(
        path=_resolve_path(base_path, template_path) if template_path else None,
        items_path=_resolve_path(base_path, items_path) if items_path else None,
        format=parse_template_format(format_value, "template.format") if format_value else None,
    )


def _parse_documents_section(value: Any, base_path: Path) -> DocumentSettings:
    section = _require_mapping(value, "documents")
    base_dir_value = _optional_string(section.get("base_dir"), "documents.base_dir")
    base_dir = _resolve_path(base_path, base_dir_value) if base_dir_value else base_path
    include = _normalize_string_sequence(section.get("include"), "documents.include")
    if not include:
        raise ConfigurationError("documents.include must contain at least one pattern.")
    parallelism = _require_positive_int(
        section.get("parallelism", DEFAULT_PARALLELISM), "documents.parallelism"
    )
    return DocumentSettings(base_dir=base_dir, include=include, parallelism=parallelism)


def _parse_output_section(value: Any, base_path: Path) -> OutputSettings:
    section = _require_mapping(value, "output")
    output_path = _require_non_empty_string(section.get("path"), "output.path")
    verbosity_value = _require_non_empty_string(
        section.get("verbosity", Verbosity.NORMAL.value), "output.verbosity"
    ).lower()
    try:
        verbosity = Verbosity(verbosity_value)
    except ValueError as exc:
        allowed = ", ".join(item.value for item in Verbosity)
        raise ConfigurationError(f"output.verbosity must be one of: {allowed}.") from exc
    return OutputSettings(path=_resolve_path(base_path, output_path), verbosity=verbosity)


def parse_template_format(value: str, field_name: str) -> TemplateFormat:
    try:
        return TemplateFormat(value.strip().lower())
    except ValueError as exc:
        allowed = ", ".join(item.value for item in TemplateFormat)
        raise ConfigurationError(f"{field_name} must be one of: {allowed}.") from exc


def _normalize_string_sequence(value: Any, field_name: str) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        stripped = value.strip()
        return (stripped,) if stripped else ()
    if isinstance(value, Sequence):
        normalized = []
        for item in value:
            if not isinstance(item, str):
                raise ConfigurationError(f"{field_name} entries must be strings.")
            stripped = item.strip()
            if stripped:
                normalized.append(stripped)
        return tuple(normalized)
    raise ConfigurationError(f"{field_name} must be a string or list of strings.")


def _resolve_path(base_path: Path, raw_path: str) -> Path:
    candidate = Path(raw_path)
    if not candidate.is_absolute():
        return (base_path / candidate).resolve()
    return candidate


def _require_mapping(value: Any, section_name: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise ConfigurationError(f"Configuration section '{section_name}' is required.")
    return value


def _require_non_empty_string(value: Any, field_name: str) -> str:
    if not isinstance(value, str):
        raise ConfigurationError(f"{field_name} must be a string.")
    stripped = value.strip()
    if not stripped:
        raise ConfigurationError(f"{field_name} must not be empty.")
    return stripped


def _optional_string(value: Any, field_name: str) -> str | None:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ConfigurationError(f"{field_name} must be a string.")
    stripped = value.strip()
    return stripped or None


def _require_positive_int(value: Any, field_name: str) -> int:
    if isinstance(value, bool):
        raise ConfigurationError(f"{field_name} must be an integer.")
    if not isinstance(value, int):
        raise ConfigurationError(f"{field_name} must be an integer.")
    if value <= 0:
        raise ConfigurationError(f"{field_name} must be greater than zero.")
    return value
