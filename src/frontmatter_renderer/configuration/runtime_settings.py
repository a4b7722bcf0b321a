"""Configuration domain entities."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from frontmatter_renderer.template_substitution import TemplateFormat, Verbosity


@dataclass(frozen=True)
class SchemaSettings:
    """Schema file location and `$ref` expansion bound."""

    path: Path
    max_ref_depth: int


@dataclass(frozen=True)
class TemplateSettings:
    """Template files; unset values fall back to the schema's x-template bindings."""

    path: Path | None
    items_path: Path | None
    format: TemplateFormat | None


@dataclass(frozen=True)
class DocumentSettings:
    """Where frontmatter documents are discovered."""

    base_dir: Path
    include: tuple[str, ...]
    parallelism: int


@dataclass(frozen=True)
class OutputSettings:
    """Destination file and missing-variable policy."""

    path: Path
    verbosity: Verbosity


@dataclass(frozen=True)
class RenderConfiguration:
    """Top-level configuration aggregate."""

    path: Path
    schema: SchemaSettings
    template: TemplateSettings
    documents: DocumentSettings
    output: OutputSettings
