"""Run execution entities."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from frontmatter_renderer.configuration.runtime_settings import RenderConfiguration
from frontmatter_renderer.document_ingestion import DocumentReadResult
from frontmatter_renderer.schema_management import ResolvedSchema, SchemaAnnotations
from frontmatter_renderer.template_ingestion import TemplateSource
from frontmatter_renderer.template_substitution import RenderedOutput, Verbosity


@dataclass(frozen=True)
class RenderRequest:
    """Input contract for executing one render run."""

    config_path: str
    output_path: str | None = None
    verbosity: Verbosity | None = None
    dry_run: bool = False


@dataclass(frozen=True)
class RenderOutcome:
    """Output contract for one completed render run."""

    output_path: Path | None
    rendered: RenderedOutput
    document_count: int
    skipped_count: int
    aggregated: bool
    warnings: tuple[str, ...] = ()


@dataclass(frozen=True)
class RenderArtifacts:
    """Loaded inputs required during a render run."""

    configuration: RenderConfiguration
    schema: ResolvedSchema
    annotations: SchemaAnnotations
    documents: DocumentReadResult
    template: TemplateSource
    items_template: TemplateSource | None
