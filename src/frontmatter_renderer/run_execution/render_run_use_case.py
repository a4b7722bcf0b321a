"""Render run use-case service."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from frontmatter_renderer.aggregation import (
    aggregate_documents,
    apply_value_filters,
    flatten_document_arrays,
)
from frontmatter_renderer.configuration import (
    ConfigurationError,
    RenderConfiguration,
    load_configuration,
    parse_template_format,
)
from frontmatter_renderer.document_ingestion import (
    DocumentReadError,
    discover_documents,
    read_documents,
)
from frontmatter_renderer.engine_outcomes import Outcome
from frontmatter_renderer.path_evaluation import assign_path
from frontmatter_renderer.results_writing import write_rendered_output
from frontmatter_renderer.schema_management import (
    FileSchemaLoader,
    SchemaAnnotations,
    SchemaCache,
    SchemaError,
    extract_annotations,
    load_schema_document,
    resolve,
)
from frontmatter_renderer.template_ingestion import (
    TemplateReadError,
    TemplateSource,
    read_template,
)
from frontmatter_renderer.template_substitution import (
    RenderedOutput,
    TemplateFormat,
    Verbosity,
    render_items,
    render_template,
)
from frontmatter_renderer.variable_context import compose_context, single_context

from .render_contracts import RenderArtifacts, RenderOutcome, RenderRequest

logger = logging.getLogger(__name__)


class RenderRunError(Exception):
    """Raised when a render run cannot be completed."""


def execute_render_run(request: RenderRequest) -> RenderOutcome:
    """Execute one full render run and return its outcome."""
    artifacts = _load_render_artifacts(request.config_path)
    verbosity = request.verbosity or artifacts.configuration.output.verbosity
    warnings: list[str] = []

    if artifacts.annotations.requires_aggregation:
        rendered = _render_aggregated(artifacts, verbosity, warnings)
    else:
        rendered = _render_per_document(artifacts, verbosity, warnings)

    for warning in warnings:
        logger.warning(warning)

    output_path: Path | None = None
    if not request.dry_run:
        destination = Path(request.output_path or artifacts.configuration.output.path)
        try:
            output_path = write_rendered_output(rendered.content, rendered.format, destination)
        except OSError as exc:
            raise RenderRunError(f"Failed to write output {destination}: {exc}") from exc
        logger.info("Wrote %s output to %s", rendered.format.value, output_path)

    return RenderOutcome(
        output_path=output_path,
        rendered=rendered,
        document_count=len(artifacts.documents.documents),
        skipped_count=len(artifacts.documents.skipped_paths),
        aggregated=artifacts.annotations.requires_aggregation,
        warnings=tuple(warnings),
    )


def _render_aggregated(
    artifacts: RenderArtifacts, verbosity: Verbosity, warnings: list[str]
) -> RenderedOutput:
    annotations = artifacts.annotations
    aggregation = _unwrap(aggregate_documents(artifacts.documents.documents, annotations))
    warnings.extend(str(error) for error in aggregation.errors)
    logger.info(
        "Aggregated %d documents with %d derivation rules",
        len(artifacts.documents.documents),
        len(annotations.derivation_rules),
    )

    data: dict[str, Any] = aggregation.data
    items = aggregation.items
    root = annotations.hierarchy_root
    if artifacts.items_template is not None:
        if root is None or items is None:
            warnings.append("Item template ignored: the schema declares no x-frontmatter-part.")
        else:
            items = _render_item_template(artifacts.items_template.content, items, verbosity)
            data = _unwrap(assign_path(data, root.path, items))

    context = _unwrap(
        compose_context(
            data,
            items,
            hierarchy_root=root.expression if root is not None else None,
        )
    )
    return _unwrap(
        render_template(artifacts.template.content, context, verbosity, artifacts.template.format)
    )


def _render_per_document(
    artifacts: RenderArtifacts, verbosity: Verbosity, warnings: list[str]
) -> RenderedOutput:
    documents = artifacts.documents.documents
    if not documents:
        raise RenderRunError("No documents with frontmatter matched documents.include.")
    if artifacts.items_template is not None:
        warnings.append("Item template ignored: the schema declares no aggregation.")

    annotations = artifacts.annotations
    outputs = []
    for document in documents:
        prepared = flatten_document_arrays(document, annotations.flatten_paths)
        data = _unwrap(
            apply_value_filters(prepared.data, annotations.value_filters), source=document.source
        )
        context = _unwrap(single_context(data), source=document.source)
        outputs.append(
            _unwrap(
                render_template(
                    artifacts.template.content, context, verbosity, artifacts.template.format
                ),
                source=document.source,
            )
        )
    if len(outputs) == 1:
        return outputs[0]
    return RenderedOutput(
        content=[output.content for output in outputs],
        format=artifacts.template.format,
        rendered_at=outputs[-1].rendered_at,
        variables=outputs[0].variables,
    )


def _render_item_template(
    item_template: Any, items: list[Any], verbosity: Verbosity
) -> list[Any]:
    """Render every item; preserved per-document groups are rendered group by group."""
    if not any(isinstance(item, list) for item in items):
        return _unwrap(render_items(item_template, items, verbosity))
    rendered: list[Any] = []
    for position, group in enumerate(items):
        members = group if isinstance(group, list) else [group]
        result = _unwrap(
            render_items(item_template, members, verbosity), source=f"item group {position}"
        )
        rendered.append(result if isinstance(group, list) else result[0])
    return rendered


def _load_render_artifacts(config_path: str) -> RenderArtifacts:
    try:
        configuration = load_configuration(config_path)
        cache = SchemaCache()
        schema_path = configuration.schema.path
        schema_document = cache.get_or_load(schema_path, load_schema_document)
        loader = FileSchemaLoader(schema_path.parent, cache=cache, root=schema_document)
        schema = _unwrap(resolve(schema_document, loader, configuration.schema.max_ref_depth))
        logger.info("Resolved schema %s (%d refs)", schema_path, len(schema.resolved_refs))
        annotations = _unwrap(extract_annotations(schema.content))
        template, items_template = _load_templates(configuration, annotations)
        paths = discover_documents(
            configuration.documents.base_dir, configuration.documents.include
        )
        documents = read_documents(paths, parallelism=configuration.documents.parallelism)
        logger.info(
            "Read %d documents (%d without frontmatter)",
            len(documents.documents),
            len(documents.skipped_paths),
        )
    except (
        ConfigurationError,
        SchemaError,
        TemplateReadError,
        DocumentReadError,
        OSError,
    ) as exc:
        raise RenderRunError(str(exc)) from exc
    return RenderArtifacts(
        configuration=configuration,
        schema=schema,
        annotations=annotations,
        documents=documents,
        template=template,
        items_template=items_template,
    )


def _load_templates(
    configuration: RenderConfiguration, annotations: SchemaAnnotations
) -> tuple[TemplateSource, TemplateSource | None]:
    settings = configuration.template
    binding = annotations.template_binding
    schema_dir = configuration.schema.path.parent

    declared_format: TemplateFormat | None = settings.format
    if declared_format is None and binding.format:
        declared_format = parse_template_format(binding.format, "x-template-format")

    template_path = settings.path or (schema_dir / binding.template if binding.template else None)
    if template_path is None:
        raise RenderRunError("No template configured and the schema declares no x-template.")
    items_path = settings.items_path or (
        schema_dir / binding.items_template if binding.items_template else None
    )

    template = read_template(template_path, declared_format)
    items_template = read_template(items_path, declared_format) if items_path else None
    return template, items_template


def _unwrap(outcome: Outcome[Any], *, source: str | None = None) -> Any:
    if outcome.ok:
        return outcome.value
    assert outcome.error is not None
    prefix = f"{source}: " if source else ""
    raise RenderRunError(f"{prefix}{outcome.error}")
