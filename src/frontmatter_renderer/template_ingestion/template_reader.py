"""Template file reader."""

from __future__ import annotations

import json
from pathlib import Path

import yaml

from frontmatter_renderer.template_substitution import TemplateFormat

from .template_models import TemplateSource

_FORMAT_BY_SUFFIX = {
    ".json": TemplateFormat.JSON,
    ".yaml": TemplateFormat.YAML,
    ".yml": TemplateFormat.YAML,
    ".xml": TemplateFormat.XML,
    ".md": TemplateFormat.MARKDOWN,
    ".markdown": TemplateFormat.MARKDOWN,
}


class TemplateReadError(Exception):
    """Raised when a template file cannot be read or parsed."""


def detect_template_format(path: Path) -> TemplateFormat:
    try:
        return _FORMAT_BY_SUFFIX[path.suffix.lower()]
    except KeyError as exc:
        raise TemplateReadError(
            f"Cannot detect template format from extension '{path.suffix}': {path}"
        ) from exc


def read_template(
    template_path: Path | str, declared_format: TemplateFormat | None = None
) -> TemplateSource:
    """Read a template file; `declared_format` overrides extension detection."""
    path = Path(template_path)
    if not path.is_file():
        raise TemplateReadError(f"Template file not found: {path}")
    template_format = declared_format or detect_template_format(path)

    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise TemplateReadError(f"Template file cannot be read: {path}: {exc}") from exc

    try:
        if template_format == TemplateFormat.JSON:
            content = json.loads(text)
        elif template_format == TemplateFormat.YAML:
            content = yaml.safe_load(text)
        else:
            content = text
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise TemplateReadError(
            f"Invalid {template_format.value} template {path}: {exc}"
        ) from exc

    return TemplateSource(path=path, format=template_format, content=content)
