"""Rendered output serializer and writer."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import yaml

from frontmatter_renderer.template_substitution import TemplateFormat, format_value


def serialize_output(content: Any, output_format: TemplateFormat) -> str:
    """Turn rendered content into file text for `output_format`."""
    if output_format == TemplateFormat.JSON:
        return json.dumps(content, indent=2, ensure_ascii=False, default=str) + "\n"
    if output_format == TemplateFormat.YAML:
        return yaml.safe_dump(content, sort_keys=False, allow_unicode=True)
    if isinstance(content, list | tuple):
        return "\n".join(format_value(part) for part in content)
    return format_value(content)


def write_rendered_output(
    content: Any, output_format: TemplateFormat, output_path: Path | str
) -> Path:
    """Write serialized content, creating parent directories.

    Returns:
      The resolved destination path.

    Raises:
      OSError: If the file cannot be written.
    """
    destination = Path(output_path)
    destination.parent.mkdir(parents=True, exist_ok=True)
    destination.write_text(serialize_output(content, output_format), encoding="utf-8")
    return destination.resolve()
