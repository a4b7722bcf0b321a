"""Template ingestion entities."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

from frontmatter_renderer.template_substitution import TemplateFormat


@dataclass(frozen=True)
class TemplateSource:
    """Raw template content with its declared format.

    Tree formats (JSON, YAML) hold the parsed tree; XML and Markdown hold text.
    """

    path: Path
    format: TemplateFormat
    content: Any
