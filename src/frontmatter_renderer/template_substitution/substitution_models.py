"""Template substitution entities."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any


class Verbosity(str, Enum):
    """Policy for placeholders that cannot be resolved.

    VERBOSE keeps the original placeholder text; NORMAL substitutes nothing.
    """

    NORMAL = "normal"
    VERBOSE = "verbose"


class TemplateFormat(str, Enum):
    """Declared format of a template and of the rendered output."""

    JSON = "json"
    YAML = "yaml"
    XML = "xml"
    MARKDOWN = "markdown"

    @property
    def is_tree(self) -> bool:
        return self in (TemplateFormat.JSON, TemplateFormat.YAML)


@dataclass(frozen=True)
class RenderedOutput:
    """Final rendered content plus bookkeeping."""

    content: Any
    format: TemplateFormat
    rendered_at: datetime
    variables: tuple[str, ...]
