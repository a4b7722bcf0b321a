"""Document ingestion entities."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any


@dataclass(frozen=True)
class Document:
    """Parsed frontmatter of one input file."""

    source: str
    data: Mapping[str, Any]


@dataclass(frozen=True)
class DocumentReadResult:
    """Result of reading a batch of input files."""

    documents: tuple[Document, ...]
    skipped_paths: tuple[Path, ...]
