"""Markdown frontmatter reader."""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping, Sequence
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

import yaml

from .document_models import Document, DocumentReadResult

logger = logging.getLogger(__name__)

_FRONTMATTER_PATTERN = re.compile(
    r"\A\ufeff?---[ \t]*\r?\n(?P<body>.*?)^---[ \t]*\r?$", re.DOTALL | re.MULTILINE
)


class DocumentReadError(Exception):
    """Raised when a document file cannot be read or its frontmatter is invalid."""


def discover_documents(base_dir: Path, include: Sequence[str]) -> list[Path]:
    """Return files matching any include glob, sorted and without duplicates."""
    matches: set[Path] = set()
    for pattern in include:
        matches.update(path.resolve() for path in base_dir.glob(pattern) if path.is_file())
    return sorted(matches)


def read_documents(paths: Sequence[Path], *, parallelism: int = 4) -> DocumentReadResult:
    """Read frontmatter from every path, in parallel, keeping input order.

    Files without a frontmatter block are skipped and reported.
    """
    with ThreadPoolExecutor(max_workers=max(1, parallelism)) as executor:
        parsed = list(executor.map(read_document, paths))

    documents: list[Document] = []
    skipped: list[Path] = []
    for path, document in zip(paths, parsed, strict=True):
        if document is None:
            logger.info("Skipping %s: no frontmatter block.", path)
            skipped.append(path)
        else:
            documents.append(document)
    return DocumentReadResult(documents=tuple(documents), skipped_paths=tuple(skipped))


def read_document(path: Path) -> Document | None:
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise DocumentReadError(f"Document cannot be read: {path}: {exc}") from exc
    data = parse_frontmatter(text, source=str(path))
    if data is None:
        return None
    return Document(source=str(path), data=data)


def parse_frontmatter(text: str, *, source: str = "<text>") -> Mapping[str, object] | None:
    """Parse the leading `---` delimited YAML block; None when there is none."""
    match = _FRONTMATTER_PATTERN.match(text)
    if match is None:
        return None
    try:
        parsed = yaml.safe_load(match.group("body"))
    except yaml.YAMLError as exc:
        raise DocumentReadError(f"Invalid frontmatter in {source}: {exc}") from exc
    if parsed is None:
        return {}
    if not isinstance(parsed, Mapping):
        raise DocumentReadError(f"Frontmatter in {source} must be a mapping.")
    return parsed
