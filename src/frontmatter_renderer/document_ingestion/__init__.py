"""Document ingestion exports."""

from .document_models import Document, DocumentReadResult
from .document_reader import (
    DocumentReadError,
    discover_documents,
    parse_frontmatter,
    read_document,
    read_documents,
)

__all__ = [
    "Document",
    "DocumentReadError",
    "DocumentReadResult",
    "discover_documents",
    "parse_frontmatter",
    "read_document",
    "read_documents",
]
