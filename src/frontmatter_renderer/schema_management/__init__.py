"""Schema management exports."""

from .reference_resolver import DEFAULT_MAX_DEPTH, REF_KEY, resolve
from .schema_annotations import extract_annotations
from .schema_cache import SchemaCache
from .schema_loaders import (
    FileSchemaLoader,
    LocalDefinitionLoader,
    SchemaError,
    SchemaLoader,
    load_schema_document,
    resolve_json_pointer,
    split_ref,
)
from .schema_models import (
    DerivationRule,
    HierarchyRoot,
    ResolvedSchema,
    SchemaAnnotations,
    TemplateBinding,
    ValueFilter,
)

__all__ = [
    "DEFAULT_MAX_DEPTH",
    "REF_KEY",
    "DerivationRule",
    "FileSchemaLoader",
    "HierarchyRoot",
    "LocalDefinitionLoader",
    "ResolvedSchema",
    "SchemaAnnotations",
    "SchemaCache",
    "SchemaError",
    "SchemaLoader",
    "TemplateBinding",
    "ValueFilter",
    "extract_annotations",
    "load_schema_document",
    "resolve",
    "resolve_json_pointer",
    "split_ref",
]
