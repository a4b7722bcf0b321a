"""Schema file parsing and `$ref` target loaders."""

from __future__ import annotations

import json
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Protocol

import yaml

from frontmatter_renderer.engine_outcomes import EngineErrorKind, Outcome

from .schema_cache import SchemaCache


class SchemaError(Exception):
    """Raised when a schema file cannot be read or parsed."""


class SchemaLoader(Protocol):
    """Loads the body a `$ref` string points at."""

    def load(self, ref: str) -> Outcome[Any]: ...


def load_schema_document(path: Path | str) -> Any:
    """Parse a JSON or YAML schema file into a tree."""
    schema_path = Path(path)
    try:
        text = schema_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise SchemaError(f"Schema file cannot be read: {schema_path}: {exc}") from exc

    try:
        if schema_path.suffix.lower() == ".json":
            return json.loads(text)
        return yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise SchemaError(f"Invalid schema file {schema_path}: {exc}") from exc


def split_ref(ref: str) -> tuple[str, str]:
    """Split `file.json#/a/b` into its file part and pointer part."""
    if "#" not in ref:
        return ref, ""
    file_part, pointer = ref.split("#", 1)
    return file_part, pointer


def resolve_json_pointer(document: Any, pointer: str, *, ref: str) -> Outcome[Any]:
    """Follow an RFC 6901 pointer; '' addresses the whole document."""
    if pointer == "":
        return Outcome.success(document)
    if not pointer.startswith("/"):
        return _not_found(ref, f"unsupported pointer fragment '{pointer}'")

    current = document
    for raw_token in pointer[1:].split("/"):
        token = raw_token.replace("~1", "/").replace("~0", "~")
        if isinstance(current, Mapping):
            if token not in current:
                return _not_found(ref, f"key '{token}' does not exist")
            current = current[token]
        elif isinstance(current, list):
            if not token.isdigit() or int(token) >= len(current):
                return _not_found(ref, f"'{token}' is not a valid list index")
            current = current[int(token)]
        else:
            return _not_found(ref, f"cannot descend into a scalar at '{token}'")
    return Outcome.success(current)


class LocalDefinitionLoader:
    """Resolves `#/...` refs against the schema document they live in."""

    def __init__(self, root: Any) -> None:
        self._root = root

    def load(self, ref: str) -> Outcome[Any]:
        file_part, pointer = split_ref(ref)
        if file_part or not ref.startswith("#"):
            return _not_found(ref, "only document-local '#/...' refs are supported")
        return resolve_json_pointer(self._root, pointer, ref=ref)


class FileSchemaLoader:
    """Resolves `other.json#/pointer` refs relative to a base directory.

    Document-local `#/...` refs are answered from `root` when one is given.
    Parsed files are memoized in `cache`.
    """

    def __init__(
        self,
        base_dir: Path | str,
        cache: SchemaCache | None = None,
        root: Any | None = None,
    ) -> None:
        self._base_dir = Path(base_dir)
        self._cache = cache if cache is not None else SchemaCache()
        self._root = root

    def load(self, ref: str) -> Outcome[Any]:
        file_part, pointer = split_ref(ref)
        if not file_part:
            if self._root is None:
                return _not_found(ref, "no root document for a local ref")
            return resolve_json_pointer(self._root, pointer, ref=ref)
        if "://" in file_part:
            return _not_found(ref, "remote refs are not supported")

        candidate = Path(file_part)
        target = candidate if candidate.is_absolute() else self._base_dir / candidate
        if not target.is_file():
            return _not_found(ref, f"file {target} does not exist")
        try:
            document = self._cache.get_or_load(target, load_schema_document)
        except SchemaError as exc:
            return _not_found(ref, str(exc))
        return resolve_json_pointer(document, pointer, ref=ref)


def _not_found(ref: str, reason: str) -> Outcome[Any]:
    return Outcome.fail(
        EngineErrorKind.REFERENCE_NOT_FOUND,
        f"Cannot load $ref '{ref}': {reason}.",
        ref=ref,
    )
