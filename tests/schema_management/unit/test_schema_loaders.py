"""Schema file and `$ref` loader tests."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from frontmatter_renderer.engine_outcomes import EngineErrorKind
from frontmatter_renderer.schema_management import (
    FileSchemaLoader,
    LocalDefinitionLoader,
    SchemaCache,
    SchemaError,
    load_schema_document,
    resolve,
    resolve_json_pointer,
    split_ref,
)


def test_split_ref_separates_file_and_pointer() -> None:
    assert split_ref("defs.json#/definitions/Tag") == ("defs.json", "/definitions/Tag")
    assert split_ref("defs.json") == ("defs.json", "")
    assert split_ref("#/a") == ("", "/a")


def test_json_pointer_supports_escapes_and_list_indexes() -> None:
    document = {"a/b": {"m~n": [10, 20]}}

    assert resolve_json_pointer(document, "/a~1b/m~0n/1", ref="x").unwrap() == 20
    assert resolve_json_pointer(document, "", ref="x").unwrap() is document


def test_json_pointer_to_missing_key_is_reference_not_found() -> None:
    outcome = resolve_json_pointer({"a": {}}, "/a/b", ref="#/a/b")

    assert outcome.error is not None
    assert outcome.error.kind == EngineErrorKind.REFERENCE_NOT_FOUND
    assert outcome.error.details["ref"] == "#/a/b"


def test_local_definition_loader_reads_definitions() -> None:
    root = {"definitions": {"Tag": {"type": "string"}}}

    assert LocalDefinitionLoader(root).load("#/definitions/Tag").unwrap() == {"type": "string"}


def test_local_definition_loader_rejects_file_refs() -> None:
    outcome = LocalDefinitionLoader({}).load("other.json#/a")

    assert outcome.error is not None
    assert outcome.error.kind == EngineErrorKind.REFERENCE_NOT_FOUND


def test_load_schema_document_parses_json_and_yaml(tmp_path: Path) -> None:
    json_path = tmp_path / "schema.json"
    json_path.write_text(json.dumps({"type": "object"}), encoding="utf-8")
    yaml_path = tmp_path / "schema.yaml"
    yaml_path.write_text("type: object\nproperties:\n  a: {type: string}\n", encoding="utf-8")

    assert load_schema_document(json_path) == {"type": "object"}
    assert load_schema_document(yaml_path)["properties"] == {"a": {"type": "string"}}


def test_load_schema_document_rejects_invalid_json(tmp_path: Path) -> None:
    path = tmp_path / "broken.json"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(SchemaError, match="Invalid schema file"):
        load_schema_document(path)


def test_load_schema_document_reports_missing_file(tmp_path: Path) -> None:
    with pytest.raises(SchemaError, match="cannot be read"):
        load_schema_document(tmp_path / "missing.json")


def test_load_schema_document_reports_non_utf8_file(tmp_path: Path) -> None:
    path = tmp_path / "schema.json"
    path.write_bytes(b"\xff\xfe{}")

    with pytest.raises(SchemaError, match="cannot be read"):
        load_schema_document(path)


def test_file_loader_reads_relative_files_with_pointer(tmp_path: Path) -> None:
    (tmp_path / "defs.json").write_text(
        json.dumps({"definitions": {"Tag": {"type": "string", "x-merge-arrays": True}}}),
        encoding="utf-8",
    )
    cache = SchemaCache()
    loader = FileSchemaLoader(tmp_path, cache=cache)

    first = loader.load("defs.json#/definitions/Tag")
    second = loader.load("defs.json")

    assert first.unwrap() == {"type": "string", "x-merge-arrays": True}
    assert "definitions" in second.unwrap()
    assert len(cache) == 1
    assert (tmp_path / "defs.json") in cache


def test_file_loader_reads_yaml_targets(tmp_path: Path) -> None:
    (tmp_path / "parts.yaml").write_text("Item:\n  type: object\n", encoding="utf-8")

    outcome = FileSchemaLoader(tmp_path).load("parts.yaml#/Item")

    assert outcome.unwrap() == {"type": "object"}


def test_file_loader_answers_local_refs_from_root() -> None:
    root = {"definitions": {"A": {"type": "number"}}}

    outcome = FileSchemaLoader(Path("."), root=root).load("#/definitions/A")

    assert outcome.unwrap() == {"type": "number"}


def test_file_loader_reports_missing_and_remote_files(tmp_path: Path) -> None:
    loader = FileSchemaLoader(tmp_path)

    for ref in ("missing.json#/a", "https://example.com/schema.json", "#/no-root"):
        outcome = loader.load(ref)
        assert outcome.error is not None
        assert outcome.error.kind == EngineErrorKind.REFERENCE_NOT_FOUND


def test_file_loader_reports_unparsable_target(tmp_path: Path) -> None:
    (tmp_path / "broken.json").write_text("{", encoding="utf-8")

    outcome = FileSchemaLoader(tmp_path).load("broken.json")

    assert outcome.error is not None
    assert outcome.error.kind == EngineErrorKind.REFERENCE_NOT_FOUND


def test_resolver_follows_refs_across_files(tmp_path: Path) -> None:
    (tmp_path / "command.json").write_text(
        json.dumps({"type": "object", "properties": {"c1": {"type": "string"}}}),
        encoding="utf-8",
    )
    schema = {
        "properties": {
            "commands": {
                "type": "array",
                "x-frontmatter-part": True,
                "items": {"$ref": "command.json"},
            }
        }
    }

    resolved = resolve(schema, FileSchemaLoader(tmp_path, root=schema)).unwrap()

    assert resolved.content["properties"]["commands"]["items"]["properties"] == {
        "c1": {"type": "string"}
    }
    assert resolved.resolved_refs == ("command.json",)
