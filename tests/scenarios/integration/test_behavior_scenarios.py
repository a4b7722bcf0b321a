"""Scenario-style integration tests for core render behaviors."""

from __future__ import annotations

import os
import subprocess
import sys
from pathlib import Path

import yaml
from click.testing import CliRunner
from frontmatter_renderer.cli import cli
from frontmatter_renderer.document_ingestion import Document
from frontmatter_renderer.engine_outcomes import EngineErrorKind
from frontmatter_renderer.path_evaluation import evaluate, evaluate_unique, parse_path_expression
from frontmatter_renderer.schema_management import LocalDefinitionLoader, resolve
from frontmatter_renderer.template_substitution import Verbosity, substitute
from frontmatter_renderer.variable_context import single_context


def _command_documents() -> list[Document]:
    return [
        Document(source="a.md", data={"commands": [{"c1": "git"}, {"c1": "build"}]}),
        Document(source="b.md", data={"commands": [{"c1": "git"}]}),
    ]


def test_given_two_documents_when_evaluating_commands_then_values_keep_document_order() -> None:
    expression = parse_path_expression("commands[].c1").unwrap()

    assert evaluate(_command_documents(), expression).values == ("git", "build", "git")
    assert evaluate_unique(_command_documents(), expression).values == ("git", "build")


def test_given_pure_placeholder_when_substituting_then_verbosity_decides_missing_values() -> None:
    template = {"v": "{{id.full}}"}
    present = single_context({"id": {"full": "X1"}}).unwrap()
    missing = single_context({}).unwrap()

    assert substitute(template, present, Verbosity.NORMAL).unwrap() == {"v": "X1"}
    assert substitute(template, missing, Verbosity.NORMAL).unwrap() == {"v": ""}
    assert substitute(template, missing, Verbosity.VERBOSE).unwrap() == {"v": "{{id.full}}"}


def test_given_self_referencing_schema_when_resolving_then_cycle_is_reported() -> None:
    schema = {"definitions": {"a": {"$ref": "#/definitions/a"}}}

    outcome = resolve(schema, LocalDefinitionLoader(schema))

    assert outcome.error is not None
    assert outcome.error.kind == EngineErrorKind.CIRCULAR_REFERENCE
    assert outcome.error.details["chain"] == ("#/definitions/a", "#/definitions/a")


def test_given_registry_project_when_rendering_then_items_and_derived_fields_are_written(
    tmp_path: Path,
) -> None:
    (tmp_path / "registry.schema.yaml").write_text(
        """
type: object
x-template: registry.yaml
x-template-format: yaml
properties:
  commands:
    type: array
    x-frontmatter-part: true
    items:
      $ref: "#/definitions/command"
  configs:
    type: array
    x-derived-from: "commands[].c1"
    x-derived-unique: true
definitions:
  command:
    type: object
""",
        encoding="utf-8",
    )
    (tmp_path / "registry.yaml").write_text(
        'configs: "{configs}"\ncommands:\n  - "{@items}"\ntitle: "Registry of {configs}"\n',
        encoding="utf-8",
    )
    for name, body in {
        "a.md": "---\ncommands:\n  - c1: git\n  - c1: build\n---\n",
        "b.md": "---\ncommands:\n  - c1: git\n---\n",
    }.items():
        (tmp_path / name).write_text(body, encoding="utf-8")
    config_path = tmp_path / "frontmatter-renderer.yaml"
    config_path.write_text(
        "schema:\n  path: registry.schema.yaml\n"
        "documents:\n  include: '*.md'\n"
        "output:\n  path: registry.out.yaml\n",
        encoding="utf-8",
    )

    result = CliRunner().invoke(cli, ["render", "--config", str(config_path)])

    assert result.exit_code == 0
    rendered = yaml.safe_load((tmp_path / "registry.out.yaml").read_text(encoding="utf-8"))
    assert rendered == {
        "configs": ["git", "build"],
        "commands": [{"c1": "git"}, {"c1": "build"}, {"c1": "git"}],
        "title": 'Registry of ["git","build"]',
    }


def test_given_module_invocation_when_requesting_help_then_commands_are_listed() -> None:
    project_root = Path(__file__).resolve().parents[3]
    env = {**os.environ, "PYTHONPATH": str(project_root / "src")}

    result = subprocess.run(
        [sys.executable, "-m", "frontmatter_renderer", "--help"],
        cwd=project_root,
        env=env,
        check=False,
        capture_output=True,
        text=True,
    )

    assert result.returncode == 0
    assert "generate-config" in result.stdout
    assert "render" in result.stdout


def test_given_render_help_when_listing_options_then_dry_run_is_supported() -> None:
    result = CliRunner().invoke(cli, ["render", "--help"])

    assert result.exit_code == 0
    assert "--dry-run" in result.output
