"""Configuration scaffold generation helpers."""

from __future__ import annotations

from pathlib import Path

DEFAULT_CONFIG_FILENAME = "frontmatter-renderer.yaml"

_CONFIG_SCAFFOLD_TEMPLATE = """# Render configuration for frontmatter-renderer.
# Replace every <REQUIRED> placeholder before running render.
# Relative paths are resolved against the directory of this file.

schema:
  # JSON or YAML schema; $ref targets are loaded relative to it.
  path: "<REQUIRED>"
  # max_ref_depth: 10

template:
  # Leave unset to use the schema's x-template / x-template-items bindings.
  # path: "<OPTIONAL>"
  # items_path: "<OPTIONAL>"
  # format: json   # json | yaml | xml | markdown

documents:
  # base_dir: "<OPTIONAL>"
  include:
    - "<REQUIRED>"
  # parallelism: 4

output:
  path: "<REQUIRED>"
  # normal drops unresolved placeholders, verbose keeps them in the output.
  verbosity: normal
"""


def build_placeholder_configuration() -> str:
    """Build a YAML render configuration with placeholders and inline guidance."""
    return _CONFIG_SCAFFOLD_TEMPLATE


def write_placeholder_configuration(output_path: Path | str) -> Path:
    """Write the placeholder render configuration to the requested output path.

    Args:
      output_path: Destination file path for the scaffold.

    Returns:
      The resolved destination path.

    Raises:
      FileExistsError: If the destination file already exists.
      OSError: If writing the scaffold fails.
    """
    destination = Path(output_path)
    if destination.exists():
        raise FileExistsError(f"Configuration file already exists: {destination.resolve()}")
    destination.write_text(build_placeholder_configuration(), encoding="utf-8")
    return destination.resolve()
