"""Command line interface entry point."""

from __future__ import annotations

import logging
import sys

import click

from frontmatter_renderer.configuration import (
    DEFAULT_CONFIG_FILENAME,
    write_placeholder_configuration,
)
from frontmatter_renderer.results_writing import serialize_output
from frontmatter_renderer.run_execution import (
    RenderRequest,
    RenderRunError,
    execute_render_run,
)
from frontmatter_renderer.template_substitution import Verbosity

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


class CliError(Exception):
    """Custom CLI error."""


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(package_name="frontmatter-renderer")
@click.option(
    "--log-level",
    type=click.Choice(_LOG_LEVELS, case_sensitive=False),
    default="WARNING",
    show_default=True,
    help="Logging level for progress and warning messages",
)
def cli(log_level: str) -> None:
    """Aggregate document frontmatter and render it through a template."""
    logging.basicConfig(level=log_level.upper(), format="%(levelname)s: %(message)s")


@cli.command(name="generate-config")
@click.option(
    "--output",
    "output_path",
    required=False,
    default=DEFAULT_CONFIG_FILENAME,
    show_default=True,
    type=click.Path(path_type=str),
    help="Path to the YAML render configuration to write",
)
def generate_config(output_path: str) -> None:
    """Generate a placeholder YAML render configuration with guidance comments."""
    try:
        resolved_output = write_placeholder_configuration(output_path)
    except (FileExistsError, OSError) as exc:
        raise CliError(str(exc)) from exc
    click.echo(str(resolved_output))


@cli.command(name="render")
@click.option(
    "--config",
    "config_path",
    required=True,
    type=click.Path(path_type=str),
    help="Path to YAML/JSON render configuration file",
)
@click.option(
    "--output",
    "output_path",
    required=False,
    type=click.Path(path_type=str),
    help="Override output.path from the configuration",
)
@click.option(
    "--verbosity",
    type=click.Choice([item.value for item in Verbosity], case_sensitive=False),
    default=None,
    help="Override output.verbosity; verbose keeps unresolved placeholders",
)
@click.option(
    "--dry-run",
    is_flag=True,
    default=False,
    help="Render and print the result without writing the output file.",
)
def render(
    config_path: str, output_path: str | None, verbosity: str | None, dry_run: bool
) -> None:
    """Render the configured documents through the template."""
    try:
        outcome = execute_render_run(
            RenderRequest(
                config_path=config_path,
                output_path=output_path,
                verbosity=Verbosity(verbosity.lower()) if verbosity else None,
                dry_run=dry_run,
            )
        )
    except RenderRunError as exc:
        raise CliError(str(exc)) from exc
    if outcome.output_path is None:
        click.echo(serialize_output(outcome.rendered.content, outcome.rendered.format))
    else:
        click.echo(str(outcome.output_path))


def main(argv: list[str] | None = None) -> int:
    """CLI entry point for console_scripts wiring."""
    argv = argv if argv is not None else sys.argv[1:]
    try:
        cli.main(args=list(argv), standalone_mode=False)
    except CliError as exc:
        click.echo(str(exc), err=True)
        return 1
    except click.ClickException as exc:
        exc.show()
        return exc.exit_code
    except click.Abort:
        click.echo("Aborted.", err=True)
        return 1
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
