"""Results writing exports."""

from .rendered_output_writer import serialize_output, write_rendered_output

__all__ = [
    "serialize_output",
    "write_rendered_output",
]
