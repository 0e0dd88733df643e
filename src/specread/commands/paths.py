"""The ``specread paths`` command.

Decodes an OpenAPI document and prints the keys of its ``paths`` object.
On a load or decode failure the error goes to stderr and nothing is
written to stdout.
"""

from __future__ import annotations

import typer

from specread.commands.inspect import load_for_command
from specread.output import print_list


def paths_command(
    ctx: typer.Context,
    source: str = typer.Argument(help="OpenAPI document: file path, URL, or '-'."),
) -> None:
    """Print the path names declared in an OpenAPI document.

    Plain output is one path per line, ``--json`` prints an array. An empty
    ``paths`` object prints nothing (``[]`` with ``--json``).

    Example::

        specread paths openapi.json
        specread --json paths https://example.com/openapi.json
    """
    document = load_for_command(ctx, source)
    print_list(document.path_names(), title="Path")
