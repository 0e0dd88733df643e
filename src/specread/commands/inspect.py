"""Inspect commands -- examine a decoded document.

Provides the ``specread inspect`` sub-command group with read-only
commands for viewing the contents of an OpenAPI document: component
schemas, general API info, and the re-encoded JSON form. Every sub-command
decodes the whole document first, so a document that fails to decode
produces an error and no output.
"""

from __future__ import annotations

from typing import Optional

import typer

from specread.exceptions import SpecreadError
from specread.models import GlobalConfig
from specread.openapi import OpenAPI
from specread.output import debug, error, info, print_data, print_record, print_table


inspect_app = typer.Typer(no_args_is_help=True)


def load_for_command(ctx: typer.Context, source: str) -> OpenAPI:
    """Load and decode *source* with the configuration resolved for *ctx*.

    Args:
        ctx: Typer context populated by :func:`~specread.app.main_callback`.
        source: File path, URL, or ``-`` for stdin.

    Returns:
        The decoded document.

    Raises:
        typer.Exit: With the error's exit code when loading or decoding
            fails; the error is printed to stderr first.
    """
    from specread.parser import load_document

    config: Optional[GlobalConfig] = (ctx.obj or {}).get("config")
    decoder_config = config.decoder if config is not None else None

    debug(f"Loading document from {source}")
    try:
        return load_document(source, decoder_config)
    except SpecreadError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None


@inspect_app.command("schemas")
def inspect_schemas(
    ctx: typer.Context,
    source: str = typer.Argument(help="OpenAPI document: file path, URL, or '-'."),
) -> None:
    """List the schemas declared under ``components.schemas``.

    Shows each schema's name, whether it is inline or a ``$ref``, and its
    type (or the reference target).

    Example::

        specread inspect schemas openapi.json
    """
    document = load_for_command(ctx, source)

    schemas = document.components.schemas or {}
    if not schemas:
        info("No schemas defined in this document.")
        return

    rows: list[list[str]] = []
    for name, entry in sorted(schemas.items()):
        if entry.is_reference:
            rows.append([name, "ref", entry.ref or ""])
        else:
            schema_type = entry.actual.type.value if entry.actual.type else "-"
            rows.append([name, "inline", schema_type])

    print_table(
        ["Schema", "Kind", "Type / Target"], rows, title=f"Schemas ({len(rows)})"
    )


@inspect_app.command("info")
def inspect_info(
    ctx: typer.Context,
    source: str = typer.Argument(help="OpenAPI document: file path, URL, or '-'."),
) -> None:
    """Show API info (title, version, servers, counts).

    Example::

        specread inspect info openapi.json
        specread --json inspect info openapi.json
    """
    document = load_for_command(ctx, source)
    components = document.components

    data: dict = {
        "title": document.info.title,
        "version": document.info.version,
        "openapi_version": document.openapi,
        "description": document.info.description or "-",
        "servers": [s.url for s in document.servers or []],
        "paths": len(document.paths),
        "schemas": len(components.schemas or {}),
        "security_schemes": sorted(components.security_schemes or {}),
    }
    if document.tags:
        data["tags"] = [tag.name for tag in document.tags]

    print_record(data)


@inspect_app.command("encode")
def inspect_encode(
    ctx: typer.Context,
    source: str = typer.Argument(help="OpenAPI document: file path, URL, or '-'."),
    indent: int = typer.Option(2, "--indent", min=0, help="JSON indentation."),
) -> None:
    """Print the document re-encoded from the decoded model.

    Only fields the model captures survive, absent fields are omitted, and
    a malformed ``default`` response that was dropped during decoding does
    not reappear.

    Example::

        specread inspect encode openapi.json > normalised.json
    """
    from specread.parser import encode_document

    document = load_for_command(ctx, source)
    print_data(encode_document(document, indent=indent or None).decode("utf-8"))
