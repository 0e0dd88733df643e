"""specread -- Decode OpenAPI 3.x documents into a typed, immutable model.

This package turns the JSON wire form of an OpenAPI document into a tree of
frozen Pydantic models. ``$ref`` indirections are kept as references (never
dereferenced), schemas nest arbitrarily, and response maps keyed by status
codes or ``default`` are split into a default slot and a code mapping.

Typical usage::

    from specread.parser import decode_document

    doc = decode_document(Path("openapi.json").read_bytes())
    print(doc.path_names())

Modules:
    openapi: The document model and its decoding rules.
    parser: Byte-level decoding, error translation, and source loading.
    app: Typer application factory and CLI entry point.
    models: Pydantic configuration models.
    config: XDG-aware configuration and precedence resolution.
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric exit codes following clig.dev conventions.
    output: stdout/stderr formatting system with Rich support.
"""

__version__ = "0.1.0"
