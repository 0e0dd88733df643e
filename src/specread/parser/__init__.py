"""OpenAPI document parser -- load sources and decode them into the model.

This sub-package turns raw OpenAPI input into a
:class:`~specread.openapi.OpenAPI` document.

Typical usage::

    from specread.parser import load_document

    doc = load_document("openapi.json")
    print(doc.path_names())

Sub-modules:

* :mod:`~specread.parser.loader` -- I/O layer (URL, file, stdin) plus
  JSON/YAML format detection.
* :mod:`~specread.parser.decoder` -- Byte-level decoding, depth limiting,
  error translation, and JSON re-encoding.
"""

from specread.parser.decoder import (
    check_depth,
    decode_document,
    decode_mapping,
    encode_document,
)
from specread.parser.loader import load_document, load_source, parse_content

__all__ = [
    "check_depth",
    "decode_document",
    "decode_mapping",
    "encode_document",
    "load_document",
    "load_source",
    "parse_content",
]
