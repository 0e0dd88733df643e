"""Decode OpenAPI bytes into the document model, and encode it back.

The document model in :mod:`specread.openapi` does the actual decoding
through Pydantic validation. This module wraps it with the parts that sit
around a single decode call:

* JSON parsing of the input buffer.
* A nesting-depth check done with an explicit work stack, so adversarial
  input is rejected before the recursive model decode starts.
* Translation of Pydantic's :class:`~pydantic.ValidationError` into one
  :class:`~specread.exceptions.DecodeError` whose ``pointer`` is an RFC 6901
  JSON Pointer into the *input* document.

The public functions are :func:`decode_document`, :func:`decode_mapping`,
:func:`encode_document` and :func:`check_depth`. Each call is independent and
shares no state, so documents can be decoded in parallel freely.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping, Sequence
from typing import Any, Optional, Union

from pydantic import ValidationError

from specread.exceptions import (
    DecodeError,
    DocumentTooDeepError,
    MissingFieldError,
    StructuralMismatchError,
    TypeMismatchError,
)
from specread.models import DecoderConfig
from specread.openapi import OpenAPI

logger = logging.getLogger(__name__)

# Pydantic error types that mean "none of the allowed shapes matched".
_STRUCTURAL_ERROR_TYPES = frozenset({"inline_or_reference", "reference_not_inline"})


def decode_document(
    data: Union[bytes, str], config: Optional[DecoderConfig] = None
) -> OpenAPI:
    """Decode a JSON buffer into an :class:`~specread.openapi.OpenAPI` document.

    Args:
        data: The complete JSON document, as bytes or text.
        config: Decoder settings. Defaults to :class:`DecoderConfig()`.

    Returns:
        The fully decoded document. Decoding is all-or-nothing.

    Raises:
        StructuralMismatchError: If *data* is not valid UTF-8 JSON or its
            root is not an object.
        DocumentTooDeepError: If the document nests deeper than
            ``config.max_depth``.
        MissingFieldError: If a required key is absent.
        TypeMismatchError: If a value has the wrong kind.

    Example::

        doc = decode_document(Path("openapi.json").read_bytes())
        print(doc.path_names())
    """
    try:
        raw = json.loads(data)
    except UnicodeDecodeError as exc:
        raise StructuralMismatchError(
            f"Invalid UTF-8 input: {exc}", expected="a UTF-8 encoded JSON document"
        ) from exc
    except json.JSONDecodeError as exc:
        raise StructuralMismatchError(
            f"Invalid JSON: {exc}", expected="a JSON document"
        ) from exc
    except RecursionError as exc:
        raise DocumentTooDeepError(
            "Document nests too deeply to parse", expected="a shallower document"
        ) from exc
    return decode_mapping(raw, config)


def decode_mapping(raw: Any, config: Optional[DecoderConfig] = None) -> OpenAPI:
    """Decode an already parsed document (e.g. from a YAML loader).

    Args:
        raw: The parsed document; must be a mapping.
        config: Decoder settings. Defaults to :class:`DecoderConfig()`.

    Returns:
        The fully decoded document.

    Raises:
        DecodeError: See :func:`decode_document`.
    """
    config = config or DecoderConfig()
    if not isinstance(raw, Mapping):
        raise StructuralMismatchError(
            f"Document root must be an object (got {type(raw).__name__})",
            expected="a JSON object",
        )

    check_depth(raw, config.max_depth)

    try:
        document = OpenAPI.model_validate(raw, context=config.context())
    except ValidationError as exc:
        raise _translate(exc, raw) from exc
    except RecursionError as exc:
        raise DocumentTooDeepError(
            "Document nests too deeply to decode", expected="a shallower document"
        ) from exc

    logger.debug("Decoded OpenAPI %s document with %d paths", document.openapi, len(document.paths))
    return document


def encode_document(document: OpenAPI, indent: Optional[int] = None) -> bytes:
    """Encode *document* back to JSON using wire key names.

    Absent optional fields are omitted and key order is not preserved, so
    the output is semantically, not byte-for-byte, equal to the input.
    ``decode_document(encode_document(doc)) == doc`` always holds.

    Args:
        document: A decoded document.
        indent: Optional indentation for pretty-printing.

    Returns:
        UTF-8 encoded JSON.
    """
    return document.model_dump_json(by_alias=True, exclude_none=True, indent=indent).encode("utf-8")


def check_depth(raw: Any, max_depth: int) -> None:
    """Reject documents whose object/array nesting exceeds *max_depth*.

    Uses an explicit work stack, so arbitrarily deep input cannot exhaust
    the Python call stack here. The root object counts as depth 1.

    Raises:
        DocumentTooDeepError: With the pointer of the first container found
            beyond the limit.
    """
    stack: list[tuple[Any, int, tuple[Union[str, int], ...]]] = [(raw, 1, ())]
    while stack:
        node, depth, path = stack.pop()
        if isinstance(node, Mapping):
            children = ((key, value) for key, value in node.items())
        elif isinstance(node, list):
            children = enumerate(node)
        else:
            continue
        if depth > max_depth:
            pointer = _format_pointer(path)
            raise DocumentTooDeepError(
                f"Document nests deeper than {max_depth} levels at {pointer or '/'}",
                pointer=pointer,
                expected=f"at most {max_depth} levels of nesting",
            )
        stack.extend((value, depth + 1, path + (key,)) for key, value in children)


# --- ValidationError translation ---


def _translate(exc: ValidationError, raw: Mapping[str, Any]) -> DecodeError:
    """Turn a Pydantic error into the matching :class:`DecodeError` subclass.

    The first error decides the class and message; all of them are kept on
    ``errors``.
    """
    problems: list[dict[str, Any]] = []
    for err in exc.errors(include_url=False):
        loc = tuple(err["loc"])
        innermost_type = err["type"]
        if err["type"] == "inline_or_reference":
            # Point below the reference position, at the inline failure.
            loc += tuple(err["ctx"]["inner_loc"])
            innermost_type = err["ctx"]["inner_type"]
        problems.append({
            "pointer": _wire_pointer(raw, loc, missing=innermost_type == "missing"),
            "type": err["type"],
            "message": err["msg"],
        })

    first = problems[0]
    location = first["pointer"] or "/"
    if first["type"] == "missing":
        cls: type[DecodeError] = MissingFieldError
        message = f"Missing required field at {location}"
        expected = "a required field"
    elif first["type"] in _STRUCTURAL_ERROR_TYPES:
        cls = StructuralMismatchError
        message = f"Structural mismatch at {location}: {first['message']}"
        expected = "an inline object or a '$ref' object"
    else:
        cls = TypeMismatchError
        message = f"Type mismatch at {location}: {first['message']}"
        expected = first["message"]

    if len(problems) > 1:
        message += f" (and {len(problems) - 1} more)"
    return cls(message, pointer=first["pointer"], expected=expected, errors=problems)


def _wire_pointer(raw: Any, loc: Sequence[Union[str, int]], missing: bool = False) -> str:
    """Map a Pydantic error location onto a JSON Pointer into *raw*.

    Pydantic locations contain model-only segments (union member tags,
    internal field names such as ``codes``) that do not exist in the input.
    Segments are kept only while they can be followed in *raw*; the final
    segment of a ``missing`` error is kept since the key is, by definition,
    absent.
    """
    node = raw
    path: list[Union[str, int]] = []
    for index, segment in enumerate(loc):
        if isinstance(node, Mapping) and str(segment) in node:
            path.append(str(segment))
            node = node[str(segment)]
        elif isinstance(node, list) and isinstance(segment, int) and 0 <= segment < len(node):
            path.append(segment)
            node = node[segment]
        elif missing and index == len(loc) - 1:
            path.append(segment)
    return _format_pointer(path)


def _format_pointer(path: Sequence[Union[str, int]]) -> str:
    """Format path segments as an RFC 6901 JSON Pointer (``~0``/``~1`` escaped)."""
    return "".join(
        "/" + str(segment).replace("~", "~0").replace("/", "~1") for segment in path
    )
