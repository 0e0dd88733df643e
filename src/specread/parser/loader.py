"""Load OpenAPI documents from a URL, local file, or stdin.

This module handles all I/O for fetching raw OpenAPI documents. It sits
outside the decoder: :func:`load_source` returns the raw bytes, and
:func:`parse_content` turns them into a Python mapping, accepting JSON or
YAML with automatic format detection.

The public functions are:

* :func:`load_source` -- Read raw bytes from any supported source.
* :func:`parse_content` -- Parse text as JSON, falling back to YAML.
* :func:`load_document` -- Load, parse and decode in one call.
"""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import Any, Optional, Union

import httpx
import yaml

from specread.exceptions import (
    DocumentTooDeepError,
    SpecLoadError,
    StructuralMismatchError,
)
from specread.models import DecoderConfig
from specread.openapi import OpenAPI
from specread.parser.decoder import decode_mapping

logger = logging.getLogger(__name__)


def load_source(source: str) -> bytes:
    """Read a document from URL, file path, or stdin ('-').

    Args:
        source: A URL (http/https), file path, or '-' for stdin.

    Returns:
        The raw document bytes.

    Raises:
        SpecLoadError: If the source cannot be read or is empty.
    """
    if source == "-":
        return _load_from_stdin()
    elif source.startswith(("http://", "https://")):
        return _load_from_url(source)
    else:
        return _load_from_file(source)


def _load_from_stdin() -> bytes:
    """Read all of stdin.

    Raises:
        SpecLoadError: If stdin cannot be read or is empty.
    """
    try:
        content = sys.stdin.buffer.read()
    except (OSError, AttributeError) as exc:
        raise SpecLoadError(f"Failed to read from stdin: {exc}") from exc

    if not content.strip():
        raise SpecLoadError("No input received from stdin")
    return content


def _load_from_url(url: str) -> bytes:
    """Fetch a document over HTTP(S).

    Raises:
        SpecLoadError: If the URL cannot be fetched.
    """
    try:
        response = httpx.get(url, timeout=30.0, follow_redirects=True)
        response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        raise SpecLoadError(
            f"HTTP {exc.response.status_code} fetching document from {url}"
        ) from exc
    except httpx.RequestError as exc:
        raise SpecLoadError(f"Failed to fetch document from {url}: {exc}") from exc

    logger.debug("Fetched %d bytes from %s", len(response.content), url)
    return response.content


def _load_from_file(path: str) -> bytes:
    """Read a local file.

    Raises:
        SpecLoadError: If the file is missing, unreadable, or empty.
    """
    file_path = Path(path)
    if not file_path.is_file():
        raise SpecLoadError(f"Document file not found: {path}")

    try:
        content = file_path.read_bytes()
    except OSError as exc:
        raise SpecLoadError(f"Failed to read document file {path}: {exc}") from exc

    if not content.strip():
        raise SpecLoadError(f"Document file is empty: {path}")
    return content


def format_hint(source: str) -> str:
    """Guess the format of *source* from its extension: ``json``, ``yaml`` or ``""``."""
    suffix = Path(source.split("?", 1)[0]).suffix.lower()
    if suffix == ".json":
        return "json"
    if suffix in (".yaml", ".yml"):
        return "yaml"
    return ""


def parse_content(content: Union[bytes, str], hint: str = "") -> dict[str, Any]:
    """Parse content as JSON or YAML.

    Tries JSON first (unless hint is 'yaml'), then falls back to YAML.
    Valid JSON is also valid YAML, but JSON parsing is stricter and faster.

    Args:
        content: The raw content.
        hint: Optional format hint ('json' or 'yaml').

    Returns:
        The parsed mapping.

    Raises:
        StructuralMismatchError: If the content is not valid UTF-8, parses
            but is not an object, or is explicitly JSON and invalid.
        SpecLoadError: If the content cannot be parsed as either format.
    """
    if isinstance(content, bytes):
        try:
            content = content.decode("utf-8-sig")
        except UnicodeDecodeError as exc:
            raise StructuralMismatchError(
                f"Invalid UTF-8 input: {exc}", expected="a UTF-8 encoded document"
            ) from exc

    json_error: Exception | None = None
    yaml_error: Exception | None = None

    if hint != "yaml":
        try:
            return _require_object(json.loads(content))
        except json.JSONDecodeError as exc:
            json_error = exc
            if hint == "json":
                raise StructuralMismatchError(
                    f"Invalid JSON: {exc}", expected="a JSON document"
                ) from exc
        except RecursionError as exc:
            raise DocumentTooDeepError(
                "Document nests too deeply to parse", expected="a shallower document"
            ) from exc

    try:
        return _require_object(yaml.safe_load(content))
    except yaml.YAMLError as exc:
        yaml_error = exc
    except RecursionError as exc:
        raise DocumentTooDeepError(
            "Document nests too deeply to parse", expected="a shallower document"
        ) from exc

    msg = "Failed to parse document as JSON or YAML"
    if json_error:
        msg += f"\n  JSON error: {json_error}"
    if yaml_error:
        msg += f"\n  YAML error: {yaml_error}"
    raise SpecLoadError(msg)


def _require_object(result: Any) -> dict[str, Any]:
    if not isinstance(result, dict):
        kind = type(result).__name__ if result is not None else "empty document"
        raise StructuralMismatchError(
            f"Document must be a JSON/YAML object (got {kind})",
            expected="a JSON object",
        )
    return result


def load_document(source: str, config: Optional[DecoderConfig] = None) -> OpenAPI:
    """Load *source*, parse it, and decode it into an :class:`OpenAPI` document.

    Args:
        source: A URL (http/https), file path, or '-' for stdin.
        config: Decoder settings.

    Returns:
        The decoded document.

    Raises:
        SpecLoadError: If the source cannot be read or parsed.
        DecodeError: If the content does not decode.
    """
    content = load_source(source)
    raw = parse_content(content, hint=format_hint(source))
    return decode_mapping(raw, config)
