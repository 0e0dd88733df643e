"""Exception hierarchy for specread.

All exceptions inherit from :class:`SpecreadError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`specread.exit_codes`.
The top-level error handler in :func:`specread.app.main` catches
``SpecreadError`` and exits with the appropriate code, while unexpected
exceptions produce a crash log and exit with :data:`EXIT_GENERIC_FAILURE`.

Subclass hierarchy::

    SpecreadError (exit 1)
    +-- DecodeError                (exit 7)
    |   +-- MissingFieldError
    |   +-- TypeMismatchError
    |   +-- StructuralMismatchError
    |       +-- DocumentTooDeepError
    +-- SpecLoadError              (exit 8)
    +-- ConfigError                (exit 1)
"""

from __future__ import annotations

from typing import Any, Optional

from specread.exit_codes import (
    EXIT_DECODE_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_LOAD_ERROR,
)


class SpecreadError(Exception):
    """Base exception for all specread errors.

    Every subclass sets a class-level ``exit_code`` corresponding to one of
    the constants in :mod:`specread.exit_codes`. The entry point catches
    this exception type and calls ``sys.exit(exc.exit_code)``.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class DecodeError(SpecreadError):
    """Raised when a document does not decode into the OpenAPI model.

    A decode is all-or-nothing: when this is raised no partial document
    exists. The error names the first failing location; every problem
    pydantic collected is kept in :attr:`errors`.

    Args:
        message: Human-readable description of the first failure.
        pointer: RFC 6901 JSON Pointer to the failing location (``""`` is
            the document root).
        expected: Short description of the expected shape.
        errors: All collected problems, each a dict with ``pointer``,
            ``type`` and ``message`` keys.
    """

    exit_code = EXIT_DECODE_ERROR

    def __init__(
        self,
        message: str,
        pointer: str = "",
        expected: Optional[str] = None,
        errors: Optional[list[dict[str, Any]]] = None,
    ):
        super().__init__(message)
        self.pointer = pointer
        self.expected = expected
        self.errors = errors or []


class MissingFieldError(DecodeError):
    """Raised when a required key is absent from an object."""


class TypeMismatchError(DecodeError):
    """Raised when a value is present but has the wrong primitive kind or enum value."""


class StructuralMismatchError(DecodeError):
    """Raised when a value matches none of the shapes allowed at its position.

    The typical case is a ``Reference`` position holding something that is
    neither an inline object nor a ``{"$ref": "..."}`` object. Invalid JSON
    and non-object documents are reported the same way.
    """


class DocumentTooDeepError(StructuralMismatchError):
    """Raised when a document nests deeper than the configured maximum depth."""


class SpecLoadError(SpecreadError):
    """Raised when a document source cannot be read (missing file, network failure, bad YAML)."""

    exit_code = EXIT_LOAD_ERROR


class ConfigError(SpecreadError):
    """Raised for configuration problems (invalid JSON, failed validation, bad env values)."""

    exit_code = EXIT_GENERIC_FAILURE
