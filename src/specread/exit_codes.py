"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~specread.exceptions.SpecreadError` subclass.
External tooling (CI scripts, shell wrappers) can inspect the exit code to
determine the failure class without parsing stderr.

Example::

    $ specread paths broken.json
    $ echo $?
    7   # EXIT_DECODE_ERROR -- the document does not match the OpenAPI model
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments or missing required parameters."""

EXIT_DECODE_ERROR = 7
"""The OpenAPI document could not be decoded into the document model."""

EXIT_LOAD_ERROR = 8
"""The document source could not be read (missing file, I/O or network failure)."""
