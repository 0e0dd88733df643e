"""Pydantic configuration models for specread.

These are serialised as JSON in the user's config directory (and optionally
in a project-local ``specread.json``). The document model itself lives in
:mod:`specread.openapi`; this module only holds settings:

    :class:`DecoderConfig`, :class:`OutputConfig` and :class:`GlobalConfig`.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

MAX_DEPTH_LIMIT = 100
"""Deepest nesting the recursive document model decodes and re-encodes reliably."""


class DecoderConfig(BaseModel):
    """Settings that change how documents are decoded.

    Example::

        DecoderConfig(max_depth=64, strict_default_response=True)
    """

    max_depth: int = Field(
        default=64,
        ge=1,
        le=MAX_DEPTH_LIMIT,
        description="Maximum JSON nesting depth accepted before decoding",
    )
    strict_default_response: bool = Field(
        default=False,
        description="Fail on a malformed 'default' response instead of dropping it",
    )

    def context(self) -> dict[str, Any]:
        """Return the validation context handed to the document model."""
        return {"strict_default_response": self.strict_default_response}


class OutputConfig(BaseModel):
    """Default output format preferences stored in :class:`GlobalConfig`."""

    format: str = Field(
        default="auto", description="Output format: auto, json, plain, rich"
    )


class GlobalConfig(BaseModel):
    """User-wide configuration persisted at ``~/.config/specread/config.json``.

    Loaded and saved by :func:`~specread.config.load_global_config` and
    :func:`~specread.config.save_global_config`. Fields here have the
    lowest precedence and can be overridden by project config, environment
    variables, or CLI flags. See :func:`~specread.config.resolve_config`
    for the full precedence chain.
    """

    decoder: DecoderConfig = Field(default_factory=DecoderConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
