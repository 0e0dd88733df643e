"""Response objects and the status-code keyed ``Responses`` map.

The ``responses`` object of an operation has no fixed field names: its keys
are HTTP status codes (``"200"``, ``"404"``, ``"5XX"``) plus the reserved key
``default``. :class:`Responses` splits it in a single pass into a
:attr:`~Responses.default` slot and a :attr:`~Responses.codes` mapping.

A malformed ``default`` entry is dropped and the slot left empty, while a
malformed status-code entry fails the whole decode. Pass
``{"strict_default_response": True}`` as the validation context to make the
default slot as strict as the rest.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Optional

from pydantic import (
    Field,
    SerializerFunctionWrapHandler,
    StrictStr,
    ValidationError,
    ValidationInfo,
    field_validator,
    model_serializer,
    model_validator,
)
from pydantic_core import PydanticCustomError

from specread.openapi.primitives import SpecObject
from specread.openapi.reference import Reference
from specread.openapi.schema import Schema

logger = logging.getLogger(__name__)

DEFAULT_KEY = "default"
"""Reserved key of the fallback response."""


class MediaType(SpecObject):
    """Content description for one media type (``application/json``, ...)."""

    schema_: Optional[Reference[Schema]] = Field(default=None, alias="schema")


class Response(SpecObject):
    """A single response. Only ``description`` is required."""

    description: StrictStr
    content: Optional[dict[str, MediaType]] = None


class Responses(SpecObject):
    """Responses of an operation, keyed by status code.

    Built from wire input only: a mapping handed to this model is always
    read as ``{status_code_or_default: response}``. Use :meth:`build` to
    assemble one in code.
    """

    default: Optional[Response] = None
    codes: dict[str, Reference[Response]] = Field(default_factory=dict)

    @classmethod
    def build(
        cls,
        default: Optional[Response] = None,
        codes: Optional[dict[str, Reference[Response]]] = None,
    ) -> Responses:
        return cls.model_construct(default=default, codes=dict(codes or {}))

    @model_validator(mode="before")
    @classmethod
    def _split_default(cls, data: Any, info: ValidationInfo) -> Any:
        if not isinstance(data, Mapping):
            return data

        split: dict[str, Any] = {}
        codes: dict[str, Any] = {}
        for key, value in data.items():
            name = str(key)
            if name in codes:
                # YAML reads a bare 200 as an int, so 200 and "200" can both appear.
                raise PydanticCustomError(
                    "duplicate_status_code",
                    "Status code {code} appears more than once",
                    {"code": name},
                )
            if name != DEFAULT_KEY:
                codes[name] = value
            elif _strict_default(info):
                split[DEFAULT_KEY] = value
            else:
                try:
                    split[DEFAULT_KEY] = Response.model_validate(value, context=info.context)
                except ValidationError as exc:
                    logger.debug(
                        "Dropping malformed default response: %s",
                        exc.errors()[0]["msg"],
                    )
        split["codes"] = codes
        return split

    @field_validator("default", mode="before")
    @classmethod
    def _reject_null_default(cls, value: Any, info: ValidationInfo) -> Any:
        if value is None and _strict_default(info):
            raise PydanticCustomError(
                "default_response_null",
                "The 'default' response must be an object, not null",
            )
        return value

    @model_serializer(mode="wrap")
    def _serialize(self, handler: SerializerFunctionWrapHandler) -> Any:
        data = handler(self)
        wire: dict[str, Any] = {}
        if data.get("default") is not None:
            wire[DEFAULT_KEY] = data["default"]
        wire.update(data.get("codes") or {})
        return wire

    def get(self, status_code: str) -> Optional[Reference[Response]]:
        """Return the entry for *status_code*, or ``None`` when absent."""
        return self.codes.get(status_code)


def _strict_default(info: ValidationInfo) -> bool:
    return bool((info.context or {}).get("strict_default_response"))
