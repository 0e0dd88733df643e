"""Scalar leaf types and the common base class of every document object.

OpenAPI leaves are plain JSON scalars, but a handful of string fields only
accept a closed set of values (``type``, ``in``, ``style`` and the security
scheme ``type``). Those are modelled as ``str`` enums so that an unknown value
fails the decode instead of slipping through as an arbitrary string.

Strings, integers and booleans are decoded strictly: ``"5"`` is not an
integer and ``1`` is not a string.
"""

from __future__ import annotations

import enum
from collections.abc import Mapping
from typing import Annotated, Any

import httpx
from pydantic import (
    AfterValidator,
    BaseModel,
    ConfigDict,
    StrictStr,
    model_validator,
)
from pydantic_core import PydanticCustomError

REF_KEY = "$ref"
"""Wire key of the JSON Reference object."""


class JSONType(str, enum.Enum):
    """JSON Schema primitive type names accepted in ``Schema.type``."""

    BOOLEAN = "boolean"
    INTEGER = "integer"
    NUMBER = "number"
    STRING = "string"
    OBJECT = "object"
    ARRAY = "array"


class ParameterLocation(str, enum.Enum):
    """Locations where a parameter or API key can appear, per the ``in`` field."""

    QUERY = "query"
    HEADER = "header"
    PATH = "path"
    COOKIE = "cookie"


class ParameterStyle(str, enum.Enum):
    """Serialisation styles for parameter values."""

    MATRIX = "matrix"
    LABEL = "label"
    FORM = "form"
    SIMPLE = "simple"
    SPACE_DELIMITED = "spaceDelimited"
    PIPE_DELIMITED = "pipeDelimited"
    DEEP_OBJECT = "deepObject"


class SecuritySchemeType(str, enum.Enum):
    """Discriminator values of a *Security Scheme Object*."""

    API_KEY = "apiKey"
    HTTP = "http"
    OAUTH2 = "oauth2"
    OPEN_ID_CONNECT = "openIdConnect"


def _check_url(value: str) -> str:
    """Accept absolute or relative URL references that httpx can parse."""
    try:
        httpx.URL(value)
    except httpx.InvalidURL as exc:
        raise PydanticCustomError(
            "url_parsing",
            "Input should be a valid URL, {reason}",
            {"reason": str(exc)},
        ) from exc
    return value


Url = Annotated[StrictStr, AfterValidator(_check_url)]
"""A URL kept as its original string once it has been checked to parse."""


class SpecObject(BaseModel):
    """Base class of every inline OpenAPI object.

    Instances are frozen: the document tree is built once per decode and
    never mutated afterwards. Unknown wire keys are ignored, with one
    exception. An object carrying ``$ref`` is only read inline when at least
    one of its other keys is a field of the model; a lone ``{"$ref": ...}``
    (or one padded with keys the model does not know) is a reference, so an
    object whose fields are all optional (``Schema``) cannot absorb it.
    """

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    @classmethod
    def wire_keys(cls) -> frozenset[str]:
        """Return every key this model reads, by alias and by field name."""
        keys = set(cls.model_fields)
        keys.update(field.alias for field in cls.model_fields.values() if field.alias)
        return frozenset(keys)

    @model_validator(mode="before")
    @classmethod
    def _reject_reference_shape(cls, data: Any) -> Any:
        if not isinstance(data, Mapping) or REF_KEY not in data:
            return data
        if cls.wire_keys().isdisjoint(key for key in data if key != REF_KEY):
            raise PydanticCustomError(
                "reference_not_inline",
                "A '$ref' object is not an inline {kind}",
                {"kind": cls.__name__},
            )
        return data
