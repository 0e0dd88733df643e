"""Top-level document objects, from ``OpenAPI`` down to operations.

These models assemble the leaf decoders, the reference union, the schema
tree and the responses map into the root :class:`OpenAPI` object. Nothing
here checks references against ``components``; a ``$ref`` to a missing
schema decodes fine.
"""

from __future__ import annotations

from typing import Optional

from pydantic import Field, StrictBool, StrictStr

from specread.openapi.primitives import (
    ParameterLocation,
    ParameterStyle,
    SecuritySchemeType,
    SpecObject,
    Url,
)
from specread.openapi.reference import Reference
from specread.openapi.responses import Response, Responses
from specread.openapi.schema import Schema


class ExternalDocumentation(SpecObject):
    """Link to additional documentation."""

    description: Optional[StrictStr] = None
    url: Url


class Info(SpecObject):
    """API metadata. ``title`` and ``version`` are required."""

    title: StrictStr
    description: Optional[StrictStr] = None
    version: StrictStr


class Server(SpecObject):
    """A server the API is reachable at. Relative URLs are allowed."""

    url: Url
    description: Optional[StrictStr] = None


class Tag(SpecObject):
    name: StrictStr
    description: Optional[StrictStr] = None


class Parameter(SpecObject):
    """An operation parameter; the wire key ``in`` is :attr:`location`."""

    name: StrictStr
    description: Optional[StrictStr] = None
    explode: Optional[StrictBool] = None
    location: ParameterLocation = Field(alias="in")
    schema_: Optional[Reference[Schema]] = Field(default=None, alias="schema")
    style: Optional[ParameterStyle] = None
    required: Optional[StrictBool] = None
    allow_reserved: Optional[StrictBool] = Field(default=None, alias="allowReserved")


class SecurityScheme(SpecObject):
    """A security scheme declared under ``components.securitySchemes``.

    Not wrapped in :class:`Reference`: a ``$ref`` here fails the decode.
    """

    type: SecuritySchemeType
    description: Optional[StrictStr] = None
    name: StrictStr
    location: ParameterLocation = Field(alias="in")


class Operation(SpecObject):
    """The ``get`` operation of a path item."""

    deprecated: Optional[StrictBool] = None
    description: Optional[StrictStr] = None
    external_docs: Optional[ExternalDocumentation] = Field(default=None, alias="externalDocs")
    parameters: Optional[list[Reference[Parameter]]] = None
    responses: Responses
    security: Optional[list[dict[str, list[StrictStr]]]] = None
    summary: Optional[StrictStr] = None
    tags: Optional[list[StrictStr]] = None


class PathItem(SpecObject):
    """Operations available on a single path. Only ``get`` is modelled."""

    summary: Optional[StrictStr] = None
    description: Optional[StrictStr] = None
    get: Optional[Operation] = None


class Components(SpecObject):
    """Registry of reusable objects, referenced elsewhere by ``$ref``."""

    schemas: Optional[dict[str, Reference[Schema]]] = None
    parameters: Optional[dict[str, Reference[Parameter]]] = None
    responses: Optional[dict[str, Reference[Response]]] = None
    security_schemes: Optional[dict[str, SecurityScheme]] = Field(
        default=None, alias="securitySchemes"
    )


class OpenAPI(SpecObject):
    """Root of a decoded OpenAPI document.

    ``paths`` and ``components`` are required; an empty ``paths`` object is
    valid and yields an empty mapping.

    See Also:
        :func:`specread.parser.decoder.decode_document`: Decode from bytes.
    """

    openapi: StrictStr
    info: Info
    servers: Optional[list[Server]] = None
    paths: dict[str, PathItem]
    components: Components
    tags: Optional[list[Tag]] = None
    external_docs: Optional[ExternalDocumentation] = Field(default=None, alias="externalDocs")

    def path_names(self) -> list[str]:
        """Return the keys of :attr:`paths` in document order."""
        return list(self.paths)
