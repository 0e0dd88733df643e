"""The OpenAPI document model.

Every object is a frozen Pydantic model whose validation *is* the wire
decoder. The interesting decoding rules live in a few places:

* :mod:`~specread.openapi.primitives` -- closed string enums, strict scalars,
  URLs, and the :class:`SpecObject` base that refuses ``$ref`` objects.
* :mod:`~specread.openapi.reference` -- the generic ``$ref``-or-inline
  :class:`Reference` union.
* :mod:`~specread.openapi.schema` -- the recursive :class:`Schema` node and
  heterogeneous ``enum`` literals.
* :mod:`~specread.openapi.responses` -- the status-code keyed
  :class:`Responses` map with its reserved ``default`` key.
* :mod:`~specread.openapi.document` -- the root :class:`OpenAPI` object and
  everything between it and the leaves.
"""

from specread.openapi.document import (
    Components,
    ExternalDocumentation,
    Info,
    OpenAPI,
    Operation,
    Parameter,
    PathItem,
    SecurityScheme,
    Server,
    Tag,
)
from specread.openapi.primitives import (
    JSONType,
    ParameterLocation,
    ParameterStyle,
    SecuritySchemeType,
    SpecObject,
)
from specread.openapi.reference import Reference
from specread.openapi.responses import MediaType, Response, Responses
from specread.openapi.schema import XML, EnumLiteral, Items, Schema

__all__ = [
    "Components",
    "EnumLiteral",
    "ExternalDocumentation",
    "Info",
    "Items",
    "JSONType",
    "MediaType",
    "OpenAPI",
    "Operation",
    "Parameter",
    "ParameterLocation",
    "ParameterStyle",
    "PathItem",
    "Reference",
    "Response",
    "Responses",
    "Schema",
    "SecurityScheme",
    "SecuritySchemeType",
    "Server",
    "SpecObject",
    "Tag",
    "XML",
]
