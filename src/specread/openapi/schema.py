"""The recursive ``Schema`` node and its literal and items helpers.

A schema nests through :class:`~specread.openapi.reference.Reference`
positions: ``properties`` values, ``items``, ``allOf``/``anyOf``/``oneOf``
members and ``not``. Each of those positions may hold an inline schema or a
``$ref`` object, so a single decoded tree mixes both. The tree never contains
cycles because references are kept as strings.
"""

from __future__ import annotations

from typing import Optional, Union

from pydantic import (
    ConfigDict,
    Field,
    RootModel,
    StrictBool,
    StrictFloat,
    StrictInt,
    StrictStr,
)

from specread.openapi.primitives import JSONType, SpecObject
from specread.openapi.reference import Reference


class XML(SpecObject):
    """XML serialisation hints attached to a schema."""

    name: Optional[StrictStr] = None
    namespace: Optional[StrictStr] = None
    prefix: Optional[StrictStr] = None
    attribute: Optional[StrictBool] = None
    wrapped: Optional[StrictBool] = None


class EnumLiteral(RootModel[Union[StrictStr, list[StrictStr], StrictInt]]):
    """One element of ``Schema.enum``.

    The element is read as a string, then as an array of strings, then as an
    integer; the first reading that succeeds wins. Elements of one ``enum``
    may mix kinds, nothing checks them against each other.
    """

    model_config = ConfigDict(frozen=True)

    root: Union[StrictStr, list[StrictStr], StrictInt] = Field(union_mode="left_to_right")

    @property
    def kind(self) -> str:
        """``"string"``, ``"array"`` or ``"integer"``."""
        if isinstance(self.root, str):
            return "string"
        if isinstance(self.root, list):
            return "array"
        return "integer"


class Schema(SpecObject):
    """A JSON-Schema-like description of a value.

    Wire keys that clash with Python names are aliased: ``enum`` is
    :attr:`enum_values`, ``not`` is :attr:`not_`, and the composition lists
    are ``allOf``/``anyOf``/``oneOf``.
    """

    enum_values: Optional[list[EnumLiteral]] = Field(default=None, alias="enum")
    type: Optional[JSONType] = None
    description: Optional[StrictStr] = None
    example: Optional[StrictStr] = None
    minimum: Optional[Union[StrictInt, StrictFloat]] = None
    maximum: Optional[Union[StrictInt, StrictFloat]] = None
    pattern: Optional[StrictStr] = None
    nullable: Optional[StrictBool] = None
    properties: Optional[dict[str, Reference[Schema]]] = None
    title: Optional[StrictStr] = None
    items: Optional[Items] = None
    all_of: Optional[list[Reference[Schema]]] = Field(default=None, alias="allOf")
    any_of: Optional[list[Reference[Schema]]] = Field(default=None, alias="anyOf")
    one_of: Optional[list[Reference[Schema]]] = Field(default=None, alias="oneOf")
    not_: Optional[Reference[Schema]] = Field(default=None, alias="not")
    xml: Optional[XML] = None


class Items(RootModel[Reference[Schema]]):
    """The ``items`` position of an array schema.

    Holds exactly one schema-or-reference. Tuple-style ``items`` lists are
    not accepted.
    """

    model_config = ConfigDict(frozen=True)

    @property
    def item(self) -> Reference[Schema]:
        return self.root


Schema.model_rebuild()
