"""Generic ``$ref``-or-inline union used at every indirection point.

OpenAPI lets most object positions hold either the object itself or a JSON
Reference (``{"$ref": "#/components/schemas/Pet"}``). :class:`Reference`
models that choice once for every target type::

    Reference[Schema]
    Reference[Parameter]
    Reference[Response]

Decoding is an ordered trial. The value is first decoded as an inline
``T``; only when that fails is it read as a reference object. The inline
reading therefore wins every tie. References are kept verbatim and never
resolved.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Generic, Optional, TypeVar

from pydantic import (
    BaseModel,
    ConfigDict,
    SerializerFunctionWrapHandler,
    ValidationError,
    ValidationInfo,
    model_serializer,
    model_validator,
)
from pydantic_core import PydanticCustomError

from specread.openapi.primitives import REF_KEY

T = TypeVar("T", bound=BaseModel)


class Reference(BaseModel, Generic[T]):
    """Either a reference path or an inline ``T``; exactly one is set.

    Build instances with :meth:`to` and :meth:`of` rather than keyword
    arguments, since keyword input goes through the same wire decoding as a
    JSON value.

    Example::

        ref = Reference[Schema].model_validate({"$ref": "#/components/schemas/Pet"})
        ref.ref           # "#/components/schemas/Pet"
        ref.is_reference  # True
    """

    model_config = ConfigDict(frozen=True)

    ref: Optional[str] = None
    actual: Optional[T] = None

    @classmethod
    def target(cls) -> type[BaseModel]:
        """Return the inline type ``T`` this parametrisation decodes."""
        args = cls.__pydantic_generic_metadata__["args"]
        if not args:
            raise TypeError("Reference must be parametrised, e.g. Reference[Schema]")
        return args[0]

    @classmethod
    def to(cls, path: str) -> Reference[T]:
        """Build the reference variant."""
        return cls.model_construct(ref=path)

    @classmethod
    def of(cls, value: T) -> Reference[T]:
        """Build the inline variant."""
        return cls.model_construct(actual=value)

    @property
    def is_reference(self) -> bool:
        return self.ref is not None

    @model_validator(mode="wrap")
    @classmethod
    def _inline_or_reference(cls, data: Any, handler: Any, info: ValidationInfo) -> Any:
        if isinstance(data, cls):
            return data
        if isinstance(data, Reference):
            # Unparametrised or differently parametrised instance: re-read it.
            data = {REF_KEY: data.ref} if data.ref is not None else data.actual

        target = cls.target()
        try:
            value = target.model_validate(data, context=info.context)
        except ValidationError as exc:
            inline_error = exc
        else:
            return cls.model_construct(actual=value)

        if isinstance(data, Mapping) and isinstance(data.get(REF_KEY), str):
            return cls.model_construct(ref=data[REF_KEY])

        inner_loc, inner_type, detail = _innermost(inline_error)
        raise PydanticCustomError(
            "inline_or_reference",
            "Input should be an inline {target} or a '$ref' object; inline reading failed at {where}: {detail}",
            {
                "target": target.__name__,
                "where": ".".join(str(part) for part in inner_loc) or "<root>",
                "detail": detail,
                "inner_loc": inner_loc,
                "inner_type": inner_type,
            },
        )

    @model_serializer(mode="wrap")
    def _serialize(self, handler: SerializerFunctionWrapHandler) -> Any:
        if self.ref is not None:
            return {REF_KEY: self.ref}
        return handler(self).get("actual")


def _innermost(exc: ValidationError) -> tuple[tuple[Any, ...], str, str]:
    """Return location, type and message of the deepest first failure.

    A nested ``Reference`` failure already carries the location of its own
    inline failure in its context; that location is appended so the result
    points below every reference level.
    """
    first = exc.errors(include_url=False)[0]
    ctx = first.get("ctx") or {}
    if first["type"] == "inline_or_reference":
        return tuple(first["loc"]) + tuple(ctx["inner_loc"]), ctx["inner_type"], ctx["detail"]
    return tuple(first["loc"]), first["type"], first["msg"]
