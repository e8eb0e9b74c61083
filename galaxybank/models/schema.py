"""
Schema validation backed by pydantic.

A schema is any type pydantic can build a `TypeAdapter` for: a model class,
`list[Model]`, `Any`, `str | None`, and so on. `None` as a schema means the
response carries no content.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Any, TypeAlias

import pydantic
from pydantic import BaseModel, TypeAdapter

from ..exceptions import ValidationError

Schema: TypeAlias = Any


@lru_cache(maxsize=256)
def _adapter(schema: Schema) -> TypeAdapter[Any]:
    return TypeAdapter(schema)


def parse(schema: Schema, value: Any) -> Any:
    """Validate `value` against `schema`, raising `ValidationError` on mismatch."""
    if isinstance(schema, type) and issubclass(schema, BaseModel) and isinstance(value, schema):
        return value
    try:
        return _adapter(schema).validate_python(value)
    except pydantic.ValidationError as e:
        raise ValidationError.from_pydantic(e, _jsonable(value)) from e


def to_jsonable(schema: Schema, value: Any) -> Any:
    """Dump a parsed value to JSON-compatible data using wire (alias) names."""
    return _adapter(schema).dump_python(value, mode="json", by_alias=True, exclude_unset=True)


def _jsonable(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json", by_alias=True, exclude_unset=True)
    return value
