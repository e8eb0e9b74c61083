"""
OpenAPI parameter serialization.

Renders path, query, header and cookie parameters according to their declared
style (simple, label, matrix, form, space/pipe delimited, deep object), honoring
the `explode` and `encode` flags.

Example:
    param = Parameter(key="ids", value=[1, 2, 3], style=SerializationStyle.FORM, explode=True)
    QuerySerializer().serialize({"ids": param})  # "?ids=1&ids=2&ids=3"
"""

from __future__ import annotations

import json
from collections.abc import Mapping, Sequence
from enum import Enum
from typing import TYPE_CHECKING, Any
from urllib.parse import quote

if TYPE_CHECKING:
    from .clients.request import Parameter


class SerializationStyle(str, Enum):
    """OpenAPI parameter serialization styles."""

    SIMPLE = "simple"
    LABEL = "label"
    MATRIX = "matrix"
    FORM = "form"
    SPACE_DELIMITED = "space_delimited"
    PIPE_DELIMITED = "pipe_delimited"
    DEEP_OBJECT = "deep_object"
    NONE = "none"


# Characters encodeURIComponent leaves untouched besides alphanumerics and "_.-~".
_URI_COMPONENT_SAFE = "!*'()"

_ENCODED_STYLES = frozenset(
    {
        SerializationStyle.FORM,
        SerializationStyle.SPACE_DELIMITED,
        SerializationStyle.PIPE_DELIMITED,
        SerializationStyle.DEEP_OBJECT,
    }
)


def to_wire_string(value: Any) -> str:
    """Render a scalar the way it appears on the wire."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return ""
    if isinstance(value, Enum):
        return str(value.value)
    return str(value)


def encode_component(value: Any) -> str:
    return quote(to_wire_string(value), safe=_URI_COMPONENT_SAFE)


def _is_sequence(value: Any) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray))


class Serializer:
    """Base serializer implementing the per-style rendering rules."""

    def serialize_value(self, param: Parameter) -> str:
        value = param.value
        if _is_sequence(value):
            return self._serialize_array(list(value), param)
        if isinstance(value, Mapping):
            return self._serialize_object(value, param)
        return self._serialize_primitive(param)

    def _enc(self, value: Any, param: Parameter) -> str:
        if param.encode and param.style in _ENCODED_STYLES:
            return encode_component(value)
        return to_wire_string(value)

    def _key(self, param: Parameter) -> str:
        return self._enc(param.key or "", param)

    def _serialize_primitive(self, param: Parameter) -> str:
        value = to_wire_string(param.value)
        style = param.style
        if style == SerializationStyle.LABEL:
            return f".{value}"
        if style == SerializationStyle.MATRIX:
            return f";{param.key}={value}"
        if style == SerializationStyle.FORM:
            return f"{self._key(param)}={self._enc(param.value, param)}"
        return value

    def _serialize_array(self, values: list[Any], param: Parameter) -> str:
        if param.explode:
            return self._serialize_array_exploded(values, param)

        joined = ",".join(to_wire_string(v) for v in values)
        style = param.style
        if style == SerializationStyle.SIMPLE:
            return joined
        if style == SerializationStyle.LABEL:
            return f".{joined}"
        if style == SerializationStyle.MATRIX:
            return f";{param.key}={joined}"
        if style == SerializationStyle.FORM:
            return f"{self._key(param)}={self._enc(joined, param)}"
        if style == SerializationStyle.SPACE_DELIMITED:
            spaced = " ".join(to_wire_string(v) for v in values)
            return f"{self._key(param)}={self._enc(spaced, param)}"
        if style == SerializationStyle.PIPE_DELIMITED:
            piped = "|".join(to_wire_string(v) for v in values)
            return f"{self._key(param)}={self._enc(piped, param)}"
        return joined

    def _serialize_array_exploded(self, values: list[Any], param: Parameter) -> str:
        style = param.style
        if style == SerializationStyle.SIMPLE:
            return ",".join(to_wire_string(v) for v in values)
        if style == SerializationStyle.LABEL:
            return "".join(f".{to_wire_string(v)}" for v in values)
        if style == SerializationStyle.MATRIX:
            return "".join(f";{param.key}={to_wire_string(v)}" for v in values)
        if style in (
            SerializationStyle.FORM,
            SerializationStyle.SPACE_DELIMITED,
            SerializationStyle.PIPE_DELIMITED,
        ):
            key = self._key(param)
            return "&".join(f"{key}={self._enc(v, param)}" for v in values)
        return ",".join(to_wire_string(v) for v in values)

    def _serialize_object(self, obj: Mapping[str, Any], param: Parameter) -> str:
        items = [(str(k), v) for k, v in obj.items()]
        style = param.style
        if param.explode:
            if style == SerializationStyle.SIMPLE:
                return ",".join(f"{k}={to_wire_string(v)}" for k, v in items)
            if style == SerializationStyle.LABEL:
                return "".join(f".{k}={to_wire_string(v)}" for k, v in items)
            if style == SerializationStyle.MATRIX:
                return "".join(f";{k}={to_wire_string(v)}" for k, v in items)
            if style == SerializationStyle.FORM:
                return "&".join(f"{self._enc(k, param)}={self._enc(v, param)}" for k, v in items)

        flat = ",".join(f"{k},{to_wire_string(v)}" for k, v in items)
        if style == SerializationStyle.SIMPLE:
            return flat
        if style == SerializationStyle.LABEL:
            return f".{flat}"
        if style == SerializationStyle.MATRIX:
            return f";{param.key}={flat}"
        if style == SerializationStyle.FORM:
            return "&".join(f"{self._enc(k, param)}={self._enc(v, param)}" for k, v in items)
        if style == SerializationStyle.DEEP_OBJECT:
            key = self._key(param)
            return "&".join(
                f"{key}[{self._enc(k, param)}]={self._enc(v, param)}" for k, v in items
            )
        return "&".join(f"{k}={to_wire_string(v)}" for k, v in items)


class PathSerializer(Serializer):
    """Substitutes `{name}` tokens of a path template."""

    def serialize(self, path_pattern: str, path_params: Mapping[str, Parameter]) -> str:
        path = path_pattern
        for param in path_params.values():
            if param.key is None or param.value is None:
                continue
            path = path.replace(f"{{{param.key}}}", self.serialize_value(param))
        return path


class QuerySerializer(Serializer):
    """Builds a `?a=1&b=2` query string, or `""` when nothing is emitted."""

    def serialize(self, query_params: Mapping[str, Parameter] | None) -> str:
        if not query_params:
            return ""
        query = [
            self.serialize_value(param) for param in query_params.values() if param.value is not None
        ]
        return f"?{'&'.join(query)}" if query else ""


class HeaderSerializer(Serializer):
    """Renders header parameters into a plain name -> value mapping."""

    def serialize(self, header_params: Mapping[str, Parameter] | None) -> dict[str, str] | None:
        if not header_params:
            return None
        return {
            param.key: self.serialize_value(param)
            for param in header_params.values()
            if param.key and param.value is not None
        }


class CookieSerializer:
    """Renders cookie parameters into a plain name -> value mapping."""

    def serialize(self, cookie_params: Mapping[str, Parameter] | None) -> dict[str, str] | None:
        if not cookie_params:
            return None
        return {
            param.key: self._serialize_cookie_value(param)
            for param in cookie_params.values()
            if param.key and param.value is not None
        }

    def _serialize_cookie_value(self, param: Parameter) -> str:
        value = param.value
        if _is_sequence(value):
            values = list(value)
            if not param.explode:
                return ",".join(to_wire_string(v) for v in values)
            if not values:
                return ""
            first = to_wire_string(values[0])
            rest = "; ".join(f"{param.key}={to_wire_string(v)}" for v in values[1:])
            return f"{first}; {rest}" if rest else first
        if isinstance(value, Mapping):
            return json.dumps(value, separators=(",", ":"), default=str)
        return to_wire_string(value)
