#!/usr/bin/env python3
"""
Typed Values

This module normalizes untyped asset attribute trees and coerces them into
typed value trees shaped by a resource schema. Every structural decision made
later by the writer is read from the typed tree, never from the raw data.
"""

import json
import logging
import math
from dataclasses import dataclass
from typing import Dict, List, Any, Iterator, Tuple

from .errors import TypeMismatch
from .schema import (
    FieldType, ListType, SetType, MapType, ObjectType, ResourceSchema,
    STRING, NUMBER, BOOL, implied_type
)

logger = logging.getLogger(__name__)


def _canonical_key(value: Any) -> str:
    return json.dumps(value, sort_keys=True, default=str)


def normalize_value(obj: Any) -> Any:
    """
    Normalize an attribute tree so it can be marshaled as JSON

    Lists and tuples become lists, mappings are mirrored, and set-like
    containers are materialized as lists sorted by their canonical JSON form
    so the output is stable from run to run.
    """
    if isinstance(obj, (list, tuple)):
        return [normalize_value(item) for item in obj]

    if isinstance(obj, dict):
        return {key: normalize_value(value) for key, value in obj.items()}

    if isinstance(obj, (set, frozenset)):
        items = [normalize_value(item) for item in obj]
        return sorted(items, key=_canonical_key)

    return obj


@dataclass(frozen=True)
class TypedValue:
    """
    A value paired with its structural type

    ``value`` is None for null, a Python scalar for primitives, a list of
    TypedValue for lists and sets, and a dict of TypedValue for maps and
    objects.
    """
    type: FieldType
    value: Any = None

    def is_null(self) -> bool:
        return self.value is None

    def length(self) -> int:
        if self.value is None:
            return 0
        if not self.type.is_collection_type():
            raise TypeError(f"length of {self.type.friendly_name()} value is undefined")
        return len(self.value)

    def elements(self) -> Iterator[Tuple[Any, "TypedValue"]]:
        """Iterate (key, element) pairs; object attributes and map keys come in sorted order"""
        if self.value is None:
            return
        if self.type.is_object_type() or self.type.is_map_type():
            for key in sorted(self.value):
                yield key, self.value[key]
        elif self.type.is_collection_type():
            for index, element in enumerate(self.value):
                yield index, element
        else:
            raise TypeError(f"{self.type.friendly_name()} value has no elements")

    def to_python(self) -> Any:
        """Convert back to plain Python data"""
        if self.value is None:
            return None
        if self.type.is_object_type() or self.type.is_map_type():
            return {key: element.to_python() for key, element in self.value.items()}
        if self.type.is_collection_type():
            return [element.to_python() for element in self.value]
        return self.value


def null_value(value_type: FieldType) -> TypedValue:
    return TypedValue(value_type, None)


def map_to_typed_value_with_schema(data: Dict[str, Any], schema: ResourceSchema) -> TypedValue:
    """
    Convert an untyped attribute map into a typed value for a resource schema

    The map is normalized, marshaled to JSON and decoded against the type the
    schema implies. Raises TypeMismatch when a value cannot take the expected
    shape and SchemaUnavailable when the schema (or part of it) is missing.
    """
    object_type = implied_type(schema)
    normalized = normalize_value(data)

    try:
        wire = json.dumps(normalized, allow_nan=False)
    except (TypeError, ValueError) as e:
        raise TypeMismatch("", f"error marshaling map as JSON: {e}")

    return decode_typed_value(json.loads(wire), object_type)


def decode_typed_value(data: Any, value_type: FieldType, path: str = "") -> TypedValue:
    """Decode JSON-compatible data against a structural type"""
    if data is None:
        return null_value(value_type)

    if value_type.is_object_type():
        return _decode_object(data, value_type, path)

    if value_type.is_map_type():
        if not isinstance(data, dict):
            raise TypeMismatch(path, f"{_describe(data)} where {value_type.friendly_name()} is required")
        return TypedValue(value_type, {
            key: decode_typed_value(data[key], value_type.element_type, _map_path(path, key))
            for key in sorted(data)
        })

    if value_type.is_collection_type():
        if not isinstance(data, list):
            raise TypeMismatch(path, f"{_describe(data)} where {value_type.friendly_name()} is required")
        elements = [decode_typed_value(item, value_type.element_type, f"{path}[{index}]")
                    for index, item in enumerate(data)]
        if isinstance(value_type, SetType):
            elements = _unique(elements)
        return TypedValue(value_type, elements)

    if value_type.is_primitive_type():
        return TypedValue(value_type, _decode_primitive(data, value_type, path))

    raise TypeMismatch(path, f"unsupported type {value_type!r}")


def _decode_object(data: Any, object_type: ObjectType, path: str) -> TypedValue:
    if not isinstance(data, dict):
        raise TypeMismatch(path, f"{_describe(data)} where object is required")

    for key in data:
        if key not in object_type.attributes:
            raise TypeMismatch(_attribute_path(path, key), "unsupported attribute")

    attributes = {}
    for name in sorted(object_type.attributes):
        attribute_type = object_type.attributes[name]
        attributes[name] = decode_typed_value(data.get(name), attribute_type, _attribute_path(path, name))

    return TypedValue(object_type, attributes)


def _decode_primitive(data: Any, value_type: FieldType, path: str) -> Any:
    if value_type == STRING:
        if isinstance(data, str):
            return data
        if isinstance(data, bool):
            return "true" if data else "false"
        if isinstance(data, (int, float)):
            return _number_to_string(data)
        raise TypeMismatch(path, f"{_describe(data)} where string is required")

    if value_type == NUMBER:
        if isinstance(data, bool):
            raise TypeMismatch(path, "bool where number is required")
        if isinstance(data, (int, float)):
            return data
        if isinstance(data, str):
            try:
                return int(data)
            except ValueError:
                pass
            try:
                number = float(data)
            except ValueError:
                raise TypeMismatch(path, f"a number is required, got string {data!r}")
            if not math.isfinite(number):
                raise TypeMismatch(path, f"a finite number is required, got string {data!r}")
            return number
        raise TypeMismatch(path, f"{_describe(data)} where number is required")

    if value_type == BOOL:
        if isinstance(data, bool):
            return data
        if data == "true":
            return True
        if data == "false":
            return False
        raise TypeMismatch(path, f"{_describe(data)} where bool is required")

    raise TypeMismatch(path, f"unsupported primitive type {value_type.friendly_name()}")


def _number_to_string(number: Any) -> str:
    if isinstance(number, float) and number.is_integer():
        return str(int(number))
    return str(number)


def _unique(elements: List[TypedValue]) -> List[TypedValue]:
    seen = set()
    result = []
    for element in elements:
        key = _canonical_key(element.to_python())
        if key not in seen:
            seen.add(key)
            result.append(element)
    return result


def _describe(data: Any) -> str:
    if isinstance(data, dict):
        return "object"
    if isinstance(data, list):
        return "array"
    if isinstance(data, bool):
        return "bool"
    if isinstance(data, (int, float)):
        return "number"
    if isinstance(data, str):
        return "string"
    return type(data).__name__


def _attribute_path(path: str, name: str) -> str:
    return f"{path}.{name}" if path else name


def _map_path(path: str, key: str) -> str:
    return f'{path}["{key}"]'
