#!/usr/bin/env python3
"""
Resource Schema Definitions

This module describes Terraform resource schemas (field name to field shape),
derives the structural type a schema implies, and provides a schema provider
that loads schema documents from YAML or JSON files.
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Any, Iterable, Union

import yaml
from jsonschema import validate, ValidationError

from .errors import SchemaUnavailable

logger = logging.getLogger(__name__)

BUNDLED_SCHEMA_DIR = Path(__file__).parent / "schemas"

FIELD_TYPES = ["string", "int", "float", "number", "bool", "list", "set", "map", "object"]

# JSON Schema every schema document has to satisfy
SCHEMA_DOCUMENT_SCHEMA = {
    "type": "object",
    "additionalProperties": {"$ref": "#/definitions/resource"},
    "definitions": {
        "resource": {
            "type": "object",
            "additionalProperties": {"$ref": "#/definitions/field"}
        },
        "field": {
            "type": "object",
            "properties": {
                "type": {"type": "string", "enum": FIELD_TYPES},
                "elem": {"$ref": "#/definitions/field"},
                "block": {"$ref": "#/definitions/resource"},
                "required": {"type": "boolean"},
                "optional": {"type": "boolean"},
                "computed": {"type": "boolean"},
                "max_items": {"type": "integer", "minimum": 0},
                "description": {"type": "string"}
            },
            "required": ["type"],
            "additionalProperties": False
        }
    }
}


@dataclass
class FieldSchema:
    """Shape of a single resource field"""
    type: str
    elem: Optional["FieldSchema"] = None
    block: Optional[Dict[str, "FieldSchema"]] = None
    required: bool = False
    optional: bool = False
    computed: bool = False
    max_items: Optional[int] = None
    description: str = ""


ResourceSchema = Dict[str, FieldSchema]


class FieldType:
    """Structural type of a typed value"""

    def is_primitive_type(self) -> bool:
        return False

    def is_object_type(self) -> bool:
        return False

    def is_collection_type(self) -> bool:
        return False

    def is_map_type(self) -> bool:
        return False

    def friendly_name(self) -> str:
        raise NotImplementedError


@dataclass(frozen=True)
class PrimitiveType(FieldType):
    kind: str

    def is_primitive_type(self) -> bool:
        return True

    def friendly_name(self) -> str:
        return self.kind


@dataclass(frozen=True)
class ListType(FieldType):
    element_type: FieldType

    def is_collection_type(self) -> bool:
        return True

    def friendly_name(self) -> str:
        return f"list of {self.element_type.friendly_name()}"


@dataclass(frozen=True)
class SetType(FieldType):
    element_type: FieldType

    def is_collection_type(self) -> bool:
        return True

    def friendly_name(self) -> str:
        return f"set of {self.element_type.friendly_name()}"


@dataclass(frozen=True)
class MapType(FieldType):
    element_type: FieldType

    def is_collection_type(self) -> bool:
        return True

    def is_map_type(self) -> bool:
        return True

    def friendly_name(self) -> str:
        return f"map of {self.element_type.friendly_name()}"


@dataclass(frozen=True)
class ObjectType(FieldType):
    attributes: Dict[str, FieldType] = field(default_factory=dict)

    def is_object_type(self) -> bool:
        return True

    def friendly_name(self) -> str:
        return "object"


STRING = PrimitiveType("string")
NUMBER = PrimitiveType("number")
BOOL = PrimitiveType("bool")

PRIMITIVE_TYPES = {
    "string": STRING,
    "int": NUMBER,
    "float": NUMBER,
    "number": NUMBER,
    "bool": BOOL,
}


def implied_type(schema: Optional[ResourceSchema]) -> ObjectType:
    """Derive the object type a resource schema implies"""
    if schema is None:
        raise SchemaUnavailable("<unknown>", "Resource schema is missing")

    return ObjectType({name: _field_type(name, field_schema)
                       for name, field_schema in schema.items()})


def _field_type(name: str, field_schema: Optional[FieldSchema]) -> FieldType:
    if field_schema is None:
        raise SchemaUnavailable(name, f"Schema for field {name} is missing")

    kind = field_schema.type
    if kind in PRIMITIVE_TYPES:
        return PRIMITIVE_TYPES[kind]

    if kind in ("list", "set"):
        if field_schema.block is not None:
            element_type = implied_type(field_schema.block)
        elif field_schema.elem is not None:
            element_type = _field_type(name, field_schema.elem)
        else:
            raise SchemaUnavailable(name, f"Element schema for field {name} is missing")
        return ListType(element_type) if kind == "list" else SetType(element_type)

    if kind == "map":
        # Maps never hold nested blocks; a map without an element schema holds strings
        if field_schema.elem is not None and field_schema.block is None:
            return MapType(_field_type(name, field_schema.elem))
        return MapType(STRING)

    if kind == "object":
        if field_schema.block is None:
            raise SchemaUnavailable(name, f"Attribute schema for object field {name} is missing")
        return implied_type(field_schema.block)

    raise SchemaUnavailable(name, f"Unknown field type {kind} for field {name}")


def parse_field_schema(definition: Dict[str, Any]) -> FieldSchema:
    """Build a FieldSchema from its document form"""
    elem = definition.get("elem")
    block = definition.get("block")
    return FieldSchema(
        type=definition["type"],
        elem=parse_field_schema(elem) if elem is not None else None,
        block=parse_resource_schema(block) if block is not None else None,
        required=definition.get("required", False),
        optional=definition.get("optional", False),
        computed=definition.get("computed", False),
        max_items=definition.get("max_items"),
        description=definition.get("description", "")
    )


def parse_resource_schema(document: Dict[str, Any]) -> ResourceSchema:
    return {name: parse_field_schema(definition) for name, definition in document.items()}


class SchemaProvider:
    """
    Source of resource schemas

    Schemas are looked up by Terraform resource type name. Documents are
    validated against SCHEMA_DOCUMENT_SCHEMA before they are parsed.
    """

    def __init__(self, schemas: Optional[Dict[str, ResourceSchema]] = None):
        self._schemas: Dict[str, ResourceSchema] = dict(schemas or {})

    def get(self, resource_type: str) -> Optional[ResourceSchema]:
        return self._schemas.get(resource_type)

    def __contains__(self, resource_type: str) -> bool:
        return resource_type in self._schemas

    def resource_types(self) -> List[str]:
        return sorted(self._schemas)

    def add_document(self, document: Dict[str, Any], source: str = "<memory>"):
        """Validate a schema document and register every resource it defines"""
        try:
            validate(instance=document, schema=SCHEMA_DOCUMENT_SCHEMA)
        except ValidationError as e:
            logger.error(f"Invalid schema document {source}: {e.message}")
            raise ValueError(f"Invalid schema document {source}: {e.message}")

        for resource_type, resource_document in document.items():
            if resource_type in self._schemas:
                logger.warning(f"Schema for {resource_type} redefined by {source}")
            self._schemas[resource_type] = parse_resource_schema(resource_document)

        logger.debug(f"Loaded {len(document)} resource schemas from {source}")

    def load_file(self, schema_file: Union[str, Path]):
        """Load a YAML or JSON schema document"""
        path = Path(schema_file).expanduser()
        with open(path, 'r') as f:
            if path.suffix.lower() in ['.yaml', '.yml']:
                document = yaml.safe_load(f)
            elif path.suffix.lower() == '.json':
                document = json.load(f)
            else:
                raise ValueError(f"Unsupported schema file format: {path.suffix}")

        self.add_document(document or {}, source=str(path))

    def load_directory(self, schema_dir: Union[str, Path]):
        path = Path(schema_dir).expanduser()
        for schema_file in sorted(path.iterdir()):
            if schema_file.suffix.lower() in ['.yaml', '.yml', '.json']:
                self.load_file(schema_file)

    @classmethod
    def from_paths(cls, paths: Iterable[Union[str, Path]], include_bundled: bool = True) -> "SchemaProvider":
        """Build a provider from bundled schemas plus extra files or directories"""
        provider = cls()
        if include_bundled:
            provider.load_directory(BUNDLED_SCHEMA_DIR)

        for schema_path in paths:
            path = Path(schema_path).expanduser()
            if path.is_dir():
                provider.load_directory(path)
            else:
                provider.load_file(path)

        logger.info(f"Schema provider ready with {len(provider._schemas)} resource schemas")
        return provider

    @classmethod
    def bundled(cls) -> "SchemaProvider":
        return cls.from_paths([])
