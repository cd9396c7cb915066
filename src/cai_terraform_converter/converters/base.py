#!/usr/bin/env python3
"""
Converter Contract

Every resource converter turns a batch of same-kind assets into resource
blocks. Converters are built once per run from a resource name and its schema.
"""

import re
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, List, Any, Callable, Sequence, Tuple

from ..assets import Asset
from ..schema import ResourceSchema
from ..values import TypedValue, map_to_typed_value_with_schema

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResourceBlock:
    """Labels plus typed body of one emitted block"""
    labels: Tuple[str, ...]
    value: TypedValue

    def __post_init__(self):
        if not self.labels:
            raise ValueError("Resource block labels must not be empty")
        object.__setattr__(self, 'labels', tuple(self.labels))


class Converter(ABC):
    """Maps assets of one kind to resource blocks"""

    def __init__(self, name: str, schema: ResourceSchema):
        self.name = name
        self.schema = schema

    @abstractmethod
    def convert(self, assets: Sequence[Asset]) -> List[ResourceBlock]:
        """Convert a batch of assets; may merge or split assets into blocks"""

    def build_block(self, block_name: str, data: Dict[str, Any]) -> ResourceBlock:
        """Type ``data`` against this converter's schema and wrap it in a resource block"""
        value = map_to_typed_value_with_schema(data, self.schema)
        return ResourceBlock(labels=(self.name, block_name), value=value)


ConverterFactory = Callable[[str, ResourceSchema], Converter]


def hcl_block_name(name: str) -> str:
    """Turn a resource id into a valid Terraform block name"""
    block_name = re.sub(r'[^A-Za-z0-9_-]', '_', name)
    if not block_name or not re.match(r'[A-Za-z_]', block_name):
        block_name = f"r_{block_name}"
    return block_name


def map_properties(data: Dict[str, Any], property_mapping: Dict[str, str]) -> Dict[str, Any]:
    """Copy asset fields under their Terraform names; unmapped fields are dropped"""
    return {tf_name: data[cai_name] for cai_name, tf_name in property_mapping.items() if cai_name in data}
