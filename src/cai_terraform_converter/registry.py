#!/usr/bin/env python3
"""
Converter Registry

Builds every converter once, up front, from its factory and the schema the
schema provider holds for its name. The registry is read-only afterwards and
is safe to share between worker threads.
"""

import logging
from collections.abc import Mapping
from typing import Dict, Iterator

from .converters.base import Converter, ConverterFactory
from .errors import SchemaUnavailable
from .schema import SchemaProvider

logger = logging.getLogger(__name__)


class ConverterRegistry(Mapping):
    """Immutable name to converter table"""

    def __init__(self, converters: Dict[str, Converter]):
        self._converters = dict(converters)

    def __getitem__(self, name: str) -> Converter:
        return self._converters[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._converters)

    def __len__(self) -> int:
        return len(self._converters)

    def __repr__(self) -> str:
        return f"ConverterRegistry({sorted(self._converters)})"


def create_converter_map(converter_factories: Dict[str, ConverterFactory],
                         schema_provider: SchemaProvider) -> ConverterRegistry:
    """
    Initialize the converter registry

    Args:
        converter_factories: Converter name to factory taking (name, schema)
        schema_provider: Source of resource schemas

    Returns:
        ConverterRegistry with one converter per factory

    Raises:
        SchemaUnavailable: a factory name has no schema; this is a setup error
    """
    converters = {}
    for name, factory in converter_factories.items():
        schema = schema_provider.get(name)
        if schema is None:
            logger.error(f"No schema found for converter {name}")
            raise SchemaUnavailable(name)
        converters[name] = factory(name, schema)

    logger.info(f"Initialized converter registry with {len(converters)} converters")
    return ConverterRegistry(converters)
