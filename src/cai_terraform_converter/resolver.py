#!/usr/bin/env python3
"""
Converter Resolution

Decides which converter handles an asset: the exact asset type table is
consulted first, then the asset name patterns in their declared order.
"""

import re
import logging
from dataclasses import dataclass, field
from typing import Dict, Optional, Pattern, Tuple

from .assets import Asset
from .utils import strip_service_prefix

logger = logging.getLogger(__name__)


@dataclass
class ConverterNames:
    """Resolution table for one or more services"""
    per_asset_type: Dict[str, str] = field(default_factory=dict)
    per_asset_regex: Dict[str, str] = field(default_factory=dict)

    def merge(self, other: "ConverterNames") -> "ConverterNames":
        """Return a new table with entries of ``other`` appended"""
        return ConverterNames(
            per_asset_type={**self.per_asset_type, **other.per_asset_type},
            per_asset_regex={**self.per_asset_regex, **other.per_asset_regex}
        )


def match_asset_name(asset_name: str, pattern: str) -> Optional[Dict[str, str]]:
    """
    Match an asset name against a pattern

    The name may carry a //service.host/ prefix or not. Returns the named
    groups of the match, or None when the pattern does not apply.
    """
    match = re.match(pattern, strip_service_prefix(asset_name))
    if match is None:
        return None
    return match.groupdict()


CompiledPatterns = Tuple[Tuple[Pattern, str], ...]


def compile_patterns(converter_names_per_regex: Dict[str, str]) -> CompiledPatterns:
    return tuple((re.compile(pattern), name) for pattern, name in converter_names_per_regex.items())


def first_matching_converter(asset_name: str, patterns: CompiledPatterns) -> Optional[str]:
    """Return the converter name of the first compiled pattern matching the asset name"""
    bare_name = strip_service_prefix(asset_name)
    for pattern, converter_name in patterns:
        if pattern.match(bare_name):
            return converter_name
    return None


def try_get_converter_name_by_asset_name_regex(asset_name: str,
                                               converter_names_per_regex: Dict[str, str]) -> Optional[str]:
    """Return the converter name of the first pattern matching the asset name"""
    return first_matching_converter(asset_name, compile_patterns(converter_names_per_regex))


class ConverterResolver:
    """Resolves assets to converter names using a ConverterNames table"""

    def __init__(self, converter_names: ConverterNames):
        self.converter_names = converter_names
        self._patterns = compile_patterns(converter_names.per_asset_regex)

    def resolve(self, asset: Asset) -> Optional[str]:
        """
        Resolve the converter name for an asset

        Returns None for assets no converter is configured for; callers skip
        those silently.
        """
        name = self.converter_names.per_asset_type.get(asset.asset_type)
        if name is not None:
            return name

        name = first_matching_converter(asset.name, self._patterns)
        if name is not None:
            return name

        logger.debug(f"No converter for asset {asset.name} ({asset.asset_type})")
        return None
