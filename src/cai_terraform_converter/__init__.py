"""
Cloud Asset Inventory to Terraform Converter

Converts Cloud Asset Inventory records into Terraform HCL resource blocks
that can be imported into Terraform state.
"""

__version__ = "1.0.0"

from .assets import Asset, AssetResource, load_assets
from .conversion import ConversionEngine, ConversionResult, create_engine
from .converters.base import Converter, ResourceBlock
from .errors import ConversionError, SchemaUnavailable, TypeMismatch, UnsupportedShape, ConverterFailure
from .registry import ConverterRegistry, create_converter_map
from .resolver import ConverterNames, ConverterResolver
from .schema import SchemaProvider
from .writer import HCLWriter

__all__ = [
    "Asset",
    "AssetResource",
    "load_assets",
    "ConversionEngine",
    "ConversionResult",
    "create_engine",
    "Converter",
    "ResourceBlock",
    "ConversionError",
    "SchemaUnavailable",
    "TypeMismatch",
    "UnsupportedShape",
    "ConverterFailure",
    "ConverterRegistry",
    "create_converter_map",
    "ConverterNames",
    "ConverterResolver",
    "SchemaProvider",
    "HCLWriter"
]
