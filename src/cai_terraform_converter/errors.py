#!/usr/bin/env python3
"""
Conversion Errors

Error kinds raised while turning inventory assets into Terraform configuration.
Unmatched assets are not errors; they are skipped by the resolver.
"""

from typing import Optional


class ConversionError(Exception):
    """Base class for every error raised by the conversion pipeline"""


class SchemaUnavailable(ConversionError):
    """A converter was requested for a resource type with no known schema"""

    def __init__(self, resource_type: str, message: Optional[str] = None):
        self.resource_type = resource_type
        super().__init__(message or f"No schema available for resource type: {resource_type}")


class TypeMismatch(ConversionError):
    """A value in an attribute tree does not fit the schema's expected shape"""

    def __init__(self, path: str, message: str):
        self.path = path
        self.reason = message
        location = path or "<root>"
        super().__init__(f"{location}: {message}")


class UnsupportedShape(ConversionError):
    """The writer met a typed value it cannot place in a block body"""


class ConverterFailure(ConversionError):
    """Opaque failure raised by a resource converter"""

    def __init__(self, converter_name: str, cause: Exception):
        self.converter_name = converter_name
        self.cause = cause
        super().__init__(f"Converter {converter_name} failed: {cause}")
