#!/usr/bin/env python3
"""
Unit tests for the converter registry
"""

import unittest
import sys
import os

# Add src directory to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '../../src'))

from cai_terraform_converter import services
from cai_terraform_converter.converters.base import Converter
from cai_terraform_converter.errors import SchemaUnavailable
from cai_terraform_converter.registry import ConverterRegistry, create_converter_map
from cai_terraform_converter.schema import SchemaProvider


class NoopConverter(Converter):
    built = []

    def __init__(self, name, schema):
        super().__init__(name, schema)
        NoopConverter.built.append(name)

    def convert(self, assets):
        return []


class TestCreateConverterMap(unittest.TestCase):
    """Test building the converter registry"""

    def setUp(self):
        NoopConverter.built = []
        self.provider = SchemaProvider()
        self.provider.add_document({
            "google_a": {"name": {"type": "string"}},
            "google_b": {"name": {"type": "string"}}
        })

    def test_every_converter_is_built_up_front(self):
        registry = create_converter_map({"google_a": NoopConverter, "google_b": NoopConverter}, self.provider)

        self.assertEqual(sorted(NoopConverter.built), ["google_a", "google_b"])
        self.assertEqual(len(registry), 2)
        self.assertEqual(registry["google_a"].name, "google_a")
        self.assertIs(registry["google_a"].schema, self.provider.get("google_a"))

    def test_missing_schema_fails_setup(self):
        with self.assertRaises(SchemaUnavailable) as ctx:
            create_converter_map({"google_a": NoopConverter, "google_missing": NoopConverter}, self.provider)
        self.assertEqual(ctx.exception.resource_type, "google_missing")

    def test_registry_is_read_only(self):
        registry = create_converter_map({"google_a": NoopConverter}, self.provider)

        with self.assertRaises(TypeError):
            registry["google_b"] = NoopConverter("google_b", {})
        self.assertIsNone(registry.get("google_b"))
        self.assertIn("google_a", registry)

    def test_bundled_services_have_schemas(self):
        registry = create_converter_map(services.converter_factories(), SchemaProvider.bundled())

        self.assertIsInstance(registry, ConverterRegistry)
        self.assertEqual(sorted(registry), [
            "google_compute_forwarding_rule",
            "google_compute_health_check",
            "google_project",
        ])


class TestServiceTables(unittest.TestCase):
    """Test the bundled service tables"""

    def test_selected_services(self):
        names = services.converter_names(["resourcemanager"])

        self.assertEqual(set(names.per_asset_type.values()), {"google_project"})
        self.assertEqual(names.per_asset_regex, {})
        self.assertEqual(list(services.converter_factories(["resourcemanager"])), ["google_project"])

    def test_unknown_service(self):
        with self.assertRaises(ValueError):
            services.converter_names(["storage"])


if __name__ == '__main__':
    unittest.main()
