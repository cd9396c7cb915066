#!/usr/bin/env python3
"""
Unit tests for value normalization and typed value building
"""

import unittest
import sys
import os

# Add src directory to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '../../src'))

from cai_terraform_converter.errors import TypeMismatch, SchemaUnavailable
from cai_terraform_converter.schema import (
    parse_resource_schema, FieldSchema, ObjectType, ListType, SetType, MapType, STRING, NUMBER, BOOL
)
from cai_terraform_converter.values import (
    normalize_value, map_to_typed_value_with_schema, TypedValue
)


SCHEMA = parse_resource_schema({
    "name": {"type": "string"},
    "port": {"type": "int"},
    "enabled": {"type": "bool"},
    "tags": {"type": "set", "elem": {"type": "string"}},
    "labels": {"type": "map", "elem": {"type": "string"}},
    "rules": {
        "type": "list",
        "block": {
            "action": {"type": "string"},
            "priority": {"type": "int"}
        }
    }
})


class TestNormalizeValue(unittest.TestCase):
    """Test the value normalizer"""

    def test_set_becomes_sorted_list(self):
        """Set-like containers are materialized in a stable order"""
        self.assertEqual(normalize_value({"b", "c", "a"}), ["a", "b", "c"])
        self.assertEqual(normalize_value(frozenset([3, 1, 2])), [1, 2, 3])

    def test_nested_structures_are_preserved(self):
        tree = {"a": [1, {"b": {"x", "y"}}], "c": (True, None)}
        expected = {"a": [1, {"b": ["x", "y"]}], "c": [True, None]}
        self.assertEqual(normalize_value(tree), expected)

    def test_normalization_is_idempotent(self):
        tree = {"a": [{"b": {2, 1}}, "s"], "m": {"k": frozenset(["z", "y"])}, "n": None}
        once = normalize_value(tree)
        self.assertEqual(normalize_value(once), once)

    def test_scalars_pass_through(self):
        for value in ["s", 1, 1.5, True, None]:
            self.assertEqual(normalize_value(value), value)

    def test_input_is_not_mutated(self):
        tree = {"tags": {"a", "b"}}
        normalize_value(tree)
        self.assertEqual(tree, {"tags": {"a", "b"}})


class TestTypedValueBuilder(unittest.TestCase):
    """Test building typed values from attribute trees"""

    def test_builds_object_with_all_attributes(self):
        value = map_to_typed_value_with_schema({"name": "n1"}, SCHEMA)

        self.assertIsInstance(value, TypedValue)
        self.assertTrue(value.type.is_object_type())
        self.assertEqual(set(value.value), set(SCHEMA))
        self.assertEqual(value.value["name"].value, "n1")
        self.assertTrue(value.value["port"].is_null())
        self.assertTrue(value.value["rules"].is_null())

    def test_implied_types(self):
        value = map_to_typed_value_with_schema({}, SCHEMA)
        types = {name: element.type for name, element in value.value.items()}

        self.assertEqual(types["name"], STRING)
        self.assertEqual(types["port"], NUMBER)
        self.assertEqual(types["enabled"], BOOL)
        self.assertEqual(types["tags"], SetType(STRING))
        self.assertEqual(types["labels"], MapType(STRING))
        self.assertIsInstance(types["rules"], ListType)
        self.assertEqual(types["rules"].element_type,
                         ObjectType({"action": STRING, "priority": NUMBER}))

    def test_nested_list_of_objects(self):
        data = {"rules": [{"action": "allow", "priority": 1}, {"action": "deny"}]}
        value = map_to_typed_value_with_schema(data, SCHEMA)

        rules = value.value["rules"]
        self.assertEqual(rules.length(), 2)
        self.assertEqual(rules.value[0].value["action"].value, "allow")
        self.assertTrue(rules.value[1].value["priority"].is_null())

    def test_set_values_are_deduplicated(self):
        value = map_to_typed_value_with_schema({"tags": ["a", "b", "a"]}, SCHEMA)
        self.assertEqual(value.value["tags"].to_python(), ["a", "b"])

    def test_python_set_input_is_accepted(self):
        value = map_to_typed_value_with_schema({"tags": {"b", "a"}}, SCHEMA)
        self.assertEqual(value.value["tags"].to_python(), ["a", "b"])

    def test_primitive_conversions(self):
        data = {"name": 42, "port": "8080", "enabled": "true"}
        value = map_to_typed_value_with_schema(data, SCHEMA)

        self.assertEqual(value.value["name"].value, "42")
        self.assertEqual(value.value["port"].value, 8080)
        self.assertIs(value.value["enabled"].value, True)

    def test_bool_to_string_conversion(self):
        value = map_to_typed_value_with_schema({"name": False}, SCHEMA)
        self.assertEqual(value.value["name"].value, "false")

    def test_string_where_object_expected_is_rejected(self):
        with self.assertRaises(TypeMismatch) as ctx:
            map_to_typed_value_with_schema({"rules": ["not-an-object"]}, SCHEMA)
        self.assertEqual(ctx.exception.path, "rules[0]")

    def test_scalar_where_list_expected_is_rejected(self):
        with self.assertRaises(TypeMismatch) as ctx:
            map_to_typed_value_with_schema({"rules": "allow"}, SCHEMA)
        self.assertEqual(ctx.exception.path, "rules")

    def test_object_where_string_expected_is_rejected(self):
        with self.assertRaises(TypeMismatch):
            map_to_typed_value_with_schema({"name": {"nested": "value"}}, SCHEMA)

    def test_non_numeric_string_where_number_expected_is_rejected(self):
        with self.assertRaises(TypeMismatch):
            map_to_typed_value_with_schema({"port": "eighty"}, SCHEMA)

    def test_bool_where_number_expected_is_rejected(self):
        with self.assertRaises(TypeMismatch):
            map_to_typed_value_with_schema({"port": True}, SCHEMA)

    def test_unknown_attribute_is_rejected(self):
        with self.assertRaises(TypeMismatch) as ctx:
            map_to_typed_value_with_schema({"name": "n", "extra": 1}, SCHEMA)
        self.assertEqual(ctx.exception.path, "extra")
        self.assertIn("unsupported attribute", str(ctx.exception))

    def test_unknown_nested_attribute_is_rejected(self):
        with self.assertRaises(TypeMismatch) as ctx:
            map_to_typed_value_with_schema({"rules": [{"action": "a", "bogus": 1}]}, SCHEMA)
        self.assertEqual(ctx.exception.path, "rules[0].bogus")

    def test_unserializable_value_is_rejected(self):
        with self.assertRaises(TypeMismatch):
            map_to_typed_value_with_schema({"name": object()}, SCHEMA)

    def test_every_typed_key_exists_in_schema(self):
        data = {"name": "n", "labels": {"a": "1"}, "rules": [{"action": "allow"}]}
        value = map_to_typed_value_with_schema(data, SCHEMA)

        self.assertTrue(set(value.value).issubset(set(SCHEMA)))
        self.assertEqual(value.to_python()["labels"], {"a": "1"})

    def test_non_finite_numbers_are_rejected(self):
        for number in [float("nan"), float("inf"), float("-inf")]:
            with self.assertRaises(TypeMismatch):
                map_to_typed_value_with_schema({"port": number}, SCHEMA)

    def test_non_finite_numeric_strings_are_rejected(self):
        with self.assertRaises(TypeMismatch):
            map_to_typed_value_with_schema({"port": "nan"}, SCHEMA)

    def test_missing_schema(self):
        with self.assertRaises(SchemaUnavailable):
            map_to_typed_value_with_schema({}, None)

    def test_missing_element_schema(self):
        schema = {"items": FieldSchema(type="list")}
        with self.assertRaises(SchemaUnavailable):
            map_to_typed_value_with_schema({}, schema)

    def test_map_values_are_typed(self):
        schema = parse_resource_schema({"limits": {"type": "map", "elem": {"type": "int"}}})
        value = map_to_typed_value_with_schema({"limits": {"cpu": "2", "mem": 4}}, schema)

        self.assertEqual(value.value["limits"].to_python(), {"cpu": 2, "mem": 4})

    def test_map_value_mismatch_reports_key_path(self):
        schema = parse_resource_schema({"limits": {"type": "map", "elem": {"type": "int"}}})
        with self.assertRaises(TypeMismatch) as ctx:
            map_to_typed_value_with_schema({"limits": {"cpu": "many"}}, schema)
        self.assertEqual(ctx.exception.path, 'limits["cpu"]')


class TestTypedValue(unittest.TestCase):
    """Test TypedValue helpers"""

    def test_object_elements_are_sorted(self):
        value = map_to_typed_value_with_schema({"port": 1, "name": "n"}, SCHEMA)
        keys = [key for key, _ in value.elements()]
        self.assertEqual(keys, sorted(SCHEMA))

    def test_length_of_null_collection(self):
        self.assertEqual(TypedValue(ListType(STRING), None).length(), 0)

    def test_length_of_primitive_raises(self):
        with self.assertRaises(TypeError):
            TypedValue(STRING, "x").length()


if __name__ == '__main__':
    unittest.main()
