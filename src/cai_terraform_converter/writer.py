#!/usr/bin/env python3
"""
HCL Block Writer

This module walks typed value trees and writes Terraform HCL. Each object
field becomes a nested block, each list or set of objects becomes a repeated
nested block, and everything else becomes a flat attribute. Null values,
empty collections and empty strings are left out.
"""

import re
import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple, Union

from jinja2 import Template

from .converters.base import ResourceBlock
from .errors import UnsupportedShape
from .schema import STRING, NUMBER, BOOL
from .values import TypedValue

logger = logging.getLogger(__name__)

INDENT = "  "
IDENTIFIER = re.compile(r'^[A-Za-z_][A-Za-z0-9_-]*$')

DOCUMENT_TEMPLATE = """{% if header_comment %}# {{ header_comment }}

{% endif %}{% for block in blocks %}{{ block }}
{% if not loop.last %}
{% endif %}{% endfor %}"""


@dataclass
class HCLAttribute:
    name: str
    value: TypedValue


@dataclass
class HCLBlock:
    type: str
    labels: Tuple[str, ...] = ()
    items: List[Union[HCLAttribute, "HCLBlock"]] = field(default_factory=list)

    def append_block(self, block_type: str, labels: Sequence[str] = ()) -> "HCLBlock":
        block = HCLBlock(block_type, tuple(labels))
        self.items.append(block)
        return block

    def set_attribute(self, name: str, value: TypedValue):
        self.items.append(HCLAttribute(name, value))


class HCLWriter:
    """
    Writes resource blocks as an HCL document

    The writer holds no per-call state; one instance can serve many calls.
    """

    def __init__(self, block_type: str = "resource", header_comment: Optional[str] = None):
        self.block_type = block_type
        self.header_comment = header_comment

    def write(self, blocks: Sequence[ResourceBlock]) -> str:
        """Render resource blocks into one document"""
        rendered = ["\n".join(self.render_block(self.build_block(block))) for block in blocks]

        template = Template(DOCUMENT_TEMPLATE)
        document = template.render(header_comment=self.header_comment, blocks=rendered)

        logger.debug(f"Wrote {len(rendered)} blocks")
        return document

    def build_block(self, resource_block: ResourceBlock) -> HCLBlock:
        block = HCLBlock(self.block_type, resource_block.labels)
        self.write_body(resource_block.value, block)
        return block

    def write_body(self, value: TypedValue, block: HCLBlock):
        """Recursively write an object-typed value into a block body"""
        if not value.type.is_object_type():
            raise UnsupportedShape(f"expect object type only, but type = {value.type.friendly_name()}")
        if value.is_null():
            return

        for key, element in value.elements():
            if element.is_null():
                continue

            element_type = element.type
            if element_type.is_object_type():
                self.write_body(element, block.append_block(_block_name(key)))

            elif element_type.is_collection_type():
                if element.length() == 0:
                    continue
                # Maps never hold nested blocks
                if not element_type.is_map_type() and element_type.element_type.is_object_type():
                    name = _block_name(key)
                    for _, item in element.elements():
                        self.write_body(item, block.append_block(name))
                    continue
                block.set_attribute(key, element)

            elif element_type.is_primitive_type():
                if element_type == STRING and element.value == "":
                    continue
                block.set_attribute(key, element)

            else:
                raise UnsupportedShape(f"cannot write {key} of type {element_type!r}")

    def render_block(self, block: HCLBlock, depth: int = 0) -> List[str]:
        indent = INDENT * depth
        header = " ".join([block.type] + [quote_string(label) for label in block.labels])
        lines = [f"{indent}{header} {{"]

        attributes: List[Tuple[str, str]] = []
        for item in block.items:
            if isinstance(item, HCLAttribute):
                attributes.append((item.name, render_value(item.value, depth + 1)))
                continue
            lines.extend(_align_attributes(attributes, depth + 1))
            attributes = []
            lines.extend(self.render_block(item, depth + 1))

        lines.extend(_align_attributes(attributes, depth + 1))
        lines.append(f"{indent}}}")
        return lines


def _block_name(key: str) -> str:
    if not IDENTIFIER.match(key):
        raise UnsupportedShape(f"cannot write {key!r} as a block name")
    return key


def _align_attributes(attributes: List[Tuple[str, str]], depth: int) -> List[str]:
    """Render name = value lines, aligning '=' across single-line runs"""
    indent = INDENT * depth
    lines = []
    run: List[Tuple[str, str]] = []

    def flush():
        width = max((len(name) for name, _ in run), default=0)
        for name, rendered in run:
            lines.append(f"{indent}{name.ljust(width)} = {rendered}")
        run.clear()

    for name, rendered in attributes:
        if "\n" in rendered:
            flush()
            lines.append(f"{indent}{name} = {rendered}")
        else:
            run.append((name, rendered))
    flush()
    return lines


def render_value(value: TypedValue, depth: int = 0) -> str:
    """Render a typed value as an HCL expression"""
    if value.is_null():
        return "null"

    value_type = value.type
    if value_type == STRING:
        return quote_string(value.value)
    if value_type == NUMBER:
        return format_number(value.value)
    if value_type == BOOL:
        return "true" if value.value else "false"

    if value_type.is_object_type() or value_type.is_map_type():
        if not value.value:
            return "{}"
        entries = [(_render_key(key), render_value(element, depth + 1))
                   for key, element in value.elements()]
        lines = _align_attributes(entries, depth + 1)
        return "{\n" + "\n".join(lines) + "\n" + INDENT * depth + "}"

    if value_type.is_collection_type():
        return "[" + ", ".join(render_value(element, depth) for _, element in value.elements()) + "]"

    raise UnsupportedShape(f"cannot render value of type {value_type!r}")


def _render_key(key: str) -> str:
    return key if IDENTIFIER.match(key) else quote_string(key)


def quote_string(text: str) -> str:
    """Quote a string as an HCL template literal"""
    escaped = []
    for char in text:
        if char == '\\':
            escaped.append('\\\\')
        elif char == '"':
            escaped.append('\\"')
        elif char == '\n':
            escaped.append('\\n')
        elif char == '\r':
            escaped.append('\\r')
        elif char == '\t':
            escaped.append('\\t')
        elif ord(char) < 0x20:
            escaped.append(f'\\u{ord(char):04x}')
        else:
            escaped.append(char)

    body = ''.join(escaped).replace('${', '$${').replace('%{', '%%{')
    return f'"{body}"'


def format_number(number: Union[int, float]) -> str:
    if isinstance(number, float) and number.is_integer():
        return str(int(number))
    return str(number)


def write_blocks(blocks: Sequence[ResourceBlock]) -> str:
    """Render resource blocks with the default writer"""
    return HCLWriter().write(blocks)
