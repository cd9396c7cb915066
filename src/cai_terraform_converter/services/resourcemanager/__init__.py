"""Resource Manager converters"""

from .converter_map import CONVERTER_NAMES, CONVERTER_FACTORIES

__all__ = ["CONVERTER_NAMES", "CONVERTER_FACTORIES"]
