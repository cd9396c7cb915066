"""
Bundled converter services

Each service module exposes CONVERTER_NAMES (its resolution table) and
CONVERTER_FACTORIES (converter name to factory).
"""

import logging
from typing import Dict, List, Optional

from ..converters.base import ConverterFactory
from ..resolver import ConverterNames
from . import compute, resourcemanager

logger = logging.getLogger(__name__)

SERVICES = {
    "compute": compute,
    "resourcemanager": resourcemanager,
}


def _selected(services: Optional[List[str]]):
    names = services or list(SERVICES)
    unknown = [name for name in names if name not in SERVICES]
    if unknown:
        raise ValueError(f"Unknown services: {', '.join(unknown)}")
    return [SERVICES[name] for name in names]


def converter_names(services: Optional[List[str]] = None) -> ConverterNames:
    """Merged resolution table of the selected services"""
    merged = ConverterNames()
    for service in _selected(services):
        merged = merged.merge(service.CONVERTER_NAMES)
    return merged


def converter_factories(services: Optional[List[str]] = None) -> Dict[str, ConverterFactory]:
    """Merged converter factories of the selected services"""
    factories: Dict[str, ConverterFactory] = {}
    for service in _selected(services):
        factories.update(service.CONVERTER_FACTORIES)
    return factories
