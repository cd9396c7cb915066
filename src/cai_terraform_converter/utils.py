#!/usr/bin/env python3
"""
Resource name helpers
"""

import re

SERVICE_PREFIX = re.compile(r'^//[^/]+/')


def strip_service_prefix(name: str) -> str:
    """Drop a leading //service.host/ segment from a full resource name"""
    return SERVICE_PREFIX.sub('', name, count=1)


def parse_field_value(url: str, name: str) -> str:
    """
    Extract the path segment that follows ``name`` in a resource URL

    >>> parse_field_value("projects/p/regions/us-central1/forwardingRules/fr", "regions")
    'us-central1'
    """
    fragments = url.split('/')
    for index, item in enumerate(fragments):
        if item == name and index + 1 < len(fragments):
            return fragments[index + 1]
    return ""
