#!/usr/bin/env python3
"""
Compute Engine converter tables
"""

from ...resolver import ConverterNames
from .forwarding_rule import ComputeForwardingRuleConverter, FORWARDING_RULE_NAME_PATTERN
from .health_check import ComputeHealthCheckConverter, HEALTH_CHECK_ASSET_TYPE

CONVERTER_NAMES = ConverterNames(
    per_asset_type={
        HEALTH_CHECK_ASSET_TYPE: "google_compute_health_check",
    },
    # Regional and global forwarding rules share one asset type
    per_asset_regex={
        FORWARDING_RULE_NAME_PATTERN: "google_compute_forwarding_rule",
    }
)

CONVERTER_FACTORIES = {
    "google_compute_forwarding_rule": ComputeForwardingRuleConverter,
    "google_compute_health_check": ComputeHealthCheckConverter,
}
