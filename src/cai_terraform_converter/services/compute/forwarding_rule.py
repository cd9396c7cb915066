#!/usr/bin/env python3
"""
Regional forwarding rule converter
"""

import logging
from typing import Dict, List, Any, Sequence

from ...assets import Asset
from ...converters.base import Converter, ResourceBlock, hcl_block_name, map_properties
from ...resolver import match_asset_name

logger = logging.getLogger(__name__)

FORWARDING_RULE_ASSET_TYPE = "compute.googleapis.com/ForwardingRule"
FORWARDING_RULE_NAME_PATTERN = r"projects/(?P<project>[^/]+)/regions/(?P<region>[^/]+)/forwardingRules"


class ComputeForwardingRuleConverter(Converter):
    """Converts regional ForwardingRule assets to google_compute_forwarding_rule"""

    PROPERTY_MAPPING = {
        'name': 'name',
        'description': 'description',
        'IPAddress': 'ip_address',
        'IPProtocol': 'ip_protocol',
        'ipVersion': 'ip_version',
        'portRange': 'port_range',
        'ports': 'ports',
        'allPorts': 'all_ports',
        'target': 'target',
        'backendService': 'backend_service',
        'loadBalancingScheme': 'load_balancing_scheme',
        'network': 'network',
        'subnetwork': 'subnetwork',
        'networkTier': 'network_tier',
        'allowGlobalAccess': 'allow_global_access',
        'isMirroringCollector': 'is_mirroring_collector',
        'labels': 'labels',
    }

    def convert(self, assets: Sequence[Asset]) -> List[ResourceBlock]:
        blocks = []
        for asset in assets:
            if asset.asset_type != FORWARDING_RULE_ASSET_TYPE:
                logger.debug(f"Skipping {asset.asset_type} asset matching the forwarding rule name pattern: {asset.name}")
                continue
            if not asset.resource or not asset.data:
                logger.debug(f"Skipping forwarding rule without resource data: {asset.name}")
                continue
            data = self._convert_resource_data(asset)
            blocks.append(self.build_block(hcl_block_name(data['name']), data))
        return blocks

    def _convert_resource_data(self, asset: Asset) -> Dict[str, Any]:
        result = map_properties(asset.data, self.PROPERTY_MAPPING)

        location = match_asset_name(asset.name, FORWARDING_RULE_NAME_PATTERN) or {}
        result['project'] = location.get('project')
        result['region'] = location.get('region')

        registrations = asset.data.get('serviceDirectoryRegistrations')
        if registrations:
            result['service_directory_registrations'] = [
                map_properties(registration, {'namespace': 'namespace', 'service': 'service'})
                for registration in registrations
            ]

        return result
