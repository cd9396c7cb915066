#!/usr/bin/env python3
"""
Health check converter
"""

import logging
from typing import Dict, List, Any, Sequence

from ...assets import Asset
from ...converters.base import Converter, ResourceBlock, hcl_block_name, map_properties
from ...utils import parse_field_value

logger = logging.getLogger(__name__)

HEALTH_CHECK_ASSET_TYPE = "compute.googleapis.com/HealthCheck"

HTTP_CHECK_MAPPING = {
    'host': 'host',
    'requestPath': 'request_path',
    'response': 'response',
    'port': 'port',
    'portName': 'port_name',
    'proxyHeader': 'proxy_header',
    'portSpecification': 'port_specification',
}

TCP_CHECK_MAPPING = {
    'request': 'request',
    'response': 'response',
    'port': 'port',
    'portName': 'port_name',
    'proxyHeader': 'proxy_header',
    'portSpecification': 'port_specification',
}

# CAI field -> (Terraform block, field mapping)
CHECK_BLOCKS = {
    'httpHealthCheck': ('http_health_check', HTTP_CHECK_MAPPING),
    'httpsHealthCheck': ('https_health_check', HTTP_CHECK_MAPPING),
    'http2HealthCheck': ('http2_health_check', HTTP_CHECK_MAPPING),
    'tcpHealthCheck': ('tcp_health_check', TCP_CHECK_MAPPING),
}


class ComputeHealthCheckConverter(Converter):
    """Converts HealthCheck assets to google_compute_health_check"""

    PROPERTY_MAPPING = {
        'name': 'name',
        'description': 'description',
        'checkIntervalSec': 'check_interval_sec',
        'timeoutSec': 'timeout_sec',
        'healthyThreshold': 'healthy_threshold',
        'unhealthyThreshold': 'unhealthy_threshold',
    }

    def convert(self, assets: Sequence[Asset]) -> List[ResourceBlock]:
        blocks = []
        for asset in assets:
            if not asset.resource or not asset.data:
                logger.debug(f"Skipping health check without resource data: {asset.name}")
                continue
            data = self._convert_resource_data(asset)
            blocks.append(self.build_block(hcl_block_name(data['name']), data))
        return blocks

    def _convert_resource_data(self, asset: Asset) -> Dict[str, Any]:
        data = asset.data
        result = map_properties(data, self.PROPERTY_MAPPING)
        result['project'] = parse_field_value(asset.name, 'projects')

        for cai_name, (tf_name, mapping) in CHECK_BLOCKS.items():
            if data.get(cai_name):
                result[tf_name] = [map_properties(data[cai_name], mapping)]

        log_config = data.get('logConfig')
        if log_config:
            result['log_config'] = [{'enable': log_config.get('enable', False)}]

        return result
