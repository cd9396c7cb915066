#!/usr/bin/env python3
"""
Project converter

Projects and their billing info are separate assets but one google_project
resource, so billing assets are folded into the project they belong to.
"""

import logging
from typing import Dict, List, Any, Sequence

from ...assets import Asset
from ...converters.base import Converter, ResourceBlock, hcl_block_name
from ...utils import parse_field_value

logger = logging.getLogger(__name__)

PROJECT_ASSET_TYPE = "cloudresourcemanager.googleapis.com/Project"
PROJECT_BILLING_ASSET_TYPE = "cloudbilling.googleapis.com/ProjectBillingInfo"


class ProjectConverter(Converter):
    """Converts Project and ProjectBillingInfo assets to google_project"""

    def convert(self, assets: Sequence[Asset]) -> List[ResourceBlock]:
        billing_accounts = {}
        projects = []
        for asset in assets:
            if asset.asset_type == PROJECT_BILLING_ASSET_TYPE:
                project_id = asset.data.get('projectId') or parse_field_value(asset.name, 'projects')
                billing_accounts[project_id] = asset.data.get('billingAccountName', '')
            elif asset.asset_type == PROJECT_ASSET_TYPE:
                projects.append(asset)

        blocks = []
        for asset in projects:
            data = self._convert_resource_data(asset)
            billing_account = billing_accounts.get(data['project_id'])
            if billing_account:
                data['billing_account'] = billing_account.split('/')[-1]
            blocks.append(self.build_block(hcl_block_name(data['project_id']), data))

        return blocks

    def _convert_resource_data(self, asset: Asset) -> Dict[str, Any]:
        data = asset.data
        result = {
            'project_id': data.get('projectId', ''),
            'name': data.get('name', ''),
            'labels': data.get('labels'),
            'number': data.get('projectNumber'),
        }

        parent = data.get('parent') or {}
        if parent.get('type') == 'organization':
            result['org_id'] = parent.get('id')
        elif parent.get('type') == 'folder':
            result['folder_id'] = parent.get('id')

        return result
