#!/usr/bin/env python3
"""
Cloud Asset Inventory Records

Asset model plus loading of asset exports (JSON array, JSON lines or YAML).
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Any, Union

import yaml

logger = logging.getLogger(__name__)


def _pick(data: Dict[str, Any], *keys: str, default: Any = None) -> Any:
    for key in keys:
        if key in data:
            return data[key]
    return default


@dataclass(frozen=True)
class AssetResource:
    """Resource payload of an asset"""
    version: str = ""
    discovery_document_uri: str = ""
    discovery_name: str = ""
    parent: str = ""
    location: str = ""
    data: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AssetResource":
        return cls(
            version=_pick(data, 'version', default=""),
            discovery_document_uri=_pick(data, 'discovery_document_uri', 'discoveryDocumentUri', default=""),
            discovery_name=_pick(data, 'discovery_name', 'discoveryName', default=""),
            parent=_pick(data, 'parent', default=""),
            location=_pick(data, 'location', default=""),
            data=_pick(data, 'data', default={}) or {}
        )


@dataclass(frozen=True)
class Asset:
    """A single inventory record"""
    name: str
    asset_type: str
    resource: Optional[AssetResource] = None
    iam_policy: Optional[Dict[str, Any]] = None
    ancestors: List[str] = field(default_factory=list)
    update_time: Optional[str] = None

    @property
    def data(self) -> Dict[str, Any]:
        """Untyped attribute tree of the asset resource"""
        return self.resource.data if self.resource else {}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Asset":
        """Build an asset from export data (camelCase or snake_case keys)"""
        resource = _pick(data, 'resource')
        return cls(
            name=_pick(data, 'name', default=""),
            asset_type=_pick(data, 'asset_type', 'assetType', 'type', default=""),
            resource=AssetResource.from_dict(resource) if resource else None,
            iam_policy=_pick(data, 'iam_policy', 'iamPolicy'),
            ancestors=list(_pick(data, 'ancestors', default=[]) or []),
            update_time=_pick(data, 'update_time', 'updateTime')
        )


def load_assets(input_file: Union[str, Path]) -> List[Asset]:
    """
    Load assets from an export file

    Args:
        input_file: .json (array or JSON lines), .yaml or .yml file

    Returns:
        List of assets in file order
    """
    path = Path(input_file).expanduser()
    logger.info(f"Loading assets from {path}")

    with open(path, 'r') as f:
        content = f.read()

    if path.suffix.lower() in ['.yaml', '.yml']:
        records = yaml.safe_load(content) or []
    elif path.suffix.lower() in ['.json', '.jsonl', '.ndjson']:
        records = _parse_json_records(content)
    else:
        raise ValueError(f"Unsupported asset file format: {path.suffix}")

    if not isinstance(records, list):
        raise ValueError(f"Asset file {path} must contain a list of assets")

    assets = [Asset.from_dict(record) for record in records]
    logger.info(f"Loaded {len(assets)} assets")
    return assets


def _parse_json_records(content: str) -> Any:
    stripped = content.strip()
    if not stripped:
        return []
    if stripped.startswith('['):
        return json.loads(stripped)
    return [json.loads(line) for line in stripped.splitlines() if line.strip()]
