#!/usr/bin/env python3
"""
Resource Manager converter tables
"""

from ...resolver import ConverterNames
from .project import ProjectConverter, PROJECT_ASSET_TYPE, PROJECT_BILLING_ASSET_TYPE

CONVERTER_NAMES = ConverterNames(
    per_asset_type={
        PROJECT_ASSET_TYPE: "google_project",
        PROJECT_BILLING_ASSET_TYPE: "google_project",
    },
    per_asset_regex={}
)

CONVERTER_FACTORIES = {
    "google_project": ProjectConverter,
}
