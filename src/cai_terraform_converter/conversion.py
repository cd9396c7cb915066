#!/usr/bin/env python3
"""
Cloud Asset Inventory to Terraform Conversion Engine

This module coordinates a conversion run: assets are resolved to converter
names, grouped, converted per group and written as one HCL document. A run
either produces the complete document or raises; partial output is never
returned.
"""

import logging
from collections import OrderedDict
from concurrent.futures import ThreadPoolExecutor, wait, FIRST_EXCEPTION
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from . import services
from .assets import Asset
from .config import ToolConfig
from .converters.base import Converter, ResourceBlock
from .errors import ConversionError, ConverterFailure
from .registry import ConverterRegistry, create_converter_map
from .resolver import ConverterNames, ConverterResolver
from .schema import SchemaProvider
from .writer import HCLWriter

logger = logging.getLogger(__name__)


@dataclass
class ConversionResult:
    """Result of an asset to Terraform conversion"""
    document: str
    blocks: List[ResourceBlock] = field(default_factory=list)
    groups: Dict[str, int] = field(default_factory=dict)
    skipped_assets: List[str] = field(default_factory=list)


class ConversionEngine:
    """
    Asset to Terraform conversion engine

    Groups assets by converter, runs each converter on its whole group and
    hands the collected blocks to the HCL writer.
    """

    def __init__(self,
                 registry: ConverterRegistry,
                 converter_names: ConverterNames,
                 writer: Optional[HCLWriter] = None,
                 max_workers: int = 1):
        """
        Initialize the conversion engine

        Args:
            registry: Converters by name, built once for the run
            converter_names: Resolution table mapping assets to converter names
            writer: HCL writer; a default writer is used when omitted
            max_workers: Number of groups converted concurrently
        """
        self.registry = registry
        self.resolver = ConverterResolver(converter_names)
        self.writer = writer or HCLWriter()
        self.max_workers = max(1, max_workers)

        logger.info(f"Initialized ConversionEngine with {len(registry)} converters")

    def group_assets(self, assets: Sequence[Asset]) -> "OrderedDict[str, List[Asset]]":
        """
        Group assets by converter name

        Groups are ordered by the first appearance of their converter name in
        ``assets``; unresolved assets are dropped.
        """
        groups: "OrderedDict[str, List[Asset]]" = OrderedDict()
        for asset in assets:
            name = self.resolver.resolve(asset)
            if name is None:
                continue
            groups.setdefault(name, []).append(asset)
        return groups

    def convert(self, assets: Sequence[Asset]) -> str:
        """Convert assets into an HCL document"""
        return self.convert_with_summary(assets).document

    def convert_with_summary(self, assets: Sequence[Asset]) -> ConversionResult:
        """Convert assets and report what was converted and skipped"""
        logger.info(f"Converting {len(assets)} assets to Terraform")

        groups = self.group_assets(assets)
        grouped = {id(asset) for members in groups.values() for asset in members}
        skipped = [asset.name for asset in assets if id(asset) not in grouped]

        blocks = self._convert_groups(groups)
        document = self.writer.write(blocks)

        logger.info(f"Conversion completed: {len(blocks)} blocks from {len(groups)} groups, "
                    f"{len(skipped)} assets skipped")

        return ConversionResult(
            document=document,
            blocks=blocks,
            groups={name: len(members) for name, members in groups.items()},
            skipped_assets=skipped
        )

    def convert_to_blocks(self, assets: Sequence[Asset]) -> List[ResourceBlock]:
        """Convert assets into resource blocks without writing them"""
        return self._convert_groups(self.group_assets(assets))

    def _convert_groups(self, groups: "OrderedDict[str, List[Asset]]") -> List[ResourceBlock]:
        runnable = []
        for name, members in groups.items():
            converter = self.registry.get(name)
            if converter is None:
                logger.warning(f"No converter registered for {name}, skipping {len(members)} assets")
                continue
            runnable.append((name, converter, members))

        if self.max_workers > 1 and len(runnable) > 1:
            results = self._convert_parallel(runnable)
        else:
            results = [_run_converter(name, converter, members) for name, converter, members in runnable]

        blocks = []
        for group_blocks in results:
            blocks.extend(group_blocks)
        return blocks

    def _convert_parallel(self, runnable) -> List[List[ResourceBlock]]:
        """Convert groups on a thread pool; results keep group order"""
        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            futures = [executor.submit(_run_converter, name, converter, members)
                       for name, converter, members in runnable]

            wait(futures, return_when=FIRST_EXCEPTION)
            failed = [index for index, future in enumerate(futures)
                      if future.done() and future.exception() is not None]
            if failed:
                # Groups after the earliest failure cannot change the outcome
                for future in futures[failed[0] + 1:]:
                    future.cancel()
            wait(futures)

            # Earlier groups run to completion, so the first failure in group
            # order is the one a sequential run reports
            for future in futures:
                if not future.cancelled() and future.exception() is not None:
                    raise future.exception()

            return [future.result() for future in futures]


def _run_converter(name: str, converter: Converter, assets: List[Asset]) -> List[ResourceBlock]:
    logger.debug(f"Running converter {name} on {len(assets)} assets")
    try:
        return list(converter.convert(assets))
    except ConversionError:
        raise
    except Exception as e:
        logger.error(f"Converter {name} failed: {str(e)}")
        raise ConverterFailure(name, e) from e


def create_engine(config: ToolConfig) -> ConversionEngine:
    """
    Build a conversion engine from tool configuration

    Schemas are loaded and every converter is constructed here, once, before
    any asset is processed.
    """
    conversion = config.conversion
    schema_provider = SchemaProvider.from_paths(conversion.schema_paths,
                                                include_bundled=conversion.include_bundled_schemas)
    registry = create_converter_map(services.converter_factories(conversion.services), schema_provider)

    return ConversionEngine(
        registry=registry,
        converter_names=services.converter_names(conversion.services),
        writer=HCLWriter(header_comment=config.output.header_comment),
        max_workers=conversion.max_workers
    )
