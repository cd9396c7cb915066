#!/usr/bin/env python3
"""
Configuration Management Module

This module handles configuration loading, validation, and management for the
Cloud Asset Inventory to Terraform converter tool.
"""

import os
import yaml
import json
import logging
from typing import Dict, List, Optional, Any
from dataclasses import dataclass, field, asdict
from pathlib import Path
from jsonschema import validate, ValidationError

logger = logging.getLogger(__name__)


@dataclass
class ConversionConfig:
    """Configuration for asset to Terraform conversion"""
    services: List[str] = field(default_factory=list)  # empty means every bundled service
    schema_paths: List[str] = field(default_factory=list)
    include_bundled_schemas: bool = True
    max_workers: int = 1


@dataclass
class OutputConfig:
    """Configuration for output generation"""
    output_file: Optional[str] = None  # None writes to stdout
    overwrite_existing: bool = False
    header_comment: Optional[str] = "Generated by cai2tf"


@dataclass
class LoggingConfig:
    """Configuration for logging"""
    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    file: Optional[str] = None
    console: bool = True
    max_file_size: int = 10485760  # 10MB
    backup_count: int = 5


@dataclass
class ToolConfig:
    """Main configuration class for the converter tool"""
    conversion: ConversionConfig = field(default_factory=ConversionConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


class ConfigManager:
    """Configuration manager for the converter tool"""

    # JSON Schema for configuration validation
    CONFIG_SCHEMA = {
        "type": "object",
        "properties": {
            "conversion": {
                "type": "object",
                "properties": {
                    "services": {"type": "array", "items": {"type": "string"}},
                    "schema_paths": {"type": "array", "items": {"type": "string"}},
                    "include_bundled_schemas": {"type": "boolean"},
                    "max_workers": {"type": "integer", "minimum": 1, "maximum": 64}
                },
                "additionalProperties": False
            },
            "output": {
                "type": "object",
                "properties": {
                    "output_file": {"type": ["string", "null"]},
                    "overwrite_existing": {"type": "boolean"},
                    "header_comment": {"type": ["string", "null"]}
                },
                "additionalProperties": False
            },
            "logging": {
                "type": "object",
                "properties": {
                    "level": {
                        "type": "string",
                        "enum": ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
                    },
                    "format": {"type": "string"},
                    "file": {"type": ["string", "null"]},
                    "console": {"type": "boolean"},
                    "max_file_size": {"type": "integer", "minimum": 1024},
                    "backup_count": {"type": "integer", "minimum": 1}
                },
                "additionalProperties": False
            }
        },
        "additionalProperties": False
    }

    DEFAULT_LOCATIONS = [
        './cai2tf-config.yaml',
        './cai2tf-config.yml',
        './config/cai2tf-config.yaml',
        '~/.cai2tf/config.yaml'
    ]

    def __init__(self):
        self.config = ToolConfig()
        self._config_sources = []

    def load_config(self,
                    config_file: Optional[str] = None,
                    cli_args: Optional[Dict[str, Any]] = None,
                    env_vars: bool = True) -> ToolConfig:
        """
        Load configuration from multiple sources with precedence:
        1. CLI arguments (highest priority)
        2. Environment variables
        3. Configuration file
        4. Default values (lowest priority)
        """
        logger.info("Loading configuration")

        self.config = ToolConfig()
        self._config_sources = ["defaults"]

        if config_file:
            self._load_from_file(config_file)
        else:
            for location in self.DEFAULT_LOCATIONS:
                expanded_path = os.path.expanduser(location)
                if os.path.exists(expanded_path):
                    self._load_from_file(expanded_path)
                    break

        if env_vars:
            self._load_from_env()

        if cli_args:
            self._apply_cli_args(cli_args)

        logger.info(f"Configuration loaded from sources: {', '.join(self._config_sources)}")
        return self.config

    def _load_from_file(self, config_file: str):
        """Load configuration from YAML or JSON file"""
        config_path = Path(config_file).expanduser()
        if not config_path.exists():
            logger.warning(f"Configuration file not found: {config_file}")
            return

        try:
            with open(config_path, 'r') as f:
                if config_path.suffix.lower() in ['.yaml', '.yml']:
                    file_config = yaml.safe_load(f)
                elif config_path.suffix.lower() == '.json':
                    file_config = json.load(f)
                else:
                    logger.warning(f"Unsupported configuration file format: {config_path.suffix}")
                    return
        except (OSError, yaml.YAMLError, json.JSONDecodeError) as e:
            logger.error(f"Failed to load configuration from {config_file}: {str(e)}")
            raise ValueError(f"Cannot read configuration file {config_file}: {e}")

        if file_config:
            self._merge_config(file_config)
            self._config_sources.append(f"file:{config_file}")
            logger.info(f"Loaded configuration from {config_file}")

    def _load_from_env(self):
        """Load configuration from environment variables"""
        env_config = {}

        if os.getenv('CAI2TF_SERVICES'):
            env_config.setdefault('conversion', {})['services'] = os.getenv('CAI2TF_SERVICES').split(',')

        if os.getenv('CAI2TF_SCHEMA_PATHS'):
            env_config.setdefault('conversion', {})['schema_paths'] = os.getenv('CAI2TF_SCHEMA_PATHS').split(',')

        if os.getenv('CAI2TF_MAX_WORKERS'):
            try:
                max_workers = int(os.getenv('CAI2TF_MAX_WORKERS'))
            except ValueError:
                raise ValueError("Invalid configuration: CAI2TF_MAX_WORKERS must be an integer")
            env_config.setdefault('conversion', {})['max_workers'] = max_workers

        if os.getenv('CAI2TF_OUTPUT_FILE'):
            env_config.setdefault('output', {})['output_file'] = os.getenv('CAI2TF_OUTPUT_FILE')

        if os.getenv('CAI2TF_OVERWRITE'):
            env_config.setdefault('output', {})['overwrite_existing'] = os.getenv('CAI2TF_OVERWRITE').lower() == 'true'

        if os.getenv('CAI2TF_LOG_LEVEL'):
            env_config.setdefault('logging', {})['level'] = os.getenv('CAI2TF_LOG_LEVEL').upper()

        if os.getenv('CAI2TF_LOG_FILE'):
            env_config.setdefault('logging', {})['file'] = os.getenv('CAI2TF_LOG_FILE')

        if env_config:
            self._merge_config(env_config)
            self._config_sources.append("environment")
            logger.debug("Loaded configuration from environment variables")

    def _apply_cli_args(self, cli_args: Dict[str, Any]):
        """Apply CLI arguments to configuration"""
        cli_config = {}

        if cli_args.get('services'):
            cli_config.setdefault('conversion', {})['services'] = list(cli_args['services'])

        if cli_args.get('schema_paths'):
            cli_config.setdefault('conversion', {})['schema_paths'] = list(cli_args['schema_paths'])

        if cli_args.get('max_workers'):
            cli_config.setdefault('conversion', {})['max_workers'] = cli_args['max_workers']

        if cli_args.get('output_file'):
            cli_config.setdefault('output', {})['output_file'] = cli_args['output_file']

        if cli_args.get('overwrite'):
            cli_config.setdefault('output', {})['overwrite_existing'] = True

        if cli_args.get('verbose'):
            cli_config.setdefault('logging', {})['level'] = 'DEBUG'
        elif cli_args.get('quiet'):
            cli_config.setdefault('logging', {})['level'] = 'WARNING'

        if cli_config:
            self._merge_config(cli_config)
            self._config_sources.append("cli_args")
            logger.debug("Applied CLI arguments to configuration")

    def _merge_config(self, new_config: Dict[str, Any]):
        """Merge new configuration into existing configuration"""
        def merge_dict(base: Dict, update: Dict):
            for key, value in update.items():
                if key in base and isinstance(base[key], dict) and isinstance(value, dict):
                    merge_dict(base[key], value)
                else:
                    base[key] = value

        config_dict = self._config_to_dict()
        merge_dict(config_dict, new_config)

        self._validate_config(config_dict)
        self.config = self._dict_to_config(config_dict)

    def _config_to_dict(self) -> Dict[str, Any]:
        """Convert configuration dataclass to dictionary"""
        return asdict(self.config)

    def _dict_to_config(self, config_dict: Dict[str, Any]) -> ToolConfig:
        """Convert dictionary to configuration dataclass"""
        return ToolConfig(
            conversion=ConversionConfig(**config_dict.get('conversion', {})),
            output=OutputConfig(**config_dict.get('output', {})),
            logging=LoggingConfig(**config_dict.get('logging', {}))
        )

    def _validate_config(self, config_dict: Dict[str, Any]):
        """Validate configuration against schema"""
        try:
            validate(instance=config_dict, schema=self.CONFIG_SCHEMA)
            logger.debug("Configuration validation passed")
        except ValidationError as e:
            logger.error(f"Configuration validation failed: {e.message}")
            raise ValueError(f"Invalid configuration: {e.message}")

    def save_config(self, output_file: str, format: str = 'yaml'):
        """Save current configuration to file"""
        config_dict = self._config_to_dict()

        with open(output_file, 'w') as f:
            if format.lower() == 'yaml':
                yaml.dump(config_dict, f, default_flow_style=False, indent=2)
            elif format.lower() == 'json':
                json.dump(config_dict, f, indent=2)
            else:
                raise ValueError(f"Unsupported format: {format}")

        logger.info(f"Configuration saved to {output_file}")

    def get_config_summary(self) -> Dict[str, Any]:
        """Get a summary of current configuration"""
        return {
            'sources': self._config_sources,
            'services': self.config.conversion.services or 'all',
            'schema_paths': self.config.conversion.schema_paths,
            'max_workers': self.config.conversion.max_workers,
            'output_file': self.config.output.output_file or '<stdout>',
            'logging_level': self.config.logging.level
        }


# Default configuration template
DEFAULT_CONFIG_TEMPLATE = """
# Cloud Asset Inventory to Terraform Converter Configuration

conversion:
  services: []  # empty converts with every bundled service (compute, resourcemanager)
  schema_paths: []  # extra schema files or directories (YAML or JSON)
  include_bundled_schemas: true
  max_workers: 1  # converter groups run concurrently when above 1

output:
  output_file: null  # null writes to stdout
  overwrite_existing: false
  header_comment: "Generated by cai2tf"

logging:
  level: INFO  # DEBUG, INFO, WARNING, ERROR, CRITICAL
  format: "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
  file: null  # Log file path (null for no file logging)
  console: true
  max_file_size: 10485760  # 10MB
  backup_count: 5
"""
