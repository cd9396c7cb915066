#!/usr/bin/env python3
"""
Command Line Interface for the Cloud Asset Inventory to Terraform Converter

This module provides the main CLI interface for the cai2tf tool.
"""

import click
import logging
import logging.handlers
import sys
import os
import json
import yaml
from tabulate import tabulate

from . import __version__, services
from .assets import load_assets
from .config import ConfigManager, LoggingConfig, DEFAULT_CONFIG_TEMPLATE
from .conversion import create_engine
from .errors import ConversionError
from .schema import SchemaProvider

logger = logging.getLogger(__name__)


def configure_logging(logging_config: LoggingConfig):
    """Configure the root logger from logging configuration"""
    handlers = []
    if logging_config.console:
        handlers.append(logging.StreamHandler(sys.stderr))
    if logging_config.file:
        handlers.append(logging.handlers.RotatingFileHandler(
            logging_config.file,
            maxBytes=logging_config.max_file_size,
            backupCount=logging_config.backup_count
        ))
    if not handlers:
        handlers.append(logging.NullHandler())

    logging.basicConfig(
        level=getattr(logging, logging_config.level),
        format=logging_config.format,
        handlers=handlers,
        force=True
    )


def _load_config(ctx, **cli_args):
    config_manager = ConfigManager()
    cli_args['verbose'] = ctx.obj.get('verbose', False)
    cli_args['quiet'] = ctx.obj.get('quiet', False)
    config = config_manager.load_config(config_file=ctx.obj.get('config_file'), cli_args=cli_args)
    configure_logging(config.logging)
    return config_manager, config


@click.group()
@click.version_option(version=__version__)
@click.option('--config', '-c', type=click.Path(exists=True),
              help='Configuration file path')
@click.option('--verbose', '-v', is_flag=True,
              help='Enable verbose logging')
@click.option('--quiet', '-q', is_flag=True,
              help='Enable quiet mode (warnings and errors only)')
@click.pass_context
def cli(ctx, config, verbose, quiet):
    """
    Cloud Asset Inventory to Terraform Converter

    Converts exported cloud asset inventory records into Terraform resource
    configuration ready for import.
    """
    ctx.ensure_object(dict)

    ctx.obj['config_file'] = config
    ctx.obj['verbose'] = verbose
    ctx.obj['quiet'] = quiet


@cli.command()
@click.argument('input_file', type=click.Path(exists=True, dir_okay=False))
@click.option('--output-file', '-o',
              help='Write the Terraform configuration to this file instead of stdout')
@click.option('--service', '-s', 'service_names', multiple=True,
              type=click.Choice(sorted(services.SERVICES)),
              help='Limit conversion to these services (can be specified multiple times)')
@click.option('--schema', 'schema_paths', multiple=True, type=click.Path(exists=True),
              help='Extra schema file or directory (can be specified multiple times)')
@click.option('--workers', '-w', type=int,
              help='Number of converter groups to run concurrently')
@click.option('--overwrite', is_flag=True,
              help='Overwrite an existing output file')
@click.pass_context
def convert(ctx, input_file, output_file, service_names, schema_paths, workers, overwrite):
    """
    Convert an asset export into Terraform configuration

    INPUT_FILE is a JSON array, JSON lines or YAML export of assets.
    """
    try:
        _, config = _load_config(
            ctx,
            services=service_names,
            schema_paths=schema_paths,
            max_workers=workers,
            output_file=output_file,
            overwrite=overwrite
        )

        target = config.output.output_file
        if target and os.path.exists(target) and not config.output.overwrite_existing:
            raise ValueError(f"Output file {target} already exists (use --overwrite)")

        assets = load_assets(input_file)
        engine = create_engine(config)
        result = engine.convert_with_summary(assets)

        if target:
            with open(target, 'w') as f:
                f.write(result.document)
        else:
            click.echo(result.document, nl=False)

        click.echo(f"Converted {len(result.blocks)} resources from {len(assets)} assets "
                   f"({len(result.skipped_assets)} skipped)", err=True)
        if target:
            click.echo(f"Terraform configuration written to: {target}", err=True)

    except (ConversionError, ValueError, OSError) as e:
        click.echo(f"Error Conversion failed: {str(e)}", err=True)
        sys.exit(1)


@cli.command()
@click.option('--schema', 'schema_paths', multiple=True, type=click.Path(exists=True),
              help='Extra schema file or directory (can be specified multiple times)')
def list_converters(schema_paths):
    """
    List bundled converters and the assets they handle
    """
    try:
        schema_provider = SchemaProvider.from_paths(schema_paths)
    except (ValueError, OSError) as e:
        click.echo(f"Error Failed to load schemas: {str(e)}", err=True)
        sys.exit(1)

    rows = []
    for service_name, service in sorted(services.SERVICES.items()):
        table = service.CONVERTER_NAMES
        for converter_name in service.CONVERTER_FACTORIES:
            asset_types = [t for t, name in table.per_asset_type.items() if name == converter_name]
            patterns = [p for p, name in table.per_asset_regex.items() if name == converter_name]
            rows.append([
                service_name,
                converter_name,
                "\n".join(asset_types) or "-",
                "\n".join(patterns) or "-",
                "yes" if converter_name in schema_provider else "no"
            ])

    click.echo(tabulate(rows, headers=['Service', 'Converter', 'Asset Types', 'Name Patterns', 'Schema'],
                        tablefmt='grid'))


@cli.command()
@click.option('--output-file', '-o', default='cai2tf-config.yaml',
              help='Output configuration file')
@click.option('--format', 'config_format', type=click.Choice(['yaml', 'json']),
              default='yaml', help='Configuration file format')
def init_config(output_file, config_format):
    """
    Generate a default configuration file
    """
    if os.path.exists(output_file):
        if not click.confirm(f"Configuration file {output_file} already exists. Overwrite?"):
            click.echo("Configuration file creation cancelled.")
            return

    try:
        with open(output_file, 'w') as f:
            if config_format == 'yaml':
                f.write(DEFAULT_CONFIG_TEMPLATE)
            else:
                config_dict = yaml.safe_load(DEFAULT_CONFIG_TEMPLATE)
                json.dump(config_dict, f, indent=2)
    except OSError as e:
        click.echo(f"Error Failed to create configuration file: {str(e)}", err=True)
        sys.exit(1)

    click.echo(f"Success Default configuration file created: {output_file}")


@cli.command()
@click.pass_context
def validate_config(ctx):
    """
    Validate configuration file
    """
    try:
        config_manager, _ = _load_config(ctx)
    except ValueError as e:
        click.echo(f"Error Configuration validation failed: {str(e)}", err=True)
        sys.exit(1)

    click.echo("Success Configuration validation passed!")
    click.echo("\nConfiguration Summary:")
    for key, value in config_manager.get_config_summary().items():
        click.echo(f"   {key}: {value}")


def main():
    """Main entry point for the CLI"""
    try:
        cli()
    except KeyboardInterrupt:
        click.echo("\nWarning  Operation cancelled by user.")
        sys.exit(1)


if __name__ == '__main__':
    main()
