#!/usr/bin/env python3
"""autodoc - Entry point."""
import logging
import sys
from pathlib import Path

import click
from colorama import Fore, init

from autodoc import __version__
from autodoc.analyzer import Analyzer
from autodoc.cli.console import ConsoleRenderer
from autodoc.errors import AutoDocError
from autodoc.exporters.json_exporter import JsonExporter
from autodoc.exporters.openapi_exporter import OpenApiExporter
from autodoc.source.index_loader import build_index, dump_index
from config import CONFIG_FILENAME, AppConfig

# Initialize colorama
init(autoreset=True)


def setup_logging(verbose: bool):
    """Configure root logging (DEBUG with --verbose)."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def load_config(verbose: bool = False, no_color: bool = False, include_private: bool = False) -> AppConfig:
    """Config file, then environment, then command-line flags."""
    config = AppConfig.from_env(AppConfig.load())
    if verbose:
        config.analysis.verbose = True
    if no_color:
        config.analysis.color_output = False
    if include_private:
        config.analysis.include_private = True
    setup_logging(config.analysis.verbose)
    return config


def build_analyzer(config: AppConfig) -> Analyzer:
    return Analyzer(
        include_private=config.analysis.include_private,
        primitive_union_mode=config.analysis.primitive_union_mode,
        exclude_patterns=config.analysis.exclude_patterns,
    )


def fail(console: ConsoleRenderer, error: Exception):
    console.echo(f"{Fore.RED}❌ {error}")
    sys.exit(1)


@click.group()
@click.version_option(version=__version__)
def cli():
    """autodoc - API documentation from annotated TypeScript sources."""
    pass


@cli.command()
@click.argument("path", type=click.Path(exists=True))
@click.option("--verbose", "-v", is_flag=True, help="Debug logging and detailed output")
@click.option("--no-color", is_flag=True, help="Disable colored output")
@click.option("--include-private", is_flag=True, help="Include private and protected methods")
def analyze(path, verbose, no_color, include_private):
    """Analyze a project and print a summary."""
    config = load_config(verbose, no_color, include_private)
    console = ConsoleRenderer(color=config.analysis.color_output)
    console.print_banner(__version__)

    try:
        result = build_analyzer(config).analyze_path(path)
    except AutoDocError as e:
        fail(console, e)

    console.print_result(result, verbose=config.analysis.verbose)


@cli.command()
@click.argument("path", type=click.Path(exists=True))
@click.option("--output", "-o", type=click.Path(), help="Output JSON file")
@click.option("--compact", is_flag=True, help="Write JSON without indentation")
@click.option("--openapi", is_flag=True, help="Also write an OpenAPI document")
@click.option("--include-private", is_flag=True, help="Include private and protected methods")
@click.option("--verbose", "-v", is_flag=True, help="Debug logging")
def export(path, output, compact, openapi, include_private, verbose):
    """Analyze a project and write the JSON documentation."""
    config = load_config(verbose=verbose, include_private=include_private)
    console = ConsoleRenderer(color=config.analysis.color_output)

    try:
        result = build_analyzer(config).analyze_path(path)
    except AutoDocError as e:
        fail(console, e)

    output_file = Path(output) if output else config.json.output_path
    pretty = config.json.pretty and not compact
    JsonExporter().export(result, output_file, pretty=pretty)

    if openapi:
        openapi_file = output_file.with_name(f"{output_file.stem}-openapi.json")
        OpenApiExporter(version=__version__).export(result.controllers, openapi_file, result.type_schemas)
        console.echo(f"{Fore.GREEN}✅ OpenAPI document written to {openapi_file}")

    console.print_summary(result, output_file=str(output_file))


@cli.command()
@click.argument("path", type=click.Path(exists=True))
@click.option("--output", "-o", type=click.Path(), required=True, help="Output JSON index file")
def scan(path, output):
    """Scan TypeScript sources and save the declarations index."""
    config = load_config()
    console = ConsoleRenderer(color=config.analysis.color_output)

    try:
        index = build_index(path, config.analysis.exclude_patterns)
    except AutoDocError as e:
        fail(console, e)

    dump_index(index, output)
    declarations = sum(len(unit.declarations) for unit in index)
    console.echo(f"{Fore.GREEN}✅ {len(index)} files, {declarations} declarations written to {output}")


@cli.command("init-config")
@click.option("--force", is_flag=True, help="Overwrite an existing config file")
def init_config(force):
    """Write the default autodoc.config.json."""
    console = ConsoleRenderer()
    config_path = Path.cwd() / CONFIG_FILENAME
    if config_path.exists() and not force:
        console.echo(f"{Fore.YELLOW}{CONFIG_FILENAME} already exists (use --force to overwrite)")
        sys.exit(1)

    AppConfig().write_default(str(config_path))
    console.echo(f"{Fore.GREEN}✅ Configuration saved to {config_path}")


if __name__ == "__main__":
    cli()
