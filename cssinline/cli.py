"""Command-line interface for the CSS import inliner."""

import sys
from pathlib import Path
from typing import Optional, Tuple

import click
from loguru import logger

from cssinline.bundler import write_bundles
from cssinline.config_loader import ensure_directories, get_encoding, get_logging_config, load_config
from cssinline.import_resolver import ImportResolver, TraversalState
from cssinline.locators import UriLocatorFactory
from cssinline.processors import strip_imports
from cssinline.resources import Resource, ResourceType


def setup_logging(config: dict, verbose: bool = False):
    """Setup logging configuration."""
    log_config = get_logging_config(config)
    level = "DEBUG" if verbose else log_config.get("level", "INFO")
    log_file = log_config.get("file")

    logger.remove()
    logger.add(
        sys.stderr,
        level=level,
        format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan> | {message}",
    )
    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            log_file,
            level=level,
            rotation=log_config.get("rotation", "1 week"),
            retention=log_config.get("retention", "1 month"),
            format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name} | {message}",
        )


@click.group()
@click.option("--config", "-c", type=click.Path(exists=True), help="Path to config file")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
@click.pass_context
def cli(ctx, config: Optional[str], verbose: bool):
    """Resolve, inline and strip CSS @import statements."""
    ctx.ensure_object(dict)

    try:
        try:
            cfg = load_config(config)
        except FileNotFoundError:
            if config is not None:
                raise
            cfg = {}
        ctx.obj["config"] = cfg
        ctx.obj["config_path"] = config

        setup_logging(cfg, verbose)
        logger.debug("Configuration loaded from {}", config or "defaults")

    except Exception as e:
        click.echo(f"Error loading configuration: {e}", err=True)
        sys.exit(1)


@cli.command()
@click.option("--group", "-g", "groups", multiple=True, help="Group to bundle (repeatable, default: all)")
@click.option("--output-dir", "-o", type=click.Path(file_okay=False), default=None, help="Output directory")
@click.pass_context
def bundle(ctx, groups: Tuple[str, ...], output_dir: Optional[str]):
    """Bundle configured groups into one stylesheet per group."""
    config = ctx.obj["config"]

    try:
        if not config.get("groups"):
            raise ValueError("No groups configured")
        if output_dir is None:
            ensure_directories(config)

        results = write_bundles(config, names=list(groups) or None, output_dir=output_dir)

        click.echo(f"\n{'='*60}")
        click.echo("CSS BUNDLES")
        click.echo(f"{'='*60}")
        click.echo(f"Output dir: {results['output_dir']}")
        for name, path in results["bundles"].items():
            click.echo(f"  - {name}: {path}")
        click.echo(f"{'='*60}")

    except Exception as e:
        logger.exception("Bundle failed")
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


@cli.command()
@click.argument("uri")
@click.pass_context
def imports(ctx, uri: str):
    """Print the resolved import order of a stylesheet."""
    config = ctx.obj["config"]
    resolver = ImportResolver(UriLocatorFactory.from_config(config), get_encoding(config))
    state = TraversalState()

    try:
        resolved = resolver.resolve(Resource.create(uri, ResourceType.CSS), state)
    except Exception as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    for position, resource in enumerate(resolved, start=1):
        click.echo(f"{position:>3}. {resource.uri}")

    if state.issues:
        click.echo(f"\nIssues ({len(state.issues)}):")
        for issue in state.issues:
            origin = f" (in {issue.importer.uri})" if issue.importer else ""
            click.echo(f"  - {issue.kind}: {issue.resource.uri}{origin}")


@cli.command()
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
@click.option("--output", "-o", type=click.Path(dir_okay=False), default=None, help="Write result to file")
@click.pass_context
def strip(ctx, path: str, output: Optional[str]):
    """Remove @import statements from a stylesheet."""
    encoding = get_encoding(ctx.obj["config"])
    css = strip_imports(Path(path).read_text(encoding=encoding))

    if output:
        Path(output).write_text(css, encoding=encoding)
        logger.info("Stripped stylesheet written: {}", output)
    else:
        click.echo(css, nl=False)


if __name__ == "__main__":
    cli()
