# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""CLI entry point for geoserver-init.

Usage:
    geoserver-init                  # run the init pipeline
    geoserver-init run --verbose
    geoserver-init publish-layer --workspace station_data --layer-name fv_stations
    geoserver-init version

Settings come from GSINIT_* environment variables and mounted secrets (see
geoserver_init.init_config). The process exits with 0 on success and 1 on any
fatal error.
"""

from __future__ import annotations

import asyncio
from dataclasses import replace

import click

from . import __version__
from .init_config import GeoServerInitConfig, init_config_from_env
from .initializer import (
    FeatureLayer,
    GeoServerInitializer,
    build_client,
    initialize,
)
from .logging_utils import configure_logging, framed_medium_logging


@click.group(invoke_without_command=True)
@click.option("--verbose", is_flag=True, help="Log configuration and REST calls.")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """Initialize a GeoServer instance through its REST API."""
    try:
        config = init_config_from_env()
    except ValueError as exc:
        framed_medium_logging(str(exc))
        ctx.exit(1)
    if verbose:
        config = replace(config, verbose=True)
    configure_logging(config.verbose)
    ctx.obj = config

    if ctx.invoked_subcommand is None:
        ctx.invoke(run)


@cli.command()
@click.pass_context
def run(ctx: click.Context) -> None:
    """Create security settings, workspaces and the PostGIS store."""
    config: GeoServerInitConfig = ctx.obj
    outcome = asyncio.run(initialize(config, build_client(config)))
    ctx.exit(outcome.exit_code)


@cli.command("publish-layer")
@click.option("--workspace", default="station_data", show_default=True)
@click.option("--store", default="station_data", show_default=True)
@click.option("--native-name", default="fv_stations", show_default=True)
@click.option("--layer-name", default=None, help="Defaults to the native name.")
@click.option("--title", default=None, help="Defaults to the layer name.")
@click.option("--srs", default="EPSG:3035", show_default=True)
@click.pass_context
def publish_layer(
    ctx: click.Context,
    workspace: str,
    store: str,
    native_name: str,
    layer_name: str | None,
    title: str | None,
    srs: str,
) -> None:
    """Publish a table of an existing store as a layer."""
    config: GeoServerInitConfig = ctx.obj
    layer_name = layer_name or native_name
    layer = FeatureLayer(
        workspace=workspace,
        store=store,
        native_name=native_name,
        layer_name=layer_name,
        title=title or layer_name,
        srs=srs,
    )
    initializer = GeoServerInitializer(config, build_client(config))
    outcome = asyncio.run(initializer.publish(layer))
    ctx.exit(outcome.exit_code)


@cli.command()
def version() -> None:
    """Show version info."""
    click.echo(f"geoserver-init {__version__}")


def main() -> None:
    """Console script entry point."""
    cli()


__all__ = ["cli", "main"]
