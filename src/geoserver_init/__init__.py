# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""geoserver-init: one-shot bootstrap of a GeoServer instance.

This package provisions a fresh GeoServer through its REST API: it hardens
security (new admin operator, default ``admin`` disabled), creates the
project workspaces and registers a PostGIS data store.

Main components:
    GeoServerInitConfig: Configuration dataclass
    init_config_from_env: Factory to build config from environment and secrets
    GeoServerInitializer: The ordered provisioning pipeline
    GeoServerRestClient: httpx client for the GeoServer REST API

Usage:
    from geoserver_init import initialize, init_config_from_env

    outcome = await initialize(init_config_from_env())
    sys.exit(outcome.exit_code)
"""

__version__ = "0.1.0"

from .http_client import GeoServerRestClient
from .init_config import GeoServerInitConfig, init_config_from_env
from .initializer import GeoServerInitializer, InitOutcome, initialize

__all__ = [
    "GeoServerInitConfig",
    "GeoServerInitializer",
    "GeoServerRestClient",
    "InitOutcome",
    "init_config_from_env",
    "initialize",
    "main",
]


def main() -> None:
    """CLI entry point."""
    from .cli import main as cli_main

    cli_main()
