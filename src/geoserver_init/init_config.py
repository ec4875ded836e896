# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Configuration dataclass for the GeoServer init process.

GeoServerInitConfig is the single entry point for all settings. It is built
once at startup, usually by init_config_from_env(), and passed to every
provisioning step; nothing else reads the environment.

Configuration via environment variables:
    GSPUB_GS_REST_URL: GeoServer REST base URL
    GSINIT_GS_REST_DEFAULT_USER: Factory-default admin user (bootstrap login)
    GSINIT_GS_REST_DEFAULT_PW: Factory-default admin password
    GSINIT_VERBOSE: Verbose logging (1/true/yes)
    GSINIT_WS: Comma separated list of workspaces to create
    GSINIT_STATION_WS: Workspace of the PostGIS data store
    GSINIT_STATION_DS: Name of the PostGIS data store
    GSINIT_PG_HOST, GSINIT_PG_PORT, GSINIT_PG_USER: PostGIS connection
    GSINIT_PG_SCHEMA, GSINIT_PG_DB: PostGIS schema and database
    GSINIT_PG_PW: PostGIS password (secret ``app_password`` preferred)
    GSINIT_GS_USER: New admin user (secret ``geoserver_user`` preferred)
    GSINIT_GS_PW: New admin password (secret ``geoserver_password`` preferred)
    GSINIT_SECRETS_DIR: Directory of mounted secrets (default: /run/secrets)

Usage:
    config = init_config_from_env()
    outcome = await initialize(config)
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from .docker_secrets import DEFAULT_SECRETS_DIR, secret_or_env

ADMIN_ROLE = "ADMIN"
"""Role granted to the new operator account."""

DEFAULT_GEOSERVER_URL = "http://geoserver:8080/geoserver/rest/"

MASK = "********"


@dataclass(frozen=True)
class GeoServerInitConfig:
    """Settings of one GeoServer init run.

    Connection:
        geoserver_url: REST API base URL
        default_user: Factory-default admin, used to log in and then disabled
        default_password: Password of the factory-default admin

    Security:
        new_user: Operator account to create (no default)
        new_password: Password of the operator account (no default)

    Workspaces and PostGIS store:
        workspaces: Comma separated workspace names, created in order
        station_workspace / station_datastore: Target of the PostGIS store
        pg_host, pg_port, pg_user, pg_password, pg_schema, pg_database
    """

    geoserver_url: str = DEFAULT_GEOSERVER_URL
    default_user: str = "admin"
    default_password: str = "geoserver"
    verbose: bool = False

    workspaces: str = "station_data,image_mosaics"
    station_workspace: str = "station_data"
    station_datastore: str = "station_data"

    pg_host: str = "db"
    pg_port: int = 5432
    pg_user: str = "app"
    pg_password: str | None = None
    pg_schema: str = "station_data"
    pg_database: str = "sauber_data"

    new_user: str | None = None
    new_password: str | None = None

    secrets_dir: str = DEFAULT_SECRETS_DIR

    @property
    def workspace_names(self) -> list[str]:
        """Workspace names in input order, blanks dropped."""
        return [name.strip() for name in self.workspaces.split(",") if name.strip()]

    def describe(self) -> dict[str, str]:
        """Settings for display, with secrets masked."""

        def secret(value: str | None) -> str:
            return MASK if value else "<not set>"

        return {
            "GeoServer REST URL": self.geoserver_url,
            "Default REST user": self.default_user,
            "Default REST password": secret(self.default_password),
            "New REST user": self.new_user or "<not set>",
            "New REST password": secret(self.new_password),
            "Workspaces": self.workspaces,
            "Station WS": self.station_workspace,
            "Station DS": self.station_datastore,
            "PG host": self.pg_host,
            "PG port": str(self.pg_port),
            "PG user": self.pg_user,
            "PG password": secret(self.pg_password),
            "PG schema": self.pg_schema,
            "PG database": self.pg_database,
        }


def _env_flag(name: str) -> bool:
    return os.environ.get(name, "").lower() in ("1", "true", "yes")


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"Invalid {name}; must be an integer (got {raw!r})") from exc


def init_config_from_env() -> GeoServerInitConfig:
    """Build GeoServerInitConfig from GSINIT_* environment variables and secrets.

    Secret values are read from mounted secret files first and from the
    environment only when the file is absent.

    Returns:
        GeoServerInitConfig instance populated from environment.

    Raises:
        ValueError: If GSINIT_PG_PORT is not an integer.
    """
    secrets_dir = os.environ.get("GSINIT_SECRETS_DIR", DEFAULT_SECRETS_DIR)
    return GeoServerInitConfig(
        geoserver_url=os.environ.get("GSPUB_GS_REST_URL", DEFAULT_GEOSERVER_URL),
        default_user=os.environ.get("GSINIT_GS_REST_DEFAULT_USER", "admin"),
        default_password=os.environ.get("GSINIT_GS_REST_DEFAULT_PW", "geoserver"),
        verbose=_env_flag("GSINIT_VERBOSE"),
        workspaces=os.environ.get("GSINIT_WS", "station_data,image_mosaics"),
        station_workspace=os.environ.get("GSINIT_STATION_WS", "station_data"),
        station_datastore=os.environ.get("GSINIT_STATION_DS", "station_data"),
        pg_host=os.environ.get("GSINIT_PG_HOST", "db"),
        pg_port=_env_int("GSINIT_PG_PORT", 5432),
        pg_user=os.environ.get("GSINIT_PG_USER", "app"),
        pg_password=secret_or_env("app_password", "GSINIT_PG_PW", secrets_dir),
        pg_schema=os.environ.get("GSINIT_PG_SCHEMA", "station_data"),
        pg_database=os.environ.get("GSINIT_PG_DB", "sauber_data"),
        new_user=secret_or_env("geoserver_user", "GSINIT_GS_USER", secrets_dir),
        new_password=secret_or_env("geoserver_password", "GSINIT_GS_PW", secrets_dir),
        secrets_dir=secrets_dir,
    )


__all__ = ["ADMIN_ROLE", "DEFAULT_GEOSERVER_URL", "GeoServerInitConfig", "init_config_from_env"]
