# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""GeoServer init pipeline.

This module defines:
- ManagementClient: capabilities the pipeline needs from a REST client
- InitError and subclasses: fatal conditions of a run
- GeoServerInitializer: the ordered provisioning steps
- initialize(): build the REST client from config and run the pipeline

Pipeline (each step awaited before the next, first failure ends the run):

    START -> PREFLIGHT_OK -> SECURITY_DONE -> WORKSPACES_DONE -> DATASTORE_DONE

1. Connectivity preflight: the REST API must answer before anything changes.
2. Security: create the operator user, grant ADMIN, disable the default admin.
3. Workspaces: create each configured workspace in order.
4. Data store: register the PostGIS store in the station workspace.

Every step is idempotent: resources reported as already existing are logged
and skipped, so running the process again against a provisioned server
succeeds. There is no retry, rollback or checkpointing.

Usage:
    config = init_config_from_env()
    outcome = await initialize(config)
    sys.exit(outcome.exit_code)
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable
from dataclasses import dataclass
from enum import Enum
from typing import Protocol

import httpx

from .http_client import GeoServerError, GeoServerRestClient, ResourceExistsError
from .init_config import ADMIN_ROLE, GeoServerInitConfig
from .logging_utils import framed_big_logging, framed_medium_logging

logger = logging.getLogger("geoserver_init")


class ManagementClient(Protocol):
    """Capabilities of the GeoServer REST API used by the pipeline.

    Create methods raise ResourceExistsError for duplicates. A False return
    means the server did not apply the change.
    """

    async def connection_check(self) -> bool: ...

    async def create_user(self, name: str, password: str) -> bool: ...

    async def assign_role(self, name: str, role: str) -> bool: ...

    async def update_user_enabled(self, name: str, password: str, enabled: bool) -> bool: ...

    async def create_workspace(self, name: str) -> bool: ...

    async def create_database_store(
        self,
        workspace: str,
        store_name: str,
        host: str,
        port: int | str,
        user: str,
        password: str | None,
        schema: str,
        database: str,
    ) -> bool: ...

    async def publish_feature_layer(
        self,
        workspace: str,
        store: str,
        native_name: str,
        layer_name: str,
        title: str,
        srs: str,
    ) -> bool: ...


class InitError(Exception):
    """Fatal condition that ends a run with exit code 1."""


class ConfigurationError(InitError):
    """Required setting missing or invalid; raised before any REST call."""


class ConnectivityError(InitError):
    """The REST API did not answer the preflight check."""


class OperationError(InitError):
    """A REST operation failed or was not applied."""


class InitStage(str, Enum):
    """Last stage reached by a run."""

    START = "start"
    PREFLIGHT_OK = "preflight_ok"
    SECURITY_DONE = "security_done"
    WORKSPACES_DONE = "workspaces_done"
    DATASTORE_DONE = "datastore_done"
    LAYER_PUBLISHED = "layer_published"


@dataclass
class InitOutcome:
    """Result of a run: the last stage reached and the fatal error, if any."""

    stage: InitStage
    error: InitError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def exit_code(self) -> int:
        return 0 if self.ok else 1


@dataclass
class FeatureLayer:
    """Feature type to publish from an existing store."""

    workspace: str = "station_data"
    store: str = "station_data"
    native_name: str = "fv_stations"
    layer_name: str = "fv_stations"
    title: str = "fv_stations"
    srs: str = "EPSG:3035"


class GeoServerInitializer:
    """Runs the provisioning steps against a ManagementClient.

    Attributes:
        config: GeoServerInitConfig, read-only for the whole run
        client: ManagementClient (GeoServerRestClient or a test fake)
    """

    def __init__(self, config: GeoServerInitConfig, client: ManagementClient):
        self.config = config
        self.client = client

    async def run(self) -> InitOutcome:
        """Execute the whole pipeline.

        Returns:
            InitOutcome; on failure it carries the error and the stage
            completed before it.
        """
        stage = InitStage.START
        framed_big_logging("Start initializing GeoServer...")
        try:
            self.operator_credentials()
            await self.check_connection()
            stage = InitStage.PREFLIGHT_OK
            await self.adapt_security()
            stage = InitStage.SECURITY_DONE
            await self.create_workspaces()
            stage = InitStage.WORKSPACES_DONE
            await self.create_postgis_datastore()
            stage = InitStage.DATASTORE_DONE
        except InitError as exc:
            return self._failed(stage, exc)

        framed_big_logging("... DONE initializing GeoServer")
        return InitOutcome(stage)

    async def publish(self, layer: FeatureLayer) -> InitOutcome:
        """Publish one feature layer after the connectivity preflight."""
        stage = InitStage.START
        try:
            await self.check_connection()
            stage = InitStage.PREFLIGHT_OK
            await self.publish_feature_layer(layer)
            stage = InitStage.LAYER_PUBLISHED
        except InitError as exc:
            return self._failed(stage, exc)
        return InitOutcome(stage)

    def _failed(self, stage: InitStage, exc: InitError) -> InitOutcome:
        framed_medium_logging(str(exc))
        if exc.__cause__ is not None:
            logger.debug(f"Caused by: {exc.__cause__!r}")
        return InitOutcome(stage, exc)

    # -------------------------------------------------------------------------
    # Steps
    # -------------------------------------------------------------------------

    def operator_credentials(self) -> tuple[str, str]:
        """Return the new operator's user and password.

        Raises:
            ConfigurationError: If either value is missing or empty.
        """
        user = self.config.new_user
        password = self.config.new_password
        if not user or not password:
            raise ConfigurationError("No valid user or user password given - EXIT.")
        return user, password

    async def check_connection(self) -> None:
        """Fail unless the REST API answers with the bootstrap credentials."""
        try:
            reachable = await self.client.connection_check()
        except (GeoServerError, httpx.HTTPError) as exc:
            raise ConnectivityError("Could not connect to GeoServer REST API - ABORT!") from exc
        if not reachable:
            raise ConnectivityError("Could not connect to GeoServer REST API - ABORT!")
        logger.info(f"Connected to GeoServer REST API at {self.config.geoserver_url}")

    async def adapt_security(self) -> None:
        """Create the operator, grant it ADMIN and disable the default admin."""
        framed_medium_logging("Adapting security settings...")
        user, password = self.operator_credentials()

        if await self._apply(f"create user {user}", self.client.create_user(user, password)):
            logger.info(f"Successfully created user {user}")
        else:
            logger.info(f"User {user} already exists")

        await self._apply(
            f"add role {ADMIN_ROLE} to user {user}",
            self.client.assign_role(user, ADMIN_ROLE),
        )
        logger.info(f"Successfully added role {ADMIN_ROLE} to user {user}")

        default_user = self.config.default_user
        await self._apply(
            f"disable default user {default_user}",
            self.client.update_user_enabled(default_user, self.config.default_password, False),
        )
        logger.info(f'Successfully disabled default "{default_user}" user')

    async def create_workspaces(self) -> None:
        """Create the configured workspaces one after the other."""
        framed_medium_logging("Creating workspaces...")
        logger.info(f"Configuring the workspaces {self.config.workspaces}")

        for name in self.config.workspace_names:
            if await self._apply(f"create workspace {name}", self.client.create_workspace(name)):
                logger.info(f"Successfully created workspace {name}")
            else:
                logger.info(f"Workspace {name} already exists")

    async def create_postgis_datastore(self) -> None:
        """Register the PostGIS store in the station workspace.

        The workspace is expected to exist; create_workspaces() runs first.
        """
        framed_medium_logging("Creating PostGIS data store...")
        cfg = self.config
        created = await self._apply(
            f"create PostGIS store {cfg.station_workspace}:{cfg.station_datastore}",
            self.client.create_database_store(
                cfg.station_workspace,
                cfg.station_datastore,
                cfg.pg_host,
                cfg.pg_port,
                cfg.pg_user,
                cfg.pg_password,
                cfg.pg_schema,
                cfg.pg_database,
            ),
        )
        if created:
            logger.info("Successfully created PostGIS store")
        else:
            logger.info(f"PostGIS store {cfg.station_datastore} already exists")

    async def publish_feature_layer(self, layer: FeatureLayer) -> None:
        """Publish ``layer`` from its data store."""
        framed_medium_logging(f"Creating layer {layer.layer_name}...")
        published = await self._apply(
            f"publish layer {layer.workspace}:{layer.layer_name}",
            self.client.publish_feature_layer(
                layer.workspace,
                layer.store,
                layer.native_name,
                layer.layer_name,
                layer.title,
                layer.srs,
            ),
        )
        if published:
            logger.info(f"Successfully created layer {layer.layer_name}")
        else:
            logger.info(f"Layer {layer.layer_name} already exists")

    async def _apply(self, action: str, call: Awaitable[bool]) -> bool:
        """Await a mutating call.

        Returns:
            True if the change was applied, False if the resource already existed.

        Raises:
            OperationError: If the call failed or returned False.
        """
        try:
            applied = await call
        except ResourceExistsError:
            return False
        except (GeoServerError, httpx.HTTPError) as exc:
            raise OperationError(f"Failed to {action}: {exc}") from exc
        if not applied:
            raise OperationError(f"Failed to {action}")
        return True


def build_client(config: GeoServerInitConfig) -> GeoServerRestClient:
    """REST client logged in with the factory-default credentials."""
    return GeoServerRestClient(config.geoserver_url, config.default_user, config.default_password)


async def initialize(
    config: GeoServerInitConfig, client: ManagementClient | None = None
) -> InitOutcome:
    """Run the full pipeline; builds a GeoServerRestClient when none is given."""
    for name, value in config.describe().items():
        logger.debug(f"{name + ':':<24}{value}")
    initializer = GeoServerInitializer(config, client or build_client(config))
    return await initializer.run()


__all__ = [
    "ConfigurationError",
    "ConnectivityError",
    "FeatureLayer",
    "GeoServerInitializer",
    "InitError",
    "InitOutcome",
    "InitStage",
    "ManagementClient",
    "OperationError",
    "build_client",
    "initialize",
]
