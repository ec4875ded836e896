# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""HTTP client for the GeoServer REST management API.

This module provides GeoServerRestClient for programmatic access to the
GeoServer REST endpoints needed to bootstrap an instance.

Features:
    - Async API over httpx with HTTP basic authentication
    - Sub-APIs grouped like the REST resources (security, workspaces, ...)
    - Flat capability methods used by the provisioning pipeline
    - Duplicate resources reported as ResourceExistsError

Example:
    Async usage::

        client = GeoServerRestClient(
            "http://geoserver:8080/geoserver/rest/", "admin", "geoserver"
        )
        if await client.exists():
            await client.workspaces.create("station_data")
            await client.security.create_user("operator", "s3cret")
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any
from urllib.parse import quote

import httpx

logger = logging.getLogger("geoserver_init.http_client")

JAXB_USER = "org.geoserver.rest.security.xml.JaxbUser"


class GeoServerError(Exception):
    """Base class for GeoServer REST failures."""


class GeoServerResponseError(GeoServerError):
    """GeoServer answered with a non-success HTTP status."""

    def __init__(self, status_code: int, detail: str = ""):
        self.status_code = status_code
        self.detail = detail
        message = f"GeoServer returned HTTP {status_code}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class ResourceExistsError(GeoServerResponseError):
    """The resource to create is already present on the server."""


def _segment(value: str) -> str:
    return quote(value, safe="")


@dataclass
class PostgisConnection:
    """Connection parameters of a PostGIS data store."""

    host: str
    port: int | str
    user: str
    password: str | None
    schema: str
    database: str
    expose_primary_keys: bool = False

    def to_entries(self) -> list[dict[str, str]]:
        """Render as GeoServer ``connectionParameters.entry`` items."""
        params = {
            "dbtype": "postgis",
            "host": self.host,
            "port": str(self.port),
            "user": self.user,
            "passwd": self.password or "",
            "schema": self.schema,
            "database": self.database,
            "Expose primary keys": str(self.expose_primary_keys).lower(),
        }
        return [{"@key": key, "$": value} for key, value in params.items()]


class SecurityAPI:
    """Users and roles endpoint API wrapper."""

    def __init__(self, client: GeoServerRestClient):
        self._client = client

    async def create_user(self, username: str, password: str, enabled: bool = True) -> bool:
        """Create a user in the default user/group service."""
        payload = {JAXB_USER: {"userName": username, "password": password, "enabled": enabled}}
        resp = await self._client._post("/security/usergroup/users", payload)
        return resp.status_code == httpx.codes.CREATED

    async def associate_user_role(self, username: str, role: str) -> bool:
        """Grant ``role`` to ``username``."""
        await self._client._post(
            f"/security/roles/role/{_segment(role)}/user/{_segment(username)}"
        )
        return True

    async def update_user(self, username: str, password: str, enabled: bool) -> bool:
        """Update password and enabled flag of an existing user."""
        payload = {JAXB_USER: {"password": password, "enabled": enabled}}
        await self._client._post(f"/security/usergroup/user/{_segment(username)}", payload)
        return True


class WorkspacesAPI:
    """Workspaces endpoint API wrapper."""

    def __init__(self, client: GeoServerRestClient):
        self._client = client

    async def create(self, name: str) -> bool:
        """Create a workspace."""
        resp = await self._client._post("/workspaces", {"workspace": {"name": name}})
        return resp.status_code == httpx.codes.CREATED


class DatastoresAPI:
    """Data stores endpoint API wrapper."""

    def __init__(self, client: GeoServerRestClient):
        self._client = client

    async def create_postgis_store(
        self,
        workspace: str,
        name: str,
        connection: PostgisConnection,
    ) -> bool:
        """Register a PostGIS store inside ``workspace``."""
        payload = {
            "dataStore": {
                "name": name,
                "type": "PostGIS",
                "enabled": True,
                "workspace": {"name": workspace},
                "connectionParameters": {"entry": connection.to_entries()},
            }
        }
        resp = await self._client._post(f"/workspaces/{_segment(workspace)}/datastores", payload)
        return resp.status_code == httpx.codes.CREATED


class LayersAPI:
    """Feature types endpoint API wrapper."""

    def __init__(self, client: GeoServerRestClient):
        self._client = client

    async def publish_feature_type(
        self,
        workspace: str,
        datastore: str,
        native_name: str,
        name: str,
        title: str,
        srs: str,
        enabled: bool = True,
    ) -> bool:
        """Publish a table of ``datastore`` as a feature type layer."""
        payload = {
            "featureType": {
                "name": name,
                "nativeName": native_name,
                "title": title,
                "srs": srs,
                "enabled": enabled,
            }
        }
        path = f"/workspaces/{_segment(workspace)}/datastores/{_segment(datastore)}/featuretypes"
        resp = await self._client._post(path, payload)
        return resp.status_code == httpx.codes.CREATED


class GeoServerRestClient:
    """HTTP client for the GeoServer REST API.

    Attributes:
        security: SecurityAPI for users and roles
        workspaces: WorkspacesAPI for workspace management
        datastores: DatastoresAPI for data store management
        layers: LayersAPI for layer publishing

    Example:
        >>> client = GeoServerRestClient("http://localhost:8080/geoserver/rest", "admin", "geoserver")
        >>> await client.exists()
        True
    """

    def __init__(
        self,
        base_url: str,
        username: str,
        password: str,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize client.

        Args:
            base_url: GeoServer REST base URL (``.../geoserver/rest``).
            username: User for HTTP basic authentication.
            password: Password for HTTP basic authentication.
            transport: Optional httpx transport (tests use MockTransport).
        """
        self.base_url = base_url.rstrip("/")
        self.username = username
        self.password = password
        self._transport = transport

        # Sub-APIs
        self.security = SecurityAPI(self)
        self.workspaces = WorkspacesAPI(self)
        self.datastores = DatastoresAPI(self)
        self.layers = LayersAPI(self)

    def _http(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            auth=(self.username, self.password),
            transport=self._transport,
            headers={"Accept": "application/json"},
        )

    @staticmethod
    def _check(resp: httpx.Response) -> None:
        """Raise the matching GeoServerResponseError for a failed response."""
        if resp.is_success:
            return
        detail = resp.text.strip()
        if resp.status_code == httpx.codes.CONFLICT or "already exists" in detail.lower():
            raise ResourceExistsError(resp.status_code, detail)
        raise GeoServerResponseError(resp.status_code, detail)

    async def _get(self, path: str, params: dict[str, Any] | None = None) -> httpx.Response:
        """Perform GET request."""
        async with self._http() as http:
            resp = await http.get(f"{self.base_url}{path}", params=params)
        logger.debug(f"GET {path} -> {resp.status_code}")
        self._check(resp)
        return resp

    async def _post(self, path: str, payload: dict[str, Any] | None = None) -> httpx.Response:
        """Perform POST request with an optional JSON body."""
        async with self._http() as http:
            resp = await http.post(f"{self.base_url}{path}", json=payload)
        logger.debug(f"POST {path} -> {resp.status_code}")
        self._check(resp)
        return resp

    async def exists(self) -> bool:
        """Check that the REST API is reachable with the configured credentials.

        Returns:
            False on any transport error or non-success status.
        """
        try:
            await self._get("/about/version.json")
        except (GeoServerError, httpx.HTTPError) as exc:
            logger.warning(f"GeoServer REST API not reachable at {self.base_url}: {exc}")
            return False
        return True

    # -------------------------------------------------------------------------
    # Management capabilities used by the provisioning pipeline
    # -------------------------------------------------------------------------

    async def connection_check(self) -> bool:
        return await self.exists()

    async def create_user(self, name: str, password: str) -> bool:
        return await self.security.create_user(name, password)

    async def assign_role(self, name: str, role: str) -> bool:
        return await self.security.associate_user_role(name, role)

    async def update_user_enabled(self, name: str, password: str, enabled: bool) -> bool:
        return await self.security.update_user(name, password, enabled)

    async def create_workspace(self, name: str) -> bool:
        return await self.workspaces.create(name)

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
    ) -> bool:
        connection = PostgisConnection(
            host=host,
            port=port,
            user=user,
            password=password,
            schema=schema,
            database=database,
        )
        return await self.datastores.create_postgis_store(workspace, store_name, connection)

    async def publish_feature_layer(
        self,
        workspace: str,
        store: str,
        native_name: str,
        layer_name: str,
        title: str,
        srs: str,
    ) -> bool:
        return await self.layers.publish_feature_type(
            workspace, store, native_name, layer_name, title, srs
        )


__all__ = [
    "DatastoresAPI",
    "GeoServerError",
    "GeoServerResponseError",
    "GeoServerRestClient",
    "LayersAPI",
    "PostgisConnection",
    "ResourceExistsError",
    "SecurityAPI",
    "WorkspacesAPI",
]
