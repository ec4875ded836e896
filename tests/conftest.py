# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Shared pytest fixtures for geoserver_init tests."""

from __future__ import annotations

import pytest

from geoserver_init.http_client import GeoServerResponseError, ResourceExistsError
from geoserver_init.init_config import GeoServerInitConfig

MUTATIONS = (
    "create_user",
    "assign_role",
    "update_user_enabled",
    "create_workspace",
    "create_database_store",
    "publish_feature_layer",
)


class RecordingClient:
    """In-memory ManagementClient that records every call.

    Args:
        reachable: Result of connection_check().
        fail_on: Call prefixes, e.g. ``("create_workspace", "b")``, answered with False.
        raise_on: Call prefixes answered with GeoServerResponseError(500).
        existing: Shared set of created resources; repeated creations raise
            ResourceExistsError like GeoServer does.
    """

    def __init__(self, reachable=True, fail_on=(), raise_on=(), existing=None):
        self.reachable = reachable
        self.fail_on = [tuple(item) for item in fail_on]
        self.raise_on = [tuple(item) for item in raise_on]
        self.existing = existing if existing is not None else set()
        self.calls: list[tuple] = []

    @property
    def names(self) -> list[str]:
        return [call[0] for call in self.calls]

    @property
    def mutations(self) -> list[tuple]:
        return [call for call in self.calls if call[0] in MUTATIONS]

    def _matches(self, call, prefixes):
        return any(call[: len(prefix)] == prefix for prefix in prefixes)

    def _record(self, *call, key=None) -> bool:
        self.calls.append(call)
        if self._matches(call, self.raise_on):
            raise GeoServerResponseError(500, "Internal Server Error")
        if self._matches(call, self.fail_on):
            return False
        if key is not None:
            if key in self.existing:
                raise ResourceExistsError(409, f"{key[-1]} already exists")
            self.existing.add(key)
        return True

    async def connection_check(self) -> bool:
        self.calls.append(("connection_check",))
        return self.reachable

    async def create_user(self, name, password):
        return self._record("create_user", name, password, key=("user", name))

    async def assign_role(self, name, role):
        return self._record("assign_role", name, role)

    async def update_user_enabled(self, name, password, enabled):
        return self._record("update_user_enabled", name, password, enabled)

    async def create_workspace(self, name):
        return self._record("create_workspace", name, key=("workspace", name))

    async def create_database_store(
        self, workspace, store_name, host, port, user, password, schema, database
    ):
        return self._record(
            "create_database_store",
            workspace,
            store_name,
            host,
            port,
            user,
            password,
            schema,
            database,
            key=("store", workspace, store_name),
        )

    async def publish_feature_layer(self, workspace, store, native_name, layer_name, title, srs):
        return self._record(
            "publish_feature_layer",
            workspace,
            store,
            native_name,
            layer_name,
            title,
            srs,
            key=("layer", workspace, layer_name),
        )


@pytest.fixture
def recording_client():
    """Factory for RecordingClient instances."""
    return RecordingClient


@pytest.fixture
def config():
    """Complete, valid configuration."""
    return GeoServerInitConfig(
        geoserver_url="http://geoserver:8080/geoserver/rest/",
        new_user="operator",
        new_password="s3cret",
        pg_password="pg-secret",
    )


# Marker registration
def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "integration: marks tests as integration tests")
