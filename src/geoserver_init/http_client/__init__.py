# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""HTTP client for the GeoServer REST management API.

Example:
    >>> from geoserver_init.http_client import GeoServerRestClient
    >>> client = GeoServerRestClient("http://geoserver:8080/geoserver/rest", "admin", "geoserver")
    >>> await client.exists()
    True
"""

from .client import (
    GeoServerError,
    GeoServerResponseError,
    GeoServerRestClient,
    PostgisConnection,
    ResourceExistsError,
)

__all__ = [
    "GeoServerError",
    "GeoServerResponseError",
    "GeoServerRestClient",
    "PostgisConnection",
    "ResourceExistsError",
]
