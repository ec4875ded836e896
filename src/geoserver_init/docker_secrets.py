# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Access to Docker/Kubernetes secrets mounted as files.

Secrets are looked up as ``<secrets_dir>/<name>`` (``/run/secrets`` by
default). A missing, unreadable or empty file reads as ``None`` so callers can
fall back to environment variables.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

logger = logging.getLogger("geoserver_init")

DEFAULT_SECRETS_DIR = "/run/secrets"


def read_secret(name: str, secrets_dir: str | Path = DEFAULT_SECRETS_DIR) -> str | None:
    """Read a mounted secret.

    Args:
        name: Secret name (file name inside ``secrets_dir``).
        secrets_dir: Directory where secrets are mounted.

    Returns:
        The stripped secret value, or None if it is not available.
    """
    secret_path = Path(secrets_dir) / name
    try:
        value = secret_path.read_text(encoding="utf-8").strip()
    except OSError:
        logger.debug(f"Secret '{name}' not found in {secrets_dir}")
        return None
    return value or None


def secret_or_env(
    name: str, env_var: str, secrets_dir: str | Path = DEFAULT_SECRETS_DIR
) -> str | None:
    """Read a secret file, falling back to an environment variable."""
    return read_secret(name, secrets_dir) or os.environ.get(env_var) or None


__all__ = ["DEFAULT_SECRETS_DIR", "read_secret", "secret_or_env"]
