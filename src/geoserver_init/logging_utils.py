# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Console logging helpers.

Log records of the ``geoserver_init`` logger are rendered by a rich handler;
milestones and fatal errors are printed as framed banners.
"""

from __future__ import annotations

import logging

from rich import box
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.text import Text

console = Console()


def configure_logging(verbose: bool = False) -> logging.Logger:
    """Attach a rich handler to the package logger.

    Args:
        verbose: Log at DEBUG level (configuration dump, REST calls).

    Returns:
        The configured ``geoserver_init`` logger.
    """
    logger = logging.getLogger("geoserver_init")
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    if not any(isinstance(handler, RichHandler) for handler in logger.handlers):
        logger.addHandler(RichHandler(console=console, show_path=False))
    return logger


def framed_big_logging(msg: str) -> None:
    """Print ``msg`` in a double-lined frame."""
    console.print(Panel(Text(msg), box=box.DOUBLE, expand=False))


def framed_medium_logging(msg: str) -> None:
    """Print ``msg`` in a single-lined frame."""
    console.print(Panel(Text(msg), box=box.ASCII, expand=False))


__all__ = ["configure_logging", "console", "framed_big_logging", "framed_medium_logging"]
