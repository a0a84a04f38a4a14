"""
Paper Minecraft server implementation.

This module provides the PaperServer class. Paper jars are resolved through
the Paper version-mapping API registered for Software.PAPER.
"""

import logging

from .base import BaseServer
from ..models import Software

logger = logging.getLogger(__name__)


class PaperServer(BaseServer):
    """Paper Minecraft server implementation."""

    @property
    def software(self) -> Software:
        return Software.PAPER

    async def get_download_url(self) -> str:
        """Resolve the Paper jar URL for the requested version."""
        download_url = await super().get_download_url()
        logger.info(f"Resolved Paper {self.version} to {download_url}")
        return download_url
