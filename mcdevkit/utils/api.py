"""
API utilities for validating Minecraft versions and resolving server downloads.

This module provides clients for the Mojang version manifest and for the
server software APIs that map a Minecraft version to a direct download URL,
plus the download manager used to fetch the server jar.
"""

import logging
from typing import Dict, List, Optional, Set, Type

import httpx
from packaging import version as packaging_version

from ..config.settings import config
from ..exceptions import APIError
from ..models import (
    Software, SoftwareApiResponse, VersionManifestEntry, parse_version_manifest
)
from .base_api import BaseDownloadClient, BaseHTTPClient, SoftwareAPI
from .validation import is_version_syntax_valid

logger = logging.getLogger(__name__)


class MojangVersionAPI(BaseHTTPClient):
    """Client for the official Mojang version manifest."""

    def __init__(
        self,
        manifest_url: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        super().__init__(config.get("downloads.timeout"), transport)
        self.manifest_url = manifest_url or config.get("api.version_manifest_url")

    async def get_versions_async(self) -> List[VersionManifestEntry]:
        """Fetch every version entry listed in the manifest."""
        data = await self.get_json_async(self.manifest_url)
        return parse_version_manifest(data)

    async def get_version_ids_async(self) -> Set[str]:
        """Fetch the set of all known version ids."""
        return {entry.id for entry in await self.get_versions_async()}


class PaperAPI(SoftwareAPI):
    """
    API client for Paper server downloads.

    The endpoint answers with ``{"latest": "<version>", "versions":
    {"<version>": "<jar url>", ...}}``.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        super().__init__(
            base_url or config.get("api.paper_url"),
            config.get("downloads.timeout"),
            transport,
        )

    def fetch_versions(self) -> SoftwareApiResponse:
        """Fetch the version mapping synchronously."""
        return SoftwareApiResponse.from_json(self.get_json(self.base_url))

    async def fetch_versions_async(self) -> SoftwareApiResponse:
        """Fetch the version mapping asynchronously."""
        return SoftwareApiResponse.from_json(await self.get_json_async(self.base_url))


# Server software to API client mapping
SOFTWARE_APIS: Dict[Software, Type[SoftwareAPI]] = {
    Software.PAPER: PaperAPI,
}


def create_software_api(
    software: Software,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> SoftwareAPI:
    """Create the API client for a server software."""
    try:
        api_class = SOFTWARE_APIS[Software(software)]
    except (KeyError, ValueError) as e:
        raise APIError(f"No download API for software {software}", e) from e
    return api_class(transport=transport)


async def resolve_download_url(
    software: Software,
    version: Optional[str] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> str:
    """Resolve the direct download URL of ``software`` for ``version``."""
    async with create_software_api(software, transport) as api:
        return await api.get_download_url(version)


async def check_valid_version(
    version_to_check: str,
    api: Optional[MojangVersionAPI] = None,
) -> bool:
    """
    Check that a version is well-formed and listed in the Mojang manifest.

    Problems are logged, never raised. The manifest is only fetched when the
    syntax check passes.

    Args:
        version_to_check: Version string given by the user
        api: Manifest client to use, a default one is created when None

    Returns:
        True if the version exists upstream
    """
    if not is_version_syntax_valid(version_to_check):
        logger.error(f"'{version_to_check}' is not a valid version number.")
        return False

    owns_api = api is None
    api = api or MojangVersionAPI()
    try:
        available_versions = await api.get_version_ids_async()
    except APIError as e:
        logger.error(f"Failed to fetch version manifest - {e}")
        return False
    finally:
        if owns_api:
            await api.aclose()

    if version_to_check not in available_versions:
        logger.error(f"Version {version_to_check} not found in version manifest.")
        return False

    logger.debug(f"Version {version_to_check} found in version manifest")
    return True


def sort_versions(versions) -> List[str]:
    """Sort version strings newest first; unparsable ones go last."""
    def key(value: str):
        try:
            return (1, packaging_version.parse(value))
        except packaging_version.InvalidVersion:
            return (0, packaging_version.parse("0"))

    return sorted(versions, key=key, reverse=True)


class DownloadManager(BaseDownloadClient):
    """Handles file downloads with progress tracking."""

    def __init__(self, transport: Optional[httpx.AsyncBaseTransport] = None) -> None:
        super().__init__(config.get("downloads.timeout"), transport)
