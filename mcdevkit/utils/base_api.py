"""
Base API classes with common functionality.

All HTTP access in mcdevkit goes through BaseHTTPClient: JSON lookups (sync
with requests for one-shot commands, async with httpx inside the start flow)
and streamed downloads. Transport failures surface as APIError or
DownloadError.
"""

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Optional, Protocol

import httpx
import requests

from ..constants import DEFAULT_TIMEOUT_SECONDS, DOWNLOAD_CHUNK_SIZE
from ..exceptions import APIError, DownloadError
from ..models import SoftwareApiResponse

logger = logging.getLogger(__name__)


class ProgressCallback(Protocol):
    """Protocol for progress callback functions."""

    def __call__(self, downloaded: int, total: int) -> None:
        """Called with download progress information. ``total`` is 0 when unknown."""
        ...


class BaseHTTPClient:
    """Base class for HTTP clients with common functionality."""

    def __init__(
        self,
        timeout: Optional[float] = DEFAULT_TIMEOUT_SECONDS,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """
        Initialize the HTTP client.

        Args:
            timeout: Default timeout for requests in seconds, None to wait forever
            transport: Optional httpx transport, e.g. httpx.MockTransport in tests
        """
        self.timeout = timeout
        self._transport = transport
        self._session: Optional[requests.Session] = None
        self._async_client: Optional[httpx.AsyncClient] = None

    @property
    def session(self) -> requests.Session:
        """Get or create synchronous HTTP session."""
        if self._session is None:
            self._session = requests.Session()
        return self._session

    @property
    def async_client(self) -> httpx.AsyncClient:
        """Get or create asynchronous HTTP client."""
        if self._async_client is None:
            self._async_client = httpx.AsyncClient(
                timeout=self.timeout,
                transport=self._transport,
                follow_redirects=True,
            )
        return self._async_client

    def get_json(self, url: str, **kwargs: Any) -> Any:
        """
        Perform synchronous GET request and return JSON response.

        Args:
            url: URL to request
            **kwargs: Additional arguments passed to requests.get

        Returns:
            Decoded JSON body

        Raises:
            APIError: If request fails or returns non-JSON response
        """
        kwargs.setdefault("timeout", self.timeout)
        try:
            response = self.session.get(url, **kwargs)
            response.raise_for_status()
            return response.json()
        except requests.HTTPError as e:
            logger.debug(f"HTTP request failed for {url}: {e}")
            raise APIError(
                f"Failed to fetch API response: Status code {e.response.status_code}", e
            ) from e
        except requests.RequestException as e:
            logger.debug(f"HTTP request failed for {url}: {e}")
            raise APIError(f"Failed to fetch API response from {url}", e) from e
        except ValueError as e:
            logger.debug(f"Invalid JSON response from {url}: {e}")
            raise APIError(f"Failed to parse JSON response from {url}", e) from e

    async def get_json_async(self, url: str, **kwargs: Any) -> Any:
        """
        Perform asynchronous GET request and return JSON response.

        Args:
            url: URL to request
            **kwargs: Additional arguments passed to httpx.AsyncClient.get

        Returns:
            Decoded JSON body

        Raises:
            APIError: If request fails, returns a non-success status or non-JSON response
        """
        try:
            response = await self.async_client.get(url, **kwargs)
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as e:
            logger.debug(f"HTTP request failed for {url}: {e}")
            raise APIError(
                f"Failed to fetch API response: Status code {e.response.status_code}", e
            ) from e
        except httpx.HTTPError as e:
            logger.debug(f"HTTP request failed for {url}: {e}")
            raise APIError(f"Failed to fetch API response from {url}", e) from e
        except ValueError as e:
            logger.debug(f"Invalid JSON response from {url}: {e}")
            raise APIError(f"Failed to parse JSON response from {url}", e) from e

    def close(self) -> None:
        """Close HTTP connections."""
        if self._session:
            self._session.close()
            self._session = None

    async def aclose(self) -> None:
        """Close async HTTP connections."""
        if self._async_client:
            await self._async_client.aclose()
            self._async_client = None

    def __enter__(self) -> 'BaseHTTPClient':
        """Context manager entry."""
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Context manager exit."""
        self.close()

    async def __aenter__(self) -> 'BaseHTTPClient':
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Async context manager exit."""
        await self.aclose()


class SoftwareAPI(BaseHTTPClient, ABC):
    """Base class for server software APIs that map versions to download URLs."""

    def __init__(
        self,
        base_url: str,
        timeout: Optional[float] = DEFAULT_TIMEOUT_SECONDS,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """
        Initialize the software API client.

        Args:
            base_url: Endpoint of the API
            timeout: Request timeout in seconds
            transport: Optional httpx transport
        """
        super().__init__(timeout, transport)
        self.base_url = base_url.rstrip('/')

    @abstractmethod
    def fetch_versions(self) -> SoftwareApiResponse:
        """Fetch the latest version and the version-to-URL mapping."""
        pass

    @abstractmethod
    async def fetch_versions_async(self) -> SoftwareApiResponse:
        """Fetch the latest version and the version-to-URL mapping asynchronously."""
        pass

    async def get_download_url(self, version: Optional[str] = None) -> str:
        """
        Resolve the direct download URL for a version.

        Args:
            version: Minecraft version, or None for the API's latest

        Returns:
            Direct download URL

        Raises:
            APIError: If the API cannot be fetched or parsed
            VersionResolutionError: If the API does not list the version
        """
        response = await self.fetch_versions_async()
        download_url = response.download_url(version)
        logger.debug(f"Resolved {version or response.latest} to {download_url} via {self.base_url}")
        return download_url


def _content_length(response: httpx.Response) -> int:
    """Declared body size, or 0 when the header is missing or not a number."""
    try:
        return max(int(response.headers.get("content-length", 0)), 0)
    except ValueError:
        logger.debug(f"Ignoring invalid content-length: {response.headers['content-length']}")
        return 0


class BaseDownloadClient(BaseHTTPClient):
    """Base class for download clients with progress tracking."""

    async def download_file(
        self,
        url: str,
        destination_dir: Path,
        file_name: str,
        progress_callback: Optional[ProgressCallback] = None,
        chunk_size: int = DOWNLOAD_CHUNK_SIZE
    ) -> Path:
        """
        Stream a file to disk with optional progress tracking.

        Chunks are written as they arrive. On failure the partial file stays
        on disk.

        Args:
            url: URL to download from
            destination_dir: Directory to save into, created if missing
            file_name: Name of the file inside destination_dir
            progress_callback: Optional callback for progress updates
            chunk_size: Size of chunks to read at once

        Returns:
            Path of the downloaded file

        Raises:
            DownloadError: If download fails
        """
        destination_dir = Path(destination_dir)
        destination = destination_dir / file_name

        try:
            destination_dir.mkdir(parents=True, exist_ok=True)

            async with self.async_client.stream("GET", url) as response:
                response.raise_for_status()

                total_size = _content_length(response)
                downloaded = 0

                with open(destination, "wb") as file:
                    async for chunk in response.aiter_bytes(chunk_size=chunk_size):
                        file.write(chunk)
                        downloaded += len(chunk)

                        if progress_callback:
                            progress_callback(downloaded, total_size)

            logger.debug(f"Downloaded {downloaded} bytes from {url} to {destination}")
            return destination

        except httpx.HTTPError as e:
            raise DownloadError(f"Failed to download {url}", e) from e
        except OSError as e:
            raise DownloadError(f"Failed to write file {destination}", e) from e
