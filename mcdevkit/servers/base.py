"""
Base server classes for Minecraft server management.

This module provides the abstract base class shared by all server software:
preparing the working directory (download, EULA, plugins) and launching the
server process.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Optional

import httpx

from ..config.settings import config
from ..constants import (
    EULA_CONTENT, EULA_FILE_NAME, MIN_HEAP_FLAG, PLUGINS_FOLDER_NAME, SERVER_JAR_NAME
)
from ..exceptions import JavaError, McDevKitError, ServerInstallationError
from ..models import ServerConfig, Software
from ..utils.api import DownloadManager, resolve_download_url
from ..utils.base_api import ProgressCallback
from ..utils.process import ServerProcess
from ..utils.system import JavaManager, PathManager

logger = logging.getLogger(__name__)


class BaseServer(ABC):
    """Abstract base class for Minecraft servers."""

    def __init__(
        self,
        server_config: ServerConfig,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.config = server_config
        self._transport = transport
        self._working_directory: Optional[Path] = None

    @property
    @abstractmethod
    def software(self) -> Software:
        """Return the server software this class installs."""
        pass

    @property
    def version(self) -> str:
        return self.config.version

    @property
    def working_directory(self) -> Path:
        """The resolved working directory; only valid after it was resolved."""
        if self._working_directory is None:
            raise ServerInstallationError("Working directory has not been resolved yet")
        return self._working_directory

    @property
    def server_jar_path(self) -> Path:
        return self.working_directory / SERVER_JAR_NAME

    @property
    def eula_path(self) -> Path:
        return self.working_directory / EULA_FILE_NAME

    @property
    def plugins_directory(self) -> Path:
        return self.working_directory / PLUGINS_FOLDER_NAME

    async def get_download_url(self) -> str:
        """Resolve the direct download URL of the server jar."""
        return await resolve_download_url(self.software, self.version, self._transport)

    def resolve_working_directory(self) -> Path:
        """Resolve or create the working directory."""
        self._working_directory = PathManager.resolve_working_directory(
            self.config.working_directory, self.software, self.version
        )
        logger.debug(f"Working directory: {self._working_directory}")
        return self._working_directory

    async def download_server_jar(self, progress_callback: Optional[ProgressCallback] = None) -> Path:
        """Download the server jar into the working directory."""
        download_url = await self.get_download_url()
        async with DownloadManager(self._transport) as download_manager:
            return await download_manager.download_file(
                download_url,
                self.working_directory,
                SERVER_JAR_NAME,
                progress_callback,
                config.get("downloads.chunk_size"),
            )

    def create_eula_file(self) -> Path:
        """Write the EULA acceptance file."""
        try:
            self.eula_path.write_text(EULA_CONTENT)
        except OSError as e:
            raise ServerInstallationError(f"Error writing to {EULA_FILE_NAME}", e) from e
        return self.eula_path

    def install_plugins(self) -> List[Path]:
        """Create the plugins folder and copy the requested plugins into it."""
        try:
            self.plugins_directory.mkdir(exist_ok=True)
        except OSError as e:
            logger.error(f"Error creating directory: {e}")
        return PathManager.copy_plugins(self.config.plugins, self.plugins_directory)

    async def prepare_workspace(self, progress_callback: Optional[ProgressCallback] = None) -> Path:
        """
        Prepare everything the server needs before it can start.

        Steps run in order and the first failure aborts the rest; files
        written by earlier steps are left in place.

        Returns:
            The resolved working directory

        Raises:
            McDevKitError: If any step fails
        """
        install_steps = [
            ("Creating working directory", self.resolve_working_directory),
            ("Downloading server software", self.download_server_jar),
            ("Creating eula.txt", self.create_eula_file),
            ("Installing plugins", self.install_plugins),
        ]

        for step_name, step_func in install_steps:
            logger.info(f"{step_name}.")
            try:
                if asyncio.iscoroutinefunction(step_func):
                    await step_func(progress_callback)
                else:
                    step_func()
            except McDevKitError:
                raise
            except OSError as e:
                raise ServerInstallationError(f"{step_name} failed", e) from e

        return self.working_directory

    def build_command(self, java_executable: str) -> List[str]:
        """Build the command line that launches the server."""
        return [
            java_executable,
            MIN_HEAP_FLAG,
            f"-Xmx{self.config.memory}M",
            "-jar",
            SERVER_JAR_NAME,
            *self.config.server_args(),
        ]

    async def start(self, interrupt: Optional[asyncio.Event] = None) -> Optional[int]:
        """
        Launch the server and wait for it to stop.

        Returns:
            The server's return code

        Raises:
            JavaError: If no Java executable can be found
            ServerStartError: If the process cannot be spawned
        """
        java_executable = JavaManager.get_java_executable()
        if java_executable is None:
            raise JavaError(
                f"Java executable '{config.get('servers.java_executable')}' not found"
            )

        process = ServerProcess(self.build_command(java_executable), self.working_directory)
        return await process.run(interrupt)
