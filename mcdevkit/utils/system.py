"""
System utilities for cross-platform support, Java lookup and workspaces.

This module provides utilities for detecting the operating system, locating
a Java runtime, and creating the directories a server runs in.
"""

import logging
import os
import platform
import random
import shutil
import string
import subprocess
import tempfile
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from ..config.settings import config
from ..constants import (
    DEFAULT_JAVA_EXECUTABLE, TEMP_FOLDER_PREFIX, UNIX_TEMP_ROOTS, WORKSPACE_SUFFIX_LENGTH
)
from ..exceptions import PathValidationError
from ..models import Software, WorkingDirectory

logger = logging.getLogger(__name__)


class SystemInfo:
    """Provides information about the current system."""

    @staticmethod
    def is_unix() -> bool:
        return os.name == "posix"

    @staticmethod
    def get_os_info() -> Dict[str, str]:
        """Get detailed OS information."""
        return {
            "system": platform.system(),
            "release": platform.release(),
            "machine": platform.machine(),
            "python": platform.python_version(),
        }


class JavaManager:
    """Locates the Java runtime used to launch servers."""

    @staticmethod
    def get_java_executable(java_executable: Optional[str] = None) -> Optional[str]:
        """
        Get path to the Java executable.

        Args:
            java_executable: Name or path to look up, defaults to the
                ``servers.java_executable`` setting

        Returns:
            Absolute path to Java, or None if it cannot be found
        """
        java_executable = java_executable or config.get("servers.java_executable") or DEFAULT_JAVA_EXECUTABLE

        if os.path.isfile(java_executable) and os.access(java_executable, os.X_OK):
            return os.path.abspath(java_executable)

        return shutil.which(java_executable)

    @staticmethod
    def get_java_version(java_executable: str) -> Optional[str]:
        """Get the version string reported by ``java -version``."""
        try:
            result = subprocess.run(
                [java_executable, "-version"],
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True
            )

            # java -version prints to stderr, redirected to stdout above
            version_line = result.stdout.split('\n')[0]
            if 'version' in version_line and '"' in version_line:
                return version_line.split('"')[1]

        except (OSError, subprocess.SubprocessError, IndexError) as e:
            logger.debug(f"Failed to get Java version from {java_executable}: {e}")

        return None


class PathManager:
    """Manages the working directories servers are launched in."""

    @staticmethod
    def generate_random_suffix(length: int = WORKSPACE_SUFFIX_LENGTH) -> str:
        """Random alphanumeric string used to keep workspace names apart."""
        alphabet = string.ascii_letters + string.digits
        return "".join(random.choice(alphabet) for _ in range(length))

    @staticmethod
    def preferred_temp_root() -> Optional[Path]:
        """The configured temp root, else a writable shared one on unix, else None."""
        configured = config.get_temp_root()
        if configured is not None:
            return configured

        if SystemInfo.is_unix():
            for candidate in UNIX_TEMP_ROOTS:
                if os.path.isdir(candidate) and os.access(candidate, os.W_OK):
                    return Path(candidate)

        return None

    @staticmethod
    def get_temp_folder() -> Path:
        """
        Get a writable root directory for temporary workspaces.

        Falls back to a fresh uniquely named folder inside the platform temp
        directory when there is no preferred root.
        """
        preferred = PathManager.preferred_temp_root()
        if preferred is not None:
            return preferred

        try:
            return Path(tempfile.mkdtemp(prefix=TEMP_FOLDER_PREFIX))
        except OSError as e:
            raise PathValidationError("Cannot create a temporary directory", e) from e

    @staticmethod
    def create_dir_if_absent(path: Path) -> Path:
        """Create a single directory level if it does not exist yet."""
        path = Path(path)
        if not path.exists():
            try:
                path.mkdir()
            except OSError as e:
                raise PathValidationError(f"Error creating directory {path}", e) from e
            logger.debug(f"Created directory {path}")
        return path

    @staticmethod
    def workspace_name(software: Software, version: str) -> str:
        """Name of a generated workspace folder."""
        return f"{Software(software).value}-{version}-{PathManager.generate_random_suffix()}"

    @staticmethod
    def create_temp_workspace(software: Software, version: str) -> Path:
        """
        Create ``<temp root>/<parent folder>/<software>-<version>-<suffix>``.

        Every run gets its own folder under one shared parent.
        """
        parent = PathManager.get_temp_folder() / config.get("workspace.parent_folder")
        PathManager.create_dir_if_absent(parent)

        workspace = parent / PathManager.workspace_name(software, version)
        return PathManager.create_dir_if_absent(workspace)

    @staticmethod
    def resolve_working_directory(
        working_directory: WorkingDirectory,
        software: Software,
        version: str,
    ) -> Path:
        """
        Turn the requested working directory into an existing absolute directory.

        An explicit path is created if missing; a failure there is only
        logged and surfaces when the path is resolved.

        Raises:
            PathValidationError: If the directory cannot be created, resolved,
                or is not a directory
        """
        if working_directory.is_generated:
            return PathManager.create_temp_workspace(software, version)

        path = working_directory.path
        if not path.exists():
            try:
                path.mkdir()
            except OSError as e:
                logger.error(f"Error creating directory: {e}")

        try:
            resolved = path.resolve(strict=True)
        except (OSError, RuntimeError) as e:
            raise PathValidationError(f"Failed to get the full path of {path}", e) from e

        if not resolved.is_dir():
            raise PathValidationError("You need to specify a directory not a file")

        return resolved

    @staticmethod
    def copy_file_to_folder(file_path: Path, folder_path: Path) -> Path:
        """Copy a file into a folder, keeping its base name."""
        if not folder_path.is_dir():
            raise FileNotFoundError(f"Destination folder does not exist: {folder_path}")

        destination = folder_path / file_path.name
        shutil.copyfile(file_path, destination)
        return destination

    @staticmethod
    def copy_plugins(plugins: Sequence[Path], plugins_folder: Path) -> List[Path]:
        """
        Copy plugin files into the plugins folder.

        Missing paths and paths that are not regular files are skipped with a
        warning. A failed copy is logged and skipped as well.

        Returns:
            Paths of the copied files
        """
        plugins_folder = Path(plugins_folder)
        if not plugins_folder.exists():
            logger.error(f"Destination folder does not exist: {plugins_folder}")
            return []

        if not plugins_folder.is_dir():
            logger.error(f"Destination path is not a directory: {plugins_folder}")
            return []

        copied = []
        for plugin in plugins:
            plugin = Path(plugin)
            if not plugin.exists():
                logger.warning(f"{plugin} does not exist. Skipping...")
                continue

            if not plugin.is_file():
                logger.warning(f"{plugin} is not a file. Skipping...")
                continue

            try:
                copied.append(PathManager.copy_file_to_folder(plugin, plugins_folder))
            except OSError as e:
                logger.error(f"Failed to copy {plugin}: {e}")
                continue

            logger.info(f"{plugin.name} copied to plugins folder.")

        return copied
