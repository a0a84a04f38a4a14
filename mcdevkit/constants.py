"""
Constants used throughout mcdevkit.

This module contains all hardcoded values used across the application
for easy maintenance and configuration.
"""

from typing import List, Optional

# Server launch defaults
DEFAULT_MEMORY_MB: int = 2048
MIN_HEAP_FLAG: str = "-Xms256M"

MIN_PORT: int = 1
MAX_PORT: int = 65535
DEFAULT_PORT: int = 25565

DEFAULT_JAVA_EXECUTABLE: str = "java"

# Flags appended to the server arguments
NOGUI_FLAG: str = "--nogui"
PORT_FLAG: str = "--port"

# Version validation: 1.<minor>[.<patch>], each 1-2 digits
VERSION_PATTERN: str = r"^1\.\d{1,2}(\.\d{1,2})?$"

# Network settings (None disables the timeout)
DEFAULT_TIMEOUT_SECONDS: Optional[float] = None
DOWNLOAD_CHUNK_SIZE: int = 8192

# API URLs
MOJANG_MANIFEST_URL: str = "https://piston-meta.mojang.com/mc/game/version_manifest_v2.json"
PAPER_API_URL: str = "https://qing762.is-a.dev/api/papermc"

# Workspace layout
SERVER_JAR_NAME: str = "server.jar"
EULA_FILE_NAME: str = "eula.txt"
EULA_CONTENT: str = "eula=true"
PLUGINS_FOLDER_NAME: str = "plugins"

WORKSPACE_PARENT_FOLDER: str = "mcdevkit"
TEMP_FOLDER_PREFIX: str = "mcdevkit-tmp"
WORKSPACE_SUFFIX_LENGTH: int = 8

# Preferred shared temp locations on unix-like systems
UNIX_TEMP_ROOTS: List[str] = ["/var/tmp"]
