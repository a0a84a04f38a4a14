"""
Data model for mcdevkit.

This module holds the value types passed between the CLI, the API clients
and the server classes: the requested server software, the working
directory choice, the launch configuration and the parsed API payloads.
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional

from .constants import DEFAULT_MEMORY_MB, DEFAULT_PORT, NOGUI_FLAG, PORT_FLAG
from .exceptions import APIError, VersionResolutionError


class Software(str, Enum):
    """Server software distributions mcdevkit can fetch."""

    PAPER = "paper"

    @classmethod
    def names(cls) -> List[str]:
        return [software.value for software in cls]


@dataclass(frozen=True)
class WorkingDirectory:
    """
    Where the server runs: an explicit user path, or a generated temp folder.

    Use the ``generate`` and ``explicit`` constructors instead of building
    the dataclass directly.
    """

    path: Optional[Path] = None

    @classmethod
    def generate(cls) -> "WorkingDirectory":
        return cls(path=None)

    @classmethod
    def explicit(cls, path: Path) -> "WorkingDirectory":
        return cls(path=Path(path))

    @property
    def is_generated(self) -> bool:
        return self.path is None


@dataclass
class ServerConfig:
    """Launch configuration built once from CLI input."""

    software: Software
    version: str
    plugins: List[Path] = field(default_factory=list)
    working_directory: WorkingDirectory = field(default_factory=WorkingDirectory.generate)
    args: List[str] = field(default_factory=list)
    memory: int = DEFAULT_MEMORY_MB
    gui: bool = False
    port: int = DEFAULT_PORT
    debug: bool = False

    def server_args(self) -> List[str]:
        """User arguments followed by the flags derived from gui and port."""
        args = list(self.args)
        if not self.gui:
            args.append(NOGUI_FLAG)
        if self.port != DEFAULT_PORT:
            args.append(f"{PORT_FLAG}={self.port}")
        return args


@dataclass(frozen=True)
class VersionManifestEntry:
    """One version listed in the Mojang version manifest."""

    id: str
    type: str

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "VersionManifestEntry":
        return cls(id=str(data["id"]), type=str(data["type"]))


def parse_version_manifest(data: Any) -> List[VersionManifestEntry]:
    """
    Parse the ``versions`` list of a Mojang version manifest.

    Raises:
        APIError: If the document does not have the expected structure
    """
    try:
        return [VersionManifestEntry.from_json(entry) for entry in data["versions"]]
    except (KeyError, TypeError) as e:
        raise APIError("Version manifest has an unexpected structure", e) from e


@dataclass
class SoftwareApiResponse:
    """Latest version and version-to-download-URL mapping of a software API."""

    latest: str
    versions: Dict[str, str]

    @classmethod
    def from_json(cls, data: Any) -> "SoftwareApiResponse":
        if not isinstance(data, dict):
            raise APIError("Software API response is not a JSON object")

        latest = data.get("latest")
        versions = data.get("versions")
        if not isinstance(latest, str) or not isinstance(versions, dict):
            raise APIError("Software API response is missing 'latest' or 'versions'")

        return cls(latest=latest, versions={str(k): str(v) for k, v in versions.items()})

    def download_url(self, version: Optional[str] = None) -> str:
        """Return the URL for ``version``, or for the latest version when None."""
        version = version or self.latest
        try:
            return self.versions[version]
        except KeyError:
            raise VersionResolutionError(f"Version {version} not found in API response.")
