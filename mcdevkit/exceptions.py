"""
Custom exception classes for mcdevkit.

This module defines the exception hierarchy used throughout the application
for consistent error handling and reporting. The CLI turns every
McDevKitError into exit status 1.
"""

from typing import Optional


class McDevKitError(Exception):
    """Base exception class for all mcdevkit errors."""

    def __init__(self, message: str, cause: Optional[Exception] = None):
        super().__init__(message)
        self.message = message
        self.cause = cause

    def __str__(self) -> str:
        if self.cause:
            return f"{self.message} (caused by: {self.cause})"
        return self.message


class ValidationError(McDevKitError):
    """Raised when input validation fails."""
    pass


class PathValidationError(ValidationError):
    """Raised when a working directory cannot be created or resolved."""
    pass


class UnsupportedVersionError(ValidationError):
    """Raised when an unknown Minecraft version is requested."""
    pass


class APIError(McDevKitError):
    """Raised when API calls fail."""
    pass


class VersionResolutionError(APIError):
    """Raised when an API answered but does not know the requested version."""
    pass


class DownloadError(McDevKitError):
    """Raised when file download fails."""
    pass


class ServerInstallationError(McDevKitError):
    """Raised when preparing the server workspace fails."""
    pass


class SystemError(McDevKitError):
    """Raised when system-level operations fail."""
    pass


class JavaError(SystemError):
    """Raised when Java-related operations fail."""
    pass


class ServerStartError(McDevKitError):
    """Raised when the server process cannot be spawned."""
    pass


class ConfigurationError(McDevKitError):
    """Raised when configuration is invalid or missing."""
    pass
