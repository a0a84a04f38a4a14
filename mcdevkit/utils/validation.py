"""
Common validation utilities for mcdevkit.

This module provides the input checks run by the CLI before anything touches
the network or the filesystem.
"""

import re
from typing import Any

from ..constants import MAX_PORT, MIN_PORT, VERSION_PATTERN
from ..exceptions import ValidationError

_VERSION_RE = re.compile(VERSION_PATTERN)


def is_version_syntax_valid(version: Any) -> bool:
    """Return True if ``version`` looks like ``1.<minor>`` or ``1.<minor>.<patch>``."""
    if not isinstance(version, str):
        return False
    return _VERSION_RE.fullmatch(version) is not None


class BaseValidator:
    """Base validator class with common validation methods."""

    @staticmethod
    def validate_integer_range(
        value: Any,
        field_name: str,
        min_value: int,
        max_value: int
    ) -> int:
        """Validate that value is an integer within the specified range."""
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValidationError(f"{field_name} must be an integer")

        if value < min_value or value > max_value:
            raise ValidationError(
                f"{field_name} must be between {min_value} and {max_value}"
            )

        return value

    @staticmethod
    def validate_positive_integer(value: Any, field_name: str) -> int:
        """Validate that value is an integer greater than zero."""
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValidationError(f"{field_name} must be an integer")

        if value <= 0:
            raise ValidationError(f"{field_name} must be a positive integer")

        return value


class ServerValidator(BaseValidator):
    """Validator for server launch inputs."""

    @staticmethod
    def validate_memory(memory: Any) -> int:
        """Validate the maximum heap size in megabytes."""
        return ServerValidator.validate_positive_integer(memory, "Memory")

    @staticmethod
    def validate_port(port: Any) -> int:
        """Validate server port input."""
        return ServerValidator.validate_integer_range(
            port, "Server port", MIN_PORT, MAX_PORT
        )

