# Copyright 2025 Ilya Makarov
#
# Licensed under the Business Source License 1.1
# Change Date: 2028-11-05
# Change License: Apache License 2.0

"""
Regbox Exception Hierarchy

Exception Hierarchy:
    RegboxError (base)
    ├── ConfigError
    ├── InvalidArgumentError
    ├── ExternalToolError
    └── ToolNotFoundError

A query that finds nothing is not an error: it yields an empty list or None.
"""

from typing import Any, Dict, List, Optional, Sequence

# ============================================================================
# Base Exceptions
# ============================================================================


class RegboxError(Exception):
    """Base exception for all regbox errors"""

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None,
    ):
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.cause = cause

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging/serialization"""
        result = {
            "type": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
        }

        if self.cause:
            result["cause"] = {
                "type": self.cause.__class__.__name__,
                "message": str(self.cause),
            }

        return result

    def __str__(self):
        base = self.message
        if self.details:
            base += f" | Details: {self.details}"
        if self.cause:
            base += f" | Caused by: {self.cause}"
        return base


# ============================================================================
# Configuration Errors
# ============================================================================


class ConfigError(RegboxError):
    """Configuration could not be loaded or failed validation"""


# ============================================================================
# Argument Errors
# ============================================================================


class InvalidArgumentError(RegboxError, ValueError):
    """
    Malformed hive, key, value name or value type.

    Always raised before any external process is spawned.
    """

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        value: Any = None,
        **kwargs,
    ):
        super().__init__(message, **kwargs)
        self.field = field
        self.value = value

    def to_dict(self) -> Dict[str, Any]:
        result = super().to_dict()
        result.update(
            {
                "field": self.field,
                "value": self.value,
            }
        )
        return result


# ============================================================================
# External Tool Errors
# ============================================================================


class ExternalToolError(RegboxError):
    """The registry tool exited with a non-zero status"""

    def __init__(
        self,
        message: str,
        exit_code: int,
        argv: Optional[Sequence[str]] = None,
        **kwargs,
    ):
        super().__init__(message, **kwargs)
        self.exit_code = exit_code
        self.argv: List[str] = list(argv or [])

    def to_dict(self) -> Dict[str, Any]:
        result = super().to_dict()
        result.update(
            {
                "exit_code": self.exit_code,
                "argv": self.argv,
            }
        )
        return result


class ToolLaunchError(RegboxError):
    """The registry tool could not be started"""

    def __init__(self, message: str, executable: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.executable = executable

    def to_dict(self) -> Dict[str, Any]:
        result = super().to_dict()
        result["executable"] = self.executable
        return result


class ToolNotFoundError(ToolLaunchError):
    """The registry tool is missing from PATH"""
