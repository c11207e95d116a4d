# Copyright 2025 Ilya Makarov
#
# Licensed under the Business Source License 1.1
# Change Date: 2028-11-05
# Change License: Apache License 2.0

"""
Regbox Core

Exports the registry model, the operation facade and the error hierarchy.
"""

from .commands import RegCommandBuilder
from .exceptions import (
    ConfigError,
    ExternalToolError,
    InvalidArgumentError,
    RegboxError,
    ToolLaunchError,
    ToolNotFoundError,
)
from .models import Hive, Location, ValueRecord, ValueType
from .registry import RegistryClient
from .runner import ProcessRunner, SubprocessRunner

__all__ = [
    # Model
    "Hive",
    "ValueType",
    "Location",
    "ValueRecord",
    # Operations
    "RegistryClient",
    "RegCommandBuilder",
    "ProcessRunner",
    "SubprocessRunner",
    # Errors
    "RegboxError",
    "ConfigError",
    "InvalidArgumentError",
    "ExternalToolError",
    "ToolLaunchError",
    "ToolNotFoundError",
]
