# Copyright 2025 Ilya Makarov
#
# Licensed under the Business Source License 1.1
# Change Date: 2028-11-05
# Change License: Apache License 2.0

"""
Regbox - asynchronous Windows Registry access through the REG tool
"""

from .core import (
    ExternalToolError,
    Hive,
    InvalidArgumentError,
    Location,
    RegboxError,
    RegistryClient,
    ToolLaunchError,
    ToolNotFoundError,
    ValueRecord,
    ValueType,
)

__version__ = "1.0.0"

__all__ = [
    "RegistryClient",
    "Location",
    "ValueRecord",
    "Hive",
    "ValueType",
    "RegboxError",
    "InvalidArgumentError",
    "ExternalToolError",
    "ToolLaunchError",
    "ToolNotFoundError",
    "__version__",
]
