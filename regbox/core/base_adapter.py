# Copyright 2025 Ilya Makarov
#
# Licensed under the Business Source License 1.1
# Change Date: 2028-11-05
# Change License: Apache License 2.0

"""
Regbox Base Adapter Architecture

Adapters expose operations as ``execute(method, inputs)`` calls that return a
standard response dictionary, which is what the CLI prints and what other
tools can consume without knowing regbox's Python types.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, Optional

from .exceptions import (
    ExternalToolError,
    InvalidArgumentError,
    RegboxError,
    ToolLaunchError,
)

logger = logging.getLogger("regbox.adapters")

MethodHandler = Callable[[Dict[str, Any]], Awaitable[Any]]


class AdapterErrorType(Enum):
    """Standard error types for adapters"""

    VALIDATION_ERROR = "validation_error"
    EXECUTION_ERROR = "execution_error"
    NOT_FOUND_ERROR = "not_found_error"
    DEPENDENCY_ERROR = "dependency_error"


@dataclass
class AdapterResponse:
    """Standardized adapter response format"""

    success: bool
    data: Any = None
    error: Optional[str] = None
    error_type: Optional[AdapterErrorType] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        result = {
            "success": self.success,
            "data": self.data,
        }
        if self.error:
            result["error"] = self.error
            result["error_type"] = self.error_type.value if self.error_type else None
        if self.metadata:
            result["metadata"] = self.metadata
        return result

    @classmethod
    def success_response(cls, data: Any = None, **metadata) -> "AdapterResponse":
        """Create success response"""
        return cls(success=True, data=data, metadata=metadata)

    @classmethod
    def error_response(
        cls,
        error: str,
        error_type: AdapterErrorType = AdapterErrorType.EXECUTION_ERROR,
        **metadata,
    ) -> "AdapterResponse":
        """Create error response"""
        return cls(success=False, error=error, error_type=error_type, metadata=metadata)

    @classmethod
    def from_exception(cls, error: Exception) -> "AdapterResponse":
        """Classify an exception raised by an adapter method"""
        if isinstance(error, InvalidArgumentError):
            return cls.error_response(
                error=error.message,
                error_type=AdapterErrorType.VALIDATION_ERROR,
                field=error.field,
            )
        if isinstance(error, ExternalToolError):
            return cls.error_response(
                error=error.message,
                error_type=AdapterErrorType.EXECUTION_ERROR,
                exit_code=error.exit_code,
            )
        if isinstance(error, ToolLaunchError):
            return cls.error_response(
                error=error.message,
                error_type=AdapterErrorType.DEPENDENCY_ERROR,
                executable=error.executable,
            )
        if isinstance(error, RegboxError):
            return cls.error_response(error=error.message)
        return cls.error_response(error=str(error))


class Adapter(ABC):
    """
    Base class for all regbox adapters.

    All adapters must inherit from this class and implement execute().
    """

    def __init__(self, adapter_name: Optional[str] = None):
        self.adapter_name = adapter_name or self.__class__.__name__
        self.logger = logging.getLogger(f"regbox.adapters.{self.adapter_name}")

    @abstractmethod
    async def execute(self, method: str, inputs: Dict[str, Any]) -> Dict[str, Any]:
        """
        Execute adapter method with inputs.

        Args:
            method: Method name to execute
            inputs: Input parameters as dictionary

        Returns:
            Response dictionary (see AdapterResponse.to_dict)
        """

    def log_execution(self, method: str, inputs: Dict[str, Any]):
        """Log method execution"""
        self.logger.debug(
            f"Executing {self.adapter_name}.{method}", extra={"inputs": inputs}
        )

    def log_success(self, method: str):
        """Log successful execution"""
        self.logger.debug(f"{self.adapter_name}.{method} completed successfully")

    def log_error(self, method: str, error: Exception):
        """Log execution error"""
        if isinstance(error, RegboxError):
            self.logger.error(f"{self.adapter_name}.{method} failed: {error}")
        else:
            self.logger.error(
                f"{self.adapter_name}.{method} failed: {error}", exc_info=True
            )


class BaseAdapter(Adapter):
    """
    Adapter with method routing and standard error handling.

    Handlers receive the inputs dictionary and return plain data, which is
    wrapped in a success response; exceptions become error responses.
    """

    def __init__(self, adapter_name: Optional[str] = None):
        super().__init__(adapter_name)
        self._methods: Dict[str, MethodHandler] = {}

    @property
    def methods(self):
        """Registered method names"""
        return sorted(self._methods)

    def register_method(self, name: str, handler: MethodHandler):
        """Register a method handler"""
        self._methods[name] = handler

    async def execute(self, method: str, inputs: Dict[str, Any]) -> Dict[str, Any]:
        """Execute registered method"""
        self.log_execution(method, inputs)

        handler = self._methods.get(method)
        if not handler:
            error = f"Unknown method: {method}"
            self.logger.error(error)
            return AdapterResponse.error_response(
                error=error, error_type=AdapterErrorType.NOT_FOUND_ERROR
            ).to_dict()

        try:
            result = await handler(inputs)
        except Exception as e:
            self.log_error(method, e)
            return AdapterResponse.from_exception(e).to_dict()

        self.log_success(method)
        return AdapterResponse.success_response(data=result).to_dict()


__all__ = [
    "Adapter",
    "BaseAdapter",
    "AdapterResponse",
    "AdapterErrorType",
]
