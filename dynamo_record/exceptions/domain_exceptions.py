"""
Exceptions raised by the client layer.

Only failures that happen on our side of the aioboto3 call are represented
here: building the aioboto3 session/resource and rejecting a handle that
cannot address a table. Anything DynamoDB returns is re-raised as-is.
"""

from typing import Any, Dict, Optional

from .base import DynamoRecordError


class ConnectionError(DynamoRecordError):
    """Raised when the aioboto3 session, resource or table handle cannot be created.

    Used for:
    - Invalid credentials or endpoint configuration rejected by aioboto3
    - Missing botocore data for the requested region
    """

    def __init__(self, message: str, original_error: Optional[Exception] = None, context: Optional[Dict[str, Any]] = None):
        """Initialize connection error.

        Args:
            message: Human-readable error message
            original_error: The original exception that caused this error
            context: Additional context information (e.g., endpoint, region)
        """
        super().__init__(message, original_error, context)


class ConfigurationError(DynamoRecordError):
    """Raised when a handle is constructed with unusable settings."""

    def __init__(self, message: str, setting: Optional[str] = None, original_error: Optional[Exception] = None):
        self.setting = setting
        context = {}
        if setting:
            context['setting'] = setting
        super().__init__(message, original_error, context)
