# Base exception class
from .base import DynamoRecordError

from .domain_exceptions import (
    ConfigurationError,
    ConnectionError,
)

__all__ = [
    "DynamoRecordError",
    "ConfigurationError",
    "ConnectionError",
]
