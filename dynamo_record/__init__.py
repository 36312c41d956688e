"""
dynamo-record

An asyncio client for a single DynamoDB table built on aioboto3 and Pydantic:
find / where / get_all / create / batch_create / update / destroy, with
placeholder-safe expression building for key conditions, filters and updates.
"""

from .config import DynamoDBConfig
from .exceptions import (
    ConfigurationError,
    ConnectionError,
    DynamoRecordError,
)
from .expressions import (
    build_filter_expression,
    build_key_condition,
    build_update_expression,
    merge_overrides,
    prune_empty_placeholders,
)
from .models import (
    BatchPutRequest,
    DeleteRequest,
    FilterSpec,
    GetRequest,
    PutRequest,
    QueryRequest,
    ScanRequest,
    UpdateRequest,
)
from .core import (
    DynamoRecord,
    create_dynamo_record,
)

__version__ = "1.6.0"
__all__ = [
    # Configuration
    "DynamoDBConfig",

    # Exceptions
    "ConfigurationError",
    "ConnectionError",
    "DynamoRecordError",

    # Expression building
    "build_filter_expression",
    "build_key_condition",
    "build_update_expression",
    "merge_overrides",
    "prune_empty_placeholders",

    # Request models
    "BatchPutRequest",
    "DeleteRequest",
    "FilterSpec",
    "GetRequest",
    "PutRequest",
    "QueryRequest",
    "ScanRequest",
    "UpdateRequest",

    # Client
    "DynamoRecord",
    "create_dynamo_record",
]
