from .requests import (
    BatchPutRequest,
    DeleteRequest,
    DynamoRequest,
    FilterSpec,
    GetRequest,
    PutRequest,
    QueryRequest,
    ScanRequest,
    UpdateRequest,
    build_where_request,
)

__all__ = [
    # Request variants
    "BatchPutRequest",
    "DeleteRequest",
    "DynamoRequest",
    "GetRequest",
    "PutRequest",
    "QueryRequest",
    "ScanRequest",
    "UpdateRequest",

    # Inputs
    "FilterSpec",

    # Builders
    "build_where_request",
]
