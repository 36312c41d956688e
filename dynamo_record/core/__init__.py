"""
Core client components.

- DynamoRecord: asyncio client bound to one DynamoDB table
- create_dynamo_record: factory applying the configured table prefix
"""

from .dynamo_record import DynamoRecord, create_dynamo_record

__all__ = [
    "DynamoRecord",
    "create_dynamo_record",
]
