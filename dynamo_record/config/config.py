import os
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, field_validator

# Load environment variables from .env file if it exists
load_dotenv()


class DynamoDBConfig(BaseModel):
    """Configuration for the DynamoDB connection and per-request defaults."""

    aws_access_key_id: Optional[str] = Field(
        default_factory=lambda: os.getenv("AWS_ACCESS_KEY_ID"),
        description="AWS access key ID"
    )

    aws_secret_access_key: Optional[str] = Field(
        default_factory=lambda: os.getenv("AWS_SECRET_ACCESS_KEY"),
        description="AWS secret access key"
    )

    region_name: str = Field(
        default_factory=lambda: os.getenv("AWS_REGION", "us-east-1"),
        description="AWS region name"
    )

    # DynamoDB specific settings
    endpoint_url: Optional[str] = Field(
        default_factory=lambda: os.getenv("DYNAMODB_ENDPOINT_URL"),
        description="DynamoDB endpoint URL (for local development)"
    )

    # Table configuration
    table_prefix: str = Field(
        default_factory=lambda: os.getenv("DYNAMODB_TABLE_PREFIX", ""),
        description="Prefix to add to all table names"
    )

    # Connection settings
    max_pool_connections: int = Field(
        default=50,
        description="Maximum number of connections in the connection pool"
    )

    retries: int = Field(
        default=3,
        description="Number of retry attempts botocore makes for failed requests"
    )

    timeout_seconds: float = Field(
        default=30.0,
        description="Request timeout in seconds"
    )

    # Request defaults
    consistent_find: bool = Field(
        default_factory=lambda: os.getenv("DYNAMODB_CONSISTENT_FIND", "true").lower() == "true",
        description="Use strongly consistent reads for find()"
    )

    return_consumed_capacity: str = Field(
        default_factory=lambda: os.getenv("DYNAMODB_RETURN_CONSUMED_CAPACITY", "TOTAL"),
        description="ReturnConsumedCapacity sent with find(), where() and get_all()"
    )

    # Logging settings
    enable_debug_logging: bool = Field(
        default_factory=lambda: os.getenv("DYNAMODB_DEBUG_LOGGING", "false").lower() == "true",
        description="Enable debug logging for DynamoDB operations"
    )

    @field_validator('region_name')
    @classmethod
    def validate_region(cls, v):
        """Validate AWS region name."""
        if not v:
            raise ValueError("AWS region name is required")
        return v

    @field_validator('return_consumed_capacity')
    @classmethod
    def validate_return_consumed_capacity(cls, v):
        """Validate ReturnConsumedCapacity value."""
        valid_values = ['INDEXES', 'TOTAL', 'NONE']
        v = v.upper()
        if v not in valid_values:
            raise ValueError(f"return_consumed_capacity must be one of: {valid_values}")
        return v

    def get_table_name(self, base_name: str) -> str:
        """Get the full table name with prefix.

        Args:
            base_name: Base table name

        Returns:
            Full table name with prefix
        """
        if self.table_prefix:
            return f"{self.table_prefix}_{base_name}"
        return base_name

    def with_region(self, region_name: Optional[str]) -> 'DynamoDBConfig':
        """Return a copy bound to another region (or self if region is None)."""
        if not region_name or region_name == self.region_name:
            return self
        return self.model_copy(update={'region_name': region_name})

    @classmethod
    def for_local_development(cls) -> 'DynamoDBConfig':
        """Create configuration for local DynamoDB development.

        Returns:
            DynamoDBConfig instance configured for local development
        """
        return cls(
            aws_access_key_id="local",
            aws_secret_access_key="local",
            region_name="us-east-1",
            endpoint_url="http://localhost:8000",
            enable_debug_logging=True
        )

    model_config = ConfigDict(
        validate_assignment=True,
        validate_default=True
    )
