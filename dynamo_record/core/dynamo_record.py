"""
DynamoRecord: an asyncio client bound to one DynamoDB table.

Each public method:

1. Builds a typed request from a simplified argument shape
   (key/filter/update mappings, see ``dynamo_record.expressions``)
2. Applies the caller's raw overrides on top of the generated parameters
3. Awaits exactly one aioboto3 call and returns its response

Nothing else happens here: no retries beyond botocore's own, no pagination
loops, no resubmission of UnprocessedItems, no error translation. Errors
raised by aioboto3/botocore reach the caller unchanged.

Example:
    async with DynamoRecord('users', 'eu-west-1') as users:
        await users.create({'id': '1', 'name': 'Ann'})
        await users.update({'id': '1'}, {'name': 'Bob'})
        page = await users.where({'id': '1'}, FilterSpec(condition='#age > :age', keys={'age': 21}))
"""

import asyncio
import logging
from typing import Any, Dict, Iterable, Mapping, Optional, Union

import aioboto3
from aiobotocore.config import AioConfig
from botocore.exceptions import BotoCoreError, ClientError

from ..config import DynamoDBConfig
from ..exceptions import ConfigurationError, ConnectionError
from ..models import (
    BatchPutRequest,
    DeleteRequest,
    DynamoRequest,
    FilterSpec,
    GetRequest,
    PutRequest,
    ScanRequest,
    UpdateRequest,
    build_where_request,
)

logger = logging.getLogger(__name__)

Overrides = Optional[Mapping[str, Any]]


class DynamoRecord:
    """
    Coroutine-based client for a single DynamoDB table.

    Table name and configuration never change once the handle is built. The
    aioboto3 service resource is opened on first use and shared by every
    call on the handle; concurrent calls on one event loop share no other
    state. Use the handle as an async context manager, or call ``close()``,
    to release the resource's connection pool.
    """

    def __init__(
        self,
        table_name: str,
        region_name: Optional[str] = None,
        *,
        config: Optional[DynamoDBConfig] = None
    ):
        """Initialize the table handle.

        Args:
            table_name: Name of the DynamoDB table
            region_name: AWS region; overrides config.region_name when given
            config: Connection settings and request defaults (from the
                environment if omitted)
        """
        if not table_name:
            raise ConfigurationError("DynamoRecord requires a table name", setting="table_name")

        self.config = (config if config is not None else DynamoDBConfig()).with_region(region_name)
        self.table_name = table_name
        self._session = None
        self._resource_context = None
        self._dynamodb = None
        self._table = None
        self._lock = None

        if self.config.enable_debug_logging:
            logging.getLogger(__name__.split('.')[0]).setLevel(logging.DEBUG)

    @property
    def region_name(self) -> str:
        return self.config.region_name

    @property
    def session(self) -> aioboto3.Session:
        """Lazy initialization of the aioboto3 session."""
        if self._session is None:
            try:
                self._session = aioboto3.Session(
                    aws_access_key_id=self.config.aws_access_key_id,
                    aws_secret_access_key=self.config.aws_secret_access_key,
                    region_name=self.config.region_name
                )
            except Exception as e:
                logger.error(f"Failed to create aioboto3 session: {e}")
                raise ConnectionError(
                    f"Failed to connect to DynamoDB: {e}",
                    e,
                    {'region': self.config.region_name, 'endpoint': self.config.endpoint_url}
                ) from e
        return self._session

    async def get_dynamodb(self):
        """Open the DynamoDB service resource on first use and return it."""
        if self._dynamodb is not None:
            return self._dynamodb

        if self._lock is None:
            self._lock = asyncio.Lock()

        async with self._lock:
            if self._dynamodb is None:
                session = self.session
                try:
                    dynamodb_config = {
                        'region_name': self.config.region_name
                    }

                    if self.config.endpoint_url:
                        dynamodb_config['endpoint_url'] = self.config.endpoint_url

                    boto_config = AioConfig(
                        retries={'max_attempts': self.config.retries},
                        max_pool_connections=self.config.max_pool_connections,
                        read_timeout=self.config.timeout_seconds,
                        connect_timeout=self.config.timeout_seconds
                    )
                    dynamodb_config['config'] = boto_config

                    context = session.resource('dynamodb', **dynamodb_config)
                    self._dynamodb = await context.__aenter__()
                    self._resource_context = context
                except Exception as e:
                    logger.error(f"Failed to create DynamoDB resource: {e}")
                    raise ConnectionError(
                        f"Failed to connect to DynamoDB: {e}",
                        e,
                        {'region': self.config.region_name, 'endpoint': self.config.endpoint_url}
                    ) from e
        return self._dynamodb

    async def get_table(self):
        """aioboto3 Table resource for this handle's table."""
        if self._table is None:
            dynamodb = await self.get_dynamodb()
            try:
                self._table = await dynamodb.Table(self.table_name)
            except Exception as e:
                logger.error(f"Failed to access table '{self.table_name}': {e}")
                raise ConnectionError(f"Failed to access table '{self.table_name}': {e}", e) from e
        return self._table

    async def close(self) -> None:
        """Close the service resource; the next call opens a new one."""
        context = self._resource_context
        self._resource_context = None
        self._dynamodb = None
        self._table = None
        if context is not None:
            await context.__aexit__(None, None, None)

    async def __aenter__(self) -> 'DynamoRecord':
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def _dispatch(self, request: DynamoRequest) -> Dict[str, Any]:
        """Send one request and return the raw DynamoDB response.

        BatchWriteItem is a service-level call; every other operation goes
        through the Table resource.
        """
        params = request.to_params()
        if isinstance(request, BatchPutRequest):
            target = await self.get_dynamodb()
        else:
            target = await self.get_table()
        call = getattr(target, request.operation)

        logger.debug(f"{request.operation} on {self.table_name}: {params}")
        try:
            return await call(**params)
        except (ClientError, BotoCoreError) as e:
            logger.error(f"{request.operation} on {self.table_name} failed: {e}")
            raise

    async def find(self, key: Mapping[str, Any], overrides: Overrides = None) -> Dict[str, Any]:
        """
        Get one item by its full primary key.

        DynamoDB Operation: GetItem, strongly consistent and reporting
        consumed capacity unless the configuration or overrides say otherwise.

        Args:
            key: Partition key (and sort key) attribute values
            overrides: Raw GetItem parameters, e.g. ``{'projectionExpression': 'id'}``

        Returns:
            Raw response; ``Item`` is absent when nothing matches
        """
        request = GetRequest.for_key(
            self.table_name,
            key,
            consistent_read=self.config.consistent_find,
            return_consumed_capacity=self.config.return_consumed_capacity
        )
        return await self._dispatch(request.with_overrides(overrides))

    async def where(
        self,
        key: Optional[Mapping[str, Any]] = None,
        filter: Optional[Union[FilterSpec, Mapping[str, Any]]] = None,
        overrides: Overrides = None
    ) -> Dict[str, Any]:
        """
        Read items matching a key specification and/or a filter.

        DynamoDB Operation: Query when a key specification is given
        (equality or ``[start, end]`` BETWEEN per attribute), Scan otherwise.

        Args:
            key: Attribute name to value or ``[start, end]`` range
            filter: FilterSpec or ``{'condition': ..., 'keys': {...}}``
            overrides: Raw Query/Scan parameters (``indexName``,
                ``exclusiveStartKey``, ``limit``...)

        Returns:
            Raw response with ``Items``, ``Count`` and ``LastEvaluatedKey``
            when more pages exist
        """
        request = build_where_request(
            self.table_name,
            key,
            filter,
            return_consumed_capacity=self.config.return_consumed_capacity
        )
        return await self._dispatch(request.with_overrides(overrides))

    async def get_all(self, overrides: Overrides = None) -> Dict[str, Any]:
        """
        Scan the table without a filter.

        Only the page DynamoDB returns is fetched; pass
        ``{'exclusiveStartKey': response['LastEvaluatedKey']}`` to continue.
        """
        request = ScanRequest(
            table_name=self.table_name,
            return_consumed_capacity=self.config.return_consumed_capacity
        )
        return await self._dispatch(request.with_overrides(overrides))

    async def create(self, item: Mapping[str, Any], overrides: Overrides = None) -> Dict[str, Any]:
        """Put an item (replacing any item with the same key)."""
        request = PutRequest(table_name=self.table_name, item=dict(item))
        response = await self._dispatch(request.with_overrides(overrides))
        logger.info(f"Put item in {self.table_name}")
        return response

    async def batch_create(self, items: Iterable[Mapping[str, Any]], overrides: Overrides = None) -> Dict[str, Any]:
        """
        Put up to 25 items in one BatchWriteItem call.

        Items DynamoDB could not write are returned in ``UnprocessedItems``
        and are not resubmitted.
        """
        items = list(items)
        request = BatchPutRequest.for_items(self.table_name, items)
        response = await self._dispatch(request.with_overrides(overrides))

        unprocessed = response.get('UnprocessedItems', {}).get(self.table_name, [])
        logger.info(f"Batch put {len(items) - len(unprocessed)}/{len(items)} items in {self.table_name}")
        if unprocessed:
            logger.warning(f"{len(unprocessed)} unprocessed items left in batch for {self.table_name}")
        return response

    async def update(
        self,
        key: Mapping[str, Any],
        changes: Optional[Mapping[str, Any]] = None,
        overrides: Overrides = None
    ) -> Dict[str, Any]:
        """
        Set attributes on the item identified by key.

        DynamoDB Operation: UpdateItem with ``set #attr = :attr, ...`` and
        ReturnValues ALL_NEW.

        Args:
            key: Primary key of the item
            changes: Attribute name to new value
            overrides: Raw UpdateItem parameters (``conditionExpression``...)

        Returns:
            Raw response; ``Attributes`` holds the item after the update
        """
        request = UpdateRequest.for_changes(self.table_name, key, changes)
        response = await self._dispatch(request.with_overrides(overrides))
        logger.info(f"Updated item in {self.table_name}: {dict(key)}")
        return response

    async def destroy(self, key: Mapping[str, Any], overrides: Overrides = None) -> Dict[str, Any]:
        """Delete the item identified by key."""
        request = DeleteRequest(table_name=self.table_name, key=dict(key))
        response = await self._dispatch(request.with_overrides(overrides))
        logger.info(f"Deleted item from {self.table_name}: {dict(key)}")
        return response

    def __repr__(self) -> str:
        return f"DynamoRecord(table_name={self.table_name!r}, region_name={self.region_name!r})"


def create_dynamo_record(table_name: str, config: DynamoDBConfig) -> DynamoRecord:
    """
    Factory function to create a DynamoRecord for a configured table.

    Args:
        table_name: Base table name (config.table_prefix is applied)
        config: DynamoDB configuration

    Returns:
        Configured DynamoRecord instance
    """
    return DynamoRecord(config.get_table_name(table_name), config=config)
