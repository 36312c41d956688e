"""
Test configuration and fixtures for dynamo_record.

Provides configuration fixtures and DynamoDB tables served by moto. aiohttp
requests are not intercepted by ``mock_aws``, so the tables live in a moto
server running in a background thread and the client is pointed at it.
"""

import sys
from pathlib import Path

# Add parent directory to path so we can import dynamo_record
sys.path.insert(0, str(Path(__file__).parent.parent))

import boto3
import pytest
import pytest_asyncio
from moto.server import ThreadedMotoServer

from dynamo_record import DynamoDBConfig, DynamoRecord

MOTO_HOST = "127.0.0.1"
MOTO_PORT = 5123


@pytest.fixture(scope="session")
def moto_endpoint():
    """moto server shared by the whole test session."""
    server = ThreadedMotoServer(ip_address=MOTO_HOST, port=MOTO_PORT, verbose=False)
    server.start()
    yield f"http://{MOTO_HOST}:{MOTO_PORT}"
    server.stop()


@pytest.fixture
def mock_dynamodb_config(moto_endpoint):
    """DynamoDB configuration pointing at the moto server."""
    return DynamoDBConfig(
        aws_access_key_id="testing",
        aws_secret_access_key="testing",
        region_name="us-east-1",
        endpoint_url=moto_endpoint,
        table_prefix="test"
    )


@pytest.fixture
def mock_dynamodb_resource(moto_endpoint):
    """Synchronous boto3 resource used to create and drop tables."""
    return boto3.resource(
        'dynamodb',
        region_name='us-east-1',
        endpoint_url=moto_endpoint,
        aws_access_key_id='testing',
        aws_secret_access_key='testing'
    )


@pytest.fixture
def users_table(mock_dynamodb_resource):
    """Create test_users table (hash key only)."""
    table = mock_dynamodb_resource.create_table(
        TableName='test_users',
        KeySchema=[
            {'AttributeName': 'id', 'KeyType': 'HASH'}
        ],
        AttributeDefinitions=[
            {'AttributeName': 'id', 'AttributeType': 'S'}
        ],
        BillingMode='PAY_PER_REQUEST'
    )
    yield table
    table.delete()


@pytest.fixture
def events_table(mock_dynamodb_resource):
    """Create test_events table (hash + numeric range key)."""
    table = mock_dynamodb_resource.create_table(
        TableName='test_events',
        KeySchema=[
            {'AttributeName': 'user_id', 'KeyType': 'HASH'},
            {'AttributeName': 'ts', 'KeyType': 'RANGE'}
        ],
        AttributeDefinitions=[
            {'AttributeName': 'user_id', 'AttributeType': 'S'},
            {'AttributeName': 'ts', 'AttributeType': 'N'}
        ],
        BillingMode='PAY_PER_REQUEST'
    )
    yield table
    table.delete()


@pytest_asyncio.fixture
async def users(mock_dynamodb_config, users_table):
    """DynamoRecord bound to the users table."""
    async with DynamoRecord(mock_dynamodb_config.get_table_name('users'), config=mock_dynamodb_config) as record:
        yield record


@pytest_asyncio.fixture
async def events(mock_dynamodb_config, events_table):
    """DynamoRecord bound to the events table."""
    async with DynamoRecord(mock_dynamodb_config.get_table_name('events'), config=mock_dynamodb_config) as record:
        yield record


@pytest.fixture
def sample_user():
    return {
        "id": "user-1",
        "name": "Ann",
        "status": "active",
        "age": 34,
    }
