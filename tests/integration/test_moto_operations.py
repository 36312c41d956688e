"""
End-to-end operation tests against moto's in-memory DynamoDB.

Key testing scenarios:
1. Write then read back through every operation
2. Query with equality and BETWEEN key conditions, plus filters
3. Override pass-through (pagination, projections, conditions)
4. Concurrent calls on one handle
5. Provider errors surfacing as botocore ClientError
"""

import asyncio

import pytest
import pytest_asyncio
from botocore.exceptions import ClientError

from dynamo_record import DynamoRecord, FilterSpec


class TestWriteAndRead:

    @pytest.mark.asyncio
    async def test_create_then_find(self, users, sample_user):
        await users.create(sample_user)

        response = await users.find({'id': 'user-1'})

        assert response['Item']['name'] == 'Ann'
        assert response['Item']['age'] == 34

    @pytest.mark.asyncio
    async def test_find_missing_item(self, users):
        response = await users.find({'id': 'nobody'})

        assert 'Item' not in response

    @pytest.mark.asyncio
    async def test_find_with_projection_override(self, users, sample_user):
        await users.create(sample_user)

        response = await users.find(
            {'id': 'user-1'},
            {'projectionExpression': '#n', 'expressionAttributeNames': {'#n': 'name'}}
        )

        assert response['Item'] == {'name': 'Ann'}

    @pytest.mark.asyncio
    async def test_batch_create_then_get_all(self, users):
        items = [{'id': f'user-{i}', 'name': f'User {i}'} for i in range(5)]

        response = await users.batch_create(items)

        assert not response.get('UnprocessedItems')
        scanned = await users.get_all()
        assert scanned['Count'] == 5
        assert sorted(item['id'] for item in scanned['Items']) == [f'user-{i}' for i in range(5)]

    @pytest.mark.asyncio
    async def test_get_all_with_limit_override(self, users):
        await users.batch_create([{'id': f'user-{i}'} for i in range(4)])

        first = await users.get_all({'limit': 2})

        assert first['Count'] == 2
        assert 'LastEvaluatedKey' in first

        rest = await users.get_all({'exclusiveStartKey': first['LastEvaluatedKey']})
        ids = {item['id'] for item in first['Items']} | {item['id'] for item in rest['Items']}
        assert ids == {f'user-{i}' for i in range(4)}

    @pytest.mark.asyncio
    async def test_get_all_paging_from_first_page(self, users):
        await users.batch_create([{'id': f'user-{i}'} for i in range(3)])

        response = await users.get_all({'exclusiveStartKey': None})

        assert response['Count'] == 3

    @pytest.mark.asyncio
    async def test_update_returns_new_attributes(self, users, sample_user):
        await users.create(sample_user)

        response = await users.update({'id': 'user-1'}, {'name': 'Bob', 'status': 'inactive'})

        assert response['Attributes']['name'] == 'Bob'
        assert response['Attributes']['status'] == 'inactive'
        assert response['Attributes']['age'] == 34

    @pytest.mark.asyncio
    async def test_destroy(self, users, sample_user):
        await users.create(sample_user)

        await users.destroy({'id': 'user-1'})

        response = await users.find({'id': 'user-1'})
        assert 'Item' not in response


class TestWhere:

    @pytest_asyncio.fixture
    async def seeded_events(self, events):
        await events.batch_create([
            {'user_id': 'u1', 'ts': 10, 'kind': 'click'},
            {'user_id': 'u1', 'ts': 20, 'kind': 'view'},
            {'user_id': 'u1', 'ts': 30, 'kind': 'click'},
            {'user_id': 'u1', 'ts': 40, 'kind': 'click'},
            {'user_id': 'u2', 'ts': 15, 'kind': 'click'},
        ])
        return events

    @pytest.mark.asyncio
    async def test_query_by_partition_key(self, seeded_events):
        response = await seeded_events.where({'user_id': 'u1'})

        assert response['Count'] == 4
        assert [item['ts'] for item in response['Items']] == [10, 20, 30, 40]

    @pytest.mark.asyncio
    async def test_query_with_between(self, seeded_events):
        response = await seeded_events.where({'user_id': 'u1', 'ts': [20, 30]})

        assert [item['ts'] for item in response['Items']] == [20, 30]

    @pytest.mark.asyncio
    async def test_query_with_filter(self, seeded_events):
        response = await seeded_events.where(
            {'user_id': 'u1'},
            FilterSpec(condition='#kind = :kind', keys={'kind': 'click'})
        )

        assert [item['ts'] for item in response['Items']] == [10, 30, 40]

    @pytest.mark.asyncio
    async def test_scan_with_filter(self, seeded_events):
        response = await seeded_events.where(
            filter={'condition': '#kind = :kind', 'keys': {'kind': 'view'}}
        )

        assert response['Count'] == 1
        assert response['Items'][0]['ts'] == 20

    @pytest.mark.asyncio
    async def test_scan_with_filter_without_placeholders(self, users):
        await users.batch_create([{'id': 'a', 'email': 'x'}, {'id': 'b'}])

        response = await users.where(filter=FilterSpec(condition='attribute_exists(email)', keys={}))

        assert response['Count'] == 1
        assert response['Items'][0]['id'] == 'a'

    @pytest.mark.asyncio
    async def test_scan_without_arguments(self, seeded_events):
        response = await seeded_events.where()

        assert response['Count'] == 5

    @pytest.mark.asyncio
    async def test_query_descending_override(self, seeded_events):
        response = await seeded_events.where({'user_id': 'u1'}, overrides={'scanIndexForward': False, 'limit': 2})

        assert [item['ts'] for item in response['Items']] == [40, 30]


class TestConcurrency:

    @pytest.mark.asyncio
    async def test_concurrent_writes_and_reads(self, users):
        await asyncio.gather(*(
            users.create({'id': f'user-{i}', 'n': i}) for i in range(10)
        ))

        responses = await asyncio.gather(*(
            users.find({'id': f'user-{i}'}) for i in range(10)
        ))

        assert [response['Item']['n'] for response in responses] == list(range(10))

    @pytest.mark.asyncio
    async def test_mixed_operations_in_flight(self, users, sample_user):
        await users.create(sample_user)

        found, updated, queried = await asyncio.gather(
            users.find({'id': 'user-1'}, {'projectionExpression': '#n', 'expressionAttributeNames': {'#n': 'name'}}),
            users.update({'id': 'user-2'}, {'name': 'Cy'}),
            users.where({'id': 'user-1'}),
        )

        assert found['Item'] == {'name': 'Ann'}
        assert updated['Attributes'] == {'id': 'user-2', 'name': 'Cy'}
        assert queried['Items'][0]['status'] == 'active'


class TestProviderErrors:

    @pytest.mark.asyncio
    async def test_conditional_check_failure_is_client_error(self, users, sample_user):
        await users.create(sample_user)

        with pytest.raises(ClientError) as exc_info:
            await users.create(sample_user, {
                'conditionExpression': 'attribute_not_exists(#id)',
                'expressionAttributeNames': {'#id': 'id'},
            })

        assert exc_info.value.response['Error']['Code'] == 'ConditionalCheckFailedException'

    @pytest.mark.asyncio
    async def test_missing_table_is_client_error(self, mock_dynamodb_config):
        async with DynamoRecord('does_not_exist', config=mock_dynamodb_config) as record:
            with pytest.raises(ClientError) as exc_info:
                await record.find({'id': '1'})

        assert exc_info.value.response['Error']['Code'] == 'ResourceNotFoundException'
