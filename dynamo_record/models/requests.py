"""
Typed DynamoDB request models.

One pydantic model per DynamoDB primitive the client dispatches to. Field
aliases are the wire parameter names, so ``model.to_params()`` can be handed
straight to aioboto3. Models accept unknown fields (``extra='allow'``): any
parameter DynamoDB supports but the client does not generate
(``ExclusiveStartKey``, ``IndexName``, ``ProjectionExpression``, ``Limit``...)
can be supplied through overrides and is sent untouched.

Example:
    >>> request = UpdateRequest.for_changes('users', {'id': '1'}, {'name': 'Bob'})
    >>> request.to_params()
    {'TableName': 'users', 'Key': {'id': '1'}, 'UpdateExpression': 'set #name = :name',
     'ExpressionAttributeNames': {'#name': 'name'},
     'ExpressionAttributeValues': {':name': 'Bob'}, 'ReturnValues': 'ALL_NEW'}
"""

from typing import Any, ClassVar, Dict, List, Mapping, Optional, Sequence, Union

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr

from ..expressions import (
    build_filter_expression,
    build_key_condition,
    build_update_expression,
    merge_overrides,
    prune_empty_placeholders,
)


class FilterSpec(BaseModel):
    """A caller-written FilterExpression and the values its placeholders bind to.

    Example:
        FilterSpec(condition='#age > :age', keys={'age': 21})
    """

    condition: Optional[str] = Field(None, description="FilterExpression using #name / :name placeholders")
    keys: Optional[Dict[str, Any]] = Field(None, description="Placeholder bindings, scalar or [start, end]")


class DynamoRequest(BaseModel):
    """Base class for request variants.

    ``operation`` names the aioboto3 method the request is dispatched to.
    Overrides are kept as given and only merged when the wire parameters are
    rendered, so malformed values reach DynamoDB and fail there.
    """

    operation: ClassVar[str]

    model_config = ConfigDict(
        populate_by_name=True,
        extra='allow'
    )

    _overrides: Dict[str, Any] = PrivateAttr(default_factory=dict)

    def _wire_params(self) -> Dict[str, Any]:
        params: Dict[str, Any] = {}
        for name, field in type(self).model_fields.items():
            params[field.alias or name] = getattr(self, name)
        params.update(self.model_extra or {})
        return params

    def to_params(self) -> Dict[str, Any]:
        """Render aioboto3 keyword arguments.

        Overrides win over generated values. Parameters whose value is None
        are omitted and empty placeholder maps are dropped.
        """
        merged = merge_overrides(self._wire_params(), self._overrides)
        return prune_empty_placeholders({k: v for k, v in merged.items() if v is not None})

    def with_overrides(self, overrides: Optional[Mapping[str, Any]] = None) -> 'DynamoRequest':
        """Return a copy of this request with raw overrides applied.

        Args:
            overrides: DynamoDB parameter names with a lower-case first
                letter; values replace generated ones

        Returns:
            A new request of the same type
        """
        if not overrides:
            return self
        request = self.model_copy()
        request._overrides = {**self._overrides, **overrides}
        return request


class TableRequest(DynamoRequest):
    table_name: str = Field(..., alias='TableName', min_length=1)


class GetRequest(TableRequest):
    operation: ClassVar[str] = 'get_item'

    key: Dict[str, Any] = Field(..., alias='Key')
    consistent_read: Optional[bool] = Field(None, alias='ConsistentRead')
    return_consumed_capacity: Optional[str] = Field(None, alias='ReturnConsumedCapacity')

    @classmethod
    def for_key(
        cls,
        table_name: str,
        key: Mapping[str, Any],
        consistent_read: Optional[bool] = True,
        return_consumed_capacity: Optional[str] = 'TOTAL'
    ) -> 'GetRequest':
        return cls(
            table_name=table_name,
            key=dict(key),
            consistent_read=consistent_read,
            return_consumed_capacity=return_consumed_capacity
        )


class ScanRequest(TableRequest):
    operation: ClassVar[str] = 'scan'

    filter_expression: Optional[str] = Field(None, alias='FilterExpression')
    expression_attribute_names: Optional[Dict[str, str]] = Field(None, alias='ExpressionAttributeNames')
    expression_attribute_values: Optional[Dict[str, Any]] = Field(None, alias='ExpressionAttributeValues')
    return_consumed_capacity: Optional[str] = Field(None, alias='ReturnConsumedCapacity')


class QueryRequest(ScanRequest):
    operation: ClassVar[str] = 'query'

    key_condition_expression: Optional[str] = Field(None, alias='KeyConditionExpression')


class PutRequest(TableRequest):
    operation: ClassVar[str] = 'put_item'

    item: Dict[str, Any] = Field(..., alias='Item')


class BatchPutRequest(DynamoRequest):
    """BatchWriteItem request made only of PutRequests for a single table.

    DynamoDB accepts at most 25 entries per call; the count is left for
    DynamoDB to enforce, as are any ``UnprocessedItems`` in the response.
    """

    operation: ClassVar[str] = 'batch_write_item'

    request_items: Dict[str, List[Dict[str, Any]]] = Field(..., alias='RequestItems')

    @classmethod
    def for_items(cls, table_name: str, items: Sequence[Mapping[str, Any]]) -> 'BatchPutRequest':
        return cls(
            request_items={
                table_name: [{'PutRequest': {'Item': dict(item)}} for item in items]
            }
        )


class UpdateRequest(TableRequest):
    operation: ClassVar[str] = 'update_item'

    key: Dict[str, Any] = Field(..., alias='Key')
    update_expression: Optional[str] = Field(None, alias='UpdateExpression')
    expression_attribute_names: Optional[Dict[str, str]] = Field(None, alias='ExpressionAttributeNames')
    expression_attribute_values: Optional[Dict[str, Any]] = Field(None, alias='ExpressionAttributeValues')
    return_values: Optional[str] = Field(None, alias='ReturnValues')

    @classmethod
    def for_changes(
        cls,
        table_name: str,
        key: Mapping[str, Any],
        changes: Optional[Mapping[str, Any]] = None,
        return_values: str = 'ALL_NEW'
    ) -> 'UpdateRequest':
        """Build an update that sets every attribute in changes."""
        expression, names, values = build_update_expression(changes or {})
        return cls(
            table_name=table_name,
            key=dict(key),
            update_expression=expression or None,
            expression_attribute_names=names,
            expression_attribute_values=values,
            return_values=return_values
        )


class DeleteRequest(TableRequest):
    operation: ClassVar[str] = 'delete_item'

    key: Dict[str, Any] = Field(..., alias='Key')


def build_where_request(
    table_name: str,
    key: Optional[Mapping[str, Any]] = None,
    filter: Optional[Union[FilterSpec, Mapping[str, Any]]] = None,
    return_consumed_capacity: Optional[str] = 'TOTAL'
) -> ScanRequest:
    """Build the request behind ``where()``.

    A key specification selects Query with a generated KeyConditionExpression;
    without one the table is scanned. The filter's placeholders share the
    key condition's namespace.

    Args:
        table_name: Table to read
        key: Attribute name to value or ``[start, end]`` range
        filter: FilterSpec (or mapping with ``condition`` and ``keys``)
        return_consumed_capacity: ReturnConsumedCapacity to request

    Returns:
        QueryRequest if key is given, ScanRequest otherwise
    """
    if key:
        key_condition, names, values = build_key_condition(key)
    else:
        key_condition, names, values = None, {}, {}

    filter_condition, names, values = build_filter_expression(filter, names, values)

    common = dict(
        table_name=table_name,
        filter_expression=filter_condition,
        expression_attribute_names=names,
        expression_attribute_values=values,
        return_consumed_capacity=return_consumed_capacity
    )

    if key:
        return QueryRequest(key_condition_expression=key_condition, **common)
    return ScanRequest(**common)
