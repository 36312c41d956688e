from dynamo_record.exceptions import ConfigurationError, ConnectionError, DynamoRecordError


def test_connection_error_carries_original_and_context():
    original = RuntimeError("no credentials")

    error = ConnectionError("Failed to connect to DynamoDB", original, {'region': 'us-east-1'})

    assert isinstance(error, DynamoRecordError)
    assert error.original_error is original
    assert str(error) == "Failed to connect to DynamoDB (Context: region=us-east-1)"


def test_configuration_error_context():
    error = ConfigurationError("DynamoRecord requires a table name", setting="table_name")

    assert error.setting == "table_name"
    assert error.context == {'setting': 'table_name'}
    assert "setting=table_name" in str(error)


def test_str_without_context():
    error = DynamoRecordError("boom")

    assert str(error) == "boom"
    assert repr(error) == "DynamoRecordError(message='boom', original_error=None, context={})"
