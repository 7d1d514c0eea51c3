"""Tests for the boto3 client pair."""

from unittest.mock import MagicMock

import pytest

from dynamodb_seed.clients import (
    DynamoDBClients,
    build_clients,
    connection_params,
    convert_empty_values,
)
from dynamodb_seed.config import RunOptions
from dynamodb_seed.exceptions import MissingRegionError


class TestConnectionParams:
    """Tests for connection_params()."""

    def test_local_endpoint(self) -> None:
        params = connection_params(RunOptions(host="127.0.0.1", port=8100))

        assert params == {
            "endpoint_url": "http://127.0.0.1:8100",
            "region_name": "localhost",
            "aws_access_key_id": "MockAccessKeyId",
            "aws_secret_access_key": "MockSecretAccessKey",
        }

    def test_online_requires_region(self) -> None:
        with pytest.raises(MissingRegionError) as exc_info:
            connection_params(RunOptions(online=True))

        assert "please specify the region" in str(exc_info.value)

    def test_online_with_region(self) -> None:
        assert connection_params(RunOptions(online=True, region="eu-west-1")) == {
            "region_name": "eu-west-1"
        }


class TestConvertEmptyValues:
    """Tests for convert_empty_values()."""

    def test_empty_values_become_none(self) -> None:
        item = {"name": "", "blob": b"", "tags": set(), "nested": {"note": ""}, "list": ["", "x"]}

        assert convert_empty_values(item) == {
            "name": None,
            "blob": None,
            "tags": None,
            "nested": {"note": None},
            "list": [None, "x"],
        }

    def test_non_empty_values_kept(self) -> None:
        item = {"name": "ada", "count": 0, "flag": False, "tags": {"a"}}

        assert convert_empty_values(item) == item


class TestDynamoDBClients:
    """Tests for the client pair write paths."""

    def test_raw_batch_write(self) -> None:
        clients = DynamoDBClients(raw=MagicMock(), doc=MagicMock())
        request_items = {"t": [{"PutRequest": {"Item": {"id": {"S": ""}}}}]}

        clients.batch_write_raw(request_items)

        clients.raw.batch_write_item.assert_called_once_with(RequestItems=request_items)
        clients.doc.batch_write_item.assert_not_called()

    def test_document_batch_write_converts_when_enabled(self) -> None:
        clients = DynamoDBClients(raw=MagicMock(), doc=MagicMock(), convert_empty_values=True)

        clients.batch_write_documents({"t": [{"PutRequest": {"Item": {"id": "1", "note": ""}}}]})

        clients.doc.batch_write_item.assert_called_once_with(
            RequestItems={"t": [{"PutRequest": {"Item": {"id": "1", "note": None}}}]}
        )

    def test_document_batch_write_untouched_by_default(self) -> None:
        clients = DynamoDBClients(raw=MagicMock(), doc=MagicMock())
        request_items = {"t": [{"PutRequest": {"Item": {"id": "1", "note": ""}}}]}

        clients.batch_write_documents(request_items)

        clients.doc.batch_write_item.assert_called_once_with(RequestItems=request_items)

    def test_create_table_uses_raw_client(self) -> None:
        clients = DynamoDBClients(raw=MagicMock(), doc=MagicMock())

        clients.create_table(TableName="t")

        clients.raw.create_table.assert_called_once_with(TableName="t")


def test_build_clients_local():
    """Clients point at DynamoDB Local without contacting it."""
    clients = build_clients(RunOptions(port=8123, convert_empty_values=True))

    assert clients.raw.meta.endpoint_url == "http://localhost:8123"
    assert clients.doc.meta.client.meta.endpoint_url == "http://localhost:8123"
    assert clients.convert_empty_values is True
