"""Pytest configuration and shared fixtures."""

import threading
from typing import Any

import pytest
from botocore.exceptions import ClientError


def client_error(code: str, message: str = "", operation: str = "CreateTable") -> ClientError:
    """Build a botocore ClientError with the given DynamoDB error code."""
    return ClientError({"Error": {"Code": code, "Message": message}}, operation)


class FakeClients:
    """
    In-memory stand-in for DynamoDBClients.

    Tables live in ``tables`` (name → create params and written items). Every
    call is recorded so tests can assert on the exact requests sent.
    """

    def __init__(self) -> None:
        self.tables: dict[str, dict[str, Any]] = {}
        self.create_calls: list[dict[str, Any]] = []
        self.batch_calls: list[tuple[str, str, list[dict[str, Any]]]] = []
        self.create_errors: dict[str, Exception] = {}
        self.batch_errors: dict[str, list[Exception]] = {}
        # table → counts of items to report unprocessed, one per call
        self.unprocessed: dict[str, list[int]] = {}
        # tables whose items are never processed
        self.always_unprocessed: set[str] = set()
        self._lock = threading.Lock()

    def create_table(self, **params: Any) -> dict[str, Any]:
        name = params["TableName"]
        with self._lock:
            self.create_calls.append(params)
            if name in self.create_errors:
                raise self.create_errors[name]
            if name in self.tables:
                raise client_error(
                    "ResourceInUseException", f"Cannot create preexisting table: {name}"
                )
            self.tables[name] = {"params": params, "items": []}
        return {"TableDescription": {"TableName": name, "TableStatus": "ACTIVE"}}

    def batch_write_raw(self, request_items: dict[str, Any]) -> dict[str, Any]:
        return self._batch_write("raw", request_items)

    def batch_write_documents(self, request_items: dict[str, Any]) -> dict[str, Any]:
        return self._batch_write("doc", request_items)

    def _batch_write(self, kind: str, request_items: dict[str, Any]) -> dict[str, Any]:
        ((table, requests),) = request_items.items()
        with self._lock:
            self.batch_calls.append((kind, table, list(requests)))
            errors = self.batch_errors.get(table)
            if errors:
                raise errors.pop(0)

            if table in self.always_unprocessed:
                count = len(requests)
            elif self.unprocessed.get(table):
                count = self.unprocessed[table].pop(0)
            else:
                count = 0

            unprocessed = list(requests[:count])
            written = [request["PutRequest"]["Item"] for request in requests[count:]]
            self.tables.setdefault(table, {"params": None, "items": []})["items"].extend(written)

        if unprocessed:
            return {"UnprocessedItems": {table: unprocessed}}
        return {"UnprocessedItems": {}}

    def items(self, table: str) -> list[dict[str, Any]]:
        return self.tables.get(table, {}).get("items", [])

    def batch_sizes(self, table: str | None = None) -> list[int]:
        return [len(requests) for _, name, requests in self.batch_calls if table in (None, name)]


class FakeLoader:
    """Seed loader backed by a path → records mapping."""

    def __init__(self, files: dict[str, list[dict[str, Any]]]) -> None:
        self.files = files
        self.calls: list[list[str]] = []

    def __call__(self, paths: list[str]) -> list[dict[str, Any]]:
        self.calls.append(list(paths))
        records: list[dict[str, Any]] = []
        for path in paths:
            if path not in self.files:
                raise FileNotFoundError(f"Seed file not found: {path}")
            records.extend(self.files[path])
        return records


@pytest.fixture
def fake_clients() -> FakeClients:
    """Provide an empty in-memory DynamoDB."""
    return FakeClients()


@pytest.fixture
def users_table_properties() -> dict[str, Any]:
    """CloudFormation Properties of an on-demand table with a GSI."""
    return {
        "TableName": "users-table",
        "AttributeDefinitions": [
            {"AttributeName": "pk", "AttributeType": "S"},
            {"AttributeName": "email", "AttributeType": "S"},
        ],
        "KeySchema": [{"AttributeName": "pk", "KeyType": "HASH"}],
        "BillingMode": "PAY_PER_REQUEST",
        "GlobalSecondaryIndexes": [
            {
                "IndexName": "by-email",
                "KeySchema": [{"AttributeName": "email", "KeyType": "HASH"}],
                "Projection": {"ProjectionType": "ALL"},
                "ContributorInsightsSpecification": {"Enabled": True},
            }
        ],
        "StreamSpecification": {"StreamViewType": "NEW_AND_OLD_IMAGES"},
        "TimeToLiveSpecification": {"AttributeName": "expires", "Enabled": True},
        "SSESpecification": {"SSEEnabled": True},
        "PointInTimeRecoverySpecification": {"PointInTimeRecoveryEnabled": True},
        "Tags": [{"Key": "team", "Value": "core"}],
        "ContributorInsightsSpecification": {"Enabled": True},
        "KinesisStreamSpecification": {"StreamArn": "arn:aws:kinesis:eu-west-1:1:stream/x"},
    }
