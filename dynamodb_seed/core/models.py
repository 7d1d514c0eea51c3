"""
Core data models for dynamodb-seed.

Defines the data structures used throughout the package for representing
CloudFormation table definitions, the reduced create-table requests sent to
DynamoDB Local, and seed categories with their sources and payloads.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Union

# Maximum number of put requests DynamoDB accepts in one BatchWriteItem call
MAX_BATCH_SIZE = 25


@dataclass(frozen=True)
class TableDefinition:
    """
    One ``AWS::DynamoDB::Table`` resource as declared for the cloud deployment.

    Wraps the resource's ``Properties`` mapping. The mapping is deep-copied on
    construction and only ever handed out as a copy, so neither the caller nor
    the normalizer can change a definition after it is built.
    """

    properties: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "properties", copy.deepcopy(dict(self.properties)))

    @property
    def table_name(self) -> Optional[str]:
        """Get the declared TableName (None when the template omits it)."""
        return self.properties.get("TableName")

    @property
    def billing_mode(self) -> Optional[str]:
        return self.properties.get("BillingMode")

    @property
    def global_secondary_indexes(self) -> list[dict[str, Any]]:
        return copy.deepcopy(self.properties.get("GlobalSecondaryIndexes") or [])

    def to_dict(self) -> dict[str, Any]:
        """Get a private deep copy of the properties."""
        return copy.deepcopy(dict(self.properties))


@dataclass(frozen=True)
class NormalizedTableRequest:
    """Create-table parameters accepted by DynamoDB Local."""

    params: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "params", copy.deepcopy(dict(self.params)))

    @property
    def table_name(self) -> Optional[str]:
        return self.params.get("TableName")

    def to_request(self) -> dict[str, Any]:
        """Get boto3 ``create_table`` keyword arguments (a fresh copy)."""
        return copy.deepcopy(dict(self.params))


@dataclass(frozen=True)
class SeedSource:
    """
    Seed files destined for one table.

    ``sources`` hold plain documents (native values); ``rawsources`` hold
    items already in DynamoDB's attribute-value wire format. Both streams
    share the same target table.
    """

    table: Optional[str]
    sources: tuple[str, ...] = ()
    rawsources: tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> SeedSource:
        return cls(
            table=data.get("table"),
            sources=tuple(data.get("sources") or ()),
            rawsources=tuple(data.get("rawsources") or ()),
        )


@dataclass(frozen=True)
class SeedCategory:
    """Named group of seed sources (e.g. "users", "orders")."""

    name: str
    sources: tuple[SeedSource, ...] = ()


@dataclass(frozen=True)
class DocumentPayload:
    """Seed record with native Python values, written via the document client."""

    value: Mapping[str, Any]

    def put_request(self) -> dict[str, Any]:
        return {"PutRequest": {"Item": dict(self.value)}}

    @staticmethod
    def batch_write(clients: Any, request_items: dict[str, Any]) -> dict[str, Any]:
        return clients.batch_write_documents(request_items)


@dataclass(frozen=True)
class RawPayload:
    """Seed record already in attribute-value format, written via the raw client."""

    item: Mapping[str, Any]

    def put_request(self) -> dict[str, Any]:
        return {"PutRequest": {"Item": dict(self.item)}}

    @staticmethod
    def batch_write(clients: Any, request_items: dict[str, Any]) -> dict[str, Any]:
        return clients.batch_write_raw(request_items)


SeedPayload = Union[DocumentPayload, RawPayload]
