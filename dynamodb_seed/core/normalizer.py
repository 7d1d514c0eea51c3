"""
Translate CloudFormation table definitions into DynamoDB Local requests.

DynamoDB Local implements a subset of the CreateTable API. Rather than
rejecting declarations it does not understand, each rule below degrades
one of them so that a template written for AWS deploys unchanged locally.
Rules are independent of each other; fields no rule mentions pass through.
"""

from __future__ import annotations

import logging
from typing import Any

from dynamodb_seed.core.models import NormalizedTableRequest, TableDefinition

logger = logging.getLogger(__name__)

PAY_PER_REQUEST = "PAY_PER_REQUEST"

DEFAULT_READ_CAPACITY = 5
DEFAULT_WRITE_CAPACITY = 5

# Table-level fields DynamoDB Local does not support
UNSUPPORTED_TABLE_FIELDS = (
    "TimeToLiveSpecification",
    "PointInTimeRecoverySpecification",
    "Tags",
    "ContributorInsightsSpecification",
    "KinesisStreamSpecification",
)

# Index-level fields DynamoDB Local does not support
UNSUPPORTED_INDEX_FIELDS = ("ContributorInsightsSpecification",)


def default_throughput() -> dict[str, int]:
    """Build a fresh provisioned-throughput block for on-demand tables."""
    return {
        "ReadCapacityUnits": DEFAULT_READ_CAPACITY,
        "WriteCapacityUnits": DEFAULT_WRITE_CAPACITY,
    }


def normalize(definition: TableDefinition) -> NormalizedTableRequest:
    """
    Rewrite one table definition into a DynamoDB Local create-table request.

    Args:
        definition: Table definition from the deployment template

    Returns:
        New request; the definition itself is never modified
    """
    params = definition.to_dict()

    _enable_stream(params)
    _rename_sse_enabled(params)
    for name in UNSUPPORTED_TABLE_FIELDS:
        params.pop(name, None)
    _strip_index_fields(params)
    _provision_on_demand(params)

    dropped = sorted(set(definition.properties) - set(params))
    if dropped:
        logger.debug(f"Table {definition.table_name}: dropped unsupported fields {dropped}")

    return NormalizedTableRequest(params)


def _enable_stream(params: dict[str, Any]) -> None:
    # DynamoDB Local needs StreamEnabled spelled out even when a view type is set
    stream = params.get("StreamSpecification")
    if isinstance(stream, dict) and stream.get("StreamViewType"):
        stream["StreamEnabled"] = True


def _rename_sse_enabled(params: dict[str, Any]) -> None:
    sse = params.get("SSESpecification")
    if isinstance(sse, dict) and "SSEEnabled" in sse:
        sse["Enabled"] = sse.pop("SSEEnabled")


def _indexes(params: dict[str, Any]) -> list[dict[str, Any]]:
    indexes = params.get("GlobalSecondaryIndexes")
    if not isinstance(indexes, list):
        return []
    return [index for index in indexes if isinstance(index, dict)]


def _strip_index_fields(params: dict[str, Any]) -> None:
    for index in _indexes(params):
        for name in UNSUPPORTED_INDEX_FIELDS:
            index.pop(name, None)


def _provision_on_demand(params: dict[str, Any]) -> None:
    if params.get("BillingMode") != PAY_PER_REQUEST:
        return

    del params["BillingMode"]
    if not params.get("ProvisionedThroughput"):
        params["ProvisionedThroughput"] = default_throughput()
    for index in _indexes(params):
        if not index.get("ProvisionedThroughput"):
            index["ProvisionedThroughput"] = default_throughput()
