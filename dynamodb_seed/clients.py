"""boto3 client pair for DynamoDB Local or an online account."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

import boto3

from dynamodb_seed.exceptions import MissingRegionError

logger = logging.getLogger(__name__)

LOCAL_REGION = "localhost"
LOCAL_ACCESS_KEY_ID = "MockAccessKeyId"
LOCAL_SECRET_ACCESS_KEY = "MockSecretAccessKey"


def local_endpoint(host: str, port: int) -> str:
    """Get the DynamoDB Local endpoint URL."""
    return f"http://{host}:{port}"


def connection_params(options: Any) -> dict[str, Any]:
    """
    Build boto3 session parameters from run options.

    Args:
        options: Run options with ``online``, ``region``, ``host`` and ``port``

    Returns:
        Keyword arguments for ``boto3.client`` / ``boto3.resource``

    Raises:
        MissingRegionError: If online mode is requested without a region
    """
    if options.online:
        if not options.region:
            raise MissingRegionError()
        return {"region_name": options.region}

    return {
        "endpoint_url": local_endpoint(options.host, options.port),
        "region_name": LOCAL_REGION,
        "aws_access_key_id": LOCAL_ACCESS_KEY_ID,
        "aws_secret_access_key": LOCAL_SECRET_ACCESS_KEY,
    }


def convert_empty_values(value: Any) -> Any:
    """Replace empty strings, binaries and sets by None, recursively."""
    if isinstance(value, (str, bytes, bytearray, set, frozenset)) and len(value) == 0:
        return None
    if isinstance(value, dict):
        return {key: convert_empty_values(item) for key, item in value.items()}
    if isinstance(value, list):
        return [convert_empty_values(item) for item in value]
    return value


@dataclass(frozen=True)
class DynamoDBClients:
    """
    Raw and document-mapped DynamoDB handles sharing one connection setup.

    ``raw`` is a low-level client speaking attribute-value maps; ``doc`` is
    the service resource, which marshals native Python values. Both are
    used read-only by every concurrent task.
    """

    raw: Any
    doc: Any
    convert_empty_values: bool = False

    def create_table(self, **params: Any) -> dict[str, Any]:
        return self.raw.create_table(**params)

    def batch_write_raw(self, request_items: dict[str, Any]) -> dict[str, Any]:
        return self.raw.batch_write_item(RequestItems=request_items)

    def batch_write_documents(self, request_items: dict[str, Any]) -> dict[str, Any]:
        if self.convert_empty_values:
            request_items = convert_empty_values(request_items)
        return self.doc.batch_write_item(RequestItems=request_items)


def build_clients(options: Any) -> DynamoDBClients:
    """
    Create the client pair for the run.

    Args:
        options: Effective run options

    Returns:
        DynamoDBClients
    """
    params = connection_params(options)
    if options.online:
        logger.info("Connecting to online tables...")
    else:
        logger.debug(f"Connecting to DynamoDB Local at {params['endpoint_url']}")

    session = boto3.session.Session()
    return DynamoDBClients(
        raw=session.client("dynamodb", **params),
        doc=session.resource("dynamodb", **params),
        convert_empty_values=bool(options.convert_empty_values),
    )
