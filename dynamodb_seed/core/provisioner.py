"""Concurrent, idempotent table creation."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Iterable

from botocore.exceptions import ClientError

from dynamodb_seed.core.concurrency import gather_settled
from dynamodb_seed.core.models import NormalizedTableRequest, TableDefinition
from dynamodb_seed.core.normalizer import normalize
from dynamodb_seed.exceptions import TableProvisioningError

logger = logging.getLogger(__name__)

RESOURCE_IN_USE = "ResourceInUseException"


def error_code(error: BaseException) -> str | None:
    """Get the DynamoDB error code of a botocore ClientError (None otherwise)."""
    if isinstance(error, ClientError):
        return error.response.get("Error", {}).get("Code")
    return None


def unique_names(names: Iterable[Any]) -> list[str]:
    """Label units by name, suffixing repeats so every label is distinct."""
    labels: list[str] = []
    for name in names:
        base = str(name) if name else "<unnamed>"
        label, count = base, 1
        while label in labels:
            count += 1
            label = f"{base}#{count}"
        labels.append(label)
    return labels


class TableProvisioner:
    """Create every table from the deployment templates in DynamoDB Local."""

    def __init__(self, clients: Any):
        """
        Initialize provisioner.

        Args:
            clients: Client pair exposing ``create_table(**params)``
        """
        self.clients = clients

    async def provision(self, tables: Iterable[TableDefinition]) -> list[str]:
        """
        Create all tables concurrently.

        Tables that already exist are left untouched and only logged.

        Args:
            tables: Table definitions

        Returns:
            Names of the tables created by this call

        Raises:
            TableProvisioningError: If any table failed for a reason other
                than already existing (raised after all calls settle)
        """
        requests = [normalize(table) for table in tables]
        labels = unique_names(request.table_name for request in requests)

        results = await gather_settled(
            {label: self.create_table(request) for label, request in zip(labels, requests)},
            TableProvisioningError,
        )
        return [label for label, created in results.items() if created]

    async def create_table(self, request: NormalizedTableRequest) -> bool:
        """
        Create one table.

        Returns:
            True if the table was created, False if it already existed
        """
        name = request.table_name
        try:
            await asyncio.to_thread(self.clients.create_table, **request.to_request())
        except ClientError as e:
            if error_code(e) == RESOURCE_IN_USE:
                logger.warning(f"DynamoDB - Warn - table {name} already exists")
                return False
            logger.error(f"DynamoDB - Error - {name}: {e}")
            raise
        except Exception as e:
            logger.error(f"DynamoDB - Error - {name}: {e}")
            raise

        logger.info(f"DynamoDB - created table {name}")
        return True


async def provision(tables: Iterable[TableDefinition], clients: Any) -> list[str]:
    """Create all tables (see ``TableProvisioner.provision``)."""
    return await TableProvisioner(clients).provision(tables)
