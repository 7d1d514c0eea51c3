"""Chunked, retried batch writes of seed data."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, Iterator, Mapping, Optional, Sequence

from botocore.exceptions import ClientError

from dynamodb_seed.core.concurrency import gather_settled
from dynamodb_seed.core.models import (
    MAX_BATCH_SIZE,
    DocumentPayload,
    RawPayload,
    SeedPayload,
    SeedSource,
)
from dynamodb_seed.core.provisioner import error_code, unique_names
from dynamodb_seed.exceptions import (
    BatchRetryExceededError,
    MissingSeedTableError,
    SeedIngestionError,
)

logger = logging.getLogger(__name__)

RESOURCE_NOT_FOUND = "ResourceNotFoundException"

# Constants for retry logic
DEFAULT_MAX_RETRIES = 5  # Resubmissions of unprocessed items per batch
DEFAULT_RETRY_DELAY = 0.05  # Seconds before the first resubmission, doubled after
MAX_RETRY_DELAY = 1.0
DEFAULT_BATCH_CONCURRENCY = 5  # Batches of one stream in flight at once
DEFAULT_TABLE_WAIT_ATTEMPTS = 5  # Retries while a table is still being created
DEFAULT_TABLE_WAIT_DELAY = 1.0

SeedLoader = Callable[[Sequence[str]], list[Mapping[str, Any]]]


def chunked(items: Sequence[SeedPayload], size: int) -> Iterator[Sequence[SeedPayload]]:
    """Split items into consecutive chunks of at most ``size``."""
    if size <= 0:
        raise ValueError("batch size must be positive")
    for i in range(0, len(items), size):
        yield items[i : i + size]


def backoff_seconds(attempt: int, base: float) -> float:
    """Delay before resubmission ``attempt`` (1-based), capped."""
    return min(base * (2.0 ** (attempt - 1)), MAX_RETRY_DELAY)


class SeedIngestionPipeline:
    """
    Write seed sources into their tables.

    Each source's documents and raw items are loaded through ``loader``,
    split into BatchWriteItem requests and sent through the client pair.
    Sources are written concurrently; a failing source does not stop the
    others, and every failure is reported once all sources have settled.
    """

    def __init__(
        self,
        clients: Any,
        loader: Optional[SeedLoader] = None,
        batch_size: int = MAX_BATCH_SIZE,
        max_retries: int = DEFAULT_MAX_RETRIES,
        retry_delay: float = DEFAULT_RETRY_DELAY,
        batch_concurrency: int = DEFAULT_BATCH_CONCURRENCY,
        table_wait_attempts: int = DEFAULT_TABLE_WAIT_ATTEMPTS,
        table_wait_delay: float = DEFAULT_TABLE_WAIT_DELAY,
    ):
        """
        Initialize pipeline.

        Args:
            clients: Client pair exposing ``batch_write_documents`` and
                ``batch_write_raw``
            loader: Resolves seed file paths to records (defaults to
                ``dynamodb_seed.loader.locate_seeds``)
            batch_size: Items per BatchWriteItem request (at most 25)
            max_retries: Resubmissions of unprocessed items before failing
            retry_delay: Base delay of the exponential resubmission backoff
            batch_concurrency: Batches of one stream sent concurrently
            table_wait_attempts: Retries when the target table does not exist yet
            table_wait_delay: Delay between those retries
        """
        if not 0 < batch_size <= MAX_BATCH_SIZE:
            raise ValueError(f"batch_size must be between 1 and {MAX_BATCH_SIZE}")
        if max_retries < 0:
            raise ValueError("max_retries must be >= 0")

        if loader is None:
            from dynamodb_seed.loader import locate_seeds

            loader = locate_seeds

        self.clients = clients
        self.loader = loader
        self.batch_size = batch_size
        self.max_retries = max_retries
        self.retry_delay = retry_delay
        self.batch_concurrency = max(1, batch_concurrency)
        self.table_wait_attempts = table_wait_attempts
        self.table_wait_delay = table_wait_delay

    async def seed(self, sources: Sequence[SeedSource]) -> dict[str, int]:
        """
        Seed all sources concurrently.

        Args:
            sources: Active seed sources

        Returns:
            Source label (table name) → number of records written

        Raises:
            MissingSeedTableError: If a source has no table (before any write)
            SeedIngestionError: If any source failed (after all settle)
        """
        for source in sources:
            if not source.table:
                raise MissingSeedTableError(source.sources + source.rawsources)

        labels = unique_names(source.table for source in sources)
        return await gather_settled(
            {label: self.seed_source(source) for label, source in zip(labels, sources)},
            SeedIngestionError,
        )

    async def seed_source(self, source: SeedSource) -> int:
        """Write both payload streams of one source. Returns records written."""
        if not source.table:
            raise MissingSeedTableError(source.sources + source.rawsources)

        documents = [DocumentPayload(value) for value in await self._load(source.sources)]
        raw_items = [RawPayload(item) for item in await self._load(source.rawsources)]

        results = await asyncio.gather(
            self.write_payloads(source.table, documents),
            self.write_payloads(source.table, raw_items),
            return_exceptions=True,
        )
        for result in results:
            if isinstance(result, BaseException):
                logger.error(f"DynamoDB - Error - seeding table {source.table}: {result}")
                raise result

        logger.info(f"Seed running complete for table: {source.table}")
        return sum(results)

    async def write_payloads(self, table: str, payloads: Sequence[SeedPayload]) -> int:
        """Send one payload stream as concurrent batches. Returns records written."""
        if not payloads:
            return 0

        semaphore = asyncio.Semaphore(self.batch_concurrency)

        async def run(batch: Sequence[SeedPayload]) -> None:
            async with semaphore:
                await self.write_batch(table, batch)

        results = await asyncio.gather(
            *(run(batch) for batch in chunked(payloads, self.batch_size)),
            return_exceptions=True,
        )
        for result in results:
            if isinstance(result, BaseException):
                raise result
        return len(payloads)

    async def write_batch(self, table: str, batch: Sequence[SeedPayload]) -> None:
        """
        Send one batch, resubmitting unprocessed items until none remain.

        Raises:
            BatchRetryExceededError: If items are still unprocessed after
                ``max_retries`` resubmissions
        """
        write = type(batch[0]).batch_write
        pending = [payload.put_request() for payload in batch]
        retries = 0

        while True:
            response = await self._send(write, table, pending)
            pending = (response.get("UnprocessedItems") or {}).get(table) or []
            if not pending:
                return
            if retries >= self.max_retries:
                raise BatchRetryExceededError(table, len(pending), retries)

            retries += 1
            logger.debug(
                f"DynamoDB - {len(pending)} unprocessed item(s) for {table}, "
                f"resubmitting (attempt {retries}/{self.max_retries})"
            )
            await asyncio.sleep(backoff_seconds(retries, self.retry_delay))

    async def _send(
        self, write: Callable[..., dict[str, Any]], table: str, requests: list[dict[str, Any]]
    ) -> dict[str, Any]:
        attempt = 0
        while True:
            try:
                response = await asyncio.to_thread(write, self.clients, {table: requests})
                return response or {}
            except ClientError as e:
                # The table may still be in creation when migrate and seed overlap
                if error_code(e) != RESOURCE_NOT_FOUND or attempt >= self.table_wait_attempts:
                    raise
                attempt += 1
                logger.info(f"DynamoDB - table {table} not found yet, retrying ({attempt})")
                await asyncio.sleep(self.table_wait_delay)

    async def _load(self, paths: Sequence[str]) -> list[Mapping[str, Any]]:
        if not paths:
            return []
        return await asyncio.to_thread(self.loader, list(paths))


async def seed(sources: Sequence[SeedSource], clients: Any, **kwargs: Any) -> dict[str, int]:
    """Seed all sources (see ``SeedIngestionPipeline.seed``)."""
    return await SeedIngestionPipeline(clients, **kwargs).seed(sources)
