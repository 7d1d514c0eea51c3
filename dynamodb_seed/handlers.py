"""Stage-gated migrate, seed, start and stop handlers."""

from __future__ import annotations

import asyncio
import functools
import logging
from typing import Any, Callable, Optional, Protocol, Sequence

from dynamodb_seed.clients import build_clients
from dynamodb_seed.config import Config, RunOptions
from dynamodb_seed.core.categories import resolve_active_sources
from dynamodb_seed.core.ingestion import SeedIngestionPipeline
from dynamodb_seed.core.models import TableDefinition
from dynamodb_seed.core.provisioner import TableProvisioner
from dynamodb_seed.core.stage import should_execute, skip_message
from dynamodb_seed.loader import locate_seeds
from dynamodb_seed.stack import load_table_definitions

logger = logging.getLogger(__name__)


class EmulatorLauncher(Protocol):
    """Starts and stops the DynamoDB Local process."""

    def start(self, options: RunOptions) -> None: ...

    def stop(self, port: int) -> None: ...


class LocalDynamoDB:
    """Run the dynamodb-seed operations for one command invocation."""

    def __init__(
        self,
        config: Config,
        options: RunOptions,
        tables: Optional[Sequence[TableDefinition]] = None,
        clients_factory: Optional[Callable[[RunOptions], Any]] = None,
    ):
        """
        Initialize handlers.

        Args:
            config: Loaded configuration
            options: Effective options (see ``resolve_options``)
            tables: Table definitions; loaded from ``config.resources`` on
                first use when omitted
            clients_factory: Builds the DynamoDB client pair from options
                (default: ``build_clients``)
        """
        self.config = config
        self.options = options
        self._tables = list(tables) if tables is not None else None
        self._clients_factory = clients_factory
        self._clients: Any = None

    @property
    def stage(self) -> str:
        return self.options.stage

    @property
    def table_definitions(self) -> list[TableDefinition]:
        if self._tables is None:
            self._tables = load_table_definitions(self.config.resource_paths())
        return self._tables

    @property
    def clients(self) -> Any:
        if self._clients is None:
            factory = self._clients_factory or build_clients
            self._clients = factory(self.options)
        return self._clients

    def should_execute(self) -> bool:
        """Check if handlers need to be executed for the active stage."""
        return should_execute(self.stage, self.config.stages)

    async def migrate(self) -> list[str]:
        """
        Create every table declared in the templates.

        Returns:
            Names of the tables created (empty when skipped)
        """
        if not self.should_execute():
            logger.info(skip_message("migration", self.stage))
            return []

        return await TableProvisioner(self.clients).provision(self.table_definitions)

    async def seed(self) -> dict[str, int]:
        """
        Write the selected seed categories.

        Without an explicit selector every configured category is seeded.

        Returns:
            Table → records written (empty when skipped)
        """
        if not self.should_execute():
            logger.info(skip_message("seeding", self.stage))
            return {}

        selector = self.options.seed or bool(self.config.seed)
        sources = resolve_active_sources(selector, self.config.seed_categories())
        if not sources:
            return {}

        loader = functools.partial(locate_seeds, base_dir=self.config.get_base_dir())
        pipeline = SeedIngestionPipeline(self.clients, loader=loader)
        return await pipeline.seed(sources)

    async def start(self, launcher: Optional[EmulatorLauncher] = None) -> None:
        """
        Bring DynamoDB Local up, then migrate and seed when requested.

        Args:
            launcher: Process launcher; without one DynamoDB Local must
                already be running
        """
        if not self.should_execute():
            logger.info(skip_message("start", self.stage))
            return

        if not self.options.no_start:
            if launcher is None:
                logger.warning(
                    f"DynamoDB - no launcher configured, expecting DynamoDB Local "
                    f"on {self.options.host}:{self.options.port}"
                )
            else:
                await asyncio.to_thread(launcher.start, self.options)

        if self.options.migrate:
            await self.migrate()
        if self.options.seed:
            await self.seed()

    async def stop(self, launcher: Optional[EmulatorLauncher] = None) -> None:
        """Stop DynamoDB Local unless it was not started by us."""
        if not self.should_execute() or self.options.no_start:
            logger.info(skip_message("end", self.stage))
            return

        logger.info("DynamoDB - stopping local database")
        if launcher is not None:
            await asyncio.to_thread(launcher.stop, self.options.port)
