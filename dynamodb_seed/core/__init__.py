"""Core functionality for dynamodb-seed."""

from dynamodb_seed.core.categories import resolve_active_sources
from dynamodb_seed.core.concurrency import gather_settled
from dynamodb_seed.core.ingestion import SeedIngestionPipeline
from dynamodb_seed.core.models import (
    DocumentPayload,
    NormalizedTableRequest,
    RawPayload,
    SeedCategory,
    SeedSource,
    TableDefinition,
)
from dynamodb_seed.core.normalizer import normalize
from dynamodb_seed.core.provisioner import TableProvisioner
from dynamodb_seed.core.stage import should_execute

__all__ = [
    "DocumentPayload",
    "NormalizedTableRequest",
    "RawPayload",
    "SeedCategory",
    "SeedIngestionPipeline",
    "SeedSource",
    "TableDefinition",
    "TableProvisioner",
    "gather_settled",
    "normalize",
    "resolve_active_sources",
    "should_execute",
]
