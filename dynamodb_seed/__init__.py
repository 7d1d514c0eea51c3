"""
dynamodb-seed - DynamoDB Local tables and seed data from deployment templates.

This package provides tools for:
- Translating CloudFormation table definitions into DynamoDB Local requests
- Creating every table concurrently and idempotently
- Selecting seed categories and writing their data with batched, retried writes
"""

__version__ = "0.1.0"

from dynamodb_seed.core.models import (
    SeedCategory,
    SeedSource,
    TableDefinition,
)

__all__ = ["SeedCategory", "SeedSource", "TableDefinition", "__version__"]
