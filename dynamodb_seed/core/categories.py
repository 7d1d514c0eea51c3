"""Selection of the seed categories active for a run."""

from __future__ import annotations

import logging
from typing import Mapping, Optional, Union

from dynamodb_seed.core.models import SeedCategory, SeedSource
from dynamodb_seed.exceptions import MissingSeedCategoryError

logger = logging.getLogger(__name__)

SeedSelector = Optional[Union[bool, str]]


def requested_category_names(
    requested: SeedSelector, categories: Mapping[str, SeedCategory]
) -> list[str]:
    """
    Turn a seed selector into category names.

    Args:
        requested: True for all categories, a comma-separated string of
            names, or None/False for none
        categories: Configured categories, in configuration order

    Returns:
        Category names in the order they should be seeded
    """
    if isinstance(requested, str):
        return [name.strip() for name in requested.split(",") if name.strip()]
    if requested:
        return list(categories)
    return []


def resolve_active_sources(
    requested: SeedSelector, categories: Mapping[str, SeedCategory]
) -> list[SeedSource]:
    """
    Determine the seed sources for this run.

    Every requested category is checked before any source is returned, so
    a typo fails the run before a single write happens.

    Args:
        requested: Seed selector (bool, comma-separated names or None)
        categories: Category name → category

    Returns:
        Sources of every selected category, concatenated in selection order

    Raises:
        MissingSeedCategoryError: If a requested category is not configured
    """
    names = requested_category_names(requested, categories)
    if not names:
        logger.info("DynamoDB - No seeding defined. Skipping data seeding.")
        return []

    for name in names:
        if name not in categories:
            logger.error(f"DynamoDB - Error - missing seed category: {name}")
            raise MissingSeedCategoryError(name, list(categories))

    sources: list[SeedSource] = []
    for name in names:
        sources.extend(categories[name].sources)
    return sources
