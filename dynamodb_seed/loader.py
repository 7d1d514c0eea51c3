"""Seed file loading.

Resolves the file paths listed in ``[seed.<category>]`` sources into
records. Supported formats:

- ``*.json``: a list of records or a single record (floats become Decimal,
  which boto3 requires for numbers)
- ``*.yaml`` / ``*.yml``: same shapes as JSON
"""

import json
import logging
from decimal import Decimal
from pathlib import Path
from typing import Any, Sequence

import yaml

logger = logging.getLogger(__name__)


def locate_seeds(paths: Sequence[str | Path], base_dir: str | Path | None = None) -> list[dict[str, Any]]:
    """
    Load and flatten records from seed files.

    Args:
        paths: Seed file paths (relative paths resolve against base_dir)
        base_dir: Directory to resolve relative paths from (default: cwd)

    Returns:
        All records, file by file, in the order given

    Raises:
        FileNotFoundError: If a seed file doesn't exist
        ValueError: If a file holds something other than records
    """
    base = Path(base_dir) if base_dir is not None else Path.cwd()
    records: list[dict[str, Any]] = []

    for entry in paths:
        path = Path(entry)
        if not path.is_absolute():
            path = base / path
        if not path.exists():
            raise FileNotFoundError(f"Seed file not found: {path}")

        loaded = load_seed_file(path)
        logger.debug(f"Loaded {len(loaded)} seed record(s) from {path}")
        records.extend(loaded)

    return records


def load_seed_file(path: str | Path) -> list[dict[str, Any]]:
    """
    Load the records of one seed file.

    Args:
        path: Path to JSON or YAML file

    Returns:
        List of record dicts
    """
    path = Path(path)
    with open(path) as f:
        if path.suffix in (".yaml", ".yml"):
            data = _floats_to_decimal(yaml.safe_load(f))
        else:
            data = json.load(f, parse_float=Decimal)

    if data is None:
        return []
    if isinstance(data, dict):
        return [data]
    if isinstance(data, list) and all(isinstance(record, dict) for record in data):
        return data

    raise ValueError(f"Seed file {path} must contain an object or a list of objects")


def _floats_to_decimal(value: Any) -> Any:
    if isinstance(value, float):
        return Decimal(str(value))
    if isinstance(value, dict):
        return {key: _floats_to_decimal(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_floats_to_decimal(item) for item in value]
    return value
