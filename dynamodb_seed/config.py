"""
Configuration management for dynamodb-seed.

Loads and validates configuration from dynamodb-seed.toml files using Pydantic,
and layers command-line options over it into one immutable RunOptions value.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Optional, Union

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from dynamodb_seed.core.models import SeedCategory, SeedSource

CONFIG_FILE_NAME = "dynamodb-seed.toml"


class StartConfig(BaseSettings):
    """DynamoDB Local connection and start-up configuration."""

    model_config = SettingsConfigDict(env_prefix="DYNAMODB_SEED_START_")

    host: str = Field(default="localhost", description="DynamoDB Local host")
    port: int = Field(default=8000, description="DynamoDB Local port")
    migrate: bool = Field(default=False, description="Create tables after start")
    seed: Optional[Union[bool, str]] = Field(
        default=None,
        description="Seed after start: true for all categories or comma-separated names",
    )
    no_start: bool = Field(
        default=False, description="Assume DynamoDB Local is already running"
    )
    convert_empty_values: bool = Field(
        default=False, description="Write empty strings, binaries and sets as NULL"
    )
    online: bool = Field(default=False, description="Target the online AWS tables")
    region: Optional[str] = Field(default=None, description="AWS region for online mode")


class SeedSourceConfig(BaseModel):
    """One seed source: files destined for a table."""

    table: Optional[str] = Field(default=None, description="Target table name")
    sources: list[str] = Field(default=[], description="Document seed files")
    rawsources: list[str] = Field(
        default=[], description="Seed files in attribute-value wire format"
    )

    def to_seed_source(self) -> SeedSource:
        return SeedSource(
            table=self.table,
            sources=tuple(self.sources),
            rawsources=tuple(self.rawsources),
        )


class SeedCategoryConfig(BaseModel):
    """Seed category configuration."""

    sources: list[SeedSourceConfig] = Field(default=[], description="Seed sources")


class Config(BaseSettings):
    """Main configuration for dynamodb-seed."""

    model_config = SettingsConfigDict(env_prefix="DYNAMODB_SEED_")

    stage: str = Field(default="dev", description="Active deployment stage")
    stages: Optional[list[str]] = Field(
        default=None, description="Stages DynamoDB Local is enabled for (all if unset)"
    )
    resources: list[str] = Field(
        default=["serverless.yml"],
        description="Templates holding AWS::DynamoDB::Table resources",
    )
    start: StartConfig = Field(default_factory=StartConfig)
    seed: dict[str, SeedCategoryConfig] = Field(default={})
    base_dir: Optional[Path] = Field(
        default=None, description="Directory relative paths resolve from"
    )

    @classmethod
    def from_toml(cls, path: Path | str) -> Config:
        """
        Load configuration from TOML file.

        Args:
            path: Path to dynamodb-seed.toml file

        Returns:
            Config instance

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If config file is invalid
        """
        config_path = Path(path)
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")

        with open(config_path, "rb") as f:
            data = tomllib.load(f)

        data.setdefault("base_dir", config_path.resolve().parent)
        return cls(**data)

    @classmethod
    def find_and_load(cls, start_dir: Optional[Path] = None) -> Config:
        """
        Find and load configuration from dynamodb-seed.toml.

        Searches for dynamodb-seed.toml starting from start_dir and walking up
        parent directories until found or reaching filesystem root.

        Args:
            start_dir: Directory to start search (defaults to current directory)

        Returns:
            Config instance

        Raises:
            FileNotFoundError: If no config file found
        """
        if start_dir is None:
            start_dir = Path.cwd()

        current = Path(start_dir).resolve()

        # Walk up directory tree
        while True:
            config_path = current / CONFIG_FILE_NAME
            if config_path.exists():
                return cls.from_toml(config_path)

            # Check if we've reached filesystem root
            parent = current.parent
            if parent == current:
                break
            current = parent

        raise FileNotFoundError(
            f"No {CONFIG_FILE_NAME} found in {start_dir} or parent directories."
        )

    def get_base_dir(self) -> Path:
        """Get the directory relative paths resolve from."""
        return Path(self.base_dir) if self.base_dir is not None else Path.cwd()

    def seed_categories(self) -> dict[str, SeedCategory]:
        """Get configured seed categories, in configuration order."""
        return {
            name: SeedCategory(
                name=name,
                sources=tuple(source.to_seed_source() for source in category.sources),
            )
            for name, category in self.seed.items()
        }

    def resource_paths(self) -> list[Path]:
        """Get template paths resolved against the base directory."""
        base = self.get_base_dir()
        return [base / path for path in self.resources]


@dataclass(frozen=True)
class RunOptions:
    """Effective options of one command invocation."""

    stage: str = "dev"
    host: str = "localhost"
    port: int = 8000
    online: bool = False
    region: Optional[str] = None
    convert_empty_values: bool = False
    migrate: bool = False
    seed: Optional[Union[bool, str]] = None
    no_start: bool = False


# Default options, the bottom layer of resolve_options
DEFAULT_OPTIONS = RunOptions()

_LAYERED_FIELDS = (
    "host",
    "port",
    "online",
    "region",
    "convert_empty_values",
    "migrate",
    "seed",
    "no_start",
)


def resolve_options(
    cli_options: Mapping[str, Any],
    config: Config,
    defaults: RunOptions = DEFAULT_OPTIONS,
) -> RunOptions:
    """
    Layer command-line options over configuration over defaults.

    A CLI value of None means "not given" and falls through to the
    ``[start]`` section, then to the defaults.

    Args:
        cli_options: Options given on the command line
        config: Loaded configuration
        defaults: Bottom layer

    Returns:
        Immutable effective options
    """
    start = config.start.model_dump(exclude_unset=True)
    resolved: dict[str, Any] = {}
    for name in _LAYERED_FIELDS:
        if cli_options.get(name) is not None:
            resolved[name] = cli_options[name]
        elif start.get(name) is not None:
            resolved[name] = start[name]
        else:
            resolved[name] = getattr(defaults, name)

    stage = cli_options.get("stage") or config.stage or defaults.stage
    return RunOptions(stage=stage, **resolved)


# Default configuration instance
DEFAULT_CONFIG = Config()
