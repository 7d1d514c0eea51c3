"""CLI commands for dynamodb-seed."""

import asyncio
import logging
import sys
from pathlib import Path
from typing import Any, Optional

import click
from botocore.exceptions import BotoCoreError, ClientError
from click.core import ParameterSource

from dynamodb_seed.config import Config, resolve_options
from dynamodb_seed.exceptions import DynamoDBSeedError
from dynamodb_seed.handlers import LocalDynamoDB


def connection_options(func):
    """Options shared by every command."""
    func = click.option("--stage", help="Deployment stage (default: config stage)")(func)
    func = click.option("--online", "-o", is_flag=True, help="Connect to the online AWS tables")(func)
    func = click.option("--region", help="AWS region (required with --online)")(func)
    func = click.option("--host", help="DynamoDB Local host (default: localhost)")(func)
    func = click.option("--port", "-p", type=int, help="DynamoDB Local port (default: 8000)")(func)
    func = click.option(
        "--convert-empty-values", "-e", is_flag=True,
        help="Write empty strings, binaries and sets as NULL",
    )(func)
    return func


def seed_option(func):
    return click.option(
        "--seed", "-s",
        help="Seed categories to load: comma-separated names (default: all)",
    )(func)


def load_config(config_path: Optional[str]) -> Config:
    if config_path:
        return Config.from_toml(config_path)
    try:
        return Config.find_and_load()
    except FileNotFoundError:
        return Config(base_dir=Path.cwd())


def run(ctx: click.Context, action: str, cli_options: dict[str, Any]) -> None:
    """Resolve options, run one handler and map failures to exit code 1."""
    # Options left at their default fall through to the config file
    given = {
        name: value
        for name, value in cli_options.items()
        if ctx.get_parameter_source(name) not in (None, ParameterSource.DEFAULT)
    }
    try:
        config = load_config(ctx.obj.get("config_path"))
        options = resolve_options(given, config)
        handlers = LocalDynamoDB(config, options)
        asyncio.run(getattr(handlers, action)())
    except (DynamoDBSeedError, ClientError, BotoCoreError, FileNotFoundError, ValueError) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


@click.group()
@click.version_option(package_name="dynamodb-seed")
@click.option(
    "--config", "config_path", type=click.Path(dir_okay=False),
    help="Path to dynamodb-seed.toml (default: search upwards from cwd)",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, config_path: Optional[str], verbose: bool) -> None:
    """dynamodb-seed - create and seed DynamoDB Local tables from templates."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path


@cli.command()
@connection_options
@click.pass_context
def migrate(ctx: click.Context, **cli_options: Any) -> None:
    """Create DynamoDB tables from the configured templates."""
    run(ctx, "migrate", cli_options)


@cli.command()
@connection_options
@seed_option
@click.pass_context
def seed(ctx: click.Context, **cli_options: Any) -> None:
    """Seed DynamoDB tables with data."""
    run(ctx, "seed", cli_options)


@cli.command()
@connection_options
@seed_option
@click.option("--migrate", "-m", is_flag=True, help="Create tables after start")
@click.option("--no-start", is_flag=True, help="Do not start DynamoDB Local (already running)")
@click.pass_context
def start(ctx: click.Context, **cli_options: Any) -> None:
    """Prepare DynamoDB Local, then migrate and seed when requested."""
    run(ctx, "start", cli_options)


if __name__ == "__main__":
    cli()
