import click

from carconf.infrastructure.bootstrap import settings
from carconf.infrastructure.cli.catalog_commands import catalog_show
from carconf.infrastructure.cli.configuration_commands import (
    config_check,
    config_create,
    config_delete,
    config_edit,
    config_show,
)
from carconf.infrastructure.cli.estimation_commands import estimate, token_issue
from carconf.infrastructure.cli.inventory_commands import inventory_show
from carconf.infrastructure.logging_config import configure_logging


@click.group()
@click.option("--log-level", default=None, help="DEBUG, INFO, WARNING or ERROR.")
def cli(log_level: str | None) -> None:
    """carconf — Car Configurator"""
    configure_logging(log_level or settings().log_level)


@cli.group()
def catalog() -> None:
    """Browse models and accessories."""


@cli.group()
def inventory() -> None:
    """Inspect accessory availability."""


@cli.group("config")
def config() -> None:
    """Manage car configurations."""


@cli.group()
def token() -> None:
    """Capability tokens for the estimation service."""


# Register subcommands
catalog.add_command(catalog_show)
inventory.add_command(inventory_show)
config.add_command(config_check)
config.add_command(config_create)
config.add_command(config_delete)
config.add_command(config_edit)
config.add_command(config_show)
token.add_command(token_issue)
cli.add_command(estimate)
