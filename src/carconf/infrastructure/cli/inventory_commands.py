"""CLI commands for accessory inventory."""

from __future__ import annotations

import click

from carconf.application.show_inventory import ShowInventoryHandler
from carconf.domain.exceptions import DomainException
from carconf.infrastructure.bootstrap import configuration_repository, rule_catalog
from carconf.infrastructure.cli.common import fail


@click.command("show")
def inventory_show() -> None:
    """Show current availability of every accessory."""
    try:
        handler = ShowInventoryHandler(
            configuration_repo=configuration_repository(),
            catalog=rule_catalog(),
        )
        lines = handler.handle()
    except DomainException as exc:
        fail(exc)

    if not lines:
        click.echo("No accessories in the catalog.")
        return

    click.echo(f"{'Accessory':<24} {'Capacity':>8} {'Selected':>10} {'Available':>10}")
    click.echo("-" * 55)
    for line in lines:
        click.echo(
            f"{line.name:<24} {line.capacity:>8} {line.selected:>10} {line.available:>10}"
        )
