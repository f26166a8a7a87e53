"""CLI commands for the model and accessory catalog."""

from __future__ import annotations

import click

from carconf.application.show_catalog import ShowCatalogHandler
from carconf.domain.exceptions import DomainException
from carconf.infrastructure.bootstrap import rule_catalog
from carconf.infrastructure.cli.common import fail


@click.command("show")
def catalog_show() -> None:
    """List models and accessories with their constraints."""
    try:
        dto = ShowCatalogHandler(rule_catalog()).handle()
    except DomainException as exc:
        fail(exc)

    click.echo(f"{'ID':<6} {'Model':<20} {'Power':>8} {'Price':>12} {'Max acc.':>9}")
    click.echo("-" * 59)
    for m in dto.models:
        click.echo(
            f"{m.id:<6} {m.name:<20} {m.power:>6}kW {m.price:>12} {m.max_accessories:>9}"
        )
    click.echo()
    click.echo(f"{'ID':<6} {'Accessory':<24} {'Price':>10} {'Stock':>6}  Constraints")
    click.echo("-" * 70)
    for a in dto.accessories:
        constraints = []
        if a.mandatory:
            constraints.append(f"requires {a.mandatory}")
        if a.incompat:
            constraints.append(f"incompatible with {', '.join(a.incompat)}")
        click.echo(
            f"{a.id:<6} {a.name:<24} {a.price:>10} {a.capacity:>6}  {'; '.join(constraints)}"
        )
