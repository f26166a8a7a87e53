"""CLI commands for the Configuration aggregate."""

from __future__ import annotations

import click

from carconf.application.create_configuration import CreateConfigurationHandler
from carconf.application.delete_configuration import DeleteConfigurationHandler
from carconf.application.dto import ConfigurationDTO, DraftSpec
from carconf.application.edit_configuration import EditConfigurationHandler
from carconf.application.preview_accessory import PreviewAccessoryHandler
from carconf.application.show_configuration import ShowConfigurationHandler
from carconf.domain.exceptions import ConcurrencyConflictError, DomainException
from carconf.infrastructure.bootstrap import configuration_repository, rule_catalog
from carconf.infrastructure.cli.common import fail, parse_ids, resolve_user


def _display_configuration(dto: ConfigurationDTO) -> None:
    """Shared formatting for displaying a configuration."""
    click.echo(f"Model:    {dto.model_id}: {dto.model_name}")
    click.echo(f"Created:  {dto.created_at}")
    click.echo()
    if dto.accessories:
        click.echo(f"  {'ID':<6} {'Accessory':<24} {'Price':>10}")
        click.echo(f"  {'-'*42}")
        for item in dto.accessories:
            click.echo(f"  {item.id:<6} {item.name:<24} {item.price:>10}")
        click.echo(f"  {'-'*42}")
    else:
        click.echo("  (no accessories)")
    click.echo(f"  {'Total':<31} {dto.total:>10}")


@click.command("show")
@click.option("--user", "username", required=True, help="Username.")
def config_show(username: str) -> None:
    """Show the user's saved car configuration."""
    user = resolve_user(username)
    try:
        dto = ShowConfigurationHandler(configuration_repository(), rule_catalog()).handle(user.id)
    except DomainException as exc:
        fail(exc)

    if dto is None:
        click.echo("No car configuration saved.")
        return
    _display_configuration(dto)


@click.command("create")
@click.option("--user", "username", required=True, help="Username.")
@click.option("--model", "model_id", required=True, help="Model ID.")
@click.option("--accessories", default="", help="Accessory IDs as '1,4,7'.")
def config_create(username: str, model_id: str, accessories: str) -> None:
    """Create a new car configuration."""
    user = resolve_user(username)
    try:
        handler = CreateConfigurationHandler(configuration_repository(), rule_catalog())
        dto = handler.handle(user.id, model_id, parse_ids(accessories))
    except ConcurrencyConflictError as exc:
        click.echo("Inventory changed while saving; please review and retry.", err=True)
        fail(exc)
    except DomainException as exc:
        fail(exc)

    click.echo(f"Car configuration created for '{user.username}'.")
    _display_configuration(dto)


@click.command("edit")
@click.option("--user", "username", required=True, help="Username.")
@click.option("--add", "add", default="", help="Accessory IDs to add, as '1,4'.")
@click.option("--remove", "remove", default="", help="Accessory IDs to remove, as '2'.")
def config_edit(username: str, add: str, remove: str) -> None:
    """Add and/or remove accessories in one step."""
    user = resolve_user(username)
    try:
        handler = EditConfigurationHandler(configuration_repository(), rule_catalog())
        dto = handler.handle(user.id, add=parse_ids(add), remove=parse_ids(remove))
    except ConcurrencyConflictError as exc:
        click.echo("Inventory changed while saving; please review and retry.", err=True)
        fail(exc)
    except DomainException as exc:
        fail(exc)

    click.echo(f"Car configuration updated for '{user.username}'.")
    _display_configuration(dto)


@click.command("delete")
@click.option("--user", "username", required=True, help="Username.")
def config_delete(username: str) -> None:
    """Delete the car configuration (releases its accessories)."""
    user = resolve_user(username)
    try:
        deleted = DeleteConfigurationHandler(configuration_repository()).handle(user.id)
    except DomainException as exc:
        fail(exc)

    if deleted:
        click.echo(f"Car configuration of '{user.username}' deleted.")
    else:
        click.echo(f"'{user.username}' has no car configuration; nothing to delete.")


@click.command("check")
@click.option("--user", "username", required=True, help="Username.")
@click.option("--accessory", "accessory_id", required=True, help="Accessory ID to check.")
@click.option("--model", "model_id", default=None, help="Draft model ID (defaults to saved).")
@click.option("--draft", default=None, help="Draft accessory IDs as '1,4' (defaults to saved).")
def config_check(
    username: str,
    accessory_id: str,
    model_id: str | None,
    draft: str | None,
) -> None:
    """Preview whether an accessory can be added or removed right now."""
    user = resolve_user(username)
    repo = configuration_repository()
    try:
        draft_spec = None
        if model_id is not None or draft is not None:
            saved = repo.get_by_owner(user.id)
            if model_id is None and saved is not None:
                model_id = saved.model_id
            if draft is not None:
                draft_ids = tuple(parse_ids(draft))
            else:
                draft_ids = saved.accessory_ids if saved else ()
            draft_spec = DraftSpec(model_id=model_id, accessory_ids=draft_ids)
        handler = PreviewAccessoryHandler(repo, rule_catalog())
        dto = handler.handle(user.id, accessory_id, draft_spec)
    except DomainException as exc:
        fail(exc)

    if dto.allowed:
        verb = "removed" if dto.action == "remove" else "added"
        click.echo(f"OK: accessory {dto.accessory_id} can be {verb}.")
        return
    click.echo(f"Cannot {dto.action} accessory {dto.accessory_id}:")
    for reason in dto.reasons:
        click.echo(f"  - {reason}")
