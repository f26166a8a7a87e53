"""Helpers shared by the CLI command modules."""

from __future__ import annotations

import logging
from typing import NoReturn

import click

from carconf.domain.exceptions import (
    DataIntegrityError,
    DomainException,
    EntityNotFoundError,
    ValidationError,
)
from carconf.domain.model.user import User
from carconf.infrastructure.bootstrap import user_repository

logger = logging.getLogger(__name__)

INTERNAL_ERROR_EXIT_CODE = 2


def resolve_user(username: str) -> User:
    """Map ``--user`` to the authenticated subject."""
    try:
        user = user_repository().get_by_username(username)
    except DomainException as exc:
        fail(exc)
    if user is None:
        fail(EntityNotFoundError(f"User '{username}' not found"))
    return user


def parse_ids(raw: str | None) -> list[str]:
    """Parse '1,4, 7' into ['1', '4', '7']; empty input gives []."""
    if not raw:
        return []
    return [part.strip() for part in raw.split(",") if part.strip()]


def fail(exc: DomainException) -> NoReturn:
    """Turn a domain exception into a CLI error."""
    if isinstance(exc, DataIntegrityError):
        logger.error("Data integrity fault: %s", exc)
        click.echo(f"Internal error: {exc}", err=True)
        raise click.exceptions.Exit(INTERNAL_ERROR_EXIT_CODE)

    if isinstance(exc, ValidationError) and len(exc.reasons) > 1:
        raise click.ClickException(
            "Errors:\n" + "\n".join(f"  - {reason}" for reason in exc.reasons)
        )
    raise click.ClickException(str(exc))
