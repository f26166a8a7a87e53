"""CLI commands for the estimation service and its capability tokens."""

from __future__ import annotations

import click

from carconf.application.dto import EstimationRequest
from carconf.application.estimate_manufacturing_time import (
    EstimateManufacturingTimeHandler,
)
from carconf.application.issue_token import IssueEstimationTokenHandler
from carconf.application.show_configuration import ShowConfigurationHandler
from carconf.domain.exceptions import DomainException
from carconf.infrastructure.bootstrap import (
    capability_codec,
    configuration_repository,
    rule_catalog,
    settings,
    user_repository,
)
from carconf.infrastructure.cli.common import fail, resolve_user


def _issue_handler() -> IssueEstimationTokenHandler:
    return IssueEstimationTokenHandler(
        user_repo=user_repository(),
        codec=capability_codec(),
        ttl_seconds=settings().token_ttl_seconds,
    )


@click.command("issue")
@click.option("--user", "username", required=True, help="Username.")
def token_issue(username: str) -> None:
    """Print a fresh capability token for the estimation service."""
    user = resolve_user(username)
    try:
        dto = _issue_handler().handle(user.id)
    except DomainException as exc:
        fail(exc)
    click.echo(dto.token)


@click.command("estimate")
@click.option("--user", "username", required=True, help="Username.")
@click.option("--token", default=None, help="Use this token instead of issuing one.")
def estimate(username: str, token: str | None) -> None:
    """Estimate manufacturing time for the user's saved configuration."""
    user = resolve_user(username)
    try:
        dto = ShowConfigurationHandler(configuration_repository(), rule_catalog()).handle(user.id)
        if dto is None:
            click.echo("No car configuration saved.")
            return

        # Reissued on every fetch: never reuse a token from an earlier call.
        if token is None:
            token = _issue_handler().handle(user.id).token

        request = EstimationRequest(
            model_name=dto.model_name,
            accessory_names=[a.name for a in dto.accessories],
        )
        result = EstimateManufacturingTimeHandler(capability_codec()).handle(token, request)
    except DomainException as exc:
        fail(exc)

    click.echo(f"Ready in {result.manufacturing_time} days")
