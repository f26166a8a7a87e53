"""Composition root — wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.
"""

from __future__ import annotations

from functools import lru_cache

from carconf.domain.model.catalog import RuleCatalog
from carconf.infrastructure.persistence.json_catalog_repository import (
    JsonCatalogRepository,
)
from carconf.infrastructure.persistence.json_user_repository import (
    JsonUserRepository,
)
from carconf.infrastructure.persistence.sqlite_configuration_repository import (
    SqliteConfigurationRepository,
)
from carconf.infrastructure.security.jwt_capability_codec import JwtCapabilityCodec
from carconf.infrastructure.settings import Settings


@lru_cache(maxsize=1)
def settings() -> Settings:
    return Settings.from_env()


def catalog_repository() -> JsonCatalogRepository:
    data_dir = settings().data_dir
    return JsonCatalogRepository(data_dir / "accessories.json", data_dir / "models.json")


def rule_catalog() -> RuleCatalog:
    """Load the catalog wholesale; integrity faults surface here."""
    repo = catalog_repository()
    return RuleCatalog.load(repo.list_accessories(), repo.list_models())


def user_repository() -> JsonUserRepository:
    return JsonUserRepository(settings().data_dir / "users.json")


def configuration_repository() -> SqliteConfigurationRepository:
    return SqliteConfigurationRepository(settings().db_path, timeout=settings().db_timeout)


def capability_codec() -> JwtCapabilityCodec:
    return JwtCapabilityCodec(settings().token_secret, ttl_seconds=settings().token_ttl_seconds)
