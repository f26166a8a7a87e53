"""Application service: Show Configuration use case (query)."""

from __future__ import annotations

from carconf.application.dto import ConfigurationDTO
from carconf.domain.model.catalog import RuleCatalog
from carconf.domain.repository.configuration_repository import ConfigurationRepository


class ShowConfigurationHandler:

    def __init__(
        self,
        configuration_repo: ConfigurationRepository,
        catalog: RuleCatalog,
    ) -> None:
        self._configuration_repo = configuration_repo
        self._catalog = catalog

    def handle(self, owner: int) -> ConfigurationDTO | None:
        """Return the saved configuration, or None if the user has none."""
        configuration = self._configuration_repo.get_by_owner(owner)
        if configuration is None:
            return None
        return ConfigurationDTO.from_domain(configuration, self._catalog)
