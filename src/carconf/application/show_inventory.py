"""Application service: Show Inventory use case (query)."""

from __future__ import annotations

from carconf.application.dto import InventoryLineDTO
from carconf.domain.model.catalog import RuleCatalog
from carconf.domain.repository.configuration_repository import ConfigurationRepository
from carconf.domain.service.inventory_accounting import InventoryAccountingService


class ShowInventoryHandler:

    def __init__(
        self,
        configuration_repo: ConfigurationRepository,
        catalog: RuleCatalog,
    ) -> None:
        self._configuration_repo = configuration_repo
        self._catalog = catalog

    def handle(self) -> list[InventoryLineDTO]:
        snapshot = InventoryAccountingService(self._configuration_repo).snapshot(self._catalog)
        return [
            InventoryLineDTO(
                accessory_id=accessory.id,
                name=accessory.name,
                capacity=accessory.capacity,
                selected=accessory.capacity - snapshot.availability(accessory.id),
                available=snapshot.availability(accessory.id),
            )
            for accessory in self._catalog.accessories()
        ]
