"""Application service: Show Catalog use case (query)."""

from __future__ import annotations

from carconf.application.dto import AccessoryDetailDTO, CatalogDTO, ModelLineDTO
from carconf.domain.model.catalog import RuleCatalog


class ShowCatalogHandler:

    def __init__(self, catalog: RuleCatalog) -> None:
        self._catalog = catalog

    def handle(self) -> CatalogDTO:
        return CatalogDTO(
            models=[
                ModelLineDTO(
                    id=m.id,
                    name=m.name,
                    power=m.power,
                    price=str(m.price),
                    max_accessories=m.max_accessories,
                )
                for m in self._catalog.models()
            ],
            accessories=[
                AccessoryDetailDTO(
                    id=a.id,
                    name=a.name,
                    description=a.description,
                    price=str(a.price),
                    capacity=a.capacity,
                    mandatory=a.mandatory,
                    incompat=sorted(self._catalog.incompatible_with(a.id)),
                )
                for a in self._catalog.accessories()
            ],
        )
