"""Abstract repository for the accessory and model catalog.

Defined in the domain layer so the domain never depends on
infrastructure.  Concrete implementations live in the infrastructure
layer; the RuleCatalog is built from whatever they return.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from carconf.domain.model.accessory import Accessory
from carconf.domain.model.car_model import CarModel


class CatalogRepository(ABC):

    @abstractmethod
    def list_accessories(self) -> list[Accessory]:
        """Return every accessory definition."""

    @abstractmethod
    def list_models(self) -> list[CarModel]:
        """Return every model definition."""
