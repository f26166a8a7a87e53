"""Domain service: Inventory Accounting.

Reads the aggregate selection counts from the authoritative store and
turns them into an InventorySnapshot.  Callers that are about to commit
must take the snapshot *inside* the store transaction; anything read
earlier is only good for advisory checks.
"""

from __future__ import annotations

import logging

from carconf.domain.model.catalog import RuleCatalog
from carconf.domain.model.inventory import InventorySnapshot
from carconf.domain.repository.configuration_repository import ConfigurationRepository

logger = logging.getLogger(__name__)


class InventoryAccountingService:

    def __init__(self, configuration_repo: ConfigurationRepository) -> None:
        self._configuration_repo = configuration_repo

    def snapshot(self, catalog: RuleCatalog) -> InventorySnapshot:
        counts = self._configuration_repo.selection_counts()
        snapshot = InventorySnapshot.compute(catalog, counts)
        logger.debug("Inventory snapshot read: %s", dict(snapshot.remaining))
        return snapshot
