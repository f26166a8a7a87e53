"""Application service: Delete Configuration use case.

Clears the model and every accessory selection, releasing their claim
on inventory.  No validation: an empty configuration satisfies every
rule.  Deleting a configuration that does not exist is a no-op.
"""

from __future__ import annotations

import logging

from carconf.domain.repository.configuration_repository import ConfigurationRepository

logger = logging.getLogger(__name__)


class DeleteConfigurationHandler:

    def __init__(self, configuration_repo: ConfigurationRepository) -> None:
        self._configuration_repo = configuration_repo

    def handle(self, owner: int) -> bool:
        """Return True if a configuration was removed."""
        with self._configuration_repo.atomic():
            deleted = self._configuration_repo.delete(owner)

        if deleted:
            logger.info("Configuration deleted for user #%s", owner)
        else:
            logger.debug("No configuration to delete for user #%s", owner)
        return deleted
