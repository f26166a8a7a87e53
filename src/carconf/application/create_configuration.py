"""Application service: Create Configuration use case.

Validates the whole proposed configuration twice:

  Phase 1 — outside any transaction, against a freshly read snapshot.
            Ordinary rule violations are reported here and nothing is
            written.
  Phase 2 — inside the store transaction: re-read the snapshot and the
            user's state, re-validate, then write model and accessories
            as one unit.  Anything that fails only now was caused by a
            concurrent commit and is reported as a ConcurrencyConflictError.
"""

from __future__ import annotations

import logging

from carconf.application.dto import ConfigurationDTO
from carconf.domain.exceptions import ConcurrencyConflictError, ValidationError
from carconf.domain.model.catalog import RuleCatalog
from carconf.domain.model.configuration import Configuration
from carconf.domain.repository.configuration_repository import ConfigurationRepository
from carconf.domain.service.inventory_accounting import InventoryAccountingService
from carconf.domain.service.validation_engine import validate_configuration

logger = logging.getLogger(__name__)


class CreateConfigurationHandler:

    def __init__(
        self,
        configuration_repo: ConfigurationRepository,
        catalog: RuleCatalog,
    ) -> None:
        self._configuration_repo = configuration_repo
        self._catalog = catalog
        self._accounting = InventoryAccountingService(configuration_repo)

    def handle(
        self,
        owner: int,
        model_id: str | None,
        accessory_ids: list[str],
    ) -> ConfigurationDTO:
        accessory_ids = list(accessory_ids)

        # Phase 1: optimistic read + full validation
        if self._configuration_repo.get_by_owner(owner) is not None:
            raise ValidationError("Car configuration already present")

        violations = validate_configuration(
            model_id, accessory_ids, self._catalog, self._accounting.snapshot(self._catalog)
        )
        if violations:
            logger.info("Create rejected for user #%s: %d violation(s)", owner, len(violations))
            raise ValidationError.from_violations(violations)

        configuration = Configuration.create(owner, model_id, accessory_ids)

        # Phase 2: authoritative re-check and write, one transaction
        with self._configuration_repo.atomic():
            if self._configuration_repo.get_by_owner(owner) is not None:
                logger.warning("Create conflict for user #%s: configuration appeared", owner)
                raise ConcurrencyConflictError("Car configuration already present")

            violations = validate_configuration(
                model_id, accessory_ids, self._catalog, self._accounting.snapshot(self._catalog)
            )
            if violations:
                logger.warning(
                    "Create conflict for user #%s: inventory changed (%s)",
                    owner,
                    "; ".join(v.reason for v in violations),
                )
                raise ConcurrencyConflictError.from_violations(violations)

            self._configuration_repo.add(configuration)

        logger.info(
            "Configuration created for user #%s: model %s, accessories %s",
            owner,
            model_id,
            list(configuration.accessory_ids),
        )
        return ConfigurationDTO.from_domain(configuration, self._catalog)
