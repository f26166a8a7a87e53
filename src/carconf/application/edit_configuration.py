"""Application service: Edit Configuration use case.

Applies an add set and a remove set to an existing configuration.  The
*entire* resulting selection is re-validated (not just the delta):
removals can break mandatory links the additions never touched, and
additions can be starved by concurrent stock consumption.

Same two-phase approach as CreateConfigurationHandler.
"""

from __future__ import annotations

import logging
from collections import Counter

from carconf.application.dto import ConfigurationDTO
from carconf.domain.exceptions import (
    ConcurrencyConflictError,
    EntityNotFoundError,
    ValidationError,
)
from carconf.domain.model.catalog import RuleCatalog
from carconf.domain.model.configuration import Configuration
from carconf.domain.model.inventory import InventorySnapshot
from carconf.domain.model.value_objects import Violation
from carconf.domain.repository.configuration_repository import ConfigurationRepository
from carconf.domain.service.inventory_accounting import InventoryAccountingService
from carconf.domain.service.validation_engine import validate_configuration

logger = logging.getLogger(__name__)


class EditConfigurationHandler:

    def __init__(
        self,
        configuration_repo: ConfigurationRepository,
        catalog: RuleCatalog,
    ) -> None:
        self._configuration_repo = configuration_repo
        self._catalog = catalog
        self._accounting = InventoryAccountingService(configuration_repo)

    def handle(self, owner: int, add: list[str], remove: list[str]) -> ConfigurationDTO:
        add, remove = list(add), list(remove)
        if not add and not remove:
            raise ValidationError("Nothing to add or remove")

        # Phase 1: optimistic read + full validation of the resulting state
        current = self._configuration_repo.get_by_owner(owner)
        if current is None:
            raise EntityNotFoundError(
                f"User #{owner} doesn't currently have a car configuration"
            )

        violations = self._violations(current, add, remove, self._accounting.snapshot(self._catalog))
        if violations:
            logger.info("Edit rejected for user #%s: %d violation(s)", owner, len(violations))
            raise ValidationError.from_violations(violations)

        # Phase 2: authoritative re-check and write, one transaction
        with self._configuration_repo.atomic():
            current = self._configuration_repo.get_by_owner(owner)
            if current is None:
                logger.warning("Edit conflict for user #%s: configuration vanished", owner)
                raise ConcurrencyConflictError(
                    f"User #{owner} doesn't currently have a car configuration"
                )

            violations = self._violations(
                current, add, remove, self._accounting.snapshot(self._catalog)
            )
            if violations:
                logger.warning(
                    "Edit conflict for user #%s: inventory changed (%s)",
                    owner,
                    "; ".join(v.reason for v in violations),
                )
                raise ConcurrencyConflictError.from_violations(violations)

            if add:
                self._configuration_repo.add_accessories(owner, add)
            if remove:
                self._configuration_repo.remove_accessories(owner, remove)

            updated = Configuration(
                owner=owner,
                model_id=current.model_id,
                accessory_ids=current.with_edit(add, remove),
                created_at=current.created_at,
            )

        logger.info("Configuration edited for user #%s: +%s -%s", owner, add, remove)
        return ConfigurationDTO.from_domain(updated, self._catalog)

    # --- Validation -----------------------------------------------------------

    def _violations(
        self,
        current: Configuration,
        add: list[str],
        remove: list[str],
        snapshot: InventorySnapshot,
    ) -> list[Violation]:
        violations: list[Violation] = []

        add_counts = Counter(add)
        for accessory_id in dict.fromkeys(add):
            if add_counts[accessory_id] > 1:
                violations.append(
                    Violation.because(f"Accessory '{accessory_id}' is added more than once")
                )
            if current.holds(accessory_id):
                violations.append(
                    Violation.because(f"Accessory '{accessory_id}' is already selected")
                )
            if accessory_id in remove:
                violations.append(
                    Violation.because(f"Accessory '{accessory_id}' is both added and removed")
                )
        for accessory_id in dict.fromkeys(remove):
            if not current.holds(accessory_id):
                violations.append(
                    Violation.because(f"Accessory '{accessory_id}' is not selected")
                )

        violations.extend(
            validate_configuration(
                current.model_id,
                current.with_edit(add, remove),
                self._catalog,
                snapshot,
                held_ids=current.accessory_ids,
            )
        )
        return violations
