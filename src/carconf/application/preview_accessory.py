"""Application service: Preview Accessory use case (query).

The optimistic path: answers "can this accessory be added (or removed)
right now?" for immediate feedback while the user is still editing.
It runs the same validation engine as the mutators but never writes,
and its answer is advisory only: the commit re-checks everything.
"""

from __future__ import annotations

from carconf.application.dto import DraftSpec, PreviewDTO
from carconf.domain.model.catalog import RuleCatalog
from carconf.domain.repository.configuration_repository import ConfigurationRepository
from carconf.domain.service.inventory_accounting import InventoryAccountingService
from carconf.domain.service.validation_engine import Candidate, validate


class PreviewAccessoryHandler:

    def __init__(
        self,
        configuration_repo: ConfigurationRepository,
        catalog: RuleCatalog,
    ) -> None:
        self._configuration_repo = configuration_repo
        self._catalog = catalog

    def handle(
        self,
        owner: int,
        accessory_id: str,
        draft: DraftSpec | None = None,
    ) -> PreviewDTO:
        """Check *accessory_id* against *draft*, or the saved configuration.

        Whether this is an addition or a removal is decided by whether the
        accessory is already in the draft.
        """
        saved = self._configuration_repo.get_by_owner(owner)
        held = saved.accessory_ids if saved else ()

        if draft is None:
            draft = DraftSpec(
                model_id=saved.model_id if saved else None,
                accessory_ids=held,
            )

        is_removal = accessory_id in draft.accessory_ids
        candidate = Candidate(
            model_id=draft.model_id,
            accessory_ids=tuple(draft.accessory_ids),
            accessory_id=accessory_id,
            held_ids=frozenset(held),
        )
        snapshot = InventoryAccountingService(self._configuration_repo).snapshot(self._catalog)
        violations = validate(candidate, self._catalog, snapshot, is_removal)

        return PreviewDTO(
            accessory_id=accessory_id,
            action="remove" if is_removal else "add",
            allowed=not violations,
            reasons=[v.reason for v in violations],
        )
