"""RuleCatalog — read-only lookup of every model and accessory constraint.

The catalog is rebuilt wholesale whenever definitions are loaded; nothing
mutates it afterwards.  All referential checks happen in ``load()`` so
that rule evaluation never has to deal with dangling ids.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

from carconf.domain.exceptions import DataIntegrityError, EntityNotFoundError
from carconf.domain.model.accessory import Accessory
from carconf.domain.model.car_model import CarModel


@dataclass(frozen=True)
class RuleCatalog:
    """Aggregate of the static rule set.

    Use ``RuleCatalog.load()`` to build one: it enforces data integrity.

    Incompatibility is kept as a set of unordered pairs, so declaring
    "A is incompatible with B" on either side forbids both directions.
    """

    _accessories: dict[str, Accessory]
    _models: dict[str, CarModel]
    _incompatible_pairs: frozenset[frozenset[str]] = field(default_factory=frozenset)

    # --- Factory --------------------------------------------------------------

    @staticmethod
    def load(
        accessories: Iterable[Accessory],
        models: Iterable[CarModel],
    ) -> RuleCatalog:
        """Build a catalog, raising DataIntegrityError on inconsistent data."""
        by_id: dict[str, Accessory] = {}
        for accessory in accessories:
            if accessory.id in by_id:
                raise DataIntegrityError(f"Duplicate accessory id '{accessory.id}'")
            by_id[accessory.id] = accessory

        models_by_id: dict[str, CarModel] = {}
        for model in models:
            if model.id in models_by_id:
                raise DataIntegrityError(f"Duplicate model id '{model.id}'")
            models_by_id[model.id] = model

        pairs: set[frozenset[str]] = set()
        for accessory in by_id.values():
            if accessory.mandatory is not None and accessory.mandatory not in by_id:
                raise DataIntegrityError(
                    f"Accessory '{accessory.id}' requires unknown accessory "
                    f"'{accessory.mandatory}'"
                )
            for other in accessory.incompat:
                if other not in by_id:
                    raise DataIntegrityError(
                        f"Accessory '{accessory.id}' is declared incompatible with "
                        f"unknown accessory '{other}'"
                    )
                pairs.add(frozenset((accessory.id, other)))

        for accessory in by_id.values():
            if accessory.mandatory is not None:
                if frozenset((accessory.id, accessory.mandatory)) in pairs:
                    raise DataIntegrityError(
                        f"Accessory '{accessory.id}' both requires and is "
                        f"incompatible with '{accessory.mandatory}'"
                    )

        _reject_mandatory_cycles(by_id)

        return RuleCatalog(
            _accessories=by_id,
            _models=models_by_id,
            _incompatible_pairs=frozenset(pairs),
        )

    # --- Lookups --------------------------------------------------------------

    def accessory_by_id(self, accessory_id: str) -> Accessory | None:
        return self._accessories.get(accessory_id)

    def model_by_id(self, model_id: str) -> CarModel | None:
        return self._models.get(model_id)

    def max_accessories_for(self, model_id: str) -> int:
        model = self._models.get(model_id)
        if model is None:
            raise EntityNotFoundError(f"Model '{model_id}' does not exist")
        return model.max_accessories

    def incompatible_with(self, accessory_id: str) -> frozenset[str]:
        """Every accessory that may not coexist with *accessory_id*."""
        return frozenset(
            other
            for pair in self._incompatible_pairs
            if accessory_id in pair
            for other in pair
            if other != accessory_id
        )

    def dependents_of(self, accessory_id: str) -> list[Accessory]:
        """Accessories whose mandatory dependency is *accessory_id*."""
        return [a for a in self._accessories.values() if a.mandatory == accessory_id]

    def accessories(self) -> list[Accessory]:
        return list(self._accessories.values())

    def models(self) -> list[CarModel]:
        return list(self._models.values())


def _reject_mandatory_cycles(by_id: dict[str, Accessory]) -> None:
    # Each accessory has at most one mandatory edge, so following the chain
    # and watching for a revisit is enough.
    for start in by_id.values():
        seen = {start.id}
        current = start.mandatory
        while current is not None:
            if current in seen:
                raise DataIntegrityError(
                    f"Mandatory dependencies form a cycle through '{start.id}'"
                )
            seen.add(current)
            current = by_id[current].mandatory
