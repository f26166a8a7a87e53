"""Inventory accounting — remaining availability per accessory.

Availability is never stored: it is ``capacity`` minus the number of
committed configurations (across all users) that currently hold the
accessory.  An InventorySnapshot freezes that computation at the instant
the selection counts were read.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import Iterable, Mapping

from carconf.domain.exceptions import DataIntegrityError
from carconf.domain.model.catalog import RuleCatalog


def _as_counts(selections: Mapping[str, int] | Iterable[str]) -> Mapping[str, int]:
    if isinstance(selections, Mapping):
        return selections
    return Counter(selections)


def availability(
    accessory_id: str,
    catalog: RuleCatalog,
    committed_selections: Mapping[str, int] | Iterable[str],
) -> int:
    """Return ``capacity - selected`` for one accessory.

    *committed_selections* is either a mapping ``accessory_id -> count`` or
    a flat iterable of selected accessory ids.

    Raises DataIntegrityError for an unknown accessory or a negative
    result; both mean a commit went wrong somewhere.
    """
    accessory = catalog.accessory_by_id(accessory_id)
    if accessory is None:
        raise DataIntegrityError(f"No catalog entry for accessory '{accessory_id}'")

    selected = _as_counts(committed_selections).get(accessory_id, 0)
    remaining = accessory.capacity - selected
    if remaining < 0:
        raise DataIntegrityError(
            f"Accessory '{accessory_id}' is over-allocated "
            f"({selected} selected, capacity {accessory.capacity})"
        )
    return remaining


@dataclass(frozen=True)
class InventorySnapshot:
    """Point-in-time view of remaining availability.

    Build with ``InventorySnapshot.compute()``; a snapshot read before a
    transaction started is stale and must not be used to authorize a commit.
    """

    remaining: Mapping[str, int] = field(default_factory=dict)

    @staticmethod
    def compute(
        catalog: RuleCatalog,
        committed_selections: Mapping[str, int] | Iterable[str],
    ) -> InventorySnapshot:
        counts = _as_counts(committed_selections)
        unknown = sorted(set(counts) - {a.id for a in catalog.accessories()})
        if unknown:
            raise DataIntegrityError(
                f"Selections reference unknown accessories: {', '.join(unknown)}"
            )
        return InventorySnapshot(
            remaining={
                accessory.id: availability(accessory.id, catalog, counts)
                for accessory in catalog.accessories()
            }
        )

    def availability(self, accessory_id: str) -> int:
        try:
            return self.remaining[accessory_id]
        except KeyError:
            raise DataIntegrityError(
                f"Snapshot has no entry for accessory '{accessory_id}'"
            ) from None

    def is_exhausted(self, accessory_id: str) -> bool:
        return self.availability(accessory_id) == 0
