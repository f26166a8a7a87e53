"""Domain service: Validation Engine.

The one and only expression of the configuration rules.  It is pure:
every input (catalog, inventory snapshot, current selection) is passed
in, so the same code answers both the optimistic preview ("can I click
this?") and the authoritative check run inside the commit transaction.

Two shapes of question are answered:

* ``validate()`` — a single addition or removal against a selection.
  Checks are collected in a fixed order (capacity, mandatory,
  incompatibility, availability) so ``first_violation()`` always surfaces
  the same reason first.
* ``validate_configuration()`` — a whole proposed state, as submitted by
  create and edit.  Every violation is reported.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import Iterable

from carconf.domain.model.accessory import Accessory
from carconf.domain.model.catalog import RuleCatalog
from carconf.domain.model.inventory import InventorySnapshot
from carconf.domain.model.value_objects import Violation


@dataclass(frozen=True)
class Candidate:
    """A single edit proposed against a selection.

    ``held_ids`` are the accessories the user already holds in the
    committed store; re-adding one of those consumes no new stock.
    """

    model_id: str | None
    accessory_ids: tuple[str, ...]
    accessory_id: str
    held_ids: frozenset[str] = field(default_factory=frozenset)


def _labels(catalog: RuleCatalog, ids: Iterable[str]) -> str:
    labels = []
    for accessory_id in ids:
        accessory = catalog.accessory_by_id(accessory_id)
        labels.append(accessory.label if accessory else f"{accessory_id}: Unknown accessory")
    return ", ".join(labels)


# ---------------------------------------------------------------------------
# Single edits
# ---------------------------------------------------------------------------


def validate(
    candidate: Candidate,
    catalog: RuleCatalog,
    inventory: InventorySnapshot,
    is_removal: bool,
) -> list[Violation]:
    """Return every violation for adding or removing ``candidate.accessory_id``.

    An empty list means the edit is legal.
    """
    accessory = catalog.accessory_by_id(candidate.accessory_id)
    if accessory is None:
        return [Violation.because(f"Accessory '{candidate.accessory_id}' does not exist")]

    if is_removal:
        return _check_removal(accessory, candidate, catalog)
    return _check_addition(accessory, candidate, catalog, inventory)


def first_violation(
    candidate: Candidate,
    catalog: RuleCatalog,
    inventory: InventorySnapshot,
    is_removal: bool,
) -> Violation:
    """The reason the optimistic caller shows, or ``Violation.ok()``."""
    violations = validate(candidate, catalog, inventory, is_removal)
    return violations[0] if violations else Violation.ok()


def _check_addition(
    accessory: Accessory,
    candidate: Candidate,
    catalog: RuleCatalog,
    inventory: InventorySnapshot,
) -> list[Violation]:
    violations: list[Violation] = []
    selected = set(candidate.accessory_ids)

    if accessory.id in selected:
        return [Violation.because(f"Accessory {accessory.label} is already selected")]

    # 1. Capacity of the model
    model = catalog.model_by_id(candidate.model_id) if candidate.model_id else None
    if not candidate.model_id:
        violations.append(
            Violation.because("No model selected: accessories cannot be added yet")
        )
    elif model is None:
        violations.append(Violation.because(f"Model '{candidate.model_id}' does not exist"))
    else:
        limit = catalog.max_accessories_for(model.id)
        if len(selected) + 1 > limit:
            violations.append(
                Violation.because(
                    "Adding this accessory would exceed the maximum number of "
                    f"accessories for model {model.label} ({limit})"
                )
            )

    # 2. Mandatory dependency
    if accessory.mandatory is not None and accessory.mandatory not in selected:
        violations.append(
            Violation.because(
                f"Accessory {accessory.label} requires "
                f"{_labels(catalog, [accessory.mandatory])}"
            )
        )

    # 3. Incompatibility, both directions, one violation for all conflicts
    conflicts = sorted(catalog.incompatible_with(accessory.id) & selected)
    if conflicts:
        violations.append(
            Violation.because(
                f"Accessory {accessory.label} is incompatible with "
                f"{_labels(catalog, conflicts)}"
            )
        )

    # 4. Availability
    if inventory.is_exhausted(accessory.id) and accessory.id not in candidate.held_ids:
        violations.append(
            Violation.because(
                f"Accessory {accessory.label} has reached the maximum usage"
            )
        )

    return violations


def _check_removal(
    accessory: Accessory,
    candidate: Candidate,
    catalog: RuleCatalog,
) -> list[Violation]:
    if accessory.id not in candidate.accessory_ids:
        return [Violation.because(f"Accessory {accessory.label} is not selected")]

    # Freeing stock is always safe; only dependents can block a removal.
    selected = set(candidate.accessory_ids)
    needy = [dep.id for dep in catalog.dependents_of(accessory.id) if dep.id in selected]
    if needy:
        return [
            Violation.because(
                f"Accessory {accessory.label} is needed by {_labels(catalog, needy)}"
            )
        ]
    return []


# ---------------------------------------------------------------------------
# Whole configurations
# ---------------------------------------------------------------------------


def validate_configuration(
    model_id: str | None,
    accessory_ids: Iterable[str],
    catalog: RuleCatalog,
    inventory: InventorySnapshot,
    held_ids: Iterable[str] = (),
) -> list[Violation]:
    """Return every violation of a complete proposed configuration.

    Mandatory dependencies are checked against the final selection, so
    the order in which accessories are listed does not matter.
    Incompatible pairs are reported once, grouped under the first member
    of the pair in selection order.
    """
    ids = list(accessory_ids)
    held = set(held_ids)
    violations: list[Violation] = []

    model = catalog.model_by_id(model_id) if model_id else None
    if not model_id:
        violations.append(Violation.because("No model selected"))
    elif model is None:
        violations.append(Violation.because(f"Model '{model_id}' does not exist"))

    counts = Counter(ids)
    for duplicate in (i for i in dict.fromkeys(ids) if counts[i] > 1):
        violations.append(
            Violation.because(f"Accessory '{duplicate}' is selected more than once")
        )

    known: list[Accessory] = []
    for accessory_id in dict.fromkeys(ids):
        accessory = catalog.accessory_by_id(accessory_id)
        if accessory is None:
            violations.append(Violation.because(f"Accessory '{accessory_id}' does not exist"))
        else:
            known.append(accessory)

    selected = {a.id for a in known}

    limit = catalog.max_accessories_for(model.id) if model is not None else None
    if limit is not None and len(selected) > limit:
        violations.append(
            Violation.because(
                f"Model {model.label} allows a maximum number of "
                f"{limit} accessories, {len(selected)} selected"
            )
        )

    reported_pairs: set[frozenset[str]] = set()
    for accessory in known:
        if accessory.mandatory is not None and accessory.mandatory not in selected:
            violations.append(
                Violation.because(
                    f"Accessory {accessory.label} requires "
                    f"{_labels(catalog, [accessory.mandatory])}"
                )
            )

        conflicts = [
            other.id
            for other in known
            if other.id in catalog.incompatible_with(accessory.id)
            and frozenset((accessory.id, other.id)) not in reported_pairs
        ]
        if conflicts:
            reported_pairs.update(frozenset((accessory.id, c)) for c in conflicts)
            violations.append(
                Violation.because(
                    f"Accessory {accessory.label} is incompatible with "
                    f"{_labels(catalog, conflicts)}"
                )
            )

        if inventory.is_exhausted(accessory.id) and accessory.id not in held:
            violations.append(
                Violation.because(
                    f"Accessory {accessory.label} has reached the maximum usage"
                )
            )

    return violations
