"""Accessory — a catalog entry that can be added to a car configuration.

Accessories are read-only definitions: the stock (``capacity``) is the
total across all users, and what is left of it is derived by inventory
accounting, never stored on the accessory itself.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from carconf.domain.exceptions import ValidationError
from carconf.domain.model.value_objects import Money


@dataclass(frozen=True)
class Accessory:
    """An accessory and the constraints it declares.

    Invariants:
    - ``capacity`` is a non-negative integer
    - ``mandatory`` never points at the accessory itself
    - ``incompat`` never contains the accessory itself

    References to other accessories are only checked once the whole
    catalog is loaded (see ``RuleCatalog.load``).
    """

    id: str
    name: str
    price: Money
    capacity: int
    description: str = ""
    mandatory: str | None = None
    incompat: frozenset[str] = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        if not self.id or not str(self.id).strip():
            raise ValidationError("Accessory id is required")
        if not self.name or not self.name.strip():
            raise ValidationError(f"Accessory '{self.id}' has no name")
        if not isinstance(self.capacity, int) or isinstance(self.capacity, bool):
            raise ValidationError(
                f"Accessory '{self.id}' capacity must be an integer, "
                f"got {type(self.capacity).__name__}"
            )
        if self.capacity < 0:
            raise ValidationError(
                f"Accessory '{self.id}' capacity cannot be negative, got {self.capacity}"
            )
        if self.mandatory == self.id:
            raise ValidationError(f"Accessory '{self.id}' cannot require itself")
        # Accept any iterable from callers, store a frozenset.
        object.__setattr__(self, "incompat", frozenset(self.incompat))
        if self.id in self.incompat:
            raise ValidationError(
                f"Accessory '{self.id}' cannot be incompatible with itself"
            )

    @property
    def label(self) -> str:
        """``id: name`` as shown in user-facing messages."""
        return f"{self.id}: {self.name}"
