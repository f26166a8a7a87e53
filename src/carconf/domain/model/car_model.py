"""CarModel — the base vehicle a configuration is built on."""

from __future__ import annotations

from dataclasses import dataclass

from carconf.domain.exceptions import ValidationError
from carconf.domain.model.value_objects import Money


@dataclass(frozen=True)
class CarModel:
    """A model in the catalog.

    ``max_accessories`` caps how many accessories a configuration built
    on this model may hold.
    """

    id: str
    name: str
    power: int
    price: Money
    max_accessories: int

    def __post_init__(self) -> None:
        if not self.id or not str(self.id).strip():
            raise ValidationError("Model id is required")
        if not isinstance(self.max_accessories, int) or self.max_accessories < 0:
            raise ValidationError(
                f"Model '{self.id}' max_accessories must be a non-negative integer"
            )
        if not isinstance(self.power, int) or self.power <= 0:
            raise ValidationError(f"Model '{self.id}' power must be positive")

    @property
    def label(self) -> str:
        return f"{self.id}: {self.name}"
