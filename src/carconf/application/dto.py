"""Data Transfer Objects — plain containers that cross layer boundaries.

DTOs carry data between the CLI and application layers without
exposing domain internals to the outside world.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from carconf.domain.exceptions import DataIntegrityError
from carconf.domain.model.catalog import RuleCatalog
from carconf.domain.model.configuration import Configuration


@dataclass(frozen=True)
class DraftSpec:
    """Input: an unsaved configuration being edited on the client side."""

    model_id: str | None
    accessory_ids: tuple[str, ...] = ()


@dataclass(frozen=True)
class AccessoryLineDTO:
    """Output: a selected accessory as displayed to the user."""

    id: str
    name: str
    price: str  # formatted, e.g. "€300.00"


@dataclass(frozen=True)
class ConfigurationDTO:
    """Output: a saved configuration as displayed to the user."""

    owner: int
    model_id: str
    model_name: str
    accessories: list[AccessoryLineDTO]
    total: str
    created_at: str

    @staticmethod
    def from_domain(configuration: Configuration, catalog: RuleCatalog) -> ConfigurationDTO:
        # A saved configuration only ever references catalog entries.
        model = catalog.model_by_id(configuration.model_id)
        if model is None:
            raise DataIntegrityError(
                f"Saved configuration of user #{configuration.owner} references "
                f"unknown model '{configuration.model_id}'"
            )
        total = model.price
        lines: list[AccessoryLineDTO] = []
        for accessory_id in configuration.accessory_ids:
            accessory = catalog.accessory_by_id(accessory_id)
            if accessory is None:
                raise DataIntegrityError(
                    f"Saved configuration of user #{configuration.owner} references "
                    f"unknown accessory '{accessory_id}'"
                )
            total = total + accessory.price
            lines.append(
                AccessoryLineDTO(id=accessory.id, name=accessory.name, price=str(accessory.price))
            )
        return ConfigurationDTO(
            owner=configuration.owner,
            model_id=configuration.model_id,
            model_name=model.name,
            accessories=lines,
            total=str(total),
            created_at=configuration.created_at.strftime("%Y-%m-%d %H:%M UTC"),
        )


@dataclass(frozen=True)
class PreviewDTO:
    """Output: advisory answer to "can this accessory be added/removed?"."""

    accessory_id: str
    action: str  # "add" or "remove"
    allowed: bool
    reasons: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class InventoryLineDTO:
    accessory_id: str
    name: str
    capacity: int
    selected: int
    available: int


@dataclass(frozen=True)
class ModelLineDTO:
    id: str
    name: str
    power: int
    price: str
    max_accessories: int


@dataclass(frozen=True)
class AccessoryDetailDTO:
    id: str
    name: str
    description: str
    price: str
    capacity: int
    mandatory: str | None
    incompat: list[str]


@dataclass(frozen=True)
class CatalogDTO:
    models: list[ModelLineDTO]
    accessories: list[AccessoryDetailDTO]


@dataclass(frozen=True)
class TokenDTO:
    token: str
    expires_in: int  # seconds


@dataclass(frozen=True)
class EstimationRequest:
    """Input to the estimation service: a finalized configuration by name."""

    model_name: str | None
    accessory_names: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class EstimateDTO:
    manufacturing_time: int  # days
    qualified: bool
