"""JSON-file-backed implementation of CatalogRepository.

Two files: ``accessories.json`` and ``models.json``, each a list of
objects.  A missing file, or a record with a missing or malformed field,
is a data-integrity fault reported at load time.  The files are never
written.
"""

from __future__ import annotations

import json
from decimal import Decimal
from pathlib import Path

from carconf.domain.exceptions import DataIntegrityError, ValidationError
from carconf.domain.model.accessory import Accessory
from carconf.domain.model.car_model import CarModel
from carconf.domain.model.value_objects import Money
from carconf.domain.repository.catalog_repository import CatalogRepository


class JsonCatalogRepository(CatalogRepository):

    def __init__(self, accessories_path: Path, models_path: Path) -> None:
        self._accessories_path = accessories_path
        self._models_path = models_path

    # --- CatalogRepository interface ------------------------------------------

    def list_accessories(self) -> list[Accessory]:
        return [
            self._parse(self._accessories_path, raw, self._to_accessory)
            for raw in self._load_raw(self._accessories_path)
        ]

    def list_models(self) -> list[CarModel]:
        return [
            self._parse(self._models_path, raw, self._to_model)
            for raw in self._load_raw(self._models_path)
        ]

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_accessory(raw: dict) -> Accessory:
        mandatory = raw.get("mandatory")
        return Accessory(
            id=str(raw["id"]),
            name=raw["name"],
            description=raw.get("description", ""),
            price=Money(Decimal(str(raw["price"])), raw.get("currency", "EUR")),
            capacity=raw["capacity"],
            mandatory=str(mandatory) if mandatory is not None else None,
            incompat=frozenset(str(i) for i in raw.get("incompat", [])),
        )

    @staticmethod
    def _to_model(raw: dict) -> CarModel:
        return CarModel(
            id=str(raw["id"]),
            name=raw["name"],
            power=raw["power"],
            price=Money(Decimal(str(raw["price"])), raw.get("currency", "EUR")),
            max_accessories=raw["max_accessories"],
        )

    @staticmethod
    def _parse(path: Path, raw: dict, convert):
        try:
            return convert(raw)
        except (KeyError, TypeError, ArithmeticError, ValidationError) as exc:
            raise DataIntegrityError(
                f"Malformed record in {path.name}: {raw!r} ({exc})"
            ) from exc

    # --- File helpers ---------------------------------------------------------

    @staticmethod
    def _load_raw(path: Path) -> list[dict]:
        try:
            records = json.loads(path.read_text(encoding="utf-8"))
        except FileNotFoundError as exc:
            raise DataIntegrityError(f"Catalog file {path} is missing") from exc
        except json.JSONDecodeError as exc:
            raise DataIntegrityError(f"{path.name} is not valid JSON: {exc}") from exc
        if not isinstance(records, list):
            raise DataIntegrityError(f"{path.name} must contain a list of records")
        return records
