"""Tests for the read-only query handlers."""

import pytest

from carconf.application.show_catalog import ShowCatalogHandler
from carconf.application.show_configuration import ShowConfigurationHandler
from carconf.application.show_inventory import ShowInventoryHandler
from carconf.domain.exceptions import DataIntegrityError
from carconf.domain.model.configuration import Configuration
from tests.fakes import FakeConfigurationRepository
from tests.samples import sample_catalog


class TestShowConfiguration:

    def test_none_when_not_created(self):
        handler = ShowConfigurationHandler(FakeConfigurationRepository(), sample_catalog())
        assert handler.handle(1) is None

    def test_lists_accessories_in_selection_order(self):
        repo = FakeConfigurationRepository([
            Configuration(owner=1, model_id="2", accessory_ids=("4", "1", "3")),
        ])
        dto = ShowConfigurationHandler(repo, sample_catalog()).handle(1)
        assert dto.model_name == "Urbano 100"
        assert [(a.id, a.name, a.price) for a in dto.accessories] == [
            ("4", "Power windows", "€200.00"),
            ("1", "Radio", "€300.00"),
            ("3", "Bluetooth", "€200.00"),
        ]
        assert dto.total == "€12700.00"

    def test_unknown_accessory_in_store_is_integrity_fault(self):
        repo = FakeConfigurationRepository([
            Configuration(owner=1, model_id="2", accessory_ids=("4", "42")),
        ])
        with pytest.raises(DataIntegrityError, match="unknown accessory '42'"):
            ShowConfigurationHandler(repo, sample_catalog()).handle(1)

    def test_unknown_model_in_store_is_integrity_fault(self):
        repo = FakeConfigurationRepository([Configuration(owner=1, model_id="9")])
        with pytest.raises(DataIntegrityError, match="unknown model '9'"):
            ShowConfigurationHandler(repo, sample_catalog()).handle(1)


class TestShowInventory:

    def test_counts_across_all_users(self):
        repo = FakeConfigurationRepository([
            Configuration(owner=1, model_id="3", accessory_ids=("1", "10")),
            Configuration(owner=2, model_id="3", accessory_ids=("1",)),
        ])
        lines = {l.accessory_id: l for l in ShowInventoryHandler(repo, sample_catalog()).handle()}
        assert len(lines) == 10
        assert (lines["1"].capacity, lines["1"].selected, lines["1"].available) == (8, 2, 6)
        assert (lines["10"].selected, lines["10"].available) == (1, 1)
        assert lines["4"].available == 10


class TestShowCatalog:

    def test_lists_models_and_accessories(self):
        dto = ShowCatalogHandler(sample_catalog()).handle()
        assert [m.id for m in dto.models] == ["1", "2", "3"]
        assert dto.models[0].price == "€10000.00"
        assert len(dto.accessories) == 10

    def test_incompatibilities_shown_on_both_sides(self):
        dto = ShowCatalogHandler(sample_catalog()).handle()
        by_id = {a.id: a for a in dto.accessories}
        assert by_id["10"].incompat == ["9"]
        assert by_id["9"].incompat == ["10"]
        assert by_id["6"].mandatory == "5"
