"""Tests for the advisory PreviewAccessory query."""

from carconf.application.dto import DraftSpec
from carconf.application.preview_accessory import PreviewAccessoryHandler
from carconf.domain.model.configuration import Configuration
from tests.fakes import FakeConfigurationRepository
from tests.samples import sample_catalog


def _setup(configurations=None, **capacities):
    repo = FakeConfigurationRepository(configurations)
    return PreviewAccessoryHandler(repo, sample_catalog(**capacities)), repo


class TestPreviewAgainstSavedConfiguration:

    def test_addition_allowed(self):
        handler, _ = _setup([Configuration(owner=1, model_id="1", accessory_ids=("1",))])
        dto = handler.handle(1, "2")
        assert dto.action == "add"
        assert dto.allowed is True
        assert dto.reasons == []

    def test_removal_blocked_by_dependent(self):
        handler, _ = _setup([Configuration(owner=1, model_id="1", accessory_ids=("1", "3"))])
        dto = handler.handle(1, "1")
        assert dto.action == "remove"
        assert dto.allowed is False
        assert dto.reasons == ["Accessory 1: Radio is needed by 3: Bluetooth"]

    def test_without_configuration_nothing_can_be_added(self):
        handler, _ = _setup()
        dto = handler.handle(1, "4")
        assert dto.allowed is False
        assert "No model selected" in dto.reasons[0]

    def test_never_writes(self):
        handler, repo = _setup([Configuration(owner=1, model_id="1", accessory_ids=("1",))])
        handler.handle(1, "2")
        handler.handle(1, "1")
        assert repo.commits == 0
        assert repo.get_by_owner(1).accessory_ids == ("1",)


class TestPreviewAgainstDraft:

    def test_draft_overrides_saved_selection(self):
        handler, _ = _setup([Configuration(owner=1, model_id="1", accessory_ids=("1",))])
        dto = handler.handle(1, "2", DraftSpec(model_id="1", accessory_ids=()))
        assert dto.reasons == ["Accessory 2: Satellite navigator requires 1: Radio"]

    def test_sold_out_accessory_held_in_store_is_fine(self):
        # The user dropped Automatic braking from the draft but still holds
        # the committed unit, so adding it back is allowed.
        handler, _ = _setup(
            [Configuration(owner=1, model_id="3", accessory_ids=("10",))], a10=1
        )
        dto = handler.handle(1, "10", DraftSpec(model_id="3", accessory_ids=()))
        assert dto.allowed is True

    def test_sold_out_accessory_for_someone_else(self):
        handler, _ = _setup(
            [Configuration(owner=2, model_id="3", accessory_ids=("10",))], a10=1
        )
        dto = handler.handle(1, "10", DraftSpec(model_id="3", accessory_ids=("4",)))
        assert dto.reasons == ["Accessory 10: Automatic braking has reached the maximum usage"]
