"""Concurrent commits against the last unit of an accessory.

Two users try to take the only remaining Automatic braking unit.
Exactly one succeeds; the store never goes below zero.
"""

import threading

import pytest

from carconf.application.create_configuration import CreateConfigurationHandler
from carconf.application.edit_configuration import EditConfigurationHandler
from carconf.domain.exceptions import ConcurrencyConflictError, ValidationError
from carconf.domain.model.configuration import Configuration
from carconf.domain.model.inventory import availability
from tests.fakes import FakeConfigurationRepository
from tests.samples import sample_catalog


def _setup() -> tuple[EditConfigurationHandler, FakeConfigurationRepository]:
    repo = FakeConfigurationRepository([
        Configuration(owner=1, model_id="3", accessory_ids=("4",)),
        Configuration(owner=2, model_id="3", accessory_ids=("5",)),
    ])
    return EditConfigurationHandler(repo, sample_catalog(a10=1)), repo


class TestLastUnit:

    def test_commit_slipping_in_after_optimistic_check(self):
        handler, repo = _setup()
        # User 2 commits between user 1's optimistic read and its commit.
        repo.on_transaction_start = lambda: handler.handle(2, add=["10"], remove=[])

        with pytest.raises(ConcurrencyConflictError, match="maximum usage"):
            handler.handle(1, add=["10"], remove=[])

        assert repo.get_by_owner(1).accessory_ids == ("4",)
        assert repo.get_by_owner(2).accessory_ids == ("5", "10")
        assert availability("10", sample_catalog(a10=1), repo.selection_counts()) == 0

    def test_failed_commit_leaves_store_untouched(self):
        handler, repo = _setup()
        repo.on_transaction_start = lambda: handler.handle(2, add=["10"], remove=[])
        before = repo.selection_counts()

        with pytest.raises(ConcurrencyConflictError):
            # Would also have freed 4 had it committed.
            handler.handle(1, add=["10"], remove=["4"])

        after = repo.selection_counts()
        assert after["4"] == before["4"]
        assert after["10"] == 1

    def test_racing_threads(self):
        handler, repo = _setup()
        barrier = threading.Barrier(2)
        results: dict[int, object] = {}

        def edit(owner: int) -> None:
            barrier.wait()
            try:
                results[owner] = handler.handle(owner, add=["10"], remove=[])
            except ValidationError as exc:
                results[owner] = exc

        threads = [threading.Thread(target=edit, args=(owner,)) for owner in (1, 2)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        failures = [r for r in results.values() if isinstance(r, ValidationError)]
        assert len(results) == 2
        assert len(failures) == 1
        assert "maximum usage" in str(failures[0])
        assert repo.selection_counts()["10"] == 1

    def test_racing_creates(self):
        repo = FakeConfigurationRepository()
        handler = CreateConfigurationHandler(repo, sample_catalog(a10=1))
        repo.on_transaction_start = lambda: handler.handle(2, "3", ["10"])

        with pytest.raises(ConcurrencyConflictError):
            handler.handle(1, "3", ["10"])

        assert repo.get_by_owner(1) is None
        assert repo.selection_counts() == {"10": 1}
