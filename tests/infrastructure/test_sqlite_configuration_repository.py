"""Tests for the SQLite configuration store.

Every test gets its own database file under ``tmp_path``.
"""

import threading

import pytest

from carconf.application.edit_configuration import EditConfigurationHandler
from carconf.domain.exceptions import EntityNotFoundError, ValidationError
from carconf.domain.model.configuration import Configuration
from carconf.infrastructure.persistence.sqlite_configuration_repository import (
    SqliteConfigurationRepository,
)
from tests.samples import sample_catalog


@pytest.fixture
def repo(tmp_path) -> SqliteConfigurationRepository:
    return SqliteConfigurationRepository(tmp_path / "carconf.db", timeout=10.0)


class TestReadWrite:

    def test_missing_configuration(self, repo):
        assert repo.get_by_owner(1) is None

    def test_add_and_read_back_in_order(self, repo):
        repo.add(Configuration.create(1, "2", ["7", "4", "1"]))
        saved = repo.get_by_owner(1)
        assert saved.model_id == "2"
        assert saved.accessory_ids == ("7", "4", "1")
        assert saved.created_at.tzinfo is not None

    def test_add_and_remove_accessories(self, repo):
        repo.add(Configuration.create(1, "3", ["1"]))
        repo.add_accessories(1, ["4", "5"])
        repo.remove_accessories(1, ["1"])
        assert repo.get_by_owner(1).accessory_ids == ("4", "5")

    def test_selection_counts_across_users(self, repo):
        repo.add(Configuration.create(1, "3", ["1", "4"]))
        repo.add(Configuration.create(2, "3", ["1"]))
        assert repo.selection_counts() == {"1": 2, "4": 1}

    def test_delete(self, repo):
        repo.add(Configuration.create(1, "3", ["1", "4"]))
        assert repo.delete(1) is True
        assert repo.get_by_owner(1) is None
        assert repo.selection_counts() == {}

    def test_delete_nonexistent(self, repo):
        repo.add(Configuration.create(2, "3", ["4"]))
        assert repo.delete(1) is False
        assert repo.selection_counts() == {"4": 1}

    def test_edit_without_configuration(self, repo):
        with pytest.raises(EntityNotFoundError):
            repo.add_accessories(1, ["4"])

    def test_survives_reopening(self, tmp_path):
        SqliteConfigurationRepository(tmp_path / "db.sqlite").add(
            Configuration.create(1, "1", ["4"])
        )
        reopened = SqliteConfigurationRepository(tmp_path / "db.sqlite")
        assert reopened.get_by_owner(1).accessory_ids == ("4",)


class TestTransactions:

    def test_exception_rolls_back_every_write(self, repo):
        repo.add(Configuration.create(1, "3", ["1"]))
        with pytest.raises(ValidationError):
            with repo.atomic():
                repo.add_accessories(1, ["4"])
                repo.add(Configuration.create(2, "3", ["5"]))
                raise ValidationError("changed my mind")
        assert repo.get_by_owner(1).accessory_ids == ("1",)
        assert repo.get_by_owner(2) is None

    def test_database_error_rolls_back_and_is_wrapped(self, repo):
        repo.add(Configuration.create(1, "3", ["1"]))
        with pytest.raises(RuntimeError, match="Database error"):
            with repo.atomic():
                repo.add_accessories(1, ["4"])
                # Primary key violation: 1 already holds "1".
                repo.add_accessories(1, ["1"])
        assert repo.get_by_owner(1).accessory_ids == ("1",)

    def test_reads_inside_transaction_see_own_writes(self, repo):
        with repo.atomic():
            repo.add(Configuration.create(1, "3", ["9"]))
            assert repo.selection_counts() == {"9": 1}


class TestLastUnitRace:

    def test_exactly_one_of_two_concurrent_edits_commits(self, repo):
        catalog = sample_catalog(a10=1)
        repo.add(Configuration.create(1, "3", ["4"]))
        repo.add(Configuration.create(2, "3", ["5"]))
        barrier = threading.Barrier(2)
        outcomes: dict[int, str] = {}

        def edit(owner: int) -> None:
            handler = EditConfigurationHandler(repo, catalog)
            barrier.wait()
            try:
                handler.handle(owner, add=["10"], remove=[])
                outcomes[owner] = "committed"
            except ValidationError:
                outcomes[owner] = "rejected"

        threads = [threading.Thread(target=edit, args=(owner,)) for owner in (1, 2)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert sorted(outcomes.values()) == ["committed", "rejected"]
        assert repo.selection_counts()["10"] == 1
