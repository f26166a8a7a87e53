"""Abstract repository for the Configuration aggregate.

This is the single authoritative store shared by every request handler.
Besides the per-user configurations it answers the aggregate question
"how many configurations hold accessory X", which inventory accounting
turns into availability.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from typing import Iterable

from carconf.domain.model.configuration import Configuration


class ConfigurationRepository(ABC):

    @abstractmethod
    def atomic(self) -> AbstractContextManager[None]:
        """Run the enclosed reads and writes as one serializable transaction.

        No other transaction may write between a read and a write made
        inside the block.  Any exception rolls every write back.
        """

    @abstractmethod
    def get_by_owner(self, owner: int) -> Configuration | None:
        """Return the user's configuration, or None if there is none."""

    @abstractmethod
    def selection_counts(self) -> dict[str, int]:
        """Return ``accessory_id -> number of configurations holding it``."""

    @abstractmethod
    def add(self, configuration: Configuration) -> None:
        """Persist a brand-new configuration (model and accessories)."""

    @abstractmethod
    def add_accessories(self, owner: int, accessory_ids: Iterable[str]) -> None:
        """Attach accessories to an existing configuration."""

    @abstractmethod
    def remove_accessories(self, owner: int, accessory_ids: Iterable[str]) -> None:
        """Detach accessories from an existing configuration."""

    @abstractmethod
    def delete(self, owner: int) -> bool:
        """Remove the configuration; return False if there was none."""
