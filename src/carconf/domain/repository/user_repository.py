"""Abstract repository for authenticated users."""

from __future__ import annotations

from abc import ABC, abstractmethod

from carconf.domain.model.user import User


class UserRepository(ABC):

    @abstractmethod
    def get_by_id(self, user_id: int) -> User | None:
        """Return a user by id, or None."""

    @abstractmethod
    def get_by_username(self, username: str) -> User | None:
        """Return a user by exact username, or None."""
