"""In-memory fake repositories for testing.

These implement the same abstract interfaces as the JSON and SQLite
repositories but keep everything in a dict. No file I/O, no side effects.
"""

from __future__ import annotations

import threading
from collections import Counter
from contextlib import contextmanager
from dataclasses import replace
from datetime import datetime, timedelta, timezone
from typing import Callable, Iterable, Iterator

from carconf.domain.exceptions import AuthorizationError, EntityNotFoundError
from carconf.domain.model.accessory import Accessory
from carconf.domain.model.car_model import CarModel
from carconf.domain.model.configuration import Configuration
from carconf.domain.model.user import User
from carconf.domain.repository.catalog_repository import CatalogRepository
from carconf.domain.repository.configuration_repository import ConfigurationRepository
from carconf.domain.repository.user_repository import UserRepository
from carconf.domain.service.capability import Capability, CapabilityCodec


class FakeConfigurationRepository(ConfigurationRepository):
    """Serializes transactions with a re-entrant lock.

    ``on_transaction_start`` runs once, inside the lock, at the start of
    the next transaction, to simulate another user committing
    between a handler's optimistic read and its authoritative re-check.
    """

    def __init__(self, configurations: list[Configuration] | None = None) -> None:
        self._store: dict[int, Configuration] = {}
        for c in configurations or []:
            self._store[c.owner] = c
        self._lock = threading.RLock()
        self.on_transaction_start: Callable[[], None] | None = None
        self.commits = 0

    @contextmanager
    def atomic(self) -> Iterator[None]:
        with self._lock:
            hook, self.on_transaction_start = self.on_transaction_start, None
            if hook is not None:
                hook()
            backup = dict(self._store)
            try:
                yield
            except BaseException:
                self._store = backup
                raise
            self.commits += 1

    def get_by_owner(self, owner: int) -> Configuration | None:
        return self._store.get(owner)

    def selection_counts(self) -> dict[str, int]:
        return dict(Counter(i for c in self._store.values() for i in c.accessory_ids))

    def add(self, configuration: Configuration) -> None:
        self._store[configuration.owner] = configuration

    def add_accessories(self, owner: int, accessory_ids: Iterable[str]) -> None:
        current = self._require(owner)
        self._store[owner] = replace(
            current, accessory_ids=current.accessory_ids + tuple(accessory_ids)
        )

    def remove_accessories(self, owner: int, accessory_ids: Iterable[str]) -> None:
        current = self._require(owner)
        removed = set(accessory_ids)
        self._store[owner] = replace(
            current,
            accessory_ids=tuple(i for i in current.accessory_ids if i not in removed),
        )

    def delete(self, owner: int) -> bool:
        return self._store.pop(owner, None) is not None

    def _require(self, owner: int) -> Configuration:
        current = self._store.get(owner)
        if current is None:
            raise EntityNotFoundError(f"User #{owner} has no configuration")
        return current


class FakeCatalogRepository(CatalogRepository):

    def __init__(
        self,
        accessories: list[Accessory] | None = None,
        models: list[CarModel] | None = None,
    ) -> None:
        self._accessories = list(accessories or [])
        self._models = list(models or [])

    def list_accessories(self) -> list[Accessory]:
        return list(self._accessories)

    def list_models(self) -> list[CarModel]:
        return list(self._models)


class FakeUserRepository(UserRepository):

    def __init__(self, users: list[User] | None = None) -> None:
        self._store: dict[int, User] = {}
        for u in users or []:
            self._store[u.id] = u

    def get_by_id(self, user_id: int) -> User | None:
        return self._store.get(user_id)

    def get_by_username(self, username: str) -> User | None:
        for u in self._store.values():
            if u.username == username:
                return u
        return None


class FakeCapabilityCodec(CapabilityCodec):
    """Tokens are ``"<subject>:<0|1>"``; only tokens it issued verify."""

    def __init__(self) -> None:
        self.issued: list[str] = []

    def issue(self, subject_id: int, qualified: bool) -> str:
        token = f"{subject_id}:{int(qualified)}"
        self.issued.append(token)
        return token

    def verify(self, token: str | None) -> Capability:
        if not token or token not in self.issued:
            raise AuthorizationError("Authorization error: invalid token")
        subject, qualified = token.split(":")
        return Capability(
            subject_id=int(subject),
            qualified=qualified == "1",
            expires_at=datetime.now(timezone.utc) + timedelta(seconds=60),
        )
