"""JSON-file-backed implementation of UserRepository.

Stands in for the authentication collaborator: it only knows who a user
is and whether they are qualified, never how they log in.  Like the
catalog, the file is read-only and a broken file is a data-integrity
fault.
"""

from __future__ import annotations

import json
from pathlib import Path

from carconf.domain.exceptions import DataIntegrityError
from carconf.domain.model.user import User
from carconf.domain.repository.user_repository import UserRepository


class JsonUserRepository(UserRepository):

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path

    # --- UserRepository interface ---------------------------------------------

    def get_by_id(self, user_id: int) -> User | None:
        return self._load().get(user_id)

    def get_by_username(self, username: str) -> User | None:
        for user in self._load().values():
            if user.username == username:
                return user
        return None

    # --- Serialization helpers ------------------------------------------------

    def _load(self) -> dict[int, User]:
        users = [self._parse(raw) for raw in self._load_raw()]
        return {user.id: user for user in users}

    def _parse(self, raw: dict) -> User:
        try:
            return User(
                id=int(raw["id"]),
                username=raw["username"],
                qualified=bool(raw.get("qualified", False)),
            )
        except (KeyError, TypeError, ValueError, AttributeError) as exc:
            raise DataIntegrityError(
                f"Malformed record in {self._file_path.name}: {raw!r} ({exc!r})"
            ) from exc

    def _load_raw(self) -> list[dict]:
        try:
            records = json.loads(self._file_path.read_text(encoding="utf-8"))
        except FileNotFoundError as exc:
            raise DataIntegrityError(f"User file {self._file_path} is missing") from exc
        except json.JSONDecodeError as exc:
            raise DataIntegrityError(
                f"{self._file_path.name} is not valid JSON: {exc}"
            ) from exc
        if not isinstance(records, list):
            raise DataIntegrityError(f"{self._file_path.name} must contain a list of records")
        return records
