"""Configuration aggregate — one user's chosen model plus accessories.

A user has at most one configuration.  Its absence (the repository
returns ``None``) is the "uncreated" state; once created the model never
changes, only the accessory selection does.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Iterable

from carconf.domain.exceptions import ValidationError


def _distinct(ids: Iterable[str]) -> tuple[str, ...]:
    return tuple(dict.fromkeys(ids))


@dataclass
class Configuration:
    """Aggregate root for a user's car configuration.

    Use ``Configuration.create()`` for new configurations: it rejects
    malformed shapes.  The ``__init__`` stays simple so repositories can
    reconstitute persisted rows without re-validating.
    """

    owner: int
    model_id: str
    accessory_ids: tuple[str, ...] = ()
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    # --- Factory (used for NEW configurations only) ---------------------------

    @staticmethod
    def create(
        owner: int,
        model_id: str | None,
        accessory_ids: Iterable[str] = (),
    ) -> Configuration:
        if owner is None:
            raise ValidationError("A configuration needs an owner")
        if not model_id or not str(model_id).strip():
            raise ValidationError("A configuration needs exactly one model")

        ids = list(accessory_ids)
        duplicates = sorted({i for i in ids if ids.count(i) > 1})
        if duplicates:
            raise ValidationError(
                f"Accessories selected more than once: {', '.join(duplicates)}"
            )
        return Configuration(owner=owner, model_id=str(model_id), accessory_ids=tuple(ids))

    # --- Edits ----------------------------------------------------------------

    def with_edit(self, add: Iterable[str], remove: Iterable[str]) -> tuple[str, ...]:
        """Resulting accessory ids for ``(current ∪ add) − remove``.

        Keeps current order, then the order of *add*.  Does not mutate.
        """
        removed = set(remove)
        merged = _distinct([*self.accessory_ids, *add])
        return tuple(i for i in merged if i not in removed)

    def holds(self, accessory_id: str) -> bool:
        return accessory_id in self.accessory_ids
