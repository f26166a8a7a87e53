"""User — the authenticated subject handed to the core by the auth layer.

The core never checks credentials; it only needs a stable identity and
the coarse qualification flag forwarded to the estimation service.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class User:
    id: int
    username: str
    qualified: bool = False
