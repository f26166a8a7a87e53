"""Domain service interface: short-lived capability tokens.

The primary service issues a capability after authentication; the
estimation service verifies it.  Both sides use the same codec so the
secret and the algorithm are configured in exactly one place.

The payload is deliberately tiny: subject id, qualification flag and
expiry.  Never the configuration, never credentials.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class Capability:
    subject_id: int
    qualified: bool
    expires_at: datetime


class CapabilityCodec(ABC):

    @abstractmethod
    def issue(self, subject_id: int, qualified: bool) -> str:
        """Sign a fresh capability for *subject_id*."""

    @abstractmethod
    def verify(self, token: str | None) -> Capability:
        """Return the capability, or raise AuthorizationError."""
