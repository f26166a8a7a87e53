"""JWT implementation of CapabilityCodec (python-jose).

Used unchanged by both sides of the trust boundary: the configuration
service issues, the estimation service verifies.  The algorithm is
pinned; a token signed any other way is rejected.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Callable

from jose import JWTError, jwt

from carconf.domain.exceptions import AuthorizationError
from carconf.domain.service.capability import Capability, CapabilityCodec
from carconf.infrastructure.settings import TOKEN_ALGORITHM

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class JwtCapabilityCodec(CapabilityCodec):

    def __init__(
        self,
        secret: str,
        ttl_seconds: int = 60,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        if not secret:
            raise ValueError("A signing secret is required")
        self._secret = secret
        self._ttl = timedelta(seconds=ttl_seconds)
        self._clock = clock

    def issue(self, subject_id: int, qualified: bool) -> str:
        expire = self._clock() + self._ttl
        to_encode = {
            "sub": str(subject_id),
            "qualified": bool(qualified),
            "exp": int(expire.timestamp()),
        }
        return jwt.encode(to_encode, self._secret, algorithm=TOKEN_ALGORITHM)

    def verify(self, token: str | None) -> Capability:
        if not token:
            raise AuthorizationError("Authorization error: missing token")

        try:
            # Expiry is checked against our own clock below, so jose does not
            # need to.
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[TOKEN_ALGORITHM],
                options={"verify_exp": False},
            )
        except JWTError as exc:
            logger.warning("Rejected capability token: %s", exc)
            raise AuthorizationError(f"Authorization error: {exc}") from exc

        subject, qualified, exp = payload.get("sub"), payload.get("qualified"), payload.get("exp")
        if subject is None or not isinstance(qualified, bool) or not isinstance(exp, int):
            logger.warning("Rejected capability token: incomplete claims")
            raise AuthorizationError("Authorization error: incomplete token claims")

        expires_at = datetime.fromtimestamp(exp, tz=timezone.utc)
        if expires_at <= self._clock():
            logger.warning("Rejected capability token for subject %s: expired", subject)
            raise AuthorizationError("Authorization error: token expired")

        try:
            subject_id = int(subject)
        except ValueError:
            raise AuthorizationError("Authorization error: malformed subject") from None

        return Capability(subject_id=subject_id, qualified=qualified, expires_at=expires_at)
