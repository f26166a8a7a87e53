"""Application service: Issue Estimation Token use case.

Reissued on every dependent fetch; clients are not expected to keep
tokens around beyond their (short) lifetime.
"""

from __future__ import annotations

import logging

from carconf.application.dto import TokenDTO
from carconf.domain.exceptions import EntityNotFoundError
from carconf.domain.repository.user_repository import UserRepository
from carconf.domain.service.capability import CapabilityCodec

logger = logging.getLogger(__name__)


class IssueEstimationTokenHandler:

    def __init__(
        self,
        user_repo: UserRepository,
        codec: CapabilityCodec,
        ttl_seconds: int,
    ) -> None:
        self._user_repo = user_repo
        self._codec = codec
        self._ttl_seconds = ttl_seconds

    def handle(self, user_id: int) -> TokenDTO:
        user = self._user_repo.get_by_id(user_id)
        if user is None:
            raise EntityNotFoundError(f"User #{user_id} not found")

        token = self._codec.issue(subject_id=user.id, qualified=user.qualified)
        logger.debug("Issued estimation token for user #%s", user.id)
        return TokenDTO(token=token, expires_in=self._ttl_seconds)
