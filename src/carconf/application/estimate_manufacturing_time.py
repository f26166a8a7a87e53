"""Application service: Estimate Manufacturing Time use case.

Runs on the estimation side of the trust boundary.  It performs no
configuration mutation and trusts nothing from the caller except what a
verified capability says: the qualification flag only scales the
estimate.

The heuristic itself is a placeholder: three days per character of each
accessory name, plus a random 1–90 day offset; qualified customers get
the total divided by a random factor between 2 and 4.
"""

from __future__ import annotations

import logging
import random

from carconf.application.dto import EstimateDTO, EstimationRequest
from carconf.domain.exceptions import ValidationError
from carconf.domain.service.capability import CapabilityCodec

logger = logging.getLogger(__name__)

DAYS_PER_NAME_CHARACTER = 3
MIN_OFFSET_DAYS, MAX_OFFSET_DAYS = 1, 90
MIN_QUALIFIED_DIVISOR, MAX_QUALIFIED_DIVISOR = 2, 4


class EstimateManufacturingTimeHandler:

    def __init__(self, codec: CapabilityCodec, rng: random.Random | None = None) -> None:
        self._codec = codec
        self._rng = rng or random.Random()

    def handle(self, token: str | None, request: EstimationRequest) -> EstimateDTO:
        # Verify first: an unauthorized caller learns nothing about its input.
        capability = self._codec.verify(token)

        if not request.model_name or not request.model_name.strip():
            raise ValidationError("A configuration with a model is required")

        days = 0
        for name in request.accessory_names:
            if not name or not name.strip():
                raise ValidationError("Accessory names must not be blank")
            days += len(name.strip()) * DAYS_PER_NAME_CHARACTER

        days = round(days + self._rng.uniform(MIN_OFFSET_DAYS, MAX_OFFSET_DAYS))

        if capability.qualified:
            days = round(days / self._rng.uniform(MIN_QUALIFIED_DIVISOR, MAX_QUALIFIED_DIVISOR))

        logger.info(
            "Estimated %d day(s) for subject #%s (qualified=%s)",
            days,
            capability.subject_id,
            capability.qualified,
        )
        return EstimateDTO(manufacturing_time=days, qualified=capability.qualified)
