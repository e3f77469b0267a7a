from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Optional, Sequence

from ..common.datetime_utils import now_local
from ..common.validators import require_descriptor
from ..core.exceptions import ValidationError
from .matcher import DescriptorMatcher
from .model import EnrolledDescriptor, MatchResult
from .store import DescriptorStore

logger = logging.getLogger(__name__)


class FaceProfileService:
    """Enrollment, reset and identification on top of the descriptor store."""

    def __init__(
        self,
        store: DescriptorStore,
        matcher: DescriptorMatcher,
        *,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self._store = store
        self._matcher = matcher
        self._clock = clock or now_local

    def enroll(self, identity_id: int, descriptor: Sequence[float]) -> EnrolledDescriptor:
        if int(identity_id) <= 0:
            raise ValidationError("identity id must be positive")
        vector = require_descriptor(descriptor, self._matcher.policy.dimensions)
        replaced = self._store.get(identity_id) is not None
        enrolled = self._store.enroll(identity_id, vector, enrolled_at=self._clock())
        logger.info("%s face descriptor for identity %s", "Replaced" if replaced else "Enrolled", identity_id)
        return enrolled

    def reset(self, identity_id: int) -> bool:
        removed = self._store.remove(identity_id)
        if removed:
            logger.info("Reset face descriptor for identity %s", identity_id)
        return removed

    def has_profile(self, identity_id: int) -> bool:
        return self._store.get(identity_id) is not None

    def identify(self, descriptor: Sequence[float]) -> MatchResult:
        """Match a probe against the current store snapshot.

        Failure modes propagate as RecognitionError subclasses.
        """
        result = self._matcher.match(descriptor, self._store.snapshot())
        logger.info(
            "Matched identity %s (distance %.4f, confidence %.2f)",
            result.identity_id,
            result.distance,
            result.confidence,
        )
        return result
