from __future__ import annotations

import logging
from typing import Sequence

import numpy as np

from ..core.exceptions import AmbiguousMatch, NoCandidates, NoMatchWithinThreshold, ValidationError
from .model import EnrolledDescriptor, MatchPolicy, MatchResult

logger = logging.getLogger(__name__)


def euclidean_distance(a: Sequence[float], b: Sequence[float]) -> float:
    va = np.asarray(a, dtype=np.float64)
    vb = np.asarray(b, dtype=np.float64)
    if va.shape != vb.shape:
        raise ValueError("Vectors must have the same length")
    return float(np.linalg.norm(va - vb))


def confidence_for(distance: float, threshold: float) -> float:
    """``1 - distance/threshold`` clamped to [0, 1]."""
    return float(min(1.0, max(0.0, 1.0 - distance / threshold)))


class DescriptorMatcher:
    """Nearest-neighbour matcher over a snapshot of enrolled descriptors.

    Stateless and side-effect free, so one instance is shared by all
    concurrent recognition attempts.
    """

    def __init__(self, policy: MatchPolicy | None = None):
        self._policy = policy or MatchPolicy()

    @property
    def policy(self) -> MatchPolicy:
        return self._policy

    def _probe_array(self, probe: Sequence[float]) -> np.ndarray:
        arr = np.asarray(probe, dtype=np.float64)
        if arr.ndim != 1 or arr.shape[0] != self._policy.dimensions:
            raise ValidationError(f"descriptor must have {self._policy.dimensions} components")
        if not np.all(np.isfinite(arr)):
            raise ValidationError("descriptor must contain only finite numbers")
        return arr

    def match(self, probe: Sequence[float], candidates: Sequence[EnrolledDescriptor]) -> MatchResult:
        """Return the accepted match for ``probe`` or raise the failure mode.

        Raises NoCandidates, NoMatchWithinThreshold or AmbiguousMatch.
        """
        probe_arr = self._probe_array(probe)

        usable = [c for c in candidates if len(c.vector) == self._policy.dimensions]
        if len(usable) != len(candidates):
            logger.warning(
                "Skipped %d enrolled descriptors with wrong dimensions",
                len(candidates) - len(usable),
            )
        if not usable:
            raise NoCandidates()

        matrix = np.asarray([c.vector for c in usable], dtype=np.float64)
        distances = np.linalg.norm(matrix - probe_arr, axis=1)
        order = np.argsort(distances, kind="stable")

        best = usable[int(order[0])]
        best_distance = float(distances[order[0]])
        runner_up = float(distances[order[1]]) if len(order) > 1 else None
        threshold = self._policy.threshold

        if best_distance >= threshold:
            raise NoMatchWithinThreshold(
                f"Face not recognized (best distance {best_distance:.4f}, threshold {threshold})"
            )

        margin = self._policy.separation_margin
        if margin > 0 and runner_up is not None and (runner_up - best_distance) <= margin:
            runner_up_id = usable[int(order[1])].identity_id
            logger.warning(
                "Ambiguous match between identities %s (%.4f) and %s (%.4f)",
                best.identity_id,
                best_distance,
                runner_up_id,
                runner_up,
            )
            raise AmbiguousMatch()

        return MatchResult(
            identity_id=best.identity_id,
            distance=best_distance,
            confidence=confidence_for(best_distance, threshold),
            runner_up_distance=runner_up,
            candidates_checked=len(usable),
        )
