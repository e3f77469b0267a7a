from datetime import datetime

import pytest

from src.face_attendance.face_attendance.core.exceptions import (
    AmbiguousMatch,
    NoCandidates,
    NoMatchWithinThreshold,
    ValidationError,
)
from src.face_attendance.face_attendance.matching.matcher import DescriptorMatcher, confidence_for
from src.face_attendance.face_attendance.matching.model import EnrolledDescriptor, MatchPolicy

ENROLLED_AT = datetime(2026, 1, 5, 8, 0, 0)


def _enrolled(identity_id, values):
    return EnrolledDescriptor(identity_id=identity_id, vector=tuple(values), enrolled_at=ENROLLED_AT)


def test_every_enrolled_descriptor_matches_itself(vector):
    candidates = [_enrolled(i, vector(i)) for i in range(1, 6)]
    matcher = DescriptorMatcher()

    for c in candidates:
        result = matcher.match(list(c.vector), candidates)
        assert result.identity_id == c.identity_id
        assert result.distance == pytest.approx(0.0)
        assert result.confidence == pytest.approx(1.0)
        assert result.candidates_checked == 5


def test_descriptor_far_from_everyone_is_not_matched(vector):
    candidates = [_enrolled(1, vector(1)), _enrolled(2, vector(2))]

    with pytest.raises(NoMatchWithinThreshold):
        DescriptorMatcher().match(vector(50), candidates)


def test_distance_equal_to_threshold_is_rejected(vector):
    candidates = [_enrolled(1, vector(0, scale=0.0))]
    query = vector(0, scale=0.5)

    with pytest.raises(NoMatchWithinThreshold):
        DescriptorMatcher(MatchPolicy(threshold=0.5)).match(query, candidates)


def test_empty_store_raises_no_candidates(vector):
    with pytest.raises(NoCandidates):
        DescriptorMatcher().match(vector(0), [])


def test_confidence_is_one_minus_distance_over_threshold(vector):
    candidates = [_enrolled(7, vector(3))]
    query = vector(3)
    query[10] = 0.25

    result = DescriptorMatcher(MatchPolicy(threshold=0.5)).match(query, candidates)

    assert result.identity_id == 7
    assert result.distance == pytest.approx(0.25)
    assert result.confidence == pytest.approx(0.5)


def test_confidence_is_clamped():
    assert confidence_for(0.9, 0.5) == 0.0
    assert confidence_for(0.0, 0.5) == 1.0


def test_two_similar_faces_within_margin_are_ambiguous(vector):
    a = vector(0, scale=0.0)
    b = vector(0, scale=0.0)
    b[1] = 0.2
    candidates = [_enrolled(1, a), _enrolled(2, b)]
    query = vector(0, scale=0.0)
    query[1] = 0.09

    with pytest.raises(AmbiguousMatch):
        DescriptorMatcher(MatchPolicy(threshold=0.5, separation_margin=0.05)).match(query, candidates)


def test_zero_margin_is_plain_nearest_neighbour(vector):
    a = vector(0, scale=0.0)
    b = vector(0, scale=0.0)
    b[1] = 0.2
    candidates = [_enrolled(1, a), _enrolled(2, b)]
    query = vector(0, scale=0.0)
    query[1] = 0.09

    result = DescriptorMatcher(MatchPolicy(threshold=0.5, separation_margin=0.0)).match(query, candidates)

    assert result.identity_id == 1
    assert result.runner_up_distance == pytest.approx(0.11)


def test_clearly_separated_runner_up_is_accepted(vector):
    a = vector(0, scale=0.0)
    b = vector(0, scale=0.0)
    b[1] = 0.4
    candidates = [_enrolled(1, a), _enrolled(2, b)]
    query = vector(0, scale=0.0)
    query[1] = 0.05

    result = DescriptorMatcher().match(query, candidates)

    assert result.identity_id == 1


def test_query_with_wrong_length_is_rejected(vector):
    with pytest.raises(ValidationError):
        DescriptorMatcher().match([0.1] * 64, [_enrolled(1, vector(1))])


def test_query_with_nan_is_rejected(vector):
    query = vector(1)
    query[5] = float("nan")

    with pytest.raises(ValidationError):
        DescriptorMatcher().match(query, [_enrolled(1, vector(1))])


def test_candidates_with_wrong_length_are_skipped(vector):
    candidates = [_enrolled(1, [0.0] * 64), _enrolled(2, vector(2))]

    result = DescriptorMatcher().match(vector(2), candidates)

    assert result.identity_id == 2
    assert result.candidates_checked == 1


def test_policy_rejects_invalid_values():
    with pytest.raises(ValueError):
        MatchPolicy(threshold=0)
    with pytest.raises(ValueError):
        MatchPolicy(separation_margin=-0.1)
