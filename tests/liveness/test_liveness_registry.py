import pytest

from src.face_attendance.face_attendance.core.enums import LivenessVerdict
from src.face_attendance.face_attendance.core.exceptions import UnknownLivenessSession
from src.face_attendance.face_attendance.liveness.model import LivenessConfig
from src.face_attendance.face_attendance.liveness.registry import LivenessSessionRegistry
from src.face_attendance.face_attendance.liveness.verifier import LivenessVerifier


@pytest.fixture
def registry(monotonic):
    return LivenessSessionRegistry(LivenessVerifier(LivenessConfig(), monotonic=monotonic))


def test_sampling_through_registry(registry):
    session = registry.open()

    status = None
    for i in range(10):
        status = registry.sample(session.session_id, 100 + 5 * i, 50)

    assert status.verdict == LivenessVerdict.PASSED
    assert status.progress == 100
    assert registry.status(session.session_id).verdict == LivenessVerdict.PASSED


def test_unknown_session_id(registry):
    with pytest.raises(UnknownLivenessSession):
        registry.sample("missing", 1, 1)


def test_cancel_removes_session(registry):
    session = registry.open()

    registry.cancel(session.session_id)

    assert session.verdict == LivenessVerdict.FAILED
    with pytest.raises(UnknownLivenessSession):
        registry.get(session.session_id)


def test_discard_keeps_sampling_sessions(registry, pass_liveness):
    sampling = registry.open()
    finished = registry.open()
    pass_liveness(finished)

    registry.discard_finished(sampling.session_id)
    registry.discard_finished(finished.session_id)

    assert registry.get(sampling.session_id) is sampling
    with pytest.raises(UnknownLivenessSession):
        registry.get(finished.session_id)


def test_purge_drops_consumed_and_stale_sessions(registry, monotonic, pass_liveness):
    consumed = registry.open()
    pass_liveness(consumed)
    consumed.consume()
    abandoned = registry.open()

    assert registry.purge_expired() == 1
    assert len(registry) == 1

    # Abandoned session times out at 20s and is kept for the verdict TTL.
    monotonic.advance(21)
    assert registry.purge_expired() == 0
    assert abandoned.verdict == LivenessVerdict.TIMED_OUT

    monotonic.advance(61)
    assert registry.purge_expired() == 1
    assert len(registry) == 0
