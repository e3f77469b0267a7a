class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class RecognitionError(DomainError):
    """User-facing failure of the recognition flow.

    These are recoverable by retrying; ``code`` is a stable identifier the UI
    keys its message and retry affordance on.
    """

    code = "recognition_error"
    default_message = "Recognition failed, please try again"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.default_message)


class NoFaceDetected(RecognitionError):
    code = "no_face_detected"
    default_message = "No face detected, please look at the camera"


class NoCandidates(RecognitionError):
    code = "no_candidates"
    default_message = "No enrolled faces to compare against"


class NoMatchWithinThreshold(RecognitionError):
    code = "no_match"
    default_message = "Face not recognized"


class AmbiguousMatch(RecognitionError):
    code = "ambiguous_match"
    default_message = "Face matches more than one person, please retry"


class IdentityNotVerified(RecognitionError):
    code = "identity_not_verified"
    default_message = "Identity was not verified"


class UnknownLivenessSession(RecognitionError):
    code = "unknown_liveness_session"
    default_message = "Liveness session not found or expired"


class LivenessNotPassed(RecognitionError):
    code = "liveness_not_passed"
    default_message = "Liveness check has not passed yet"


class LivenessTimedOut(RecognitionError):
    code = "liveness_timed_out"
    default_message = "Liveness check timed out, please try again"


class LivenessFailed(RecognitionError):
    code = "liveness_failed"
    default_message = "Liveness check failed, please try again"


class SessionAlreadyConsumed(RecognitionError):
    code = "session_already_consumed"
    default_message = "Liveness session was already used, start a new one"


class DuplicateOpenEvent(RecognitionError):
    code = "duplicate_open_event"
    default_message = "Already checked in today, check out first"


class OrphanCheckout(RecognitionError):
    code = "orphan_checkout"
    default_message = "No check-in found for today, check-out needs review"


class OperationalError(DomainError):
    """Failure that needs administrator attention rather than a user retry."""

    code = "operational_error"


class ScheduleNotConfigured(OperationalError):
    code = "schedule_not_configured"

    def __init__(self, employee_id: int, work_date=None):
        self.employee_id = employee_id
        self.work_date = work_date
        suffix = f" on {work_date}" if work_date else ""
        super().__init__(f"No work schedule configured for employee {employee_id}{suffix}")


class StorageError(OperationalError):
    code = "storage_error"
