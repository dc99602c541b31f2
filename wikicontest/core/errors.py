"""Exceptions raised by the submission and screening stores."""


class SubmissionStoreError(Exception):
    """Raised when a submission cannot be persisted.

    The submission insert runs in a single transaction, so when this is
    raised nothing about the submission has been written.
    """

    def __init__(self, message: str, original_error: Exception = None):
        super().__init__(message)
        self.original_error = original_error

    @classmethod
    def from_collisions(cls, attempts: int) -> "SubmissionStoreError":
        """Create error for a unique code that kept colliding."""
        return cls(f"Could not generate a unique submission code after {attempts} attempts")


class ScreeningStoreError(Exception):
    """Raised when a screening event cannot be appended or read."""

    def __init__(self, message: str, original_error: Exception = None, submission_id: int = None):
        super().__init__(message)
        self.original_error = original_error
        self.submission_id = submission_id

    @classmethod
    def from_missing_submission(cls, submission_id: int) -> "ScreeningStoreError":
        return cls(f"Submission {submission_id} does not exist", submission_id=submission_id)

    @classmethod
    def from_invalid_decision(cls, submission_id: int, decision: str) -> "ScreeningStoreError":
        return cls(f"Invalid screening decision {decision!r}", submission_id=submission_id)
