from models.submission import (
    STATUS_PENDING_REVIEW,
    STATUS_SEND_FAILED,
    STATUS_SENT_TO_LENDER,
    IntakeSubmission,
)

__all__ = [
    "IntakeSubmission",
    "STATUS_PENDING_REVIEW",
    "STATUS_SEND_FAILED",
    "STATUS_SENT_TO_LENDER",
]
