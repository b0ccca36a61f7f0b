from sqlalchemy import Column, DateTime, Integer, String, Text, func
from sqlalchemy import JSON

from database import Base

STATUS_PENDING_REVIEW = "pending_review"
STATUS_SENT_TO_LENDER = "sent_to_lender"
STATUS_SEND_FAILED = "send_failed"


class IntakeSubmission(Base):
    __tablename__ = "intake_submissions"

    id = Column(String(64), primary_key=True, index=True)
    email = Column(String(320), nullable=True)
    # Raw camelCase submission as posted by the intake wizard
    data = Column(JSON, nullable=False)
    user_agent = Column(Text, nullable=True)
    status = Column(String(32), nullable=False, default=STATUS_PENDING_REVIEW, index=True)
    # Outcome of the most recent relay attempt; overwritten on every send
    relay_status_code = Column(Integer, nullable=True)
    relay_last_error = Column(Text, nullable=True)
    relay_response_body = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
