from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Any, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from models import STATUS_PENDING_REVIEW, STATUS_SEND_FAILED, STATUS_SENT_TO_LENDER, IntakeSubmission
from schemas.relay import RelayResult
from schemas.submission import SubmissionData
from services.errors import SubmissionNotFoundError

DEFAULT_PAGE_SIZE = 50
MAX_PAGE_SIZE = 200


async def create_submission(
    session: AsyncSession, data: SubmissionData, user_agent: Optional[str] = None
) -> IntakeSubmission:
    now = datetime.now(timezone.utc)
    submission = IntakeSubmission(
        id=f"sub-{uuid.uuid4().hex[:12]}",
        email=data.email,
        data=data.to_record(),
        user_agent=user_agent or "",
        status=STATUS_PENDING_REVIEW,
        created_at=now,
        updated_at=now,
    )
    session.add(submission)
    await session.flush()
    return submission


async def get_submission(session: AsyncSession, submission_id: str) -> IntakeSubmission:
    result = await session.execute(select(IntakeSubmission).where(IntakeSubmission.id == submission_id))
    submission = result.scalar_one_or_none()
    if not submission:
        raise SubmissionNotFoundError(submission_id)
    return submission


async def list_submissions(
    session: AsyncSession, limit: int = DEFAULT_PAGE_SIZE, offset: int = 0
) -> list[IntakeSubmission]:
    limit = max(1, min(limit, MAX_PAGE_SIZE))
    result = await session.execute(
        select(IntakeSubmission)
        .order_by(IntakeSubmission.created_at.desc(), IntakeSubmission.id.desc())
        .limit(limit)
        .offset(max(0, offset))
    )
    return list(result.scalars().all())


async def replace_submission_data(session: AsyncSession, submission_id: str, data: SubmissionData) -> IntakeSubmission:
    """Full data replacement from an admin edit; the record goes back to review."""
    submission = await get_submission(session, submission_id)
    submission.data = data.to_record()
    submission.status = STATUS_PENDING_REVIEW
    submission.updated_at = datetime.now(timezone.utc)
    await session.flush()
    return submission


async def record_relay_outcome(session: AsyncSession, submission_id: str, result: RelayResult) -> None:
    """Overwrite status and relay bookkeeping with the latest attempt. No history is kept."""
    submission = await get_submission(session, submission_id)
    submission.status = STATUS_SENT_TO_LENDER if result.ok else STATUS_SEND_FAILED
    submission.relay_status_code = result.status
    submission.relay_last_error = None if result.ok else result.error
    submission.relay_response_body = result.body_text
    submission.updated_at = datetime.now(timezone.utc)
    await session.flush()


def submission_to_summary(s: IntakeSubmission) -> dict[str, Any]:
    return {
        "id": s.id,
        "status": s.status,
        "email": s.email,
        "createdAt": s.created_at.isoformat() if s.created_at else None,
    }


def submission_to_response(s: IntakeSubmission) -> dict[str, Any]:
    return {
        **submission_to_summary(s),
        "data": s.data or {},
        "userAgent": s.user_agent,
        "relayStatusCode": s.relay_status_code,
        "relayLastError": s.relay_last_error,
        "relayResponseBody": s.relay_response_body,
        "updatedAt": s.updated_at.isoformat() if s.updated_at else None,
    }
