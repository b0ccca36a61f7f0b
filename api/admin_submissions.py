import time

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from api.deps import get_relay_client, require_admin
from config import Settings, get_settings
from database import get_db
from schemas.submission import SubmissionUpdate
from services.notifications import send_submission_notification
from services.relay_client import RelayClient
from services.relay_config import RelayConfig, get_relay_config
from services.relay_workflow import preview_submission, send_submission
from services.submissions import (
    DEFAULT_PAGE_SIZE,
    MAX_PAGE_SIZE,
    get_submission,
    list_submissions,
    replace_submission_data,
    submission_to_response,
    submission_to_summary,
)
from services.validation import validate_submission

router = APIRouter(prefix="/api/admin", tags=["admin"], dependencies=[Depends(require_admin)])


@router.get("/submissions")
async def list_intake_submissions(
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    offset: int = Query(0, ge=0),
    db: AsyncSession = Depends(get_db),
):
    rows = await list_submissions(db, limit=limit, offset=offset)
    return {"ok": True, "submissions": [submission_to_summary(s) for s in rows], "limit": limit, "offset": offset}


@router.get("/submissions/{submission_id}")
async def get_intake_submission(submission_id: str, db: AsyncSession = Depends(get_db)):
    submission = await get_submission(db, submission_id)
    return {"ok": True, "submission": submission_to_response(submission)}


@router.patch("/submissions/{submission_id}")
async def update_intake_submission(submission_id: str, body: SubmissionUpdate, db: AsyncSession = Depends(get_db)):
    """Replace the stored data after an admin edit; status returns to pending_review."""
    if body.data is None:
        return JSONResponse({"ok": False, "error": "Missing data"}, status_code=400)
    data = validate_submission(body.data)
    submission = await replace_submission_data(db, submission_id, data)
    return {"ok": True, "data": submission.data, "status": submission.status}


@router.get("/submissions/{submission_id}/preview")
async def preview_intake_submission(
    submission_id: str,
    db: AsyncSession = Depends(get_db),
    config: RelayConfig = Depends(get_relay_config),
):
    """The exact payload a send would deliver, without delivering it."""
    payload = await preview_submission(db, submission_id, config)
    return {
        "ok": True,
        "relayPreview": payload,
        "payloadMode": config.payload_mode.value,
        "encoding": config.encoding.value,
        "twoStage": config.two_stage,
    }


@router.post("/submissions/{submission_id}/send")
async def send_intake_submission(
    submission_id: str,
    db: AsyncSession = Depends(get_db),
    config: RelayConfig = Depends(get_relay_config),
    client: RelayClient = Depends(get_relay_client),
):
    outcome = await send_submission(db, submission_id, config, client)
    return {"ok": outcome.result.ok, "relayResult": outcome.result.to_response(), "relayPreview": outcome.payload}


@router.post("/test-email")
async def send_test_email(request: Request, s: Settings = Depends(get_settings)):
    result = await send_submission_notification(
        submission_id=f"test_{int(time.time() * 1000)}",
        user_email="test@example.com",
        origin=str(request.base_url).rstrip("/"),
        s=s,
    )
    if not result.ok:
        return JSONResponse({"ok": False, "error": result.error}, status_code=500)
    return {"ok": True}
