from typing import Any

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from config import Settings, get_settings
from database import get_db
from schemas.submission import (
    EXPERIENCE_OPTIONS,
    FICO_OPTIONS,
    LEAD_SOURCE_SUGGESTIONS,
    LOAN_TYPE_OPTIONS,
    PREFERRED_CLOSING_OPTIONS,
    PROPERTY_TYPE_OPTIONS,
    PURCHASE_OR_REFI_OPTIONS,
    REFI_6_MONTHS_OPTIONS,
    ROLE_OPTIONS,
)
from services.errors import ConfigurationError
from services.notifications import send_submission_notification
from services.payload_builder import build_payload
from services.relay_config import RelayConfig, get_relay_config
from services.submissions import create_submission
from services.validation import validate_submission

router = APIRouter(prefix="/api", tags=["intake"])


async def _read_json(request: Request) -> Any:
    try:
        return await request.json()
    except ValueError:
        return None


@router.post("/submit")
async def submit_intake(
    request: Request,
    db: AsyncSession = Depends(get_db),
    config: RelayConfig = Depends(get_relay_config),
    s: Settings = Depends(get_settings),
):
    """
    Store a new intake submission for admin review and notify the operator.
    Nothing is relayed here; the response carries the payload that would be sent.
    """
    data = validate_submission(await _read_json(request))
    if not config.operator_email:
        raise ConfigurationError("Missing INJECTED_EMAIL env")

    submission = await create_submission(db, data, user_agent=request.headers.get("user-agent", ""))
    notify = await send_submission_notification(
        submission_id=submission.id,
        user_email=data.email,
        origin=str(request.base_url).rstrip("/"),
        s=s,
    )
    lender_payload = build_payload(data, config.operator_email, config)

    body: dict[str, Any] = {
        "ok": True,
        "relayPreview": lender_payload,
        "submissionId": submission.id,
        "notifyOk": notify.ok,
    }
    if not notify.ok:
        body["notifyError"] = notify.error
    return JSONResponse(body)


@router.get("/intake/options")
async def intake_options():
    """Choice lists for the intake wizard."""
    return {
        "role": list(ROLE_OPTIONS),
        "fico": list(FICO_OPTIONS),
        "propertyType": list(PROPERTY_TYPE_OPTIONS),
        "purchaseOrRefi": list(PURCHASE_OR_REFI_OPTIONS),
        "refi6Months": list(REFI_6_MONTHS_OPTIONS),
        "loanType": list(LOAN_TYPE_OPTIONS),
        "experience": list(EXPERIENCE_OPTIONS),
        "preferredClosing": list(PREFERRED_CLOSING_OPTIONS),
        "leadSource": list(LEAD_SOURCE_SUGGESTIONS),
    }
