"""
Admin send flow: load -> re-validate -> build -> relay (forced submit) -> record outcome.

The outcome write happens after the relay result is known and is best-effort: if it
fails, the failure is logged and dropped so it cannot replace the result the caller
already has.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from schemas.relay import RelayMode, RelayResult
from schemas.submission import SubmissionData
from services.errors import ConfigurationError, StaleDataError
from services.payload_builder import build_payload
from services.relay_client import RelayClient
from services.relay_config import RelayConfig
from services.submissions import get_submission, record_relay_outcome
from services.validation import SubmissionValidationError, validate_submission

logger = logging.getLogger(__name__)


@dataclass
class SendOutcome:
    result: RelayResult
    payload: dict[str, Any]


async def load_sendable(session: AsyncSession, submission_id: str) -> SubmissionData:
    """Stored data must still pass validation before it may be previewed or sent."""
    submission = await get_submission(session, submission_id)
    try:
        return validate_submission(submission.data)
    except SubmissionValidationError as e:
        raise StaleDataError(submission_id, e.flatten()) from e


def _require_operator_email(config: RelayConfig) -> str:
    if not config.operator_email:
        raise ConfigurationError("Missing INJECTED_EMAIL env")
    return config.operator_email


async def preview_submission(session: AsyncSession, submission_id: str, config: RelayConfig) -> dict[str, Any]:
    data = await load_sendable(session, submission_id)
    return build_payload(data, _require_operator_email(config), config)


async def send_submission(
    session: AsyncSession, submission_id: str, config: RelayConfig, client: RelayClient
) -> SendOutcome:
    data = await load_sendable(session, submission_id)
    payload = build_payload(data, _require_operator_email(config), config)

    logger.info("Relaying submission %s (%s, %s)", submission_id, config.payload_mode.value, config.encoding.value)
    # The admin action always delivers, whatever the global relay mode
    result = await client.relay(payload, mode_override=RelayMode.SUBMIT)
    logger.info("Relay of submission %s finished: ok=%s status=%s", submission_id, result.ok, result.status)

    await _record_outcome_best_effort(session, submission_id, result)
    return SendOutcome(result=result, payload=payload)


async def _record_outcome_best_effort(session: AsyncSession, submission_id: str, result: RelayResult) -> None:
    try:
        await record_relay_outcome(session, submission_id, result)
        await session.commit()
    except Exception:
        logger.warning("Could not record relay outcome for submission %s; ignoring", submission_id, exc_info=True)
        try:
            await session.rollback()
        except Exception:
            logger.warning("Rollback after failed bookkeeping for submission %s also failed", submission_id, exc_info=True)
