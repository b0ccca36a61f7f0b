"""
Delivers a built payload to the lender intake endpoint.

One POST per stage, no retries, redirects never followed. In preview mode nothing
leaves the process, so payloads can be built and inspected end to end without
notifying the lender. The two-stage protocol mirrors the browser flow, which
posts a complete=false draft before the complete=true submit.
"""
from __future__ import annotations

import json
import logging
import time
from typing import Any, Mapping, Optional
from urllib.parse import urlencode

import httpx

from schemas.relay import DeliveryEncoding, RelayMode, RelayResult
from services.errors import ConfigurationError
from services.relay_config import RelayConfig

logger = logging.getLogger(__name__)

RELAY_DISABLED_BODY = "Relay disabled"
FORM_CONTENT_TYPE = "application/x-www-form-urlencoded;charset=UTF-8"
JSON_CONTENT_TYPE = "application/json"


def _now_ms() -> int:
    return int(time.time() * 1000)


def _to_json(payload: Any) -> str:
    return json.dumps(payload, separators=(",", ":"), ensure_ascii=False)


def _form_value(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (dict, list)):
        return _to_json(value)
    return str(value)


def is_two_stage_payload(payload: Any) -> bool:
    return (
        isinstance(payload, dict)
        and payload.get("complete") is True
        and isinstance(payload.get("session_id"), str)
        and isinstance(payload.get("form_data"), dict)
    )


class RelayClient:
    def __init__(self, config: RelayConfig, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.config = config
        self._transport = transport

    def effective_mode(self, mode_override: Optional[RelayMode] = None) -> RelayMode:
        if mode_override is not None:
            return RelayMode(mode_override)
        return self.config.relay_mode or RelayMode.PREVIEW

    async def relay(self, payload: Any, mode_override: Optional[RelayMode] = None) -> RelayResult:
        mode = self.effective_mode(mode_override)
        if mode is not RelayMode.SUBMIT:
            logger.info("Relay mode is %s; payload not sent", mode.value)
            return RelayResult.success(200, RELAY_DISABLED_BODY)

        url = self.config.endpoint_url
        if not url:
            raise ConfigurationError("Missing PRIVATELENDER_ENDPOINT_URL")

        headers: dict[str, str] = dict(self.config.headers)

        if self.config.encoding is DeliveryEncoding.JSON:
            headers["content-type"] = JSON_CONTENT_TYPE
            if self.config.two_stage and is_two_stage_payload(payload):
                return await self._relay_two_stage(url, headers, payload)
            return await self._post_once(url, headers, _to_json(payload))

        headers["content-type"] = FORM_CONTENT_TYPE
        if not isinstance(payload, Mapping):
            return RelayResult.failure("Form relay requires an object payload")
        body = urlencode([(str(k), _form_value(v)) for k, v in payload.items()])
        return await self._post_once(url, headers, body)

    async def _relay_two_stage(self, url: str, headers: Mapping[str, str], payload: dict[str, Any]) -> RelayResult:
        draft = {
            "session_id": payload["session_id"],
            "form_data": dict(payload["form_data"]),
            "sent_timestamp": _now_ms(),
            "complete": False,
        }
        logger.info("Posting draft stage for session %s", payload["session_id"])
        draft_result = await self._post_once(url, headers, _to_json(draft))
        if not draft_result.ok:
            logger.warning("Draft stage failed; final stage not sent: %s", draft_result.error)
            return draft_result

        final = {**payload, "sent_timestamp": _now_ms()}
        logger.info("Posting final stage for session %s", payload["session_id"])
        final_result = await self._post_once(url, headers, _to_json(final))
        if not final_result.ok:
            return final_result

        return RelayResult.success(
            final_result.status,
            _to_json({"draft": draft_result.body_text, "final": final_result.body_text}),
        )

    async def _post_once(self, url: str, headers: Mapping[str, str], body: str) -> RelayResult:
        """Exactly one POST. Non-2xx and transport errors come back as failures."""
        logger.debug("POST %s body=%s", url, body)
        try:
            async with httpx.AsyncClient(transport=self._transport, follow_redirects=False) as client:
                response = await client.post(url, content=body.encode("utf-8"), headers=dict(headers))
                text = response.text
        except httpx.HTTPError as e:
            logger.error("Request error relaying to lender endpoint: %s", e)
            return RelayResult.failure(str(e) or "Relay failed")

        if not response.is_success:
            logger.error("Lender endpoint rejected relay: status=%s", response.status_code)
            return RelayResult.failure(
                f"Relay failed with status {response.status_code}",
                status=response.status_code,
                body_text=text,
            )
        logger.info("Lender endpoint accepted relay: status=%s", response.status_code)
        return RelayResult.success(response.status_code, text)
