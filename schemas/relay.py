from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class RelayMode(str, Enum):
    PREVIEW = "preview"
    SUBMIT = "submit"


class DeliveryEncoding(str, Enum):
    FORM = "form"
    JSON = "json"


class PayloadMode(str, Enum):
    FLAT = "flat"
    JSON_RECORD_MAP = "json-record-map"
    INTAKE_FORM_UPDATE = "intake-form-update"

    @classmethod
    def _missing_(cls, value: object) -> Optional["PayloadMode"]:
        # Name used by deployments configured before the shape was generalized
        if isinstance(value, str) and value.lower() == "surecap-intake-form-update":
            return cls.INTAKE_FORM_UPDATE
        return None


class RelayResult(BaseModel):
    """Outcome of one relay call. `ok` is the tag; failures carry `error`."""

    ok: bool
    status: Optional[int] = None
    error: Optional[str] = None
    body_text: Optional[str] = Field(None, alias="bodyText")

    model_config = {"populate_by_name": True}

    @classmethod
    def success(cls, status: int, body_text: str) -> "RelayResult":
        return cls(ok=True, status=status, body_text=body_text)

    @classmethod
    def failure(cls, error: str, status: Optional[int] = None, body_text: Optional[str] = None) -> "RelayResult":
        return cls(ok=False, status=status, error=error, body_text=body_text)

    def to_response(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)
