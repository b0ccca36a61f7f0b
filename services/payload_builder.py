"""
Maps a validated submission onto the lender endpoint's wire shape.

The lender schema is not documented; key names were inferred from captured browser
traffic, so field names, static fields and the overall shape are all driven by
RelayConfig. Every builder is pure: no I/O, and identical input gives identical
output apart from the session id and timestamp of the intake-form-update shape.
"""
from __future__ import annotations

import math
import re
import time
import uuid
from typing import Any, Callable, Mapping, Optional

from schemas.relay import PayloadMode
from schemas.submission import ZIP_PATTERN, SubmissionData
from services.errors import ConfigurationError
from services.relay_config import RelayConfig, relay_config as default_relay_config

# Internal (camelCase) name -> external name for the flat shape
DEFAULT_FLAT_FIELD_MAP: dict[str, str] = {
    "email": "email",
    "firstName": "first_name",
    "lastName": "last_name",
    "phone": "phone",
    "role": "role",
    "fico": "fico_estimate",
    "propertyAddress": "property_address",
    "propertyType": "property_type",
    "purchaseOrRefi": "intent",
    "loanType": "loan_type",
    "purchasePrice": "purchase_price",
    "experience": "experience_36m",
    "refi6Months": "refi_6_months",
    "inputLandCost": "land_cost",
    "inputGUCPurchaseConstructionCost": "guc_construction_cost",
    "inputGUCARV": "guc_arv",
    "preferredClosing": "preferred_closing",
    "brokerFee": "broker_fee",
    "leadSource": "lead_source",
}

# The json-record-map shape carries every internal field, snake_cased by default
DEFAULT_RECORD_FIELD_MAP: dict[str, str] = {
    (f.alias or name): name for name, f in SubmissionData.model_fields.items()
}

_ZIP_RE = re.compile(ZIP_PATTERN)
_CITY_STATE_ZIP_RE = re.compile(r",\s*([^,]+),\s*([A-Z]{2})\s+\d{5}(?:-\d{4})?\b")

COUNTRY_SUBDIVISION = {"code": "US", "name": "United States", "type": "COUNTRY"}

# (attribute, form_data key, include zero)
FORM_CURRENCY_FIELDS: dict[str, tuple[tuple[str, str, bool], ...]] = {
    "fix and flip": (
        ("rehab_cost", "inputRehabCost", False),
        ("fix_flip_arv", "inputARV", False),
    ),
    "rental": (
        ("rental_monthly_income", "inputMonthlyRentalIncome", False),
        ("rental_annual_taxes", "inputAnnualPropertyTaxes", False),
        ("rental_annual_insurance", "inputAnnualInsurance", False),
        ("rental_monthly_hoa", "inputMonthlyHOAFees", True),
    ),
    "ground-up construction": (
        ("input_land_cost", "inputLandCost", False),
        ("input_guc_purchase_construction_cost", "inputGUCPurchaseConstructionCost", False),
        ("input_guc_arv", "inputGUCARV", False),
    ),
}


def format_usd(value: Any) -> str:
    """Whole-dollar currency string: 1234.6 -> "$1,235". Non-finite input -> ""."""
    if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
        return ""
    # Half rounds up, as the captured form does
    dollars = math.floor(value + 0.5)
    return f"${dollars:,}"


def stringify(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if math.isfinite(value) and value.is_integer():
            return str(int(value))
        return repr(value)
    return str(value)


def parse_address(raw: str) -> dict[str, Any]:
    """
    Best-effort split of a free-text US address into the lender's address object.
    Parts that cannot be recognized are omitted; this never raises.
    """
    trimmed = raw.strip()
    out: dict[str, Any] = {"formatted": trimmed, "country": "US"}

    postal = _ZIP_RE.search(trimmed)
    if postal:
        out["postalCode"] = postal.group(0)

    city = subdivision = None
    m = _CITY_STATE_ZIP_RE.search(trimmed)
    if m:
        city = m.group(1).strip() or None
        subdivision = m.group(2).strip() or None
    if subdivision:
        out["subdivision"] = subdivision
    if city:
        out["city"] = city

    subdivisions: list[dict[str, Any]] = []
    if subdivision:
        subdivisions.append({"code": subdivision, "name": subdivision, "type": "ADMINISTRATIVE_AREA_LEVEL_1"})
    subdivisions.append(dict(COUNTRY_SUBDIVISION))
    out["subdivisions"] = subdivisions
    return out


def _role_tag(role: str) -> str:
    return "Broker" if "broker" in role.lower() else "Borrower"


def _include_amount(value: Optional[float], include_zero: bool) -> bool:
    if value is None or not math.isfinite(value):
        return False
    return value >= 0 if include_zero else value > 0


def _internal_record(submission: SubmissionData, operator_email: str) -> dict[str, Any]:
    record = submission.model_dump(by_alias=True)
    record["email"] = operator_email
    return record


def _rename(record: Mapping[str, Any], field_map: Mapping[str, str], static_fields: Mapping[str, Any]) -> dict[str, str]:
    out = {k: stringify(v) for k, v in static_fields.items()}
    for internal_key, value in record.items():
        external_key = field_map.get(internal_key)
        if external_key:
            out[external_key] = stringify(value)
    return out


def _build_flat(submission: SubmissionData, operator_email: str, config: RelayConfig) -> dict[str, Any]:
    field_map = {**DEFAULT_FLAT_FIELD_MAP, **config.field_map}
    return _rename(_internal_record(submission, operator_email), field_map, config.static_fields)


def _build_record_map(submission: SubmissionData, operator_email: str, config: RelayConfig) -> dict[str, Any]:
    field_map = {**DEFAULT_RECORD_FIELD_MAP, **config.field_map}
    return _rename(_internal_record(submission, operator_email), field_map, config.static_fields)


def _build_intake_form_update(submission: SubmissionData, operator_email: str, config: RelayConfig) -> dict[str, Any]:
    form_data: dict[str, Any] = dict(config.static_fields)
    form_data.update({
        "utm": {"source": None, "medium": None, "campaign": None, "content": None, "term": None},
        "email": operator_email,
        "firstName": submission.first_name,
        "lastName": submission.last_name,
        "phoneNum": submission.phone,
        "selectionTagsBorrowerBroker": _role_tag(submission.role),
        "selectionTagsFICO": submission.fico,
        "addressInput": parse_address(submission.property_address),
        "selectionTagsPropertyType": submission.property_type,
        # Captured traffic sends "Purchase" even for refinances; kept until the
        # lender contract is reconfirmed.
        "loanPurpose": "Purchase",
        "selectionTagsPurchaseRefinance": submission.purchase_or_refi,
        "selectionTagsLoanType": submission.loan_type,
    })

    if submission.refi_6_months and submission.refi_6_months.strip():
        form_data["selectionTagsRefi6Months"] = submission.refi_6_months

    loan_type = submission.loan_type.strip().lower()
    for attr, key, include_zero in FORM_CURRENCY_FIELDS.get(loan_type, ()):
        value = getattr(submission, attr)
        if _include_amount(value, include_zero):
            form_data[key] = format_usd(value)
    if loan_type == "rental" and submission.rental_leased_at_closing and submission.rental_leased_at_closing.strip():
        form_data["selectionTagsLeasedAtClosing"] = submission.rental_leased_at_closing

    # Final-stage fields
    form_data["selectionTagsPreferredClosing"] = submission.preferred_closing
    form_data["selectionTagsBrokerFee"] = submission.broker_fee
    form_data["radioGroupLeadSource"] = submission.lead_source
    if submission.experience and submission.experience.strip():
        form_data["selectionTagsBorrowerExperience"] = submission.experience

    return {
        "session_id": str(uuid.uuid4()),
        "form_data": form_data,
        "sent_timestamp": int(time.time() * 1000),
        "complete": True,
    }


PayloadHandler = Callable[[SubmissionData, str, RelayConfig], dict[str, Any]]

PAYLOAD_BUILDERS: dict[PayloadMode, PayloadHandler] = {
    PayloadMode.FLAT: _build_flat,
    PayloadMode.JSON_RECORD_MAP: _build_record_map,
    PayloadMode.INTAKE_FORM_UPDATE: _build_intake_form_update,
}

_unhandled = set(PayloadMode) - set(PAYLOAD_BUILDERS)
if _unhandled:
    raise RuntimeError(f"No payload builder for modes: {sorted(m.value for m in _unhandled)}")


def build_payload(
    submission: SubmissionData,
    operator_email: Optional[str],
    config: Optional[RelayConfig] = None,
) -> dict[str, Any]:
    """Build the outbound payload for the configured payload mode."""
    if not operator_email:
        raise ConfigurationError("Missing INJECTED_EMAIL env")
    config = config or default_relay_config
    return PAYLOAD_BUILDERS[config.payload_mode](submission, operator_email, config)
