"""
Validates intake submissions against the internal contract.

Base shape rules live on SubmissionData; the loan-type / intent conditional rules
live here so every violated field is reported at once, keyed by its own camelCase
name, instead of failing on the first problem.
"""
from __future__ import annotations

from typing import Any, Callable, Optional

from pydantic import ValidationError

from schemas.submission import SubmissionData

REQUIRED = "Required"


class SubmissionValidationError(ValueError):
    """All field-scoped problems found in one candidate submission."""

    def __init__(self, field_errors: Optional[dict[str, list[str]]] = None, form_errors: Optional[list[str]] = None):
        self.field_errors = field_errors or {}
        self.form_errors = form_errors or []
        fields = ", ".join(sorted(self.field_errors)) or "submission"
        super().__init__(f"Invalid submission: {fields}")

    @classmethod
    def from_pydantic(cls, exc: ValidationError) -> "SubmissionValidationError":
        field_errors: dict[str, list[str]] = {}
        form_errors: list[str] = []
        for err in exc.errors():
            loc = err.get("loc") or ()
            if loc:
                field_errors.setdefault(str(loc[0]), []).append(err.get("msg", "Invalid"))
            else:
                form_errors.append(err.get("msg", "Invalid"))
        return cls(field_errors=field_errors, form_errors=form_errors)

    def flatten(self) -> dict[str, Any]:
        return {"formErrors": list(self.form_errors), "fieldErrors": {k: list(v) for k, v in self.field_errors.items()}}


def _is_positive(value: Optional[float]) -> bool:
    return value is not None and value > 0


def _is_non_negative(value: Optional[float]) -> bool:
    return value is not None and value >= 0


def _is_filled(value: Optional[str]) -> bool:
    return value is not None and bool(value.strip())


Rule = tuple[str, Callable[[Any], bool]]

PURCHASE_PRICE_LOAN_TYPES = frozenset({"bridge", "rental", "fix and flip"})

LOAN_TYPE_RULES: dict[str, tuple[Rule, ...]] = {
    "fix and flip": (
        ("rehab_cost", _is_positive),
        ("fix_flip_arv", _is_positive),
        ("experience", _is_filled),
    ),
    "rental": (
        ("rental_monthly_income", _is_positive),
        ("rental_annual_taxes", _is_positive),
        ("rental_annual_insurance", _is_positive),
        ("rental_monthly_hoa", _is_non_negative),
        ("rental_leased_at_closing", _is_filled),
    ),
    "ground-up construction": (
        ("input_land_cost", _is_positive),
        ("input_guc_purchase_construction_cost", _is_positive),
        ("input_guc_arv", _is_positive),
        ("experience", _is_filled),
    ),
}


def _external_name(field_name: str) -> str:
    return SubmissionData.model_fields[field_name].alias or field_name


def conditional_errors(data: SubmissionData) -> dict[str, list[str]]:
    """Return field errors for the rules governed by loanType and purchaseOrRefi."""
    rules: list[Rule] = []
    if data.purchase_or_refi.strip().lower() == "refinance":
        rules.append(("refi_6_months", _is_filled))

    loan_type = data.loan_type.strip().lower()
    if loan_type in PURCHASE_PRICE_LOAN_TYPES:
        rules.append(("purchase_price", _is_positive))
    rules.extend(LOAN_TYPE_RULES.get(loan_type, ()))

    errors: dict[str, list[str]] = {}
    for field_name, check in rules:
        if not check(getattr(data, field_name)):
            errors.setdefault(_external_name(field_name), []).append(REQUIRED)
    return errors


def validate_submission(candidate: Any) -> SubmissionData:
    """
    Parse and validate a candidate submission (camelCase dict or SubmissionData).
    Raises SubmissionValidationError listing every violated field.
    """
    if isinstance(candidate, SubmissionData):
        candidate = candidate.model_dump(by_alias=True)
    if not isinstance(candidate, dict):
        raise SubmissionValidationError(form_errors=["Expected an object"])
    try:
        data = SubmissionData.model_validate(candidate)
    except ValidationError as e:
        raise SubmissionValidationError.from_pydantic(e) from e

    errors = conditional_errors(data)
    if errors:
        raise SubmissionValidationError(field_errors=errors)
    return data
